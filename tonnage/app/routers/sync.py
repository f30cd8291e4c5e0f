"""Trigger a Hevy sync for the signed-in user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tonnage.app.auth import require_user
from tonnage.app.dependencies import get_sync_orchestrator
from tonnage.integrations.hevy import HevyAPIError
from tonnage.models import SyncResponse
from tonnage.models.user import User
from tonnage.sync import (
    MissingConfigurationError,
    SyncError,
    SyncInProgressError,
    SyncOrchestrator,
    SyncTimeoutError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"])


def sync_error_to_http(error: SyncError | HevyAPIError) -> HTTPException:
    """Translate a failed sync into the HTTP error the client sees."""
    match error:
        case MissingConfigurationError():
            return HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No API key configured",
            )
        case SyncInProgressError():
            return HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A sync is already in progress",
            )
        case SyncTimeoutError():
            return HTTPException(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                detail=f"Sync failed: {error}",
            )
        case HevyAPIError():
            return HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Sync failed: {error.message}",
            )
        case _:
            return HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Sync failed: {error}",
            )


@router.post("", response_model=SyncResponse)
def sync_workouts(
    full_sync: bool = Query(False, description="Re-fetch the whole workout list"),
    user: User = Depends(require_user),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> SyncResponse:
    """Pull workout changes from Hevy and rebuild records and aggregates.

    Runs incrementally from the last successful sync unless `full_sync` is set
    or the user has never synced.
    """
    try:
        result = orchestrator.sync(user.id, force_full=full_sync)
    except (
        MissingConfigurationError,
        SyncInProgressError,
        SyncTimeoutError,
        HevyAPIError,
    ) as e:
        raise sync_error_to_http(e) from e

    return SyncResponse(
        **result.model_dump(),
        message=(
            f"Synced {result.workouts_updated} workouts "
            f"({result.workouts_deleted} deleted, {result.workouts_skipped} skipped)"
        ),
    )
