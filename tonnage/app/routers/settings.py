"""Hevy connection settings for the signed-in user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tonnage.app.auth import require_user
from tonnage.app.dependencies import get_storage, get_sync_orchestrator
from tonnage.db import Storage
from tonnage.models import SettingsResponse, UpdateSettingsRequest
from tonnage.models.user import User
from tonnage.sync import SyncOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsResponse)
def get_settings(
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
) -> SettingsResponse:
    """Get the user's connection settings. 404 until Hevy has been connected."""
    connection = storage.get_connection(user.id)
    if connection is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No settings found",
        )
    return SettingsResponse.from_connection(connection)


@router.post("", response_model=SettingsResponse)
def update_settings(
    request: UpdateSettingsRequest,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> SettingsResponse:
    """Create or update the Hevy connection and dashboard settings.

    Changing the default bodyweight re-derives every stored volume.
    """
    previous = storage.get_connection(user.id)
    connection = storage.upsert_connection(user.id, request)
    logger.info(f"Updated settings for user {user.id}")

    if (
        previous is not None
        and previous.default_bodyweight_lb != connection.default_bodyweight_lb
    ):
        orchestrator.recompute(user.id)
    return SettingsResponse.from_connection(connection)
