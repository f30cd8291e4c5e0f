"""Bodyweight log used for bodyweight exercise volume."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tonnage.app.auth import require_user
from tonnage.app.dependencies import get_storage, get_sync_orchestrator
from tonnage.db import Storage
from tonnage.models import WeightLogEntry, CreateWeightLogEntryRequest
from tonnage.models.user import User
from tonnage.sync import SyncOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weight-log", tags=["weight-log"])


@router.get("", response_model=list[WeightLogEntry])
def get_weight_log(
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
) -> list[WeightLogEntry]:
    """Get the user's weight log, oldest entry first."""
    return storage.get_weight_log(user.id)


@router.post("", response_model=WeightLogEntry, status_code=status.HTTP_201_CREATED)
def add_weight_log_entry(
    entry: CreateWeightLogEntryRequest,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> WeightLogEntry:
    """Record a bodyweight for a day (replacing that day's entry) and recompute."""
    created = storage.add_weight_log_entry(user.id, entry)
    logger.info(f"Logged {created.weight_lb} lb on {created.date} for user {user.id}")
    orchestrator.recompute(user.id)
    return created


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_weight_log_entry(
    entry_id: int,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> None:
    if not storage.delete_weight_log_entry(user.id, entry_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Weight log entry {entry_id} not found",
        )
    orchestrator.recompute(user.id)
