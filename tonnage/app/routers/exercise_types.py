"""View and override how each exercise template's sets are loaded."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tonnage.app.auth import require_user
from tonnage.app.dependencies import get_storage, get_sync_orchestrator
from tonnage.db import Storage
from tonnage.models import ExerciseTemplate, UpdateExerciseTypeRequest
from tonnage.models.user import User
from tonnage.sync import SyncOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exercise-types", tags=["exercise-types"])


@router.get("", response_model=list[ExerciseTemplate])
def get_exercise_types(
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
) -> list[ExerciseTemplate]:
    """Get every cached exercise template with its resolved type."""
    return storage.get_templates(user.id)


@router.put("/{template_id}", response_model=ExerciseTemplate)
def update_exercise_type(
    template_id: str,
    request: UpdateExerciseTypeRequest,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> ExerciseTemplate:
    """Override a template's exercise type, then recompute all volumes."""
    template = storage.set_exercise_type(user.id, template_id, request.exercise_type)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Exercise template {template_id} not found",
        )
    logger.info(
        f"Set exercise type of {template_id} to {request.exercise_type} "
        f"for user {user.id}"
    )
    orchestrator.recompute(user.id)
    return template
