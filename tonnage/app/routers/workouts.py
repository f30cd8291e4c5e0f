"""Workout listings."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tonnage.app.auth import require_user
from tonnage.app.dependencies import get_storage
from tonnage.db import Storage
from tonnage.models import TopWorkout
from tonnage.models.user import User

router = APIRouter(prefix="/workouts", tags=["workouts"])


@router.get("/top", response_model=list[TopWorkout])
def get_top_workouts(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    limit: int = Query(5, ge=1, le=50),
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
) -> list[TopWorkout]:
    """The year's heaviest workouts by volume. Defaults to the tracked year."""
    if year is None:
        connection = storage.get_connection(user.id)
        year = connection.tracked_year if connection else date.today().year
    return storage.get_top_workouts(user.id, year, limit)
