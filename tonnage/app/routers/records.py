"""Personal records."""

from fastapi import APIRouter, Depends, Query

from tonnage.agg import pr_feed
from tonnage.app.auth import require_user
from tonnage.app.dependencies import get_storage
from tonnage.db import Storage
from tonnage.models import ExercisePr, PrFeedItem
from tonnage.models.user import User

router = APIRouter(prefix="/records", tags=["records"])


@router.get("/exercises", response_model=list[ExercisePr])
def get_exercise_records(
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
) -> list[ExercisePr]:
    """Current bests of every exercise, sorted by exercise name."""
    return storage.get_exercise_prs(user.id)


@router.get("/recent", response_model=list[PrFeedItem])
def get_recent_records(
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
) -> list[PrFeedItem]:
    """Most recent record-breaking events, newest first."""
    return pr_feed(storage.get_recent_prs(user.id, limit))
