"""Personal record models."""

from datetime import date
from typing import Literal

from pydantic import BaseModel

from .workout import ExerciseType


PrType = Literal[
    "exercise_max_weight",
    "exercise_max_set_volume",
    "exercise_max_session_volume",
    "daily_total_volume",
]

# Categories tracked per exercise over the full workout history.
EXERCISE_PR_TYPES: tuple[PrType, ...] = (
    "exercise_max_weight",
    "exercise_max_set_volume",
    "exercise_max_session_volume",
)

# Tracked per calendar year across all exercises.
DAILY_PR_TYPE: PrType = "daily_total_volume"


class PrEvent(BaseModel):
    """The moment a record was broken. Never mutated once created."""

    id: int | None = None
    date: date
    type: PrType
    value: float
    previous_best: float = 0.0
    delta: float = 0.0
    workout_id: str | None = None
    exercise_template_id: str | None = None
    exercise_name: str | None = None
    reps: int | None = None  # Reps of the set, for max-weight records


class ExercisePr(BaseModel):
    """Current bests for one exercise, derived from its PR events."""

    exercise_template_id: str
    exercise_name: str
    exercise_type: ExerciseType
    max_weight_lb: float = 0.0
    max_weight_reps: int | None = None
    max_weight_date: date | None = None
    max_set_volume_lb: float = 0.0
    max_set_volume_date: date | None = None
    max_session_volume_lb: float = 0.0
    max_session_volume_date: date | None = None
