"""Hevy integration for fetching weightlifting workout data."""

from .client import HevyClient, HevyAPIError
from .models import (
    HevyWorkout,
    HevyExercise,
    HevySet,
    HevyExerciseTemplate,
    HevyWorkoutEvent,
    MuscleGroup,
    SetType,
)

__all__ = [
    "HevyClient",
    "HevyAPIError",
    "HevyWorkout",
    "HevyExercise",
    "HevySet",
    "HevyExerciseTemplate",
    "HevyWorkoutEvent",
    "MuscleGroup",
    "SetType",
]
