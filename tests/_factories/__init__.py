from .hevy import (
    HevyWorkoutFactory,
    HevyExerciseFactory,
    HevySetFactory,
    HevyExerciseTemplateFactory,
)
from .workout import WorkoutFactory, ExerciseFactory, SetFactory

__all__ = [
    "HevyWorkoutFactory",
    "HevyExerciseFactory",
    "HevySetFactory",
    "HevyExerciseTemplateFactory",
    "WorkoutFactory",
    "ExerciseFactory",
    "SetFactory",
]
