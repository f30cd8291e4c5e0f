"""Pydantic models for Hevy API responses."""

from __future__ import annotations
from typing import Literal

from pydantic import BaseModel, AwareDatetime


# Muscle groups as defined by Hevy API
MuscleGroup = Literal[
    "abdominals",
    "shoulders",
    "biceps",
    "triceps",
    "forearms",
    "quadriceps",
    "hamstrings",
    "calves",
    "glutes",
    "abductors",
    "adductors",
    "lats",
    "upper_back",
    "traps",
    "lower_back",
    "chest",
    "cardio",
    "neck",
    "full_body",
    "other",
]

# Set types as defined by Hevy API
SetType = Literal["warmup", "normal", "failure", "dropset"]

WorkoutEventType = Literal["updated", "deleted"]


class HevySet(BaseModel):
    """A single set within an exercise."""

    index: int = 0
    set_type: SetType | None = None
    weight_kg: float | None = None
    reps: int | None = None
    distance_meters: float | None = None
    duration_seconds: int | None = None
    rpe: float | None = None  # Rating of Perceived Exertion (1-10)


class HevyExercise(BaseModel):
    """An exercise within a workout."""

    index: int = 0
    title: str
    notes: str | None = None
    exercise_template_id: str | None = None
    superset_id: int | None = None
    sets: list[HevySet] = []


class HevyWorkout(BaseModel):
    """A workout from the Hevy API."""

    id: str
    title: str | None = None
    description: str | None = None
    start_time: AwareDatetime
    end_time: AwareDatetime | None = None
    created_at: AwareDatetime | None = None
    updated_at: AwareDatetime | None = None
    exercises: list[HevyExercise] = []


class HevyExerciseTemplate(BaseModel):
    """An exercise template from Hevy (defines the exercise type and muscle groups)."""

    id: str
    title: str
    type: str  # e.g., "weight_reps", "bodyweight_reps", "duration", etc.
    primary_muscle_group: MuscleGroup | None = None
    secondary_muscle_groups: list[MuscleGroup] = []
    is_custom: bool = False


class HevyWorkoutEvent(BaseModel):
    """A single entry of the /v1/workouts/events feed.

    Updated events normally carry the full workout, but may carry only its ID.
    Deleted events carry only the ID.
    """

    type: WorkoutEventType
    id: str | None = None
    workout: HevyWorkout | None = None
    deleted_at: AwareDatetime | None = None

    @property
    def workout_id(self) -> str | None:
        if self.workout is not None:
            return self.workout.id
        return self.id


class HevyWorkoutsResponse(BaseModel):
    """Paginated response from /v1/workouts endpoint."""

    page: int = 1
    page_count: int = 0
    workouts: list[HevyWorkout] = []


class HevyWorkoutEventsResponse(BaseModel):
    """Paginated response from /v1/workouts/events endpoint."""

    page: int = 1
    page_count: int = 0
    events: list[HevyWorkoutEvent] = []
