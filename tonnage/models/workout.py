"""Workout models as stored locally."""

from __future__ import annotations
from typing import TYPE_CHECKING, Literal, Mapping, Self
from datetime import date, datetime, timezone

from pydantic import BaseModel

if TYPE_CHECKING:
    from tonnage.integrations.hevy.models import HevyWorkout, HevyExercise, HevySet


# How an exercise's load is attributed to a set.
ExerciseType = Literal[
    "weight_reps",  # standard weighted
    "bodyweight",
    "bodyweight_weighted",
    "bodyweight_assisted",
]

DEFAULT_EXERCISE_TYPE: ExerciseType = "weight_reps"

SetType = Literal["warmup", "normal", "failure", "dropset"]


class Set(BaseModel):
    """A single set within an exercise."""

    index: int = 0
    set_type: SetType | None = None
    weight_kg: float | None = None
    reps: int | None = None
    distance_meters: float | None = None
    duration_seconds: int | None = None
    rpe: float | None = None

    @classmethod
    def from_hevy(cls, hevy_set: HevySet) -> Self:
        return cls(
            index=hevy_set.index,
            set_type=hevy_set.set_type,
            weight_kg=hevy_set.weight_kg,
            reps=hevy_set.reps,
            distance_meters=hevy_set.distance_meters,
            duration_seconds=hevy_set.duration_seconds,
            rpe=hevy_set.rpe,
        )


class Exercise(BaseModel):
    """An exercise within a workout.

    `exercise_type` is the type that was known for the exercise when the
    workout was written. The per-user template map takes precedence over it.
    """

    index: int = 0
    title: str
    exercise_template_id: str | None = None
    exercise_type: ExerciseType | None = None
    notes: str | None = None
    superset_id: int | None = None
    sets: list[Set] = []

    @property
    def identity(self) -> str:
        """Stable key used to track records for this exercise."""
        return self.exercise_template_id or self.title

    def total_reps(self) -> int:
        return sum(s.reps or 0 for s in self.sets)

    @classmethod
    def from_hevy(
        cls,
        hevy_exercise: HevyExercise,
        exercise_types: Mapping[str, ExerciseType] | None = None,
    ) -> Self:
        recorded_type = None
        if exercise_types and hevy_exercise.exercise_template_id:
            recorded_type = exercise_types.get(hevy_exercise.exercise_template_id)
        return cls(
            index=hevy_exercise.index,
            title=hevy_exercise.title,
            exercise_template_id=hevy_exercise.exercise_template_id,
            exercise_type=recorded_type,
            notes=hevy_exercise.notes,
            superset_id=hevy_exercise.superset_id,
            sets=[Set.from_hevy(s) for s in hevy_exercise.sets],
        )


class Workout(BaseModel):
    """A lifting workout synced from Hevy.

    `volume_lb` is derived from the set data and is recomputed whenever the
    sets, the bodyweight log or the exercise-type mapping change.
    """

    id: str
    title: str | None = None
    description: str | None = None
    start_time: datetime
    end_time: datetime | None = None
    exercises: list[Exercise] = []
    volume_lb: int = 0

    @property
    def start_date(self) -> date:
        """Calendar date of the start time, truncated in UTC."""
        return self.start_time.astimezone(timezone.utc).date()

    @property
    def year(self) -> int:
        return self.start_date.year

    def duration_seconds(self) -> int:
        if self.end_time is None:
            return 0
        return int((self.end_time - self.start_time).total_seconds())

    @classmethod
    def from_hevy(
        cls,
        hevy_workout: HevyWorkout,
        exercise_types: Mapping[str, ExerciseType] | None = None,
    ) -> Self:
        """Create a Workout from a Hevy workout.

        Args:
            hevy_workout: The Hevy workout to convert.
            exercise_types: Template ID -> type map used to record each
                exercise's type at write time.
        """
        return cls(
            id=hevy_workout.id,
            title=hevy_workout.title,
            description=hevy_workout.description,
            start_time=hevy_workout.start_time.astimezone(timezone.utc),
            end_time=(
                hevy_workout.end_time.astimezone(timezone.utc)
                if hevy_workout.end_time
                else None
            ),
            exercises=[
                Exercise.from_hevy(e, exercise_types) for e in hevy_workout.exercises
            ],
        )
