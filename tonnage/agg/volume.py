"""Volume math: effective load per set and total volume per workout.

All volumes are reported in pounds. Hevy records weights in kilograms, so
recorded weights are converted; bodyweights already come in pounds.
"""

import math
from typing import Mapping, NamedTuple, Optional

from tonnage.models import Workout, Exercise, Set, ExerciseType, DEFAULT_EXERCISE_TYPE


KG_TO_LB = 2.20462

# Hevy template types -> how the load of a set is attributed.
HEVY_TYPE_MAP: dict[str, ExerciseType] = {
    "weight_reps": "weight_reps",
    "reps_only": "bodyweight",
    "bodyweight_reps": "bodyweight",
    "bodyweight_weighted": "bodyweight_weighted",
    "weighted_bodyweight": "bodyweight_weighted",
    "bodyweight_assisted": "bodyweight_assisted",
    "bodyweight_assisted_reps": "bodyweight_assisted",
    "assisted_bodyweight": "bodyweight_assisted",
}


class SetLoad(NamedTuple):
    effective_weight_lb: float
    volume_lb: int


def kg_to_lb(weight_kg: float) -> float:
    return weight_kg * KG_TO_LB


def exercise_type_from_hevy(template_type: Optional[str]) -> Optional[ExerciseType]:
    """Map a Hevy template type onto an exercise type, or None if unknown."""
    if not template_type:
        return None
    return HEVY_TYPE_MAP.get(template_type)


def resolve_exercise_type(
    exercise: Exercise, exercise_types: Mapping[str, ExerciseType] | None = None
) -> ExerciseType:
    """Resolve how an exercise's sets are loaded.

    Checked in order, first match wins:
        1. the user's template map, keyed by exercise template ID
        2. the type recorded on the exercise when the workout was written
        3. the standard weighted default
    """
    if exercise_types and exercise.exercise_template_id:
        mapped = exercise_types.get(exercise.exercise_template_id)
        if mapped is not None:
            return mapped
    if exercise.exercise_type is not None:
        return exercise.exercise_type
    return DEFAULT_EXERCISE_TYPE


def compute_set_load(
    set_: Set, exercise_type: ExerciseType, bodyweight_lb: float
) -> SetLoad:
    """Compute the effective weight and volume of a single set.

    A set without reps contributes nothing, whatever its weight. Missing
    weights count as zero.
    """
    reps = set_.reps or 0
    if reps <= 0:
        return SetLoad(0.0, 0)

    raw_lb = kg_to_lb(set_.weight_kg or 0.0)
    match exercise_type:
        case "bodyweight":
            effective = bodyweight_lb
        case "bodyweight_weighted":
            effective = bodyweight_lb + raw_lb
        case "bodyweight_assisted":
            effective = max(0.0, bodyweight_lb - raw_lb)
        case _:
            effective = raw_lb

    # Volume uses the unrounded weight and rounds halves up.
    volume = int(math.floor(effective * reps + 0.5))
    return SetLoad(round(effective, 2), volume)


def compute_exercise_volume(
    exercise: Exercise, exercise_type: ExerciseType, bodyweight_lb: float
) -> int:
    return sum(
        compute_set_load(s, exercise_type, bodyweight_lb).volume_lb
        for s in exercise.sets
    )


def compute_workout_volume(
    workout: Workout,
    bodyweight_lb: float,
    exercise_types: Mapping[str, ExerciseType] | None = None,
) -> int:
    """Total volume (lb) of a workout, summed over every set of every exercise."""
    total = 0
    for exercise in workout.exercises:
        exercise_type = resolve_exercise_type(exercise, exercise_types)
        total += compute_exercise_volume(exercise, exercise_type, bodyweight_lb)
    return int(round(total))
