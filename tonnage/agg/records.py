"""Personal record detection over the full workout history.

Records are found with a single forward pass over workouts in chronological
order, keeping a running best per (exercise, category). A statistic becomes a
record only when it is positive and strictly greater than the running best,
so matching a previous best is not a new record.

Because running bests depend on everything that came before, callers must
always pass the complete history. The result replaces, rather than extends,
any previously stored records.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Mapping, NamedTuple

from tonnage.models import (
    Workout,
    Exercise,
    ExerciseType,
    PrEvent,
    PrType,
    ExercisePr,
)
from .volume import compute_set_load, resolve_exercise_type


class SessionStats(NamedTuple):
    """Statistics of one exercise within one workout."""

    max_weight_lb: float
    max_weight_reps: int | None
    max_set_volume_lb: float
    session_volume_lb: float


class RecordScan(NamedTuple):
    bests: list[ExercisePr]
    events: list[PrEvent]


@dataclass
class _RunningBest:
    value: float = 0.0
    day: date | None = None
    reps: int | None = None


@dataclass
class _ExerciseState:
    name: str
    exercise_type: ExerciseType
    bests: dict[PrType, _RunningBest] = field(
        default_factory=lambda: {
            "exercise_max_weight": _RunningBest(),
            "exercise_max_set_volume": _RunningBest(),
            "exercise_max_session_volume": _RunningBest(),
        }
    )


def session_stats(
    exercises: list[Exercise], exercise_type: ExerciseType, bodyweight_lb: float
) -> SessionStats:
    """Compute max weight, max set volume and session volume over some sets.

    All instances of the same exercise within a workout are passed together.
    On a max-weight tie the earlier set wins (and keeps its rep count).
    """
    max_weight = 0.0
    max_weight_reps: int | None = None
    max_set_volume = 0.0
    session_volume = 0.0
    for exercise in exercises:
        for set_ in exercise.sets:
            load = compute_set_load(set_, exercise_type, bodyweight_lb)
            if load.effective_weight_lb > max_weight:
                max_weight = load.effective_weight_lb
                max_weight_reps = set_.reps
            if load.volume_lb > max_set_volume:
                max_set_volume = float(load.volume_lb)
            session_volume += load.volume_lb
    return SessionStats(max_weight, max_weight_reps, max_set_volume, session_volume)


def _group_by_identity(workout: Workout) -> dict[str, list[Exercise]]:
    grouped: dict[str, list[Exercise]] = {}
    for exercise in sorted(workout.exercises, key=lambda e: e.index):
        grouped.setdefault(exercise.identity, []).append(exercise)
    return grouped


def detect_records(
    workouts: list[Workout],
    resolve_bodyweight: Callable[[date], float],
    exercise_types: Mapping[str, ExerciseType] | None = None,
) -> RecordScan:
    """Replay the workout history and emit an event for every broken record.

    Args:
        workouts: The user's complete workout history, in any order. They are
            sorted by start time (stably) before the pass.
        resolve_bodyweight: Bodyweight (lb) on a given day, for bodyweight
            exercise variants.
        exercise_types: The user's template ID -> type map.

    Returns:
        The per-exercise bests and the events in detection order, which is
        chronological; within a workout, exercises keep their order.
    """
    states: dict[str, _ExerciseState] = {}
    events: list[PrEvent] = []

    for workout in sorted(workouts, key=lambda w: w.start_time):
        day = workout.start_date
        bodyweight = resolve_bodyweight(day)

        for identity, instances in _group_by_identity(workout).items():
            first = instances[0]
            exercise_type = resolve_exercise_type(first, exercise_types)
            stats = session_stats(instances, exercise_type, bodyweight)

            state = states.get(identity)
            if state is None:
                state = states[identity] = _ExerciseState(
                    name=first.title, exercise_type=exercise_type
                )
            state.name = first.title
            state.exercise_type = exercise_type

            candidates: list[tuple[PrType, float, int | None]] = [
                ("exercise_max_weight", stats.max_weight_lb, stats.max_weight_reps),
                ("exercise_max_set_volume", stats.max_set_volume_lb, None),
                ("exercise_max_session_volume", stats.session_volume_lb, None),
            ]
            for pr_type, value, reps in candidates:
                best = state.bests[pr_type]
                if value <= 0 or value <= best.value:
                    continue
                events.append(
                    PrEvent(
                        date=day,
                        type=pr_type,
                        value=value,
                        previous_best=best.value,
                        delta=value - best.value,
                        workout_id=workout.id,
                        exercise_template_id=identity,
                        exercise_name=first.title,
                        reps=reps,
                    )
                )
                best.value, best.day, best.reps = value, day, reps

    return RecordScan(bests=_summaries(states), events=events)


def _summaries(states: dict[str, _ExerciseState]) -> list[ExercisePr]:
    summaries = []
    for identity, state in states.items():
        max_weight = state.bests["exercise_max_weight"]
        max_set = state.bests["exercise_max_set_volume"]
        max_session = state.bests["exercise_max_session_volume"]
        # Exercises that never moved any load (e.g. timed holds) have no records.
        if max_weight.day is None and max_set.day is None and max_session.day is None:
            continue
        summaries.append(
            ExercisePr(
                exercise_template_id=identity,
                exercise_name=state.name,
                exercise_type=state.exercise_type,
                max_weight_lb=max_weight.value,
                max_weight_reps=max_weight.reps,
                max_weight_date=max_weight.day,
                max_set_volume_lb=max_set.value,
                max_set_volume_date=max_set.day,
                max_session_volume_lb=max_session.value,
                max_session_volume_date=max_session.day,
            )
        )
    return summaries
