"""Per-day rollups of a year's workouts, and year-scoped daily volume records."""

from collections import Counter
from datetime import date
from typing import Iterable, NamedTuple

from tonnage.models import Workout, DailyAggregate, PrEvent, DAILY_PR_TYPE


class DailyAggregation(NamedTuple):
    rows: list[DailyAggregate]
    daily_events: list[PrEvent]


def year_bounds(year: int) -> tuple[date, date]:
    """First day of `year` and first day of the next one (exclusive end)."""
    return date(year, 1, 1), date(year + 1, 1, 1)


def bucket_by_day(workouts: Iterable[Workout], year: int) -> list[DailyAggregate]:
    """Sum volume and count sessions per UTC calendar day of `year`.

    Workouts that start outside the year are ignored. Rows come back sorted
    by date, and only for days with at least one workout.
    """
    volume: dict[date, int] = {}
    count: Counter[date] = Counter()
    for workout in workouts:
        day = workout.start_date
        if day.year != year:
            continue
        volume[day] = volume.get(day, 0) + workout.volume_lb
        count[day] += 1

    return sorted(
        DailyAggregate(
            date=day, year=year, volume_lb=volume[day], workouts_count=count[day]
        )
        for day in volume
    )


def daily_volume_records(rows: list[DailyAggregate]) -> list[PrEvent]:
    """Emit an event each time a day's total beats every earlier day of the year.

    The comparison scope is the year only ("year best"), so there is no need
    to look at earlier years.
    """
    events = []
    running_max = 0.0
    for row in sorted(rows):
        if row.volume_lb <= 0 or row.volume_lb <= running_max:
            continue
        events.append(
            PrEvent(
                date=row.date,
                type=DAILY_PR_TYPE,
                value=float(row.volume_lb),
                previous_best=running_max,
                delta=row.volume_lb - running_max,
            )
        )
        running_max = float(row.volume_lb)
    return events


def aggregate_daily(
    workouts: Iterable[Workout],
    year: int,
    exercise_events: Iterable[PrEvent] = (),
) -> DailyAggregation:
    """Build the year's daily aggregate rows and its daily volume records.

    Args:
        workouts: Workouts of the year (others are ignored).
        year: The year being rebuilt.
        exercise_events: Exercise-level PR events; those dated within the year
            count toward the PR count of their day.

    Returns:
        The rows, with `prs_count` covering both exercise-level and daily
        volume events, and the freshly computed daily volume events.
    """
    rows = bucket_by_day(workouts, year)
    daily_events = daily_volume_records(rows)

    pr_counts: Counter[date] = Counter()
    for event in [*exercise_events, *daily_events]:
        if event.date.year == year:
            pr_counts[event.date] += 1

    rows = [row.model_copy(update={"prs_count": pr_counts[row.date]}) for row in rows]
    return DailyAggregation(rows=rows, daily_events=daily_events)
