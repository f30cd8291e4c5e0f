"""Turn a year's daily aggregates into dashboard stats and chart series.

Pacing deliberately ignores leap years: a year is always 365 days long for
the daily target, so Dec 31 of a leap year is clamped to day 365.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, NamedTuple

from tonnage.models import (
    DailyAggregate,
    DashboardStats,
    ChartPoint,
    HeatmapDay,
    PrEvent,
    PrFeedItem,
)


DAYS_PER_YEAR = 365


class DashboardProjection(NamedTuple):
    stats: DashboardStats
    chart_data: list[ChartPoint]


def day_of_year(day: date | datetime, year: int) -> int:
    """Whole days elapsed since Dec 31 of the previous year, so Jan 1 is day 1.

    Days before the year clamp to 0 and days after it to 365.
    """
    if isinstance(day, datetime):
        start = datetime(year - 1, 12, 31, tzinfo=day.tzinfo)
    else:
        start = date(year - 1, 12, 31)
    elapsed = (day - start) // timedelta(days=1)
    return min(max(elapsed, 0), DAYS_PER_YEAR)


def project(
    aggregates: Iterable[DailyAggregate],
    goal_lb: float,
    year: int,
    now: datetime,
    last_sync_at: datetime | None = None,
) -> DashboardProjection:
    """Compute progress, pace and the cumulative chart for one year.

    Args:
        aggregates: The daily aggregates of `year`.
        goal_lb: The annual volume goal.
        year: The year being displayed.
        now: The current time; decides whether `year` is the current one.
        last_sync_at: Passed through onto the stats.
    """
    rows = sorted(aggregates)
    total = float(sum(row.volume_lb for row in rows))
    is_current_year = now.year == year

    today = day_of_year(now, year) if is_current_year else DAYS_PER_YEAR
    target_per_day = goal_lb / DAYS_PER_YEAR
    expected_to_date = target_per_day * today
    days_remaining = DAYS_PER_YEAR - today if is_current_year else 0

    if is_current_year and today > 0:
        projected_year_end = total / today * DAYS_PER_YEAR
    else:
        projected_year_end = total

    stats = DashboardStats(
        total_lifted_lb=total,
        goal_lb=goal_lb,
        percentage_complete=total / goal_lb * 100 if goal_lb > 0 else 0.0,
        day_of_year=today,
        days_remaining=days_remaining,
        expected_to_date_lb=expected_to_date,
        ahead_behind_lb=total - expected_to_date,
        required_per_day_lb=(
            (goal_lb - total) / days_remaining if days_remaining > 0 else 0.0
        ),
        projected_year_end_lb=projected_year_end,
        sessions_count=sum(row.workouts_count for row in rows),
        days_lifted_count=sum(1 for row in rows if row.workouts_count > 0),
        last_workout_volume_lb=float(rows[-1].volume_lb) if rows else 0.0,
        last_sync_at=last_sync_at,
    )

    chart_data = chart_series(rows, goal_lb, year, now)
    return DashboardProjection(stats=stats, chart_data=chart_data)


def chart_series(
    rows: list[DailyAggregate], goal_lb: float, year: int, now: datetime
) -> list[ChartPoint]:
    """Cumulative actual volume per active day, framed by two synthetic points.

    The series opens with Jan 1 at day 0 and closes with a point for today
    (Dec 31 for past years) that carries the target-to-date, so the target
    line can be drawn straight between the first and last points. Future
    years get no closing point.
    """
    target_per_day = goal_lb / DAYS_PER_YEAR
    points = [
        ChartPoint(
            date=date(year, 1, 1),
            day_of_year=0,
            actual_volume=0.0,
            target_volume=0.0,
            cumulative_actual=0.0,
            cumulative_target=0.0,
        )
    ]

    cumulative = 0.0
    for row in sorted(rows):
        cumulative += row.volume_lb
        index = day_of_year(row.date, year)
        points.append(
            ChartPoint(
                date=row.date,
                day_of_year=index,
                actual_volume=float(row.volume_lb),
                target_volume=target_per_day,
                cumulative_actual=cumulative,
                cumulative_target=target_per_day * index,
            )
        )

    if now.year < year:
        return points

    if now.year == year:
        closing_date = now.date()
        index = day_of_year(now, year)
    else:
        closing_date = date(year, 12, 31)
        index = DAYS_PER_YEAR

    if points[-1].date != closing_date:
        points.append(
            ChartPoint(
                date=closing_date,
                day_of_year=index,
                actual_volume=0.0,
                target_volume=target_per_day,
                cumulative_actual=cumulative,
                cumulative_target=target_per_day * index,
            )
        )
    return points


def heatmap(aggregates: Iterable[DailyAggregate]) -> list[HeatmapDay]:
    return [
        HeatmapDay(
            date=row.date,
            volume_lb=float(row.volume_lb),
            count=row.workouts_count,
            pr_count=row.prs_count,
        )
        for row in sorted(aggregates)
    ]


def pr_feed(events: Iterable[PrEvent]) -> list[PrFeedItem]:
    """Shape stored PR events into feed items, keeping the given order."""
    return [
        PrFeedItem(
            id=event.id,
            date=event.date,
            type=event.type,
            exercise_name=event.exercise_name,
            value=event.value,
            delta=event.delta,
        )
        for event in events
    ]
