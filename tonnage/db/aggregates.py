"""Queries for the daily_aggregates table."""

import logging
from uuid import UUID

import psycopg

from tonnage.models import DailyAggregate, PrEvent, DAILY_PR_TYPE
from tonnage.agg.daily import year_bounds
from .records import delete_pr_events, insert_pr_events

logger = logging.getLogger(__name__)


def get_aggregates_for_year(
    cursor: psycopg.Cursor, user_id: UUID, year: int
) -> list[DailyAggregate]:
    cursor.execute(
        """
        SELECT date, year, volume_lb, workouts_count, prs_count
        FROM daily_aggregates
        WHERE user_id = %s AND year = %s
        ORDER BY date ASC
        """,
        (user_id, year),
    )
    return [
        DailyAggregate(
            date=date_,
            year=year_,
            volume_lb=volume_lb,
            workouts_count=workouts_count,
            prs_count=prs_count,
        )
        for date_, year_, volume_lb, workouts_count, prs_count in cursor.fetchall()
    ]


def get_years_with_aggregates(cursor: psycopg.Cursor, user_id: UUID) -> set[int]:
    cursor.execute(
        "SELECT DISTINCT year FROM daily_aggregates WHERE user_id = %s", (user_id,)
    )
    return {row[0] for row in cursor.fetchall()}


def replace_daily_aggregates(
    cursor: psycopg.Cursor,
    user_id: UUID,
    year: int,
    rows: list[DailyAggregate],
    daily_events: list[PrEvent],
) -> None:
    """Replace a year's aggregate rows and its daily volume events.

    Exercise-level events are left alone.
    """
    start, end = year_bounds(year)
    cursor.execute(
        "DELETE FROM daily_aggregates WHERE user_id = %s AND year = %s",
        (user_id, year),
    )
    delete_pr_events(cursor, user_id, [DAILY_PR_TYPE], start, end)

    for row in rows:
        cursor.execute(
            """
            INSERT INTO daily_aggregates (
                user_id, date, year, volume_lb, workouts_count, prs_count
            ) VALUES (%s, %s, %s, %s, %s, %s)
            """,
            (
                user_id,
                row.date,
                row.year,
                row.volume_lb,
                row.workouts_count,
                row.prs_count,
            ),
        )
    insert_pr_events(cursor, user_id, daily_events)
    logger.debug(
        f"Rebuilt {year} for user {user_id}: {len(rows)} days, "
        f"{len(daily_events)} daily volume records"
    )
