"""Queries for personal records: the pr_events log and exercise_prs summaries."""

import logging
from datetime import date
from typing import Iterable, Optional
from uuid import UUID

import psycopg
from psycopg import sql

from tonnage.models import PrEvent, ExercisePr, PrType, EXERCISE_PR_TYPES

logger = logging.getLogger(__name__)


_EVENT_COLUMNS = """
    id, date, type, value, previous_best, delta, workout_id,
    exercise_template_id, exercise_name, reps
"""

_SUMMARY_COLUMNS = """
    exercise_template_id, exercise_name, exercise_type,
    max_weight_lb, max_weight_reps, max_weight_date,
    max_set_volume_lb, max_set_volume_date,
    max_session_volume_lb, max_session_volume_date
"""


# --- PR events ---


def insert_pr_events(
    cursor: psycopg.Cursor, user_id: UUID, events: Iterable[PrEvent]
) -> int:
    """Append events in the given order; serial IDs preserve that order."""
    count = 0
    for event in events:
        cursor.execute(
            """
            INSERT INTO pr_events (
                user_id, date, type, value, previous_best, delta, workout_id,
                exercise_template_id, exercise_name, reps
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """,
            (
                user_id,
                event.date,
                event.type,
                event.value,
                event.previous_best,
                event.delta,
                event.workout_id,
                event.exercise_template_id,
                event.exercise_name,
                event.reps,
            ),
        )
        count += cursor.rowcount
    return count


def delete_pr_events(
    cursor: psycopg.Cursor,
    user_id: UUID,
    types: Iterable[PrType],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> int:
    """Delete a user's events of the given types, optionally within [start, end)."""
    conditions: list[sql.Composable] = [
        sql.SQL("user_id = %s"),
        sql.SQL("type = ANY(%s)"),
    ]
    params: list = [user_id, list(types)]
    if start_date is not None:
        conditions.append(sql.SQL("date >= %s"))
        params.append(start_date)
    if end_date is not None:
        conditions.append(sql.SQL("date < %s"))
        params.append(end_date)

    query = sql.SQL("DELETE FROM pr_events WHERE {where_clause}").format(
        where_clause=sql.SQL(" AND ").join(conditions)
    )
    cursor.execute(query, params)
    return cursor.rowcount


def get_recent_pr_events(
    cursor: psycopg.Cursor, user_id: UUID, limit: int
) -> list[PrEvent]:
    """Latest events first; events of the same day in reverse detection order."""
    cursor.execute(
        f"""
        SELECT {_EVENT_COLUMNS}
        FROM pr_events
        WHERE user_id = %s
        ORDER BY date DESC, id DESC
        LIMIT %s
        """,
        (user_id, limit),
    )
    return [_row_to_pr_event(row) for row in cursor.fetchall()]


# --- Exercise PR summaries ---


def replace_exercise_prs(
    cursor: psycopg.Cursor, user_id: UUID, summaries: Iterable[ExercisePr]
) -> int:
    cursor.execute("DELETE FROM exercise_prs WHERE user_id = %s", (user_id,))
    count = 0
    for pr in summaries:
        cursor.execute(
            f"""
            INSERT INTO exercise_prs (user_id, {_SUMMARY_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            """,
            (
                user_id,
                pr.exercise_template_id,
                pr.exercise_name,
                pr.exercise_type,
                pr.max_weight_lb,
                pr.max_weight_reps,
                pr.max_weight_date,
                pr.max_set_volume_lb,
                pr.max_set_volume_date,
                pr.max_session_volume_lb,
                pr.max_session_volume_date,
            ),
        )
        count += cursor.rowcount
    return count


def get_exercise_prs(cursor: psycopg.Cursor, user_id: UUID) -> list[ExercisePr]:
    """Per-exercise bests, sorted by exercise name."""
    cursor.execute(
        f"""
        SELECT {_SUMMARY_COLUMNS}
        FROM exercise_prs
        WHERE user_id = %s
        ORDER BY exercise_name ASC, exercise_template_id ASC
        """,
        (user_id,),
    )
    return [_row_to_exercise_pr(row) for row in cursor.fetchall()]


def replace_exercise_records(
    cursor: psycopg.Cursor,
    user_id: UUID,
    summaries: list[ExercisePr],
    events: list[PrEvent],
) -> None:
    """Swap out every exercise-level record of a user for a fresh scan."""
    deleted = delete_pr_events(cursor, user_id, EXERCISE_PR_TYPES)
    inserted = insert_pr_events(cursor, user_id, events)
    replace_exercise_prs(cursor, user_id, summaries)
    logger.debug(
        f"Replaced exercise records for user {user_id}: "
        f"{deleted} events removed, {inserted} inserted, {len(summaries)} summaries"
    )


# --- Helper functions ---


def _row_to_pr_event(row: tuple) -> PrEvent:
    (
        id_,
        date_,
        type_,
        value,
        previous_best,
        delta,
        workout_id,
        exercise_template_id,
        exercise_name,
        reps,
    ) = row
    return PrEvent(
        id=id_,
        date=date_,
        type=type_,
        value=value,
        previous_best=previous_best or 0.0,
        delta=delta or 0.0,
        workout_id=workout_id,
        exercise_template_id=exercise_template_id,
        exercise_name=exercise_name,
        reps=reps,
    )


def _row_to_exercise_pr(row: tuple) -> ExercisePr:
    (
        exercise_template_id,
        exercise_name,
        exercise_type,
        max_weight_lb,
        max_weight_reps,
        max_weight_date,
        max_set_volume_lb,
        max_set_volume_date,
        max_session_volume_lb,
        max_session_volume_date,
    ) = row
    return ExercisePr(
        exercise_template_id=exercise_template_id,
        exercise_name=exercise_name,
        exercise_type=exercise_type,
        max_weight_lb=max_weight_lb,
        max_weight_reps=max_weight_reps,
        max_weight_date=max_weight_date,
        max_set_volume_lb=max_set_volume_lb,
        max_set_volume_date=max_set_volume_date,
        max_session_volume_lb=max_session_volume_lb,
        max_session_volume_date=max_session_volume_date,
    )
