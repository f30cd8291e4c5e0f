"""Queries for the workouts table.

Every function takes an open cursor so that callers can compose several
operations into one transaction. Set data is embedded in the `exercises`
JSONB column.
"""

import json
import logging
from datetime import date, datetime, timezone
from typing import Iterable
from uuid import UUID

import psycopg

from tonnage.models import Workout, Exercise, TopWorkout

logger = logging.getLogger(__name__)


_WORKOUT_COLUMNS = "id, title, description, start_time, end_time, exercises, volume_lb"


def get_all_workouts(cursor: psycopg.Cursor, user_id: UUID) -> list[Workout]:
    """Get every workout of a user, oldest first."""
    cursor.execute(
        f"""
        SELECT {_WORKOUT_COLUMNS}
        FROM workouts
        WHERE user_id = %s
        ORDER BY start_time ASC, id ASC
        """,
        (user_id,),
    )
    return [_row_to_workout(row) for row in cursor.fetchall()]


def get_workout_years(
    cursor: psycopg.Cursor, user_id: UUID, workout_ids: Iterable[str]
) -> dict[str, int]:
    """Map the given workout IDs to the UTC year of their stored start time.

    IDs that are not stored are left out.
    """
    ids = list(workout_ids)
    if not ids:
        return {}
    cursor.execute(
        """
        SELECT id, EXTRACT(YEAR FROM start_time AT TIME ZONE 'UTC')::int
        FROM workouts
        WHERE user_id = %s AND id = ANY(%s)
        """,
        (user_id, ids),
    )
    return {row[0]: row[1] for row in cursor.fetchall()}


def get_years_with_workouts(cursor: psycopg.Cursor, user_id: UUID) -> set[int]:
    cursor.execute(
        """
        SELECT DISTINCT EXTRACT(YEAR FROM start_time AT TIME ZONE 'UTC')::int
        FROM workouts
        WHERE user_id = %s
        """,
        (user_id,),
    )
    return {row[0] for row in cursor.fetchall()}


def upsert_workouts(
    cursor: psycopg.Cursor, user_id: UUID, workouts: list[Workout]
) -> int:
    """Insert or overwrite workouts by ID. Returns the number of rows written."""
    count = 0
    for workout in workouts:
        exercises_json = json.dumps(
            [e.model_dump(mode="json") for e in workout.exercises]
        )
        cursor.execute(
            """
            INSERT INTO workouts (
                user_id, id, title, description, start_time, end_time,
                exercises, volume_lb
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (user_id, id) DO UPDATE SET
                title = EXCLUDED.title,
                description = EXCLUDED.description,
                start_time = EXCLUDED.start_time,
                end_time = EXCLUDED.end_time,
                exercises = EXCLUDED.exercises,
                volume_lb = EXCLUDED.volume_lb,
                updated_at = CURRENT_TIMESTAMP
            """,
            (
                user_id,
                workout.id,
                workout.title,
                workout.description,
                workout.start_time,
                workout.end_time,
                exercises_json,
                workout.volume_lb,
            ),
        )
        count += cursor.rowcount
    logger.debug(f"Upserted {count} workouts for user {user_id}")
    return count


def delete_workouts(
    cursor: psycopg.Cursor, user_id: UUID, workout_ids: Iterable[str]
) -> dict[str, int]:
    """Delete workouts by ID, returning the UTC start year of each deleted row."""
    ids = list(workout_ids)
    if not ids:
        return {}
    cursor.execute(
        """
        DELETE FROM workouts
        WHERE user_id = %s AND id = ANY(%s)
        RETURNING id, EXTRACT(YEAR FROM start_time AT TIME ZONE 'UTC')::int
        """,
        (user_id, ids),
    )
    return {row[0]: row[1] for row in cursor.fetchall()}


def get_top_workouts(
    cursor: psycopg.Cursor, user_id: UUID, year: int, limit: int
) -> list[TopWorkout]:
    """The heaviest workouts of a year by volume."""
    cursor.execute(
        """
        SELECT id, title, start_time, volume_lb, jsonb_array_length(exercises)
        FROM workouts
        WHERE user_id = %s
          AND start_time >= %s AND start_time < %s
        ORDER BY volume_lb DESC, start_time ASC
        LIMIT %s
        """,
        (
            user_id,
            _utc_midnight(date(year, 1, 1)),
            _utc_midnight(date(year + 1, 1, 1)),
            limit,
        ),
    )
    return [
        TopWorkout(
            id=id_,
            title=title,
            start_time=start_time,
            volume_lb=volume_lb,
            exercise_count=exercise_count,
        )
        for id_, title, start_time, volume_lb, exercise_count in cursor.fetchall()
    ]


def _utc_midnight(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def _row_to_workout(row: tuple) -> Workout:
    id_, title, description, start_time, end_time, exercises_json, volume_lb = row
    exercises_data = (
        exercises_json
        if isinstance(exercises_json, list)
        else json.loads(exercises_json or "[]")
    )
    return Workout(
        id=id_,
        title=title,
        description=description,
        start_time=start_time,
        end_time=end_time,
        exercises=[Exercise.model_validate(e) for e in exercises_data],
        volume_lb=volume_lb,
    )
