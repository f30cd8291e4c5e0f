"""Queries for the per-user exercise_templates cache."""

import logging
from typing import Optional
from uuid import UUID

import psycopg

from tonnage.models import ExerciseTemplate, ExerciseType

logger = logging.getLogger(__name__)


def get_all_templates(cursor: psycopg.Cursor, user_id: UUID) -> list[ExerciseTemplate]:
    cursor.execute(
        """
        SELECT id, title, hevy_type, exercise_type, primary_muscle_group
        FROM exercise_templates
        WHERE user_id = %s
        ORDER BY title
        """,
        (user_id,),
    )
    return [_row_to_template(row) for row in cursor.fetchall()]


def get_template_ids(cursor: psycopg.Cursor, user_id: UUID) -> set[str]:
    cursor.execute("SELECT id FROM exercise_templates WHERE user_id = %s", (user_id,))
    return {row[0] for row in cursor.fetchall()}


def get_exercise_types(cursor: psycopg.Cursor, user_id: UUID) -> dict[str, ExerciseType]:
    """Template ID -> resolved exercise type, for templates with a known type."""
    cursor.execute(
        """
        SELECT id, exercise_type
        FROM exercise_templates
        WHERE user_id = %s AND exercise_type IS NOT NULL
        """,
        (user_id,),
    )
    return {row[0]: row[1] for row in cursor.fetchall()}


def insert_templates(
    cursor: psycopg.Cursor, user_id: UUID, templates: list[ExerciseTemplate]
) -> int:
    """Cache new templates. Existing rows, and any type override on them, are kept."""
    count = 0
    for template in templates:
        cursor.execute(
            """
            INSERT INTO exercise_templates (
                user_id, id, title, hevy_type, exercise_type, primary_muscle_group
            ) VALUES (%s, %s, %s, %s, %s, %s)
            ON CONFLICT (user_id, id) DO NOTHING
            """,
            (
                user_id,
                template.id,
                template.title,
                template.hevy_type,
                template.exercise_type,
                template.primary_muscle_group,
            ),
        )
        count += cursor.rowcount
    logger.debug(f"Cached {count} new exercise templates for user {user_id}")
    return count


def set_exercise_type(
    cursor: psycopg.Cursor,
    user_id: UUID,
    template_id: str,
    exercise_type: ExerciseType,
) -> Optional[ExerciseTemplate]:
    """Override the type of a cached template. Returns None if it is unknown."""
    cursor.execute(
        """
        UPDATE exercise_templates
        SET exercise_type = %s, updated_at = CURRENT_TIMESTAMP
        WHERE user_id = %s AND id = %s
        RETURNING id, title, hevy_type, exercise_type, primary_muscle_group
        """,
        (exercise_type, user_id, template_id),
    )
    row = cursor.fetchone()
    return _row_to_template(row) if row else None


def _row_to_template(row: tuple) -> ExerciseTemplate:
    id_, title, hevy_type, exercise_type, primary_muscle_group = row
    return ExerciseTemplate(
        id=id_,
        title=title,
        hevy_type=hevy_type,
        exercise_type=exercise_type,
        primary_muscle_group=primary_muscle_group,
    )
