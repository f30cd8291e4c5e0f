"""Queries for the hevy_connections table (one row per user)."""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import psycopg

from tonnage.models import HevyConnection, UpdateSettingsRequest, ConnectionStatus

logger = logging.getLogger(__name__)


_CONNECTION_COLUMNS = """
    user_id, api_key, goal_lb, selected_year, default_bodyweight_lb,
    last_sync_at, status
"""


def get_connection(cursor: psycopg.Cursor, user_id: UUID) -> Optional[HevyConnection]:
    cursor.execute(
        f"SELECT {_CONNECTION_COLUMNS} FROM hevy_connections WHERE user_id = %s",
        (user_id,),
    )
    row = cursor.fetchone()
    return _row_to_connection(row) if row else None


def upsert_connection(
    cursor: psycopg.Cursor, user_id: UUID, settings: UpdateSettingsRequest
) -> HevyConnection:
    """Create or update a user's connection settings.

    The sync marker and status are kept when the row already exists.
    """
    cursor.execute(
        f"""
        INSERT INTO hevy_connections (
            user_id, api_key, goal_lb, selected_year, default_bodyweight_lb
        ) VALUES (%s, %s, %s, %s, %s)
        ON CONFLICT (user_id) DO UPDATE SET
            api_key = EXCLUDED.api_key,
            goal_lb = EXCLUDED.goal_lb,
            selected_year = EXCLUDED.selected_year,
            default_bodyweight_lb = EXCLUDED.default_bodyweight_lb,
            updated_at = CURRENT_TIMESTAMP
        RETURNING {_CONNECTION_COLUMNS}
        """,
        (
            user_id,
            settings.api_key,
            settings.goal_lb,
            settings.selected_year,
            settings.default_bodyweight_lb,
        ),
    )
    return _row_to_connection(cursor.fetchone())


def mark_sync_succeeded(
    cursor: psycopg.Cursor, user_id: UUID, synced_at: datetime
) -> None:
    cursor.execute(
        """
        UPDATE hevy_connections
        SET last_sync_at = %s, status = 'ok', updated_at = CURRENT_TIMESTAMP
        WHERE user_id = %s
        """,
        (synced_at, user_id),
    )


def mark_sync_failed(
    cursor: psycopg.Cursor, user_id: UUID, status: ConnectionStatus
) -> None:
    """Record a failed sync. The last successful sync time is left unchanged."""
    cursor.execute(
        """
        UPDATE hevy_connections
        SET status = %s, updated_at = CURRENT_TIMESTAMP
        WHERE user_id = %s
        """,
        (status, user_id),
    )


def _row_to_connection(row: tuple) -> HevyConnection:
    (
        user_id,
        api_key,
        goal_lb,
        selected_year,
        default_bodyweight_lb,
        last_sync_at,
        status,
    ) = row
    # Add timezone info if naive (assume UTC)
    if last_sync_at is not None and last_sync_at.tzinfo is None:
        last_sync_at = last_sync_at.replace(tzinfo=timezone.utc)
    return HevyConnection(
        user_id=user_id,
        api_key=api_key,
        goal_lb=goal_lb,
        selected_year=selected_year,
        default_bodyweight_lb=default_bodyweight_lb,
        last_sync_at=last_sync_at,
        status=status,
    )
