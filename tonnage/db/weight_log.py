"""Queries for the weight_log table."""

from uuid import UUID

import psycopg

from tonnage.models import WeightLogEntry, CreateWeightLogEntryRequest


def get_weight_log(cursor: psycopg.Cursor, user_id: UUID) -> list[WeightLogEntry]:
    cursor.execute(
        """
        SELECT id, date, weight_lb
        FROM weight_log
        WHERE user_id = %s
        ORDER BY date ASC
        """,
        (user_id,),
    )
    return [
        WeightLogEntry(id=id_, date=date_, weight_lb=weight_lb)
        for id_, date_, weight_lb in cursor.fetchall()
    ]


def upsert_weight_log_entry(
    cursor: psycopg.Cursor, user_id: UUID, entry: CreateWeightLogEntryRequest
) -> WeightLogEntry:
    """Record a weight for a day, replacing any earlier entry for that day."""
    cursor.execute(
        """
        INSERT INTO weight_log (user_id, date, weight_lb)
        VALUES (%s, %s, %s)
        ON CONFLICT (user_id, date) DO UPDATE SET weight_lb = EXCLUDED.weight_lb
        RETURNING id, date, weight_lb
        """,
        (user_id, entry.date, entry.weight_lb),
    )
    id_, date_, weight_lb = cursor.fetchone()
    return WeightLogEntry(id=id_, date=date_, weight_lb=weight_lb)


def delete_weight_log_entry(
    cursor: psycopg.Cursor, user_id: UUID, entry_id: int
) -> bool:
    """Delete an entry. Returns False if the user has no such entry."""
    cursor.execute(
        "DELETE FROM weight_log WHERE user_id = %s AND id = %s",
        (user_id, entry_id),
    )
    return cursor.rowcount > 0
