"""Transactional storage handle for everything a user syncs and derives.

`Storage` is constructed explicitly and passed to whoever needs it. Each
method runs in its own transaction; methods that replace derived data do
their delete and reinsert inside that one transaction, so readers never see
a half-rebuilt year.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterable, Iterator, Optional
from uuid import UUID

import psycopg

from tonnage.models import (
    Workout,
    TopWorkout,
    DailyAggregate,
    PrEvent,
    ExercisePr,
    HevyConnection,
    UpdateSettingsRequest,
    ConnectionStatus,
    ExerciseTemplate,
    ExerciseType,
    WeightLogEntry,
    CreateWeightLogEntryRequest,
)
from . import (
    aggregates,
    exercise_templates,
    hevy_connections,
    records,
    weight_log,
    workouts,
)
from .connection import get_database_url, get_db_cursor

logger = logging.getLogger(__name__)


class Storage:
    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or get_database_url()

    @contextmanager
    def transaction(self) -> Iterator[psycopg.Cursor]:
        """A cursor whose statements commit together, or not at all."""
        with get_db_cursor(self.database_url) as cursor:
            yield cursor

    # --- Connection settings ---

    def get_connection(self, user_id: UUID) -> Optional[HevyConnection]:
        with self.transaction() as cursor:
            return hevy_connections.get_connection(cursor, user_id)

    def upsert_connection(
        self, user_id: UUID, settings: UpdateSettingsRequest
    ) -> HevyConnection:
        with self.transaction() as cursor:
            return hevy_connections.upsert_connection(cursor, user_id, settings)

    def mark_sync_succeeded(self, user_id: UUID, synced_at: datetime) -> None:
        with self.transaction() as cursor:
            hevy_connections.mark_sync_succeeded(cursor, user_id, synced_at)

    def mark_sync_failed(self, user_id: UUID, status: ConnectionStatus) -> None:
        with self.transaction() as cursor:
            hevy_connections.mark_sync_failed(cursor, user_id, status)

    # --- Exercise templates ---

    def get_templates(self, user_id: UUID) -> list[ExerciseTemplate]:
        with self.transaction() as cursor:
            return exercise_templates.get_all_templates(cursor, user_id)

    def get_template_ids(self, user_id: UUID) -> set[str]:
        with self.transaction() as cursor:
            return exercise_templates.get_template_ids(cursor, user_id)

    def get_exercise_types(self, user_id: UUID) -> dict[str, ExerciseType]:
        with self.transaction() as cursor:
            return exercise_templates.get_exercise_types(cursor, user_id)

    def insert_templates(
        self, user_id: UUID, templates: list[ExerciseTemplate]
    ) -> int:
        if not templates:
            return 0
        with self.transaction() as cursor:
            return exercise_templates.insert_templates(cursor, user_id, templates)

    def set_exercise_type(
        self, user_id: UUID, template_id: str, exercise_type: ExerciseType
    ) -> Optional[ExerciseTemplate]:
        with self.transaction() as cursor:
            return exercise_templates.set_exercise_type(
                cursor, user_id, template_id, exercise_type
            )

    # --- Weight log ---

    def get_weight_log(self, user_id: UUID) -> list[WeightLogEntry]:
        with self.transaction() as cursor:
            return weight_log.get_weight_log(cursor, user_id)

    def add_weight_log_entry(
        self, user_id: UUID, entry: CreateWeightLogEntryRequest
    ) -> WeightLogEntry:
        with self.transaction() as cursor:
            return weight_log.upsert_weight_log_entry(cursor, user_id, entry)

    def delete_weight_log_entry(self, user_id: UUID, entry_id: int) -> bool:
        with self.transaction() as cursor:
            return weight_log.delete_weight_log_entry(cursor, user_id, entry_id)

    # --- Workouts ---

    def get_all_workouts(self, user_id: UUID) -> list[Workout]:
        with self.transaction() as cursor:
            return workouts.get_all_workouts(cursor, user_id)

    def get_workout_years(
        self, user_id: UUID, workout_ids: Iterable[str]
    ) -> dict[str, int]:
        with self.transaction() as cursor:
            return workouts.get_workout_years(cursor, user_id, workout_ids)

    def upsert_workouts(self, user_id: UUID, new_workouts: list[Workout]) -> int:
        if not new_workouts:
            return 0
        logger.info(f"Upserting {len(new_workouts)} workouts for user {user_id}")
        with self.transaction() as cursor:
            return workouts.upsert_workouts(cursor, user_id, new_workouts)

    def delete_workouts(
        self, user_id: UUID, workout_ids: Iterable[str]
    ) -> dict[str, int]:
        with self.transaction() as cursor:
            return workouts.delete_workouts(cursor, user_id, workout_ids)

    def get_top_workouts(
        self, user_id: UUID, year: int, limit: int
    ) -> list[TopWorkout]:
        with self.transaction() as cursor:
            return workouts.get_top_workouts(cursor, user_id, year, limit)

    def get_years_with_data(self, user_id: UUID) -> set[int]:
        """Years that have workouts or (possibly stale) aggregates."""
        with self.transaction() as cursor:
            return workouts.get_years_with_workouts(
                cursor, user_id
            ) | aggregates.get_years_with_aggregates(cursor, user_id)

    # --- Records ---

    def replace_exercise_records(
        self, user_id: UUID, summaries: list[ExercisePr], events: list[PrEvent]
    ) -> None:
        with self.transaction() as cursor:
            records.replace_exercise_records(cursor, user_id, summaries, events)

    def get_exercise_prs(self, user_id: UUID) -> list[ExercisePr]:
        with self.transaction() as cursor:
            return records.get_exercise_prs(cursor, user_id)

    def get_recent_prs(self, user_id: UUID, limit: int = 10) -> list[PrEvent]:
        with self.transaction() as cursor:
            return records.get_recent_pr_events(cursor, user_id, limit)

    # --- Daily aggregates ---

    def get_aggregates_for_year(
        self, user_id: UUID, year: int
    ) -> list[DailyAggregate]:
        with self.transaction() as cursor:
            return aggregates.get_aggregates_for_year(cursor, user_id, year)

    def replace_daily_aggregates(
        self,
        user_id: UUID,
        year: int,
        rows: list[DailyAggregate],
        daily_events: list[PrEvent],
    ) -> None:
        with self.transaction() as cursor:
            aggregates.replace_daily_aggregates(
                cursor, user_id, year, rows, daily_events
            )
