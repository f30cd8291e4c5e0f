from datetime import datetime, timezone
from typing import Iterable
from unittest.mock import MagicMock
from uuid import UUID

import pytest

from tonnage.integrations.hevy import HevyClient
from tonnage.models import (
    DailyAggregate,
    ExercisePr,
    ExerciseTemplate,
    HevyConnection,
    PrEvent,
    WeightLogEntry,
    Workout,
)
from tonnage.sync import SyncOrchestrator, SyncLockRegistry


USER_ID = UUID("11111111-2222-3333-4444-555555555555")
NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeStorage:
    """In-memory stand-in for `tonnage.db.Storage`, holding a single user."""

    def __init__(self, connection: HevyConnection | None = None):
        self.connection = connection
        self.templates: dict[str, ExerciseTemplate] = {}
        self.weight_log: list[WeightLogEntry] = []
        self.workouts: dict[str, Workout] = {}
        self.exercise_prs: list[ExercisePr] = []
        self.exercise_events: list[PrEvent] = []
        self.daily_rows: dict[int, list[DailyAggregate]] = {}
        self.daily_events: dict[int, list[PrEvent]] = {}
        self.upsert_calls: list[list[Workout]] = []

    def get_connection(self, user_id):
        return self.connection

    def mark_sync_succeeded(self, user_id, synced_at):
        self.connection = self.connection.model_copy(
            update={"last_sync_at": synced_at, "status": "ok"}
        )

    def mark_sync_failed(self, user_id, status):
        self.connection = self.connection.model_copy(update={"status": status})

    def get_template_ids(self, user_id):
        return set(self.templates)

    def insert_templates(self, user_id, templates):
        new = [t for t in templates if t.id not in self.templates]
        for template in new:
            self.templates[template.id] = template
        return len(new)

    def get_exercise_types(self, user_id):
        return {
            t.id: t.exercise_type
            for t in self.templates.values()
            if t.exercise_type is not None
        }

    def get_weight_log(self, user_id):
        return list(self.weight_log)

    def delete_workouts(self, user_id, workout_ids: Iterable[str]):
        return {
            id_: self.workouts.pop(id_).year
            for id_ in list(workout_ids)
            if id_ in self.workouts
        }

    def get_workout_years(self, user_id, workout_ids: Iterable[str]):
        return {
            id_: self.workouts[id_].year
            for id_ in workout_ids
            if id_ in self.workouts
        }

    def upsert_workouts(self, user_id, workouts):
        self.upsert_calls.append(list(workouts))
        for workout in workouts:
            self.workouts[workout.id] = workout
        return len(workouts)

    def get_all_workouts(self, user_id):
        return sorted(self.workouts.values(), key=lambda w: (w.start_time, w.id))

    def get_years_with_data(self, user_id):
        return {w.year for w in self.workouts.values()} | set(self.daily_rows)

    def replace_exercise_records(self, user_id, summaries, events):
        self.exercise_prs = list(summaries)
        self.exercise_events = list(events)

    def replace_daily_aggregates(self, user_id, year, rows, daily_events):
        self.daily_rows[year] = list(rows)
        self.daily_events[year] = list(daily_events)


@pytest.fixture
def connection() -> HevyConnection:
    return HevyConnection(user_id=USER_ID, api_key="hevy-key", selected_year=2024)


@pytest.fixture
def storage(connection) -> FakeStorage:
    return FakeStorage(connection)


@pytest.fixture
def hevy_client(hevy_exercise_template_factory) -> MagicMock:
    client = MagicMock(spec=HevyClient)
    client.get_exercise_template.return_value = hevy_exercise_template_factory.make()
    return client


@pytest.fixture
def orchestrator(storage, hevy_client) -> SyncOrchestrator:
    return SyncOrchestrator(
        storage,
        client_factory=MagicMock(return_value=hevy_client),
        locks=SyncLockRegistry(),
        clock=lambda: NOW,
    )
