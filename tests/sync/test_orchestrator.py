from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from tonnage.integrations.hevy import HevyAPIError
from tonnage.integrations.hevy.models import (
    HevyWorkout,
    HevyWorkoutEvent,
    HevyWorkoutEventsResponse,
    HevyWorkoutsResponse,
)
from tonnage.models import ExerciseTemplate, WeightLogEntry, Workout
from tonnage.sync import (
    MissingConfigurationError,
    SyncInProgressError,
    SyncTimeoutError,
    SyncOrchestrator,
    connection_status_for,
)
from tonnage.sync.constants import FULL_SYNC_MAX_PAGES, INCREMENTAL_SYNC_MAX_PAGES

from .conftest import USER_ID, NOW


LAST_SYNC = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _workouts_page(workouts, page=1, page_count=1):
    return HevyWorkoutsResponse(page=page, page_count=page_count, workouts=workouts)


def _events_page(events, page=1, page_count=1):
    return HevyWorkoutEventsResponse(page=page, page_count=page_count, events=events)


def _updated(workout):
    return HevyWorkoutEvent(type="updated", workout=workout)


def _deleted(workout_id):
    return HevyWorkoutEvent(type="deleted", id=workout_id, deleted_at=NOW)


def _store(storage, hevy_workout):
    storage.workouts[hevy_workout.id] = Workout.from_hevy(hevy_workout)


@pytest.fixture
def synced_before(storage):
    storage.connection = storage.connection.model_copy(
        update={"last_sync_at": LAST_SYNC}
    )
    return storage


class TestFullSync:
    """Test syncs that read the whole workout list."""

    def test_first_sync_fetches_everything(
        self,
        orchestrator,
        storage,
        hevy_client,
        hevy_workout_factory,
        hevy_exercise_template_factory,
    ):
        first = hevy_workout_factory.make()
        second = hevy_workout_factory.make(
            {"start_time": datetime(2024, 3, 6, 17, tzinfo=timezone.utc)}
        )
        hevy_client.get_workouts_page.return_value = _workouts_page([second, first])
        hevy_client.get_exercise_template.return_value = (
            hevy_exercise_template_factory.make()
        )

        result = orchestrator.sync(USER_ID)

        assert result.mode == "full"
        assert result.workouts_updated == 2
        assert result.workouts_deleted == 0
        assert result.templates_synced == 1
        assert result.years_recomputed == [2024]
        assert result.synced_at == NOW

        # 100 kg x 5 + 110 kg x 3
        assert {w.volume_lb for w in storage.workouts.values()} == {1830}
        assert storage.templates["squat_001"].exercise_type == "weight_reps"
        assert [row.volume_lb for row in storage.daily_rows[2024]] == [1830, 1830]
        assert len(storage.daily_events[2024]) == 1
        assert storage.exercise_prs[0].exercise_template_id == "squat_001"
        assert storage.connection.last_sync_at == NOW
        assert storage.connection.status == "ok"

    def test_force_full_ignores_last_sync(
        self, orchestrator, synced_before, hevy_client, hevy_workout_factory
    ):
        hevy_client.get_workouts_page.return_value = _workouts_page(
            [hevy_workout_factory.make()]
        )

        result = orchestrator.sync(USER_ID, force_full=True)

        assert result.mode == "full"
        hevy_client.get_workout_events_page.assert_not_called()

    def test_full_sync_never_deletes(
        self, orchestrator, storage, hevy_client, hevy_workout_factory
    ):
        stale = hevy_workout_factory.make()
        _store(storage, stale)
        hevy_client.get_workouts_page.return_value = _workouts_page([])

        result = orchestrator.sync(USER_ID)

        assert result.workouts_deleted == 0
        assert stale.id in storage.workouts

    def test_reads_pages_until_the_last(
        self, orchestrator, hevy_client, hevy_workout_factory
    ):
        hevy_client.get_workouts_page.side_effect = [
            _workouts_page([hevy_workout_factory.make()], page=1, page_count=2),
            _workouts_page([hevy_workout_factory.make()], page=2, page_count=2),
        ]

        result = orchestrator.sync(USER_ID)

        assert result.workouts_updated == 2
        assert hevy_client.get_workouts_page.call_count == 2

    def test_stops_at_page_limit(self, orchestrator, hevy_client):
        hevy_client.get_workouts_page.return_value = _workouts_page([], page_count=100)

        orchestrator.sync(USER_ID)

        assert hevy_client.get_workouts_page.call_count == FULL_SYNC_MAX_PAGES

    def test_known_templates_are_not_refetched(
        self, orchestrator, storage, hevy_client, hevy_workout_factory
    ):
        storage.templates["squat_001"] = ExerciseTemplate(
            id="squat_001", title="Squat (Barbell)", exercise_type="weight_reps"
        )
        hevy_client.get_workouts_page.return_value = _workouts_page(
            [hevy_workout_factory.make()]
        )

        result = orchestrator.sync(USER_ID)

        assert result.templates_synced == 0
        hevy_client.get_exercise_template.assert_not_called()

    def test_template_fetch_failure_does_not_fail_sync(
        self, orchestrator, storage, hevy_client, hevy_workout_factory
    ):
        hevy_client.get_workouts_page.return_value = _workouts_page(
            [hevy_workout_factory.make()]
        )
        hevy_client.get_exercise_template.side_effect = HevyAPIError(404, "Not Found")

        result = orchestrator.sync(USER_ID)

        assert result.workouts_updated == 1
        assert result.templates_synced == 0
        assert storage.templates == {}
        assert storage.connection.status == "ok"

    def test_workout_moved_between_years_rebuilds_both(
        self, orchestrator, storage, hevy_client, hevy_workout_factory
    ):
        original = hevy_workout_factory.make(
            {"start_time": datetime(2023, 12, 30, 17, tzinfo=timezone.utc)}
        )
        _store(storage, original)
        moved = original.model_copy(
            update={"start_time": datetime(2024, 1, 2, 17, tzinfo=timezone.utc)}
        )
        hevy_client.get_workouts_page.return_value = _workouts_page([moved])

        result = orchestrator.sync(USER_ID)

        assert result.years_recomputed == [2023, 2024]
        assert storage.daily_rows[2023] == []
        assert [row.date for row in storage.daily_rows[2024]] == [date(2024, 1, 2)]


class TestIncrementalSync:
    """Test syncs that read the events feed since the last sync."""

    def test_applies_updates_and_deletes(
        self, orchestrator, synced_before, hevy_client, hevy_workout_factory
    ):
        storage = synced_before
        gone = hevy_workout_factory.make(
            {"start_time": datetime(2023, 11, 1, tzinfo=timezone.utc)}
        )
        _store(storage, gone)
        fresh = hevy_workout_factory.make()
        hevy_client.get_workout_events_page.return_value = _events_page(
            [_updated(fresh), _deleted(gone.id)]
        )

        result = orchestrator.sync(USER_ID)

        assert result.mode == "incremental"
        assert result.workouts_updated == 1
        assert result.workouts_deleted == 1
        assert result.years_recomputed == [2023, 2024]
        assert set(storage.workouts) == {fresh.id}
        hevy_client.get_workout_events_page.assert_called_once_with(LAST_SYNC, 1)
        hevy_client.get_workouts_page.assert_not_called()
        assert storage.connection.last_sync_at == NOW

    def test_later_delete_supersedes_update(
        self, orchestrator, synced_before, hevy_client, hevy_workout_factory
    ):
        storage = synced_before
        workout = hevy_workout_factory.make()
        _store(storage, workout)
        hevy_client.get_workout_events_page.return_value = _events_page(
            [_updated(workout), _deleted(workout.id)]
        )

        result = orchestrator.sync(USER_ID)

        assert result.workouts_updated == 0
        assert result.workouts_deleted == 1
        assert storage.workouts == {}

    def test_later_update_supersedes_delete(
        self, orchestrator, synced_before, hevy_client, hevy_workout_factory
    ):
        storage = synced_before
        workout = hevy_workout_factory.make()
        hevy_client.get_workout_events_page.return_value = _events_page(
            [_deleted(workout.id), _updated(workout)]
        )

        result = orchestrator.sync(USER_ID)

        assert result.workouts_updated == 1
        assert result.workouts_deleted == 0
        assert workout.id in storage.workouts

    def test_deleting_unknown_workout_rebuilds_tracked_year(
        self, orchestrator, synced_before, hevy_client
    ):
        hevy_client.get_workout_events_page.return_value = _events_page(
            [_deleted("never_seen")]
        )

        result = orchestrator.sync(USER_ID)

        assert result.workouts_deleted == 0
        assert result.years_recomputed == [2024]
        assert 2024 in synced_before.daily_rows

    def test_backfills_updates_without_payload(
        self, orchestrator, synced_before, hevy_client, hevy_workout_factory
    ):
        workout = hevy_workout_factory.make()
        hevy_client.get_workout_events_page.return_value = _events_page(
            [HevyWorkoutEvent(type="updated", id=workout.id)]
        )
        hevy_client.get_workout.return_value = workout

        result = orchestrator.sync(USER_ID)

        hevy_client.get_workout.assert_called_once_with(workout.id)
        assert result.workouts_updated == 1
        assert workout.id in synced_before.workouts

    def test_failed_backfill_is_skipped(
        self, orchestrator, synced_before, hevy_client, hevy_workout_factory
    ):
        ok = hevy_workout_factory.make()
        hevy_client.get_workout_events_page.return_value = _events_page(
            [HevyWorkoutEvent(type="updated", id="broken"), _updated(ok)]
        )
        hevy_client.get_workout.side_effect = HevyAPIError(500, "Internal Server Error")

        result = orchestrator.sync(USER_ID)

        assert result.workouts_updated == 1
        assert result.workouts_skipped == 1
        assert set(synced_before.workouts) == {ok.id}
        assert synced_before.connection.status == "ok"

    def test_malformed_backfill_payload_is_skipped(
        self, orchestrator, synced_before, hevy_client, hevy_workout_factory
    ):
        ok = hevy_workout_factory.make()
        hevy_client.get_workout_events_page.return_value = _events_page(
            [HevyWorkoutEvent(type="updated", id="broken"), _updated(ok)]
        )
        with pytest.raises(ValidationError) as exc_info:
            HevyWorkout.model_validate({"id": "broken"})
        hevy_client.get_workout.side_effect = exc_info.value

        result = orchestrator.sync(USER_ID)

        assert result.workouts_updated == 1
        assert result.workouts_skipped == 1
        assert set(synced_before.workouts) == {ok.id}
        assert synced_before.connection.last_sync_at == NOW

    def test_stops_at_page_limit(self, orchestrator, synced_before, hevy_client):
        hevy_client.get_workout_events_page.return_value = _events_page(
            [], page_count=100
        )

        orchestrator.sync(USER_ID)

        assert (
            hevy_client.get_workout_events_page.call_count
            == INCREMENTAL_SYNC_MAX_PAGES
        )


class TestSyncFailures:
    """Test that failed syncs leave local state alone."""

    def test_missing_connection(self, orchestrator, storage):
        storage.connection = None
        with pytest.raises(MissingConfigurationError):
            orchestrator.sync(USER_ID)

    def test_empty_api_key(self, orchestrator, storage):
        storage.connection = storage.connection.model_copy(update={"api_key": ""})
        with pytest.raises(MissingConfigurationError):
            orchestrator.sync(USER_ID)

    @pytest.mark.parametrize(
        "status_code,expected_status",
        [(401, "auth_error"), (429, "rate_limited"), (500, "error"), (None, "error")],
    )
    def test_page_failure_records_status(
        self,
        orchestrator,
        synced_before,
        hevy_client,
        hevy_workout_factory,
        status_code,
        expected_status,
    ):
        storage = synced_before
        kept = hevy_workout_factory.make()
        _store(storage, kept)
        hevy_client.get_workout_events_page.side_effect = HevyAPIError(
            status_code, "failed"
        )

        with pytest.raises(HevyAPIError):
            orchestrator.sync(USER_ID)

        assert storage.connection.status == expected_status
        assert storage.connection.last_sync_at == LAST_SYNC
        assert set(storage.workouts) == {kept.id}
        assert storage.upsert_calls == []
        assert storage.daily_rows == {}

    def test_failure_on_a_later_page_writes_nothing(
        self, orchestrator, storage, hevy_client, hevy_workout_factory
    ):
        hevy_client.get_workouts_page.side_effect = [
            _workouts_page([hevy_workout_factory.make()], page=1, page_count=2),
            HevyAPIError(429, "Too Many Requests"),
        ]

        with pytest.raises(HevyAPIError):
            orchestrator.sync(USER_ID)

        assert storage.workouts == {}
        assert storage.connection.last_sync_at is None
        assert storage.connection.status == "rate_limited"

    def test_timeout(self, storage, hevy_client):
        orchestrator = SyncOrchestrator(
            storage, client_factory=lambda key: hevy_client, timeout_seconds=0
        )

        with pytest.raises(SyncTimeoutError):
            orchestrator.sync(USER_ID)

        hevy_client.get_workouts_page.assert_not_called()
        assert storage.connection.status == "error"
        assert storage.connection.last_sync_at is None

    def test_overlapping_sync_is_rejected(self, orchestrator, storage, hevy_client):
        with orchestrator.locks.hold(USER_ID):
            with pytest.raises(SyncInProgressError):
                orchestrator.sync(USER_ID)

        hevy_client.get_workouts_page.assert_not_called()
        assert storage.connection.status == "ok"


class TestRecompute:
    """Test rebuilding derived data from stored workouts."""

    @pytest.fixture
    def pull_up_workout(self, storage, workout_factory, exercise_factory, set_factory):
        storage.templates["pullup_001"] = ExerciseTemplate(
            id="pullup_001", title="Pull Up", exercise_type="bodyweight"
        )
        workout = workout_factory.make(
            {"volume_lb": 1800},
            exercises=[
                exercise_factory.make(
                    {"title": "Pull Up", "exercise_template_id": "pullup_001"},
                    sets=[set_factory.make({"weight_kg": None, "reps": 10})],
                )
            ],
        )
        storage.workouts[workout.id] = workout
        return workout

    def test_weight_log_change_updates_volume(
        self, orchestrator, storage, pull_up_workout
    ):
        storage.weight_log = [
            WeightLogEntry(id=1, date=date(2024, 3, 1), weight_lb=200.0)
        ]

        years = orchestrator.recompute(USER_ID)

        assert years == [2024]
        assert storage.workouts[pull_up_workout.id].volume_lb == 2000
        assert storage.daily_rows[2024][0].volume_lb == 2000
        assert storage.exercise_prs[0].max_weight_lb == 200.0

    def test_unchanged_volumes_are_not_rewritten(
        self, orchestrator, storage, pull_up_workout
    ):
        # No weight log and no default: the 180 lb fallback gives 1800.
        orchestrator.recompute(USER_ID)

        assert storage.upsert_calls == [[]]

    def test_explicit_years(self, orchestrator, storage, pull_up_workout):
        years = orchestrator.recompute(USER_ID, years=[2022])

        assert years == [2022]
        assert set(storage.daily_rows) == {2022}
        assert storage.daily_rows[2022] == []

    def test_includes_years_with_stale_aggregates(
        self, orchestrator, storage, pull_up_workout
    ):
        storage.daily_rows[2021] = []

        assert orchestrator.recompute(USER_ID) == [2021, 2024]

    def test_is_deterministic(self, orchestrator, storage, pull_up_workout):
        orchestrator.recompute(USER_ID)
        snapshot = (
            storage.exercise_prs,
            storage.exercise_events,
            dict(storage.daily_rows),
        )
        orchestrator.recompute(USER_ID)
        assert (
            storage.exercise_prs,
            storage.exercise_events,
            storage.daily_rows,
        ) == snapshot


@pytest.mark.parametrize(
    "status_code,expected",
    [(401, "auth_error"), (429, "rate_limited"), (404, "error"), (None, "error")],
)
def test_connection_status_for(status_code, expected):
    assert connection_status_for(HevyAPIError(status_code, "x")) == expected
