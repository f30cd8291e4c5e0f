"""Pull workout changes from Hevy and rebuild everything derived from them.

A sync runs in two phases. The fetch phase talks to Hevy only: it pages the
workout list (full sync) or the events feed (incremental sync), backfills
workouts that events only name by ID, and fetches unseen exercise templates.
Nothing is written until that phase has finished, so a failed page leaves
local state and `last_sync_at` untouched and the next run retries in the same
mode. The apply phase then deletes, upserts, replays records over the whole
history and rebuilds the daily aggregates of every affected year.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional
from uuid import UUID

from pydantic import ValidationError

from tonnage.agg import (
    BodyweightResolver,
    aggregate_daily,
    compute_workout_volume,
    detect_records,
    exercise_type_from_hevy,
)
from tonnage.db import Storage
from tonnage.integrations.hevy import (
    HevyAPIError,
    HevyClient,
    HevyExerciseTemplate,
    HevyWorkout,
)
from tonnage.models import (
    ConnectionStatus,
    ExerciseTemplate,
    ExerciseType,
    HevyConnection,
    SyncMode,
    SyncResult,
    Workout,
)
from .constants import (
    FULL_SYNC_MAX_PAGES,
    INCREMENTAL_SYNC_MAX_PAGES,
    DEFAULT_SYNC_TIMEOUT_SECONDS,
)
from .errors import MissingConfigurationError, SyncTimeoutError
from .locks import SyncLockRegistry

logger = logging.getLogger(__name__)


ClientFactory = Callable[[str], HevyClient]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def connection_status_for(error: HevyAPIError) -> ConnectionStatus:
    """Map a Hevy API failure onto the status stored on the connection."""
    match error.status_code:
        case 401:
            return "auth_error"
        case 429:
            return "rate_limited"
        case _:
            return "error"


class _Deadline:
    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        self._started = time.monotonic()

    def check(self) -> None:
        if time.monotonic() - self._started >= self.timeout_seconds:
            raise SyncTimeoutError(self.timeout_seconds)


@dataclass
class _FetchedChanges:
    """Everything the fetch phase learned from Hevy."""

    updated: dict[str, HevyWorkout] = field(default_factory=dict)
    deleted: set[str] = field(default_factory=set)
    skipped: int = 0
    templates: list[ExerciseTemplate] = field(default_factory=list)


class SyncOrchestrator:
    """Coordinates sync and recompute for one user at a time.

    Args:
        storage: Where workouts and derived data live.
        client_factory: Builds a Hevy client from an API key.
        locks: Registry used to keep runs for the same user from overlapping.
        timeout_seconds: Wall-clock budget for the remote calls of one sync.
        clock: Returns the current (aware) time.
    """

    def __init__(
        self,
        storage: Storage,
        client_factory: ClientFactory = HevyClient,
        locks: Optional[SyncLockRegistry] = None,
        timeout_seconds: float = DEFAULT_SYNC_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.storage = storage
        self.client_factory = client_factory
        self.locks = locks if locks is not None else SyncLockRegistry()
        self.timeout_seconds = timeout_seconds
        self.clock = clock

    # --- Sync ---

    def sync(self, user_id: UUID, force_full: bool = False) -> SyncResult:
        """Run one sync attempt for a user.

        Raises:
            MissingConfigurationError: The user has not connected Hevy.
            SyncInProgressError: A sync for the user is already running.
            SyncTimeoutError: The remote calls ran past the time budget.
            HevyAPIError: A page of the workout list or events feed failed.
        """
        connection = self.storage.get_connection(user_id)
        if connection is None or not connection.api_key:
            raise MissingConfigurationError(user_id)

        with self.locks.hold(user_id):
            try:
                return self._sync(connection, force_full)
            except HevyAPIError as e:
                status = connection_status_for(e)
                logger.error(f"Sync failed for user {user_id} ({status}): {e}")
                self.storage.mark_sync_failed(user_id, status)
                raise
            except SyncTimeoutError as e:
                logger.error(f"Sync timed out for user {user_id}: {e}")
                self.storage.mark_sync_failed(user_id, "error")
                raise

    def _sync(self, connection: HevyConnection, force_full: bool) -> SyncResult:
        user_id = connection.user_id
        since = None if force_full else connection.last_sync_at
        mode: SyncMode = "full" if since is None else "incremental"
        logger.info(f"Starting {mode} Hevy sync for user {user_id}")
        # The next incremental sync reads events from this point on.
        synced_at = self.clock()

        client = self.client_factory(connection.api_key)
        deadline = _Deadline(self.timeout_seconds)
        if since is None:
            changes = self._fetch_all_workouts(client, deadline)
        else:
            changes = self._fetch_workout_events(client, deadline, since)
        changes.templates = self._fetch_missing_templates(
            client, deadline, user_id, changes.updated.values()
        )

        # Fetching is done; from here on only local state changes.
        templates_synced = self.storage.insert_templates(user_id, changes.templates)
        exercise_types = self.storage.get_exercise_types(user_id)
        resolve_bodyweight = self._bodyweight_resolver(user_id, connection)

        years: set[int] = set()
        deleted_years = self.storage.delete_workouts(user_id, changes.deleted)
        years.update(deleted_years.values())
        unknown_deleted = changes.deleted - deleted_years.keys()
        if unknown_deleted:
            logger.debug(
                f"{len(unknown_deleted)} deleted workouts were not stored locally; "
                f"recomputing tracked year {connection.tracked_year}"
            )
            years.add(connection.tracked_year)

        workouts = [
            self._with_volume(
                Workout.from_hevy(hevy_workout, exercise_types),
                resolve_bodyweight,
                exercise_types,
            )
            for hevy_workout in changes.updated.values()
        ]
        previous_years = self.storage.get_workout_years(
            user_id, (w.id for w in workouts)
        )
        years.update(previous_years.values())
        years.update(w.year for w in workouts)
        self.storage.upsert_workouts(user_id, workouts)

        self._rebuild(user_id, years, exercise_types, resolve_bodyweight)

        self.storage.mark_sync_succeeded(user_id, synced_at)
        result = SyncResult(
            mode=mode,
            workouts_updated=len(workouts),
            workouts_deleted=len(deleted_years),
            workouts_skipped=changes.skipped,
            templates_synced=templates_synced,
            years_recomputed=sorted(years),
            synced_at=synced_at,
        )
        logger.info(
            f"Finished {mode} sync for user {user_id}: "
            f"{result.workouts_updated} updated, {result.workouts_deleted} deleted, "
            f"{result.workouts_skipped} skipped, years {result.years_recomputed}"
        )
        return result

    def _fetch_all_workouts(
        self, client: HevyClient, deadline: _Deadline
    ) -> _FetchedChanges:
        changes = _FetchedChanges()
        for page in range(1, FULL_SYNC_MAX_PAGES + 1):
            deadline.check()
            response = client.get_workouts_page(page)
            for workout in response.workouts:
                changes.updated[workout.id] = workout
            if page >= response.page_count:
                break
        else:
            logger.warning(
                f"Stopped full sync after {FULL_SYNC_MAX_PAGES} pages; "
                "older workouts were not fetched"
            )
        logger.info(f"Fetched {len(changes.updated)} workouts from Hevy")
        return changes

    def _fetch_workout_events(
        self, client: HevyClient, deadline: _Deadline, since: datetime
    ) -> _FetchedChanges:
        changes = _FetchedChanges()
        # None marks an updated workout the feed named without its payload.
        pending: dict[str, Optional[HevyWorkout]] = {}

        for page in range(1, INCREMENTAL_SYNC_MAX_PAGES + 1):
            deadline.check()
            response = client.get_workout_events_page(since, page)
            for event in response.events:
                workout_id = event.workout_id
                if workout_id is None:
                    logger.warning(f"Ignoring {event.type} event without a workout ID")
                    continue
                if event.type == "deleted":
                    pending.pop(workout_id, None)
                    changes.deleted.add(workout_id)
                else:
                    changes.deleted.discard(workout_id)
                    pending[workout_id] = event.workout
            if page >= response.page_count:
                break
        else:
            logger.warning(
                f"Stopped reading events after {INCREMENTAL_SYNC_MAX_PAGES} pages"
            )

        for workout_id, workout in pending.items():
            if workout is None:
                deadline.check()
                try:
                    workout = client.get_workout(workout_id)
                except (HevyAPIError, ValidationError) as e:
                    logger.warning(f"Skipping workout {workout_id}: {e}")
                    changes.skipped += 1
                    continue
            changes.updated[workout_id] = workout

        logger.info(
            f"Events since {since.isoformat()}: {len(changes.updated)} updated, "
            f"{len(changes.deleted)} deleted, {changes.skipped} skipped"
        )
        return changes

    def _fetch_missing_templates(
        self,
        client: HevyClient,
        deadline: _Deadline,
        user_id: UUID,
        workouts: Iterable[HevyWorkout],
    ) -> list[ExerciseTemplate]:
        template_ids = {
            exercise.exercise_template_id
            for workout in workouts
            for exercise in workout.exercises
            if exercise.exercise_template_id
        }
        missing = sorted(template_ids - self.storage.get_template_ids(user_id))
        if missing:
            logger.info(f"Fetching {len(missing)} new exercise templates")

        templates = []
        for template_id in missing:
            deadline.check()
            try:
                hevy_template = client.get_exercise_template(template_id)
            except (HevyAPIError, ValidationError) as e:
                logger.warning(f"Could not fetch exercise template {template_id}: {e}")
                continue
            templates.append(_template_from_hevy(hevy_template))
        return templates

    # --- Recompute ---

    def recompute(
        self, user_id: UUID, years: Optional[Iterable[int]] = None
    ) -> list[int]:
        """Re-derive volumes, records and aggregates from stored workouts.

        Used when inputs to the volume math change locally (weight log,
        exercise types). Waits for a running sync of the same user to finish.

        Args:
            user_id: The user to recompute.
            years: Years whose aggregates to rebuild. Defaults to every year
                that has workouts or aggregates.

        Returns:
            The years that were rebuilt.
        """
        with self.locks.hold(user_id, blocking=True):
            connection = self.storage.get_connection(user_id)
            exercise_types = self.storage.get_exercise_types(user_id)
            resolve_bodyweight = self._bodyweight_resolver(user_id, connection)

            workouts = self.storage.get_all_workouts(user_id)
            changed = []
            for workout in workouts:
                updated = self._with_volume(workout, resolve_bodyweight, exercise_types)
                if updated.volume_lb != workout.volume_lb:
                    changed.append(updated)
            self.storage.upsert_workouts(user_id, changed)

            if years is None:
                target_years = self.storage.get_years_with_data(user_id)
            else:
                target_years = set(years)
            logger.info(
                f"Recomputing user {user_id}: {len(changed)} workout volumes changed, "
                f"years {sorted(target_years)}"
            )
            self._rebuild(user_id, target_years, exercise_types, resolve_bodyweight)
            return sorted(target_years)

    # --- Shared helpers ---

    def _rebuild(
        self,
        user_id: UUID,
        years: Iterable[int],
        exercise_types: dict[str, ExerciseType],
        resolve_bodyweight: BodyweightResolver,
    ) -> None:
        """Replay records over the full history, then rebuild the given years."""
        workouts = self.storage.get_all_workouts(user_id)
        scan = detect_records(workouts, resolve_bodyweight, exercise_types)
        self.storage.replace_exercise_records(user_id, scan.bests, scan.events)

        for year in sorted(years):
            aggregation = aggregate_daily(workouts, year, scan.events)
            self.storage.replace_daily_aggregates(
                user_id, year, aggregation.rows, aggregation.daily_events
            )

    def _bodyweight_resolver(
        self, user_id: UUID, connection: Optional[HevyConnection]
    ) -> BodyweightResolver:
        return BodyweightResolver(
            self.storage.get_weight_log(user_id),
            connection.default_bodyweight_lb if connection is not None else None,
        )

    @staticmethod
    def _with_volume(
        workout: Workout,
        resolve_bodyweight: BodyweightResolver,
        exercise_types: dict[str, ExerciseType],
    ) -> Workout:
        volume = compute_workout_volume(
            workout, resolve_bodyweight(workout.start_date), exercise_types
        )
        return workout.model_copy(update={"volume_lb": volume})


def _template_from_hevy(template: HevyExerciseTemplate) -> ExerciseTemplate:
    return ExerciseTemplate(
        id=template.id,
        title=template.title,
        hevy_type=template.type,
        exercise_type=exercise_type_from_hevy(template.type),
        primary_muscle_group=template.primary_muscle_group,
    )
