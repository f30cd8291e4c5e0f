"""Hevy API client for fetching workout data."""

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .models import (
    HevyWorkout,
    HevyExerciseTemplate,
    HevyWorkoutsResponse,
    HevyWorkoutEventsResponse,
)

logger = logging.getLogger(__name__)

BASE_URL = "https://api.hevyapp.com"
WORKOUTS_URL = f"{BASE_URL}/v1/workouts"
WORKOUT_EVENTS_URL = f"{BASE_URL}/v1/workouts/events"
EXERCISE_TEMPLATES_URL = f"{BASE_URL}/v1/exercise_templates"

PAGE_SIZE = 10  # Hevy API max for workouts and events

ModelT = TypeVar("ModelT", bound=BaseModel)


class HevyAPIError(Exception):
    """Raised when the Hevy API answers with a non-success status.

    `status_code` is None when the request never got a response (network error).
    """

    def __init__(self, status_code: Optional[int], message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(
            f"Hevy API error ({status_code}): {message}"
            if status_code is not None
            else f"Hevy API error: {message}"
        )


@dataclass
class HevyClient:
    """Client for interacting with the Hevy API.

    Requires a Hevy PRO subscription to obtain an API key.
    Get your key at: https://hevy.com/settings?developer
    """

    api_key: str
    timeout: float = 30

    def _auth_headers(self) -> dict[str, str]:
        return {
            "api-key": self.api_key,
            "Content-Type": "application/json",
        }

    def _get(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET a Hevy endpoint and return the decoded JSON body.

        Raises:
            HevyAPIError: on any non-2xx status, transport failure or non-JSON body.
        """
        try:
            with httpx.Client() as client:
                response = client.request(
                    "GET",
                    url,
                    headers=self._auth_headers(),
                    params=params,
                    timeout=self.timeout,
                )
        except httpx.RequestError as e:
            logger.error(f"Hevy request to {url} failed: {e}")
            raise HevyAPIError(None, str(e)) from e

        if response.status_code == 401:
            logger.error("Hevy API returned 401 Unauthorized - check your API key")
        elif response.status_code == 429:
            logger.warning("Hevy API rate limit exceeded")

        if not response.is_success:
            logger.error(
                f"Hevy API error on {url}: {response.status_code} {response.text}"
            )
            raise HevyAPIError(response.status_code, response.reason_phrase or "")

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Hevy API returned invalid JSON on {url}: {e}")
            raise HevyAPIError(None, f"invalid JSON from {url}") from e

    def _parse(self, model: type[ModelT], data: Any, url: str) -> ModelT:
        """Validate a decoded body, raising HevyAPIError if it is malformed."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected {model.__name__} payload from {url}: {e}")
            raise HevyAPIError(None, f"malformed {model.__name__} payload") from e

    def get_workouts_page(self, page: int = 1) -> HevyWorkoutsResponse:
        """Get one page of the workout list (newest first).

        Args:
            page: Page number (1-indexed)
        """
        params = {"page": page, "pageSize": PAGE_SIZE}
        logger.debug(f"Fetching Hevy workouts: page={page}")
        data = self._get(WORKOUTS_URL, params=params)
        parsed = self._parse(HevyWorkoutsResponse, data, WORKOUTS_URL)
        logger.debug(
            f"Received {len(parsed.workouts)} workouts from page {page}/{parsed.page_count}"
        )
        return parsed

    def get_workout_events_page(
        self, since: datetime, page: int = 1
    ) -> HevyWorkoutEventsResponse:
        """Get one page of workout update/delete events since a point in time.

        Args:
            since: Only return events after this datetime
            page: Page number (1-indexed)
        """
        params = {"page": page, "pageSize": PAGE_SIZE, "since": since.isoformat()}
        logger.debug(f"Fetching Hevy workout events: page={page}, since={since}")
        data = self._get(WORKOUT_EVENTS_URL, params=params)
        parsed = self._parse(HevyWorkoutEventsResponse, data, WORKOUT_EVENTS_URL)
        logger.debug(
            f"Received {len(parsed.events)} events from page {page}/{parsed.page_count}"
        )
        return parsed

    def get_workout(self, workout_id: str) -> HevyWorkout:
        """Get a single workout by ID."""
        url = f"{WORKOUTS_URL}/{workout_id}"
        data = self._get(url)
        # The single-workout endpoint sometimes wraps the payload.
        if isinstance(data, dict) and "workout" in data:
            data = data["workout"]
        return self._parse(HevyWorkout, data, url)

    def get_exercise_template(self, template_id: str) -> HevyExerciseTemplate:
        """Get a single exercise template by ID."""
        url = f"{EXERCISE_TEMPLATES_URL}/{template_id}"
        return self._parse(HevyExerciseTemplate, self._get(url), url)
