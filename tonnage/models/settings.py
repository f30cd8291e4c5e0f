"""Per-user Hevy connection settings and exercise-type templates."""

from datetime import date, datetime
from typing import Literal, Self
from uuid import UUID

from pydantic import BaseModel, Field

from .workout import ExerciseType


ConnectionStatus = Literal["ok", "auth_error", "rate_limited", "error"]

DEFAULT_GOAL_LB = 3_000_000.0


class HevyConnection(BaseModel):
    """A user's link to Hevy plus their dashboard configuration."""

    user_id: UUID
    api_key: str
    goal_lb: float = DEFAULT_GOAL_LB
    selected_year: int | None = None
    default_bodyweight_lb: float | None = None
    last_sync_at: datetime | None = None
    status: ConnectionStatus = "ok"

    @property
    def tracked_year(self) -> int:
        """The year the dashboard tracks, defaulting to the current one."""
        return self.selected_year or date.today().year


class UpdateSettingsRequest(BaseModel):
    """Request model for creating or updating the Hevy connection."""

    api_key: str = Field(min_length=1, description="Hevy API key")
    goal_lb: float = Field(
        default=DEFAULT_GOAL_LB, ge=1000, description="Annual volume goal in lb"
    )
    selected_year: int = Field(
        default_factory=lambda: date.today().year, ge=2000, le=2100
    )
    default_bodyweight_lb: float | None = Field(
        default=None,
        gt=0,
        le=1000,
        description="Bodyweight used when the weight log has no entries",
    )


class ExerciseTemplate(BaseModel):
    """A cached Hevy exercise template with the type used for volume math."""

    id: str
    title: str
    hevy_type: str | None = None
    exercise_type: ExerciseType | None = None
    primary_muscle_group: str | None = None


class UpdateExerciseTypeRequest(BaseModel):
    """Request model to override the type of an exercise template."""

    exercise_type: ExerciseType


class SettingsResponse(BaseModel):
    """A user's connection settings as returned to the client.

    The API key itself is never echoed back, only its last characters.
    """

    api_key_hint: str
    goal_lb: float
    selected_year: int
    default_bodyweight_lb: float | None
    last_sync_at: datetime | None
    status: ConnectionStatus

    @classmethod
    def from_connection(cls, connection: HevyConnection) -> Self:
        return cls(
            api_key_hint=f"...{connection.api_key[-4:]}",
            goal_lb=connection.goal_lb,
            selected_year=connection.tracked_year,
            default_bodyweight_lb=connection.default_bodyweight_lb,
            last_sync_at=connection.last_sync_at,
            status=connection.status,
        )
