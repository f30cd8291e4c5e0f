"""Models describing the outcome of a Hevy sync."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


SyncMode = Literal["full", "incremental"]


class SyncResult(BaseModel):
    """Outcome of one successful sync attempt."""

    mode: SyncMode
    workouts_updated: int = Field(description="Workouts inserted or updated")
    workouts_deleted: int = Field(description="Local workouts removed")
    workouts_skipped: int = Field(
        default=0, description="Workouts dropped because their fetch failed"
    )
    templates_synced: int = Field(
        default=0, description="Exercise templates newly cached"
    )
    years_recomputed: list[int] = Field(default_factory=list)
    synced_at: datetime


class SyncResponse(SyncResult):
    """Response from the sync endpoint."""

    message: str
