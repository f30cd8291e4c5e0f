from datetime import date

from pydantic import BaseModel, Field


class WeightLogEntry(BaseModel):
    """A bodyweight measurement on a given day."""

    id: int
    date: date
    weight_lb: float


class CreateWeightLogEntryRequest(BaseModel):
    """Request model for adding a bodyweight measurement."""

    date: date
    weight_lb: float = Field(gt=0, le=1000)
