from datetime import date
from typing import Self

from pydantic import BaseModel


class DailyAggregate(BaseModel):
    """Volume, session and PR counts rolled up for a single calendar day."""

    date: date
    year: int
    volume_lb: int = 0
    workouts_count: int = 0
    prs_count: int = 0

    def __lt__(self, other: Self) -> bool:
        return self.date < other.date
