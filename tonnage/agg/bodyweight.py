"""Resolve a user's bodyweight on a given day from their weight log."""

from bisect import bisect_left
from datetime import date
from typing import Iterable, Optional

from tonnage.models import WeightLogEntry


# Used when the user has neither a weight log nor a default bodyweight.
DEFAULT_BODYWEIGHT_LB = 180.0


class BodyweightResolver:
    """Nearest-date lookup over a weight log.

    When two entries are equally far from the requested day, the earlier one
    wins. Without any entries, the user's default bodyweight is used, then
    the global default.
    """

    def __init__(
        self,
        entries: Iterable[WeightLogEntry] = (),
        default_lb: Optional[float] = None,
    ):
        ordered = sorted(entries, key=lambda e: e.date)
        self._dates = [e.date for e in ordered]
        self._weights = [e.weight_lb for e in ordered]
        self.default_lb = default_lb if default_lb else DEFAULT_BODYWEIGHT_LB

    def resolve(self, day: date) -> float:
        if not self._dates:
            return self.default_lb

        i = bisect_left(self._dates, day)
        if i == 0:
            return self._weights[0]
        if i == len(self._dates):
            return self._weights[-1]

        before, after = self._dates[i - 1], self._dates[i]
        if after == day:
            return self._weights[i]
        if (day - before) <= (after - day):
            return self._weights[i - 1]
        return self._weights[i]

    __call__ = resolve
