"""Errors raised by a sync attempt.

Errors from the Hevy API itself surface as `HevyAPIError`.
"""

from uuid import UUID


class SyncError(Exception):
    """Base class for sync failures that are not remote API errors."""


class MissingConfigurationError(SyncError):
    """The user has no Hevy connection, or it has no API key."""

    def __init__(self, user_id: UUID):
        self.user_id = user_id
        super().__init__(f"No Hevy API key configured for user {user_id}")


class SyncInProgressError(SyncError):
    """Another sync (or recompute) for the same user is still running."""

    def __init__(self, user_id: UUID):
        self.user_id = user_id
        super().__init__(f"A sync is already in progress for user {user_id}")


class SyncTimeoutError(SyncError):
    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Sync did not finish within {timeout_seconds:g} seconds")
