from .errors import (
    SyncError,
    MissingConfigurationError,
    SyncInProgressError,
    SyncTimeoutError,
)
from .locks import SyncLockRegistry
from .orchestrator import SyncOrchestrator, connection_status_for


__all__ = [
    "SyncError",
    "MissingConfigurationError",
    "SyncInProgressError",
    "SyncTimeoutError",
    "SyncLockRegistry",
    "SyncOrchestrator",
    "connection_status_for",
]
