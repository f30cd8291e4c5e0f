import logging
from functools import lru_cache

from fastapi import Depends

from tonnage.db import Storage
from tonnage.integrations.hevy import HevyClient
from tonnage.sync import SyncLockRegistry, SyncOrchestrator
from tonnage.sync.constants import get_sync_timeout_seconds

logger = logging.getLogger(__name__)

# Shared by every request handled by this process.
SYNC_LOCKS = SyncLockRegistry()


@lru_cache
def get_storage() -> Storage:
    return Storage()


def hevy_client_factory(api_key: str) -> HevyClient:
    return HevyClient(api_key=api_key)


def get_sync_orchestrator(
    storage: Storage = Depends(get_storage),
) -> SyncOrchestrator:
    return SyncOrchestrator(
        storage=storage,
        client_factory=hevy_client_factory,
        locks=SYNC_LOCKS,
        timeout_seconds=get_sync_timeout_seconds(),
    )
