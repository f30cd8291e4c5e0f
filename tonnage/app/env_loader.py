"""Environment setup for the Tonnage API, run on import before anything else.

In dev, settings come from `.env.dev` (database URL, identity provider, and
optionally LOG_LEVEL and SYNC_TIMEOUT_SECONDS). Staging and prod deployments
inject them directly, so no file is read there.
"""

import os
import sys
from typing import Literal
from dotenv import load_dotenv

EnvironmentName = Literal["dev", "staging", "prod"]
ENVIRONMENTS: tuple[EnvironmentName, ...] = ("dev", "staging", "prod")
DEV_ENV_FILE = ".env.dev"

# Postgres for workouts and aggregates, plus the JWKS issuer and audience.
REQUIRED_ENV_VARS = [
    "DATABASE_URL",
    "IDENTITY_PROVIDER_URL",
    "JWT_AUDIENCE",
]


def get_current_environment() -> EnvironmentName:
    """Which deployment the API is running as, from ENV (default dev)."""
    env = os.getenv("ENV", "dev")
    if env not in ENVIRONMENTS:
        raise ValueError(f"Invalid ENV value: {env}. Must be one of {ENVIRONMENTS}.")
    return env  # type: ignore[return-value]


def validate_required_env_vars() -> None:
    """Exit if Tonnage can't reach its database or validate tokens.

    Raises:
        SystemExit: If any required variable is unset or empty.
    """
    missing = [var for var in REQUIRED_ENV_VARS if not os.getenv(var)]
    if missing:
        print(
            f"ERROR: Tonnage is missing required settings: {', '.join(missing)}",
            file=sys.stderr,
        )
        print(
            f"Set them in {DEV_ENV_FILE} for local runs, or in the deployment.",
            file=sys.stderr,
        )
        sys.exit(1)


current_env = get_current_environment()
if current_env == "dev":
    print(f"Tonnage API (dev): loading settings from {DEV_ENV_FILE}")
    load_dotenv(DEV_ENV_FILE, verbose=True)
else:
    print(f"Tonnage API ({current_env}): using injected environment")

validate_required_env_vars()
