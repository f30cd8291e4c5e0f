# This file loads env variables and must thus be imported before anything else.
from . import env_loader  # noqa: F401
from .env_loader import get_current_environment

import os
import logging

from fastapi import FastAPI, Depends, Response
from fastapi.middleware.cors import CORSMiddleware

from .routers import (
    settings_router,
    sync_router,
    weight_log_router,
    exercise_types_router,
    records_router,
    workouts_router,
    dashboard_router,
)
from .models import EnvironmentResponse
from .auth import require_user
from tonnage.models.user import User

"""FastAPI application setup for the tonnage API.

Exposes routes for Hevy connection settings, syncing, the weight log,
exercise types, personal records and the yearly dashboard. This module
configures CORS and logging.
"""

logger = logging.getLogger(__name__)

app = FastAPI()
app.include_router(settings_router)
app.include_router(sync_router)
app.include_router(weight_log_router)
app.include_router(exercise_types_router)
app.include_router(records_router)
app.include_router(workouts_router)
app.include_router(dashboard_router)
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=[
        origin.strip()
        for origin in os.getenv(
            "CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
        ).split(",")
        if origin.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s - %(filename)s:%(lineno)d",
    datefmt="%Y-%m-%d %H:%M:%S",
)
# Configure the logging for the API itself if the user specifies it.
if "LOG_LEVEL" in os.environ:
    match os.environ["LOG_LEVEL"].upper():
        case "DEBUG":
            log_level = logging.DEBUG
        case "INFO":
            log_level = logging.INFO
        case "WARNING":
            log_level = logging.WARNING
        case "ERROR":
            log_level = logging.ERROR
        case "CRITICAL":
            log_level = logging.CRITICAL
        case _:
            raise ValueError(f"Invalid log level: {os.environ['LOG_LEVEL']}")
    logging.getLogger("tonnage").setLevel(log_level)


@app.get("/health")
@app.options("/health")
def health_check(response: Response) -> dict[str, str]:
    """Health check endpoint that returns 200 status with CORS from anywhere."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "*"
    return {"status": "healthy"}


@app.get("/environment", response_model=EnvironmentResponse)
def get_environment(_user: User = Depends(require_user)) -> EnvironmentResponse:
    """Get the current environment configuration."""
    return EnvironmentResponse(environment=get_current_environment())


@app.get("/auth/verify")
def verify_auth(user: User = Depends(require_user)) -> dict[str, str]:
    """Verify authentication credentials without any side effects.

    Raises:
        HTTPException 401 if credentials are invalid.
    """
    return {"status": "authenticated", "username": user.username or ""}
