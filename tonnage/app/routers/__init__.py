from .settings import router as settings_router
from .sync import router as sync_router
from .weight_log import router as weight_log_router
from .exercise_types import router as exercise_types_router
from .records import router as records_router
from .workouts import router as workouts_router
from .dashboard import router as dashboard_router

__all__ = [
    "settings_router",
    "sync_router",
    "weight_log_router",
    "exercise_types_router",
    "records_router",
    "workouts_router",
    "dashboard_router",
]
