from .workout import Workout, Exercise, Set, ExerciseType, DEFAULT_EXERCISE_TYPE
from .records import PrEvent, ExercisePr, PrType, EXERCISE_PR_TYPES, DAILY_PR_TYPE
from .aggregate import DailyAggregate
from .settings import (
    HevyConnection,
    UpdateSettingsRequest,
    ExerciseTemplate,
    UpdateExerciseTypeRequest,
    ConnectionStatus,
    SettingsResponse,
    DEFAULT_GOAL_LB,
)
from .weight_log import WeightLogEntry, CreateWeightLogEntryRequest
from .dashboard import (
    DashboardStats,
    ChartPoint,
    HeatmapDay,
    PrFeedItem,
    TopWorkout,
    DashboardResponse,
)
from .sync import SyncMode, SyncResult, SyncResponse
from .user import User


__all__ = [
    "Workout",
    "Exercise",
    "Set",
    "ExerciseType",
    "DEFAULT_EXERCISE_TYPE",
    "PrEvent",
    "ExercisePr",
    "PrType",
    "EXERCISE_PR_TYPES",
    "DAILY_PR_TYPE",
    "DailyAggregate",
    "HevyConnection",
    "UpdateSettingsRequest",
    "ExerciseTemplate",
    "UpdateExerciseTypeRequest",
    "ConnectionStatus",
    "SettingsResponse",
    "DEFAULT_GOAL_LB",
    "WeightLogEntry",
    "CreateWeightLogEntryRequest",
    "DashboardStats",
    "ChartPoint",
    "HeatmapDay",
    "PrFeedItem",
    "TopWorkout",
    "DashboardResponse",
    "SyncMode",
    "SyncResult",
    "SyncResponse",
    "User",
]
