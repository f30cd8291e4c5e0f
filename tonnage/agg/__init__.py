from .volume import (
    KG_TO_LB,
    HEVY_TYPE_MAP,
    SetLoad,
    compute_set_load,
    compute_exercise_volume,
    compute_workout_volume,
    exercise_type_from_hevy,
    resolve_exercise_type,
)
from .bodyweight import BodyweightResolver, DEFAULT_BODYWEIGHT_LB
from .records import RecordScan, SessionStats, detect_records, session_stats
from .daily import DailyAggregation, aggregate_daily, daily_volume_records
from .dashboard import DashboardProjection, project, heatmap, pr_feed, day_of_year


__all__ = [
    "KG_TO_LB",
    "HEVY_TYPE_MAP",
    "SetLoad",
    "compute_set_load",
    "compute_exercise_volume",
    "compute_workout_volume",
    "exercise_type_from_hevy",
    "resolve_exercise_type",
    "BodyweightResolver",
    "DEFAULT_BODYWEIGHT_LB",
    "RecordScan",
    "SessionStats",
    "detect_records",
    "session_stats",
    "DailyAggregation",
    "aggregate_daily",
    "daily_volume_records",
    "DashboardProjection",
    "project",
    "heatmap",
    "pr_feed",
    "day_of_year",
]
