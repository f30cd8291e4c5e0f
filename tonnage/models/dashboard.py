"""Response models for the dashboard."""

from datetime import date, datetime

from pydantic import BaseModel

from .records import PrType


class DashboardStats(BaseModel):
    """Year-to-date progress toward the volume goal."""

    total_lifted_lb: float
    goal_lb: float
    percentage_complete: float
    day_of_year: int
    days_remaining: int
    expected_to_date_lb: float
    ahead_behind_lb: float
    required_per_day_lb: float
    projected_year_end_lb: float
    sessions_count: int
    days_lifted_count: int
    last_workout_volume_lb: float
    last_sync_at: datetime | None = None


class ChartPoint(BaseModel):
    """A point on the cumulative volume chart.

    `cumulative_target` follows the straight goal-pace line, so a client can
    draw both curves without per-day target rows.
    """

    date: date
    day_of_year: int
    actual_volume: float
    target_volume: float
    cumulative_actual: float
    cumulative_target: float


class HeatmapDay(BaseModel):
    date: date
    volume_lb: float
    count: int
    pr_count: int


class PrFeedItem(BaseModel):
    id: int | None
    date: date
    type: PrType
    exercise_name: str | None = None
    value: float
    delta: float


class TopWorkout(BaseModel):
    id: str
    title: str | None
    start_time: datetime
    volume_lb: int
    exercise_count: int


class DashboardResponse(BaseModel):
    """Everything the dashboard renders for one year.

    When the user has not connected Hevy yet, only `setup_required` and `year`
    are meaningful.
    """

    setup_required: bool = False
    year: int
    stats: DashboardStats | None = None
    chart_data: list[ChartPoint] = []
    heatmap_data: list[HeatmapDay] = []
    recent_prs: list[PrFeedItem] = []
