"""Year dashboard: progress toward the goal, chart series, heatmap, recent PRs."""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tonnage.agg import project, heatmap, pr_feed
from tonnage.app.auth import require_user
from tonnage.app.dependencies import get_storage
from tonnage.db import Storage
from tonnage.models import DashboardResponse
from tonnage.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

RECENT_PRS_LIMIT = 10


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
) -> DashboardResponse:
    """Everything the dashboard shows for a year (the tracked year by default).

    Users who have not connected Hevy get `setup_required` and nothing else.
    """
    now = datetime.now(timezone.utc)
    connection = storage.get_connection(user.id)
    if connection is None:
        return DashboardResponse(setup_required=True, year=year or now.year)

    year = year or connection.tracked_year
    aggregates = storage.get_aggregates_for_year(user.id, year)
    projection = project(
        aggregates,
        goal_lb=connection.goal_lb,
        year=year,
        now=now,
        last_sync_at=connection.last_sync_at,
    )
    return DashboardResponse(
        year=year,
        stats=projection.stats,
        chart_data=projection.chart_data,
        heatmap_data=heatmap(aggregates),
        recent_prs=pr_feed(storage.get_recent_prs(user.id, RECENT_PRS_LIMIT)),
    )
