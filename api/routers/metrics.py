"""
Metrics Router - Dashboard metrics endpoints.

This router provides the numbers behind the admin dashboard: daily trends,
participant distributions, the event comparison table, per-game gaming
numbers, revenue, attendance, contact messages and organiser expenses.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from innothon.errors import UpstreamFetchError

from ..dependencies import get_reporting_service
from ..schemas.metrics import (
    AttendanceStatsResponse,
    DistributionResponse,
    EventOverviewResponse,
    ExpenseSummaryResponse,
    GameBreakdownResponse,
    MessageSummaryResponse,
    RevenueResponse,
    TrendsResponse,
)
from ..services.reporting_service import ReportingService
from ..settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


def _upstream_error(e: UpstreamFetchError) -> HTTPException:
    logger.error(f"Upstream fetch failed: {e}")
    return HTTPException(status_code=500, detail=str(e))


@router.get("/trends", response_model=TrendsResponse)
async def get_trends(
    window_days: int | None = Query(None, ge=1, le=366, description="Days in the trailing window (default 7)"),
    service: ReportingService = Depends(get_reporting_service),
) -> TrendsResponse:
    """Get registration, revenue and message counts per day.

    Every series has exactly window_days points, oldest first, ending today.
    """
    try:
        return await service.trends(window_days or get_settings().trend_window_days)
    except UpstreamFetchError as e:
        raise _upstream_error(e) from e
    except Exception as e:
        logger.error(f"Error calculating trends: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error calculating trends: {str(e)}")


@router.get("/distribution", response_model=DistributionResponse)
async def get_distribution(
    service: ReportingService = Depends(get_reporting_service),
) -> DistributionResponse:
    """Get registrations per event and unique participants by affiliation and year."""
    try:
        return await service.distribution()
    except UpstreamFetchError as e:
        raise _upstream_error(e) from e
    except Exception as e:
        logger.error(f"Error calculating distributions: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error calculating distributions: {str(e)}")


@router.get("/events", response_model=EventOverviewResponse)
async def get_event_overview(
    service: ReportingService = Depends(get_reporting_service),
) -> EventOverviewResponse:
    """Get the event overview: totals, online/offline split and per-event comparison rows."""
    try:
        return await service.event_overview()
    except UpstreamFetchError as e:
        raise _upstream_error(e) from e
    except Exception as e:
        logger.error(f"Error building event overview: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error building event overview: {str(e)}")


@router.get("/revenue", response_model=RevenueResponse)
async def get_revenue(
    service: ReportingService = Depends(get_reporting_service),
) -> RevenueResponse:
    """Get recognized (approved) and potential revenue, overall and per event."""
    try:
        return await service.revenue()
    except UpstreamFetchError as e:
        raise _upstream_error(e) from e
    except Exception as e:
        logger.error(f"Error calculating revenue: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error calculating revenue: {str(e)}")


@router.get("/attendance", response_model=AttendanceStatsResponse)
async def get_attendance(
    service: ReportingService = Depends(get_reporting_service),
) -> AttendanceStatsResponse:
    """Get attendance totals and per-event presence for approved teams."""
    try:
        return await service.attendance_stats()
    except UpstreamFetchError as e:
        raise _upstream_error(e) from e
    except Exception as e:
        logger.error(f"Error calculating attendance: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error calculating attendance: {str(e)}")


@router.get("/messages", response_model=MessageSummaryResponse)
async def get_message_summary(
    q: str = Query("", description="Case-insensitive search over name, email and message"),
    unread_only: bool = Query(False, description="List only unread messages"),
    service: ReportingService = Depends(get_reporting_service),
) -> MessageSummaryResponse:
    """Get contact message counts and the messages matching the inbox search.

    Counts always cover every message; q and unread_only filter only the list.
    """
    try:
        return await service.message_summary(query=q, unread_only=unread_only)
    except UpstreamFetchError as e:
        raise _upstream_error(e) from e
    except Exception as e:
        logger.error(f"Error counting messages: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error counting messages: {str(e)}")


@router.get("/games", response_model=GameBreakdownResponse)
async def get_game_breakdown(
    service: ReportingService = Depends(get_reporting_service),
) -> GameBreakdownResponse:
    """Get Pixel Showdown teams, approvals and fees per game."""
    try:
        return await service.game_breakdown()
    except UpstreamFetchError as e:
        raise _upstream_error(e) from e
    except Exception as e:
        logger.error(f"Error building game breakdown: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error building game breakdown: {str(e)}")


@router.get("/expenses", response_model=ExpenseSummaryResponse)
async def get_expense_summary(
    service: ReportingService = Depends(get_reporting_service),
) -> ExpenseSummaryResponse:
    """Get total expenses, pending reimbursement and stamp/reimbursed bill counts."""
    try:
        return await service.expense_summary()
    except UpstreamFetchError as e:
        raise _upstream_error(e) from e
    except Exception as e:
        logger.error(f"Error summarizing expenses: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error summarizing expenses: {str(e)}")
