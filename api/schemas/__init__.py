"""
Pydantic schemas for the Innothon admin reporting API.

Re-exports all schemas for convenient importing.
"""

from __future__ import annotations

from .metrics import (
    AttendanceStatsResponse,
    AttendanceSummary,
    DistributionResponse,
    DistributionSlice,
    EventAttendance,
    EventComparisonRow,
    EventOverviewResponse,
    EventRevenue,
    ExpenseSummaryResponse,
    GameBreakdownResponse,
    GameStats,
    MessageItem,
    MessageSummaryResponse,
    ModeSummary,
    RevenueResponse,
    RevenueSummary,
    RevenueTrendPoint,
    TrendPoint,
    TrendsResponse,
)

__all__ = [
    "AttendanceStatsResponse",
    "AttendanceSummary",
    "DistributionResponse",
    "DistributionSlice",
    "EventAttendance",
    "EventComparisonRow",
    "EventOverviewResponse",
    "EventRevenue",
    "ExpenseSummaryResponse",
    "GameBreakdownResponse",
    "GameStats",
    "MessageItem",
    "MessageSummaryResponse",
    "ModeSummary",
    "RevenueResponse",
    "RevenueSummary",
    "RevenueTrendPoint",
    "TrendPoint",
    "TrendsResponse",
]
