# backend/app/domain/maintenance/history.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from .numbers import SECONDS_PER_DAY, days_between_ceil, round_half_up, round_int
from .types import MaintenanceCategory, MaintenanceRecord, PropertySummary

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class CategoryHistoryStats:
    category: MaintenanceCategory
    count: int
    avg_resolution_days: float
    total_cost: float
    avg_cost: float
    last_occurrence: Optional[datetime]
    avg_days_between: Optional[int]


@dataclass(frozen=True)
class MaintenanceHistory:
    property_id: int
    property_title: str
    year_built: Optional[int]
    property_age: Optional[int]
    total_requests: int
    total_spent: float
    avg_annual_cost: float
    by_category: list[CategoryHistoryStats]
    analysis_start_date: datetime
    analysis_end_date: datetime


def _cost(r: MaintenanceRecord) -> float:
    return float(r.actual_cost) if r.actual_cost else 0.0


def _mean(xs: Sequence[float]) -> float:
    return sum(xs) / len(xs) if xs else 0.0


def category_stats(category: MaintenanceCategory, records: Sequence[MaintenanceRecord]) -> CategoryHistoryStats:
    """records: one category, oldest first, non-empty."""
    total_cost = sum(_cost(r) for r in records)

    resolution_days = [
        days_between_ceil(r.created_at, r.completed_at) for r in records if r.completed_at is not None
    ]

    avg_between: Optional[int] = None
    if len(records) >= 2:
        gaps = [days_between_ceil(prev.created_at, cur.created_at) for prev, cur in zip(records, records[1:])]
        mean_gap = _mean(gaps)
        avg_between = round_int(mean_gap) if mean_gap else None

    return CategoryHistoryStats(
        category=category,
        count=len(records),
        avg_resolution_days=round_half_up(_mean(resolution_days), 1),
        total_cost=total_cost,
        avg_cost=round_half_up(total_cost / len(records), 2),
        last_occurrence=records[-1].created_at,
        avg_days_between=avg_between,
    )


def summarize_history(
    prop: PropertySummary,
    records: Sequence[MaintenanceRecord],
    *,
    now: datetime,
) -> MaintenanceHistory:
    """
    Historical spend and cadence for a property.

    `records` must be the completed history, oldest first. Categories with
    no records are omitted from `by_category`.
    """
    by_category: list[CategoryHistoryStats] = []
    for category in MaintenanceCategory:
        rows = [r for r in records if MaintenanceCategory(r.category) == category]
        if rows:
            by_category.append(category_stats(category, rows))

    total_spent = sum(_cost(r) for r in records)

    start = records[0].created_at if records else now
    years_of_data = max(1.0, (now - start).total_seconds() / (SECONDS_PER_DAY * DAYS_PER_YEAR))

    return MaintenanceHistory(
        property_id=prop.id,
        property_title=prop.title,
        year_built=prop.year_built,
        property_age=max(0, now.year - prop.year_built) if prop.year_built is not None else None,
        total_requests=len(records),
        total_spent=total_spent,
        avg_annual_cost=round_half_up(total_spent / years_of_data, 2),
        by_category=by_category,
        analysis_start_date=start,
        analysis_end_date=now,
    )
