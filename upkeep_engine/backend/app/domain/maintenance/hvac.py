# backend/app/domain/maintenance/hvac.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from .numbers import days_between_ceil, round_half_up, round_int
from .types import MaintenanceRecord, PropertySummary

TYPICAL_LIFESPAN_YEARS = 20
MAX_ASSUMED_HVAC_AGE = 25
SERVICE_INTERVAL_DAYS = 180

BASE_REPLACEMENT_COST = 5000
OLD_BUILDING_REPLACEMENT_PREMIUM = 2000
BASE_ANNUAL_MAINTENANCE = 200
ANNUAL_COST_PER_ISSUE = 50


@dataclass(frozen=True)
class HvacPrediction:
    property_id: int
    property_title: str
    estimated_hvac_age: int
    typical_lifespan: int
    lifespan_percentage: int
    last_maintenance_date: Optional[datetime]
    days_since_last_service: Optional[int]
    historical_hvac_issues: int
    failure_risk: float
    health_status: str
    seasonal_risk: str
    recommendations: list[str]
    estimated_replacement_cost: int
    estimated_annual_maintenance_cost: int


def health_status(failure_risk: float) -> str:
    if failure_risk <= 0.2:
        return "EXCELLENT"
    if failure_risk <= 0.4:
        return "GOOD"
    if failure_risk <= 0.6:
        return "FAIR"
    if failure_risk <= 0.8:
        return "POOR"
    return "CRITICAL"


def seasonal_risk(month: int) -> str:
    if month in (6, 7, 8):
        return "High risk - Peak summer cooling season"
    if month in (12, 1, 2):
        return "High risk - Peak winter heating season"
    if month in (4, 5):
        return "Moderate - Pre-summer preparation recommended"
    if month in (10, 11):
        return "Moderate - Pre-winter preparation recommended"
    return "Low seasonal risk"


def failure_risk(hvac_age: int, days_since_last_service: Optional[int], issue_count: int) -> float:
    # age: up to 0.4 at end of typical life
    risk = hvac_age / TYPICAL_LIFESPAN_YEARS * 0.4

    # service gap: 0.15 per year, capped at 0.3; never serviced counts 0.2
    if days_since_last_service:
        risk += min(days_since_last_service / 365 * 0.15, 0.3)
    else:
        risk += 0.2

    # past issues: 0.05 each, capped at 0.3
    risk += min(issue_count * 0.05, 0.3)

    return round_half_up(min(risk, 1.0), 2)


def assess_hvac(
    prop: PropertySummary,
    hvac_history: Sequence[MaintenanceRecord],
    property_age: int,
    *,
    now: datetime,
) -> HvacPrediction:
    """
    HVAC lifecycle estimate. The unit is assumed to be as old as the
    building (capped at 25 years). `hvac_history` is newest first.
    """
    hvac_age = min(property_age, MAX_ASSUMED_HVAC_AGE)
    lifespan_pct = min(hvac_age / TYPICAL_LIFESPAN_YEARS * 100, 100)

    last_service = hvac_history[0].created_at if hvac_history else None
    days_since = days_between_ceil(last_service, now) if last_service is not None else None

    risk = failure_risk(hvac_age, days_since, len(hvac_history))
    status = health_status(risk)

    month = now.month
    recommendations: list[str] = []
    if status in ("CRITICAL", "POOR"):
        recommendations.append("Schedule immediate HVAC inspection")
        recommendations.append("Consider replacement options - system may be near end of life")
    if last_service is None or (days_since and days_since > SERVICE_INTERVAL_DAYS):
        recommendations.append("Schedule preventive maintenance service")
    if month in (4, 5):
        recommendations.append("Pre-summer AC tune-up recommended")
    if month in (10, 11):
        recommendations.append("Pre-winter heating system check recommended")
    if not recommendations:
        recommendations.append("Continue regular maintenance schedule")
        recommendations.append("Replace air filters monthly during peak seasons")

    replacement = BASE_REPLACEMENT_COST + (OLD_BUILDING_REPLACEMENT_PREMIUM if property_age > 30 else 0)

    return HvacPrediction(
        property_id=prop.id,
        property_title=prop.title,
        estimated_hvac_age=hvac_age,
        typical_lifespan=TYPICAL_LIFESPAN_YEARS,
        lifespan_percentage=round_int(lifespan_pct),
        last_maintenance_date=last_service,
        days_since_last_service=days_since,
        historical_hvac_issues=len(hvac_history),
        failure_risk=risk,
        health_status=status,
        seasonal_risk=seasonal_risk(month),
        recommendations=recommendations,
        estimated_replacement_cost=replacement,
        estimated_annual_maintenance_cost=BASE_ANNUAL_MAINTENANCE + len(hvac_history) * ANNUAL_COST_PER_ISSUE,
    )
