# backend/app/domain/maintenance/prediction.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from .numbers import days_between_ceil, format_us_date, round_half_up, round_int
from .risk_model import DEFAULT_RISK_MODEL, RiskModel
from .types import CategoryPrediction, MaintenanceCategory, MaintenanceRecord, RiskLabel

SEASONAL_MULTIPLIER = 1.3
SUMMER_MONTHS = frozenset({6, 7, 8})
WINTER_MONTHS = frozenset({12, 1, 2})

OLD_PROPERTY_AGE = 20
REPEAT_ISSUE_COUNT = 3


def risk_label(score: float) -> RiskLabel:
    if score >= 0.8:
        return RiskLabel.CRITICAL
    if score >= 0.6:
        return RiskLabel.HIGH
    if score >= 0.4:
        return RiskLabel.MEDIUM
    return RiskLabel.LOW


def hvac_season(month: int) -> str | None:
    """'summer' | 'winter' | None. The two windows never overlap."""
    if month in SUMMER_MONTHS:
        return "summer"
    if month in WINTER_MONTHS:
        return "winter"
    return None


def frequency_multiplier(history_count: int) -> float:
    return min(1 + history_count * 0.1, 2.0)


def confidence_for(history_count: int) -> float:
    return round_half_up(min(0.5 + history_count * 0.1, 0.95), 2)


def recommendation_for(label: RiskLabel, category_label: str) -> str:
    if label == RiskLabel.CRITICAL:
        return (
            f"Immediate attention required for {category_label}. "
            "Schedule inspection within 1-2 weeks to prevent costly emergency repairs."
        )
    if label == RiskLabel.HIGH:
        return f"Schedule preventive maintenance for {category_label} within the next month to avoid potential issues."
    if label == RiskLabel.MEDIUM:
        return f"Consider scheduling routine {category_label} check in the next 2-3 months."
    return f"{category_label[:1].upper()}{category_label[1:]} appears to be in good condition. Continue regular monitoring."


class PredictionEngine:
    """
    Rule-based failure prediction for one maintenance category at one property.

    Pure: every time-dependent value derives from the `now` passed in.
    History must be ordered newest-first; the first record is treated as the
    most recent maintenance and the engine never re-sorts.
    """

    def __init__(self, risk_model: RiskModel = DEFAULT_RISK_MODEL) -> None:
        self.risk_model = risk_model

    def days_since_last_maintenance(
        self,
        category: MaintenanceCategory,
        history: Sequence[MaintenanceRecord],
        property_age: int,
        *,
        now: datetime,
    ) -> int:
        if history:
            return days_between_ceil(history[0].created_at, now)
        # No history: assume overdue in proportion to age, capped at two intervals.
        interval = self.risk_model.interval_for(category)
        return min(property_age * 365, interval * 2)

    def predict(
        self,
        category: MaintenanceCategory,
        history: Sequence[MaintenanceRecord],
        property_age: int,
        months_ahead: int,
        *,
        now: datetime,
    ) -> CategoryPrediction:
        interval = self.risk_model.interval_for(category)
        avg_cost = self.risk_model.repair_cost_for(category)
        age_mult = self.risk_model.age_multiplier(property_age)
        n = len(history)

        days_since = self.days_since_last_maintenance(category, history, property_age, now=now)

        score = days_since / interval
        score *= age_mult
        score *= frequency_multiplier(n)

        season = hvac_season(now.month) if category == MaintenanceCategory.HVAC else None
        if season is not None:
            score *= SEASONAL_MULTIPLIER

        clamped = max(0.0, min(score, 1.0))
        # label the unrounded score; a raw 0.7956 reports as 0.8 but stays HIGH
        label = risk_label(clamped)
        score = round_half_up(clamped, 2)

        remaining = max(0, interval - days_since)
        days_until = max(1, round_int(remaining / age_mult))

        window_end = now + timedelta(days=min(days_until, months_ahead * 30))
        timeframe = f"{format_us_date(now.date())} - {format_us_date(window_end.date())}"

        factors: list[str] = []
        if property_age > OLD_PROPERTY_AGE:
            factors.append(f"Property age: {property_age} years")
        if days_since > interval:
            factors.append(f"Overdue by {days_since - interval} days")
        if n >= REPEAT_ISSUE_COUNT:
            factors.append(f"{n} past issues of this type")
        if season == "summer":
            factors.append("Peak summer usage period")
        elif season == "winter":
            factors.append("Peak winter heating season")

        return CategoryPrediction(
            category=category,
            risk_score=score,
            risk_category=label,
            estimated_days_until_issue=days_until,
            predicted_timeframe=timeframe,
            estimated_cost=round_int(avg_cost * age_mult),
            risk_factors=factors,
            recommendation=recommendation_for(label, self.risk_model.label_for(category)),
            confidence=confidence_for(n),
        )
