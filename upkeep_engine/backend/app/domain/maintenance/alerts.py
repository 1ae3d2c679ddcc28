# backend/app/domain/maintenance/alerts.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from .numbers import round_int
from .portfolio import PortfolioAggregator
from .types import (
    Alert,
    AlertSeverity,
    AlertsSummary,
    CategoryPrediction,
    PropertyPrediction,
    PropertySummary,
    RiskLabel,
)

ALERT_MONTHS_AHEAD = 3
WARNING_MIN_SCORE = 0.45


def epoch_ms(now: datetime) -> int:
    # naive datetimes are UTC throughout
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return int(now.timestamp() * 1000)


def alert_for(pp: PropertyPrediction, pred: CategoryPrediction, *, now: datetime) -> Optional[Alert]:
    """
    HIGH/CRITICAL -> URGENT/CRITICAL alert; MEDIUM above 0.45 -> WARNING.
    Everything else produces no alert.
    """
    category = pred.category
    alert_id = f"{pp.property_id}-{category.value}-{epoch_ms(now)}"

    if pred.is_high_risk:
        severity = AlertSeverity.CRITICAL if pred.risk_category == RiskLabel.CRITICAL else AlertSeverity.URGENT
        return Alert(
            id=alert_id,
            property_id=pp.property_id,
            property_title=pp.property_title,
            severity=severity,
            category=category,
            title=f"{category.value} maintenance needed",
            message=pred.recommendation,
            recommended_action=f"Schedule {category.value.lower()} inspection",
            estimated_cost_if_ignored=pred.estimated_cost * 2,
            days_until_action_needed=pred.estimated_days_until_issue,
            created_at=now,
        )

    if pred.risk_category == RiskLabel.MEDIUM and pred.risk_score > WARNING_MIN_SCORE:
        return Alert(
            id=alert_id,
            property_id=pp.property_id,
            property_title=pp.property_title,
            severity=AlertSeverity.WARNING,
            category=category,
            title=f"{category.value} maintenance recommended",
            message=pred.recommendation,
            recommended_action=f"Plan {category.value.lower()} maintenance",
            estimated_cost_if_ignored=round_int(pred.estimated_cost * 1.5),
            days_until_action_needed=pred.estimated_days_until_issue,
            created_at=now,
        )

    return None


def sort_alerts(alerts: Sequence[Alert]) -> list[Alert]:
    return sorted(alerts, key=lambda a: (a.severity.rank, a.days_until_action_needed))


class AlertProjector:
    def __init__(self, aggregator: PortfolioAggregator, *, months_ahead: int = ALERT_MONTHS_AHEAD) -> None:
        self.aggregator = aggregator
        self.months_ahead = int(months_ahead)

    def project(self, properties: Sequence[PropertySummary], *, now: datetime) -> AlertsSummary:
        portfolio = self.aggregator.portfolio_summary(properties, self.months_ahead, now=now)

        # one alert per (property, category)
        by_key: dict[tuple[int, str], Alert] = {}
        for pp in portfolio.properties:
            for pred in pp.predictions:
                alert = alert_for(pp, pred, now=now)
                if alert is not None:
                    by_key.setdefault((alert.property_id, alert.category.value), alert)

        alerts = sort_alerts(list(by_key.values()))
        return AlertsSummary(
            alerts=alerts,
            total_alerts=len(alerts),
            critical_count=sum(1 for a in alerts if a.severity == AlertSeverity.CRITICAL),
            urgent_count=sum(1 for a in alerts if a.severity == AlertSeverity.URGENT),
        )
