# backend/tests/test_alert_projection.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Sequence

from app.domain.maintenance import (
    AlertProjector,
    AlertSeverity,
    CategoryPrediction,
    MaintenanceCategory as C,
    MaintenanceRecord,
    PortfolioAggregator,
    PredictionEngine,
    PropertyPrediction,
    PropertySummary,
    RiskLabel,
)
from app.domain.maintenance.alerts import alert_for, sort_alerts

NOW = datetime(2026, 3, 15, 12, 0, 0)


class NoHistory:
    def records_for_property(self, property_id: int) -> Sequence[MaintenanceRecord]:
        return []


def _pred(category: C, score: float, label: RiskLabel, *, cost: int = 300, days: int = 10) -> CategoryPrediction:
    return CategoryPrediction(
        category=category,
        risk_score=score,
        risk_category=label,
        estimated_days_until_issue=days,
        predicted_timeframe="3/15/2026 - 3/25/2026",
        estimated_cost=cost,
        risk_factors=[],
        recommendation="do the thing",
        confidence=0.5,
    )


def _pp(*preds: CategoryPrediction) -> PropertyPrediction:
    return PropertyPrediction(
        property_id=7,
        property_title="Maple Duplex",
        property_address="12 Maple St",
        overall_risk_score=0.0,
        high_risk_count=0,
        predictions=list(preds),
        total_estimated_cost=0,
        generated_at=NOW,
    )


def test_critical_prediction_becomes_critical_alert():
    pred = _pred(C.PLUMBING, 0.9, RiskLabel.CRITICAL, cost=600, days=3)
    a = alert_for(_pp(pred), pred, now=NOW)

    assert a is not None
    assert a.severity == AlertSeverity.CRITICAL
    assert a.id == f"7-PLUMBING-{int(NOW.replace(tzinfo=timezone.utc).timestamp() * 1000)}"
    assert a.title == "PLUMBING maintenance needed"
    assert a.recommended_action == "Schedule plumbing inspection"
    assert a.message == "do the thing"
    assert a.estimated_cost_if_ignored == 1200
    assert a.days_until_action_needed == 3
    assert a.property_title == "Maple Duplex"
    assert a.dismissed is False


def test_high_prediction_becomes_urgent_alert():
    pred = _pred(C.PEST_CONTROL, 0.65, RiskLabel.HIGH)
    a = alert_for(_pp(pred), pred, now=NOW)

    assert a is not None
    assert a.severity == AlertSeverity.URGENT
    assert a.recommended_action == "Schedule pest_control inspection"


def test_medium_prediction_warns_only_above_cutoff():
    at_cutoff = _pred(C.HVAC, 0.45, RiskLabel.MEDIUM)
    above = _pred(C.HVAC, 0.46, RiskLabel.MEDIUM, cost=175)

    assert alert_for(_pp(at_cutoff), at_cutoff, now=NOW) is None

    a = alert_for(_pp(above), above, now=NOW)
    assert a is not None
    assert a.severity == AlertSeverity.WARNING
    assert a.title == "HVAC maintenance recommended"
    assert a.recommended_action == "Plan hvac maintenance"
    # 175 * 1.5 = 262.5 rounds half-up
    assert a.estimated_cost_if_ignored == 263


def test_low_prediction_has_no_alert():
    pred = _pred(C.OTHER, 0.3, RiskLabel.LOW)
    assert alert_for(_pp(pred), pred, now=NOW) is None


def test_sort_by_severity_then_days():
    pp = _pp()
    alerts = [
        alert_for(pp, _pred(C.HVAC, 0.5, RiskLabel.MEDIUM, days=1), now=NOW),
        alert_for(pp, _pred(C.PLUMBING, 0.7, RiskLabel.HIGH, days=2), now=NOW),
        alert_for(pp, _pred(C.ELECTRICAL, 0.9, RiskLabel.CRITICAL, days=30), now=NOW),
        alert_for(pp, _pred(C.APPLIANCE, 0.9, RiskLabel.CRITICAL, days=5), now=NOW),
    ]
    ordered = sort_alerts([a for a in alerts if a is not None])

    assert [(a.severity, a.category) for a in ordered] == [
        (AlertSeverity.CRITICAL, C.APPLIANCE),
        (AlertSeverity.CRITICAL, C.ELECTRICAL),
        (AlertSeverity.URGENT, C.PLUMBING),
        (AlertSeverity.WARNING, C.HVAC),
    ]


def test_projector_summarizes_portfolio_alerts():
    agg = PortfolioAggregator(PredictionEngine(), NoHistory(), default_property_age=20)
    props = [
        PropertySummary(id=1, title="Young", address="1 A St", year_built=2025, owner_id=1),
        PropertySummary(id=2, title="New", address="2 B St", year_built=2026, owner_id=1),
    ]

    s = AlertProjector(agg).project(props, now=NOW)

    # four CRITICAL categories plus four MEDIUM at 0.5; STRUCTURAL stays LOW
    assert s.total_alerts == 8
    assert s.critical_count == 4
    assert s.urgent_count == 0
    assert len(s.alerts) == s.total_alerts
    assert [a.severity for a in s.alerts[:4]] == [AlertSeverity.CRITICAL] * 4
    assert [a.severity for a in s.alerts[4:]] == [AlertSeverity.WARNING] * 4
    assert all(a.property_id == 1 for a in s.alerts)

    hvac = [a for a in s.alerts if a.category == C.HVAC][0]
    assert hvac.estimated_cost_if_ignored == 500


def test_projector_emits_one_alert_per_property_category():
    agg = PortfolioAggregator(PredictionEngine(), NoHistory(), default_property_age=20)
    prop = PropertySummary(id=1, title="Young", address="1 A St", year_built=2025, owner_id=1)

    s = AlertProjector(agg).project([prop, prop], now=NOW)

    keys = [(a.property_id, a.category) for a in s.alerts]
    assert len(keys) == len(set(keys)) == 8


def test_no_properties_no_alerts():
    agg = PortfolioAggregator(PredictionEngine(), NoHistory(), default_property_age=20)
    s = AlertProjector(agg).project([], now=NOW)

    assert s.alerts == []
    assert (s.total_alerts, s.critical_count, s.urgent_count) == (0, 0, 0)


def test_old_property_alerts_on_every_category():
    agg = PortfolioAggregator(PredictionEngine(), NoHistory(), default_property_age=20)
    projector = AlertProjector(agg)
    assert projector.months_ahead == 3

    prop = PropertySummary(id=1, title="Old", address="1 A St", year_built=1970, owner_id=1)
    s = projector.project([prop], now=NOW)

    assert s.critical_count == 9
    assert {a.category for a in s.alerts} == set(C)
    assert all(a.days_until_action_needed == 1 for a in s.alerts)


def test_score_reported_as_point_six_still_warns_as_medium():
    history = [MaintenanceRecord(category=C.PLUMBING, created_at=NOW - timedelta(days=198))]
    pred = PredictionEngine().predict(C.PLUMBING, history, property_age=15, months_ahead=3, now=NOW)
    assert (pred.risk_score, pred.risk_category) == (0.6, RiskLabel.MEDIUM)

    a = alert_for(_pp(pred), pred, now=NOW)
    assert a is not None
    assert a.severity == AlertSeverity.WARNING
    assert a.estimated_cost_if_ignored == 450
