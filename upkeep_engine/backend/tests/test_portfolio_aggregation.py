# backend/tests/test_portfolio_aggregation.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from app.domain.maintenance import (
    MaintenanceCategory as C,
    MaintenanceRecord,
    PortfolioAggregator,
    PredictionEngine,
    PropertySummary,
    RiskLabel,
)
from app.domain.maintenance.portfolio import most_common_issue

NOW = datetime(2026, 3, 15, 12, 0, 0)


class MemoryHistory:
    def __init__(self, records: dict[int, list[MaintenanceRecord]] | None = None) -> None:
        self.records = records or {}

    def records_for_property(self, property_id: int) -> Sequence[MaintenanceRecord]:
        return self.records.get(property_id, [])


def _prop(pid: int, year_built: int | None) -> PropertySummary:
    return PropertySummary(id=pid, title=f"Unit {pid}", address=f"{pid} Main St", year_built=year_built, owner_id=1)


def _agg(records: dict[int, list[MaintenanceRecord]] | None = None) -> PortfolioAggregator:
    return PortfolioAggregator(PredictionEngine(), MemoryHistory(records), default_property_age=20)


def test_property_prediction_sorted_by_risk_and_totals_add_up():
    # one year old, no history: every category is scored against a 365 day gap
    pp = _agg().property_prediction(_prop(1, 2025), 12, now=NOW)

    assert [p.category for p in pp.predictions] == [
        C.HVAC,
        C.PEST_CONTROL,
        C.CLEANING,
        C.LANDSCAPING,
        C.PLUMBING,
        C.ELECTRICAL,
        C.APPLIANCE,
        C.OTHER,
        C.STRUCTURAL,
    ]
    assert [p.risk_score for p in pp.predictions] == [1.0, 1.0, 1.0, 1.0, 0.5, 0.5, 0.5, 0.5, 0.25]
    assert pp.high_risk_count == 4
    assert pp.overall_risk_score == 0.69
    assert pp.total_estimated_cost == 1875
    assert pp.total_estimated_cost == sum(p.estimated_cost for p in pp.predictions)
    assert pp.property_title == "Unit 1"
    assert pp.generated_at == NOW


def test_brand_new_property_has_no_predictions():
    pp = _agg().property_prediction(_prop(2, 2026), 12, now=NOW)

    assert pp.predictions == []
    assert pp.overall_risk_score == 0.0
    assert pp.high_risk_count == 0
    assert pp.total_estimated_cost == 0


def test_scores_at_threshold_are_suppressed():
    prop = _prop(3, 2011)

    at_threshold = [MaintenanceRecord(category=C.PLUMBING, created_at=NOW - timedelta(days=66))]
    above = [MaintenanceRecord(category=C.PLUMBING, created_at=NOW - timedelta(days=69))]

    dropped = _agg().category_predictions(prop, at_threshold, 12, now=NOW)
    kept = _agg().category_predictions(prop, above, 12, now=NOW)

    assert C.PLUMBING not in [p.category for p in dropped]
    plumbing = [p for p in kept if p.category == C.PLUMBING]
    assert len(plumbing) == 1
    assert plumbing[0].risk_score == 0.21
    assert all(p.risk_score > 0.2 for p in dropped + kept)


def test_unknown_year_built_uses_default_age():
    pp = _agg().property_prediction(_prop(4, None), 12, now=NOW)
    plumbing = [p for p in pp.predictions if p.category == C.PLUMBING][0]
    # default age 20 -> multiplier 1.0
    assert plumbing.estimated_cost == 300
    assert plumbing.risk_factors == ["Overdue by 365 days"]


def test_history_is_routed_to_its_category():
    records = {5: [MaintenanceRecord(category=C.HVAC, created_at=NOW - timedelta(days=10))]}
    pp = _agg(records).property_prediction(_prop(5, 2011), 12, now=NOW)

    # 10/180 * 1.0 * 1.1 is well under the suppression threshold
    assert C.HVAC not in [p.category for p in pp.predictions]
    assert C.PLUMBING in [p.category for p in pp.predictions]


def test_portfolio_summary_counts():
    props = [_prop(1, 2025), _prop(2, 2026)]
    s = _agg().portfolio_summary(props, 6, now=NOW)

    assert s.total_properties == 2
    assert s.high_risk_properties == 1
    assert s.total_estimated_costs == 1875
    assert s.hvac_concern_count == 1
    # every category appears once; the first one counted wins the tie
    assert s.most_common_issue_type == C.HVAC
    assert [pp.property_id for pp in s.properties] == [1, 2]
    assert s.total_estimated_costs == sum(pp.total_estimated_cost for pp in s.properties)


def test_empty_portfolio_is_zeroed():
    s = _agg().portfolio_summary([], 6, now=NOW)

    assert s.total_properties == 0
    assert s.high_risk_properties == 0
    assert s.total_estimated_costs == 0
    assert s.most_common_issue_type is None
    assert s.hvac_concern_count == 0
    assert s.properties == []


def test_most_common_issue_tie_break():
    assert most_common_issue({}) is None
    assert most_common_issue({C.PLUMBING: 2, C.HVAC: 3}) == C.HVAC
    assert most_common_issue({C.ELECTRICAL: 2, C.PLUMBING: 2}) == C.ELECTRICAL


def test_high_risk_labels_match_count():
    pp = _agg().property_prediction(_prop(6, 1970), 12, now=NOW)
    assert len(pp.predictions) == 9
    assert all(p.risk_category == RiskLabel.CRITICAL for p in pp.predictions)
    assert pp.high_risk_count == 9
    assert pp.overall_risk_score == 1.0
