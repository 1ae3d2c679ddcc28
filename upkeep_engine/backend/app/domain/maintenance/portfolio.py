# backend/app/domain/maintenance/portfolio.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol, Sequence

from .numbers import property_age, round_half_up
from .prediction import PredictionEngine
from .types import (
    CategoryPrediction,
    MaintenanceCategory,
    MaintenanceRecord,
    PortfolioSummary,
    PropertyPrediction,
    PropertySummary,
)

SUPPRESSION_THRESHOLD = 0.2
HVAC_CONCERN_THRESHOLD = 0.5


class HistorySource(Protocol):
    def records_for_property(self, property_id: int) -> Sequence[MaintenanceRecord]:
        """All maintenance records for the property, newest first."""
        ...


def group_by_category(records: Iterable[MaintenanceRecord]) -> dict[MaintenanceCategory, list[MaintenanceRecord]]:
    """Buckets records per category, keeping the incoming (newest-first) order."""
    out: dict[MaintenanceCategory, list[MaintenanceRecord]] = {}
    for r in records:
        out.setdefault(MaintenanceCategory(r.category), []).append(r)
    return out


class PortfolioAggregator:
    def __init__(self, engine: PredictionEngine, history: HistorySource, *, default_property_age: int) -> None:
        self.engine = engine
        self.history = history
        self.default_property_age = int(default_property_age)

    def category_predictions(
        self,
        prop: PropertySummary,
        records: Sequence[MaintenanceRecord],
        months_ahead: int,
        *,
        now: datetime,
    ) -> list[CategoryPrediction]:
        """
        Every category scored, predictions at or below the suppression
        threshold dropped, highest risk first (stable on ties).
        """
        age = property_age(prop.year_built, now=now, default_age=self.default_property_age)
        by_category = group_by_category(records)

        kept: list[CategoryPrediction] = []
        for category in MaintenanceCategory:
            pred = self.engine.predict(category, by_category.get(category, []), age, months_ahead, now=now)
            if pred.risk_score > SUPPRESSION_THRESHOLD:
                kept.append(pred)

        return sorted(kept, key=lambda p: p.risk_score, reverse=True)

    def property_prediction(
        self,
        prop: PropertySummary,
        months_ahead: int,
        *,
        now: datetime,
    ) -> PropertyPrediction:
        records = self.history.records_for_property(prop.id)
        predictions = self.category_predictions(prop, records, months_ahead, now=now)

        overall = sum(p.risk_score for p in predictions) / len(predictions) if predictions else 0.0

        return PropertyPrediction(
            property_id=prop.id,
            property_title=prop.title,
            property_address=prop.address,
            overall_risk_score=round_half_up(overall, 2),
            high_risk_count=sum(1 for p in predictions if p.is_high_risk),
            predictions=predictions,
            total_estimated_cost=sum(p.estimated_cost for p in predictions),
            generated_at=now,
        )

    def portfolio_summary(
        self,
        properties: Sequence[PropertySummary],
        months_ahead: int,
        *,
        now: datetime,
    ) -> PortfolioSummary:
        results: list[PropertyPrediction] = []
        high_risk_properties = 0
        total_costs = 0
        hvac_concerns = 0
        issue_counts: dict[MaintenanceCategory, int] = {}

        for prop in properties:
            pp = self.property_prediction(prop, months_ahead, now=now)
            results.append(pp)

            if pp.high_risk_count > 0:
                high_risk_properties += 1

            if any(
                p.category == MaintenanceCategory.HVAC and p.risk_score > HVAC_CONCERN_THRESHOLD
                for p in pp.predictions
            ):
                hvac_concerns += 1

            for p in pp.predictions:
                issue_counts[p.category] = issue_counts.get(p.category, 0) + 1
                total_costs += p.estimated_cost

        return PortfolioSummary(
            total_properties=len(properties),
            high_risk_properties=high_risk_properties,
            total_estimated_costs=total_costs,
            most_common_issue_type=most_common_issue(issue_counts),
            hvac_concern_count=hvac_concerns,
            properties=results,
            generated_at=now,
        )


def most_common_issue(counts: dict[MaintenanceCategory, int]) -> MaintenanceCategory | None:
    """Highest count wins; on a tie the category counted first is kept."""
    best: MaintenanceCategory | None = None
    best_count = 0
    for category, count in counts.items():
        if count > best_count:
            best, best_count = category, count
    return best
