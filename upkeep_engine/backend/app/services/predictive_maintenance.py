# backend/app/services/predictive_maintenance.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ..config import settings
from ..domain.maintenance.alerts import AlertProjector
from ..domain.maintenance.history import MaintenanceHistory, summarize_history
from ..domain.maintenance.hvac import HvacPrediction, assess_hvac
from ..domain.maintenance.numbers import property_age
from ..domain.maintenance.portfolio import PortfolioAggregator
from ..domain.maintenance.prediction import PredictionEngine
from ..domain.maintenance.risk_model import DEFAULT_RISK_MODEL, RiskModel
from ..domain.maintenance.types import AlertsSummary, MaintenanceCategory, PortfolioSummary, PropertyPrediction
from .maintenance_history import SqlHistorySource
from .ownership import list_owned_properties, must_get_owned_property, to_summary

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.utcnow()


def build_aggregator(db: Session, *, risk_model: RiskModel = DEFAULT_RISK_MODEL) -> PortfolioAggregator:
    return PortfolioAggregator(
        PredictionEngine(risk_model),
        SqlHistorySource(db),
        default_property_age=int(settings.default_property_age),
    )


def get_property_predictions(
    db: Session,
    *,
    user_id: int,
    property_id: int,
    months_ahead: Optional[int] = None,
    now: Optional[datetime] = None,
) -> PropertyPrediction:
    now = now or _utcnow()
    months = int(months_ahead or settings.property_predictions_months_ahead)

    prop = to_summary(must_get_owned_property(db, user_id=user_id, property_id=property_id))
    result = build_aggregator(db).property_prediction(prop, months, now=now)

    log.info(
        "property predictions computed",
        extra={"user_id": user_id, "property_id": property_id},
    )
    return result


def get_portfolio_predictions(
    db: Session,
    *,
    user_id: int,
    months_ahead: Optional[int] = None,
    now: Optional[datetime] = None,
) -> PortfolioSummary:
    now = now or _utcnow()
    months = int(months_ahead or settings.portfolio_predictions_months_ahead)

    props = [to_summary(r) for r in list_owned_properties(db, user_id=user_id)]
    return build_aggregator(db).portfolio_summary(props, months, now=now)


def get_alerts(db: Session, *, user_id: int, now: Optional[datetime] = None) -> AlertsSummary:
    now = now or _utcnow()

    props = [to_summary(r) for r in list_owned_properties(db, user_id=user_id)]
    projector = AlertProjector(build_aggregator(db), months_ahead=int(settings.alerts_months_ahead))
    return projector.project(props, now=now)


def get_property_history(
    db: Session,
    *,
    user_id: int,
    property_id: int,
    now: Optional[datetime] = None,
) -> MaintenanceHistory:
    now = now or _utcnow()

    prop = to_summary(must_get_owned_property(db, user_id=user_id, property_id=property_id))
    records = SqlHistorySource(db).confirmed_records(prop.id)
    return summarize_history(prop, records, now=now)


def get_hvac_prediction(
    db: Session,
    *,
    user_id: int,
    property_id: int,
    now: Optional[datetime] = None,
) -> HvacPrediction:
    now = now or _utcnow()

    prop = to_summary(must_get_owned_property(db, user_id=user_id, property_id=property_id))
    age = property_age(prop.year_built, now=now, default_age=int(settings.default_property_age))
    hvac_history = SqlHistorySource(db).records_for_property(prop.id, category=MaintenanceCategory.HVAC)
    return assess_hvac(prop, hvac_history, age, now=now)
