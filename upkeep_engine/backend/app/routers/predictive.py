# backend/app/routers/predictive.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..schemas import (
    AlertsOut,
    HvacPredictionOut,
    MaintenanceHistoryOut,
    PortfolioSummaryOut,
    PropertyPredictionOut,
)
from ..services import predictive_maintenance as svc

router = APIRouter(prefix="/maintenance", tags=["predictive-maintenance"])


@router.get("/history/{property_id}", response_model=MaintenanceHistoryOut)
def property_history(property_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    out = svc.get_property_history(db, user_id=p.user_id, property_id=property_id)
    return MaintenanceHistoryOut.model_validate(out)


@router.get("/predictions/properties/{property_id}", response_model=PropertyPredictionOut)
def property_predictions(
    property_id: int,
    months_ahead: Optional[int] = Query(default=None, ge=1, le=60),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    out = svc.get_property_predictions(db, user_id=p.user_id, property_id=property_id, months_ahead=months_ahead)
    return PropertyPredictionOut.model_validate(out)


@router.get("/predictions/portfolio", response_model=PortfolioSummaryOut)
def portfolio_predictions(
    months_ahead: Optional[int] = Query(default=None, ge=1, le=60),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    """
    Predictions for every property the caller owns.
    An empty portfolio returns a zeroed summary, never an error.
    """
    out = svc.get_portfolio_predictions(db, user_id=p.user_id, months_ahead=months_ahead)
    return PortfolioSummaryOut.model_validate(out)


@router.get("/alerts", response_model=AlertsOut)
def alerts(db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    out = svc.get_alerts(db, user_id=p.user_id)
    return AlertsOut.model_validate(out)


@router.get("/hvac/{property_id}", response_model=HvacPredictionOut)
def hvac_prediction(property_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    out = svc.get_hvac_prediction(db, user_id=p.user_id, property_id=property_id)
    return HvacPredictionOut.model_validate(out)
