# backend/app/schemas.py
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .domain.maintenance.types import AlertSeverity, MaintenanceCategory, RiskLabel


# -------------------- Predictions --------------------

class CategoryPredictionOut(BaseModel):
    category: MaintenanceCategory
    risk_score: float = Field(ge=0.0, le=1.0)
    risk_category: RiskLabel
    estimated_days_until_issue: int
    predicted_timeframe: str
    estimated_cost: int
    risk_factors: List[str] = Field(default_factory=list)
    recommendation: str
    confidence: float = Field(ge=0.5, le=0.95)

    model_config = ConfigDict(from_attributes=True)


class PropertyPredictionOut(BaseModel):
    property_id: int
    property_title: str
    property_address: str
    overall_risk_score: float
    high_risk_count: int
    predictions: List[CategoryPredictionOut] = Field(default_factory=list)
    total_estimated_cost: int
    generated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PortfolioSummaryOut(BaseModel):
    total_properties: int
    high_risk_properties: int
    total_estimated_costs: int
    most_common_issue_type: Optional[MaintenanceCategory] = None
    hvac_concern_count: int
    properties: List[PropertyPredictionOut] = Field(default_factory=list)
    generated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# -------------------- Alerts --------------------

class AlertOut(BaseModel):
    id: str
    property_id: int
    property_title: str
    severity: AlertSeverity
    category: MaintenanceCategory
    title: str
    message: str
    recommended_action: str
    estimated_cost_if_ignored: int
    days_until_action_needed: int
    created_at: datetime
    dismissed: bool = False

    model_config = ConfigDict(from_attributes=True)


class AlertsOut(BaseModel):
    alerts: List[AlertOut] = Field(default_factory=list)
    total_alerts: int
    critical_count: int
    urgent_count: int

    model_config = ConfigDict(from_attributes=True)


# -------------------- History / HVAC --------------------

class CategoryHistoryOut(BaseModel):
    category: MaintenanceCategory
    count: int
    avg_resolution_days: float
    total_cost: float
    avg_cost: float
    last_occurrence: Optional[datetime] = None
    avg_days_between: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class MaintenanceHistoryOut(BaseModel):
    property_id: int
    property_title: str
    year_built: Optional[int] = None
    property_age: Optional[int] = None
    total_requests: int
    total_spent: float
    avg_annual_cost: float
    by_category: List[CategoryHistoryOut] = Field(default_factory=list)
    analysis_start_date: datetime
    analysis_end_date: datetime

    model_config = ConfigDict(from_attributes=True)


class HvacPredictionOut(BaseModel):
    property_id: int
    property_title: str
    estimated_hvac_age: int
    typical_lifespan: int
    lifespan_percentage: int
    last_maintenance_date: Optional[datetime] = None
    days_since_last_service: Optional[int] = None
    historical_hvac_issues: int
    failure_risk: float
    health_status: str
    seasonal_risk: str
    recommendations: List[str] = Field(default_factory=list)
    estimated_replacement_cost: int
    estimated_annual_maintenance_cost: int

    model_config = ConfigDict(from_attributes=True)


# -------------------- Notifications --------------------

class NotificationOut(BaseModel):
    id: int
    notification_type: str
    title: str
    message: str
    data: Optional[dict[str, Any]] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="before")
    @classmethod
    def _parse_data_json(cls, v: Any) -> Any:
        # ORM rows carry data_json (text); expose it as a dict
        raw = getattr(v, "data_json", None)
        if raw is None or isinstance(v, dict):
            return v
        return {
            "id": v.id,
            "notification_type": v.notification_type,
            "title": v.title,
            "message": v.message,
            "data": json.loads(raw),
            "is_read": v.is_read,
            "read_at": v.read_at,
            "created_at": v.created_at,
        }
