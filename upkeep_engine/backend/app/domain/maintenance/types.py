# backend/app/domain/maintenance/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class MaintenanceCategory(str, Enum):
    # Declaration order is the evaluation order everywhere (predictions, tie-breaks).
    PLUMBING = "PLUMBING"
    ELECTRICAL = "ELECTRICAL"
    HVAC = "HVAC"
    APPLIANCE = "APPLIANCE"
    STRUCTURAL = "STRUCTURAL"
    PEST_CONTROL = "PEST_CONTROL"
    CLEANING = "CLEANING"
    LANDSCAPING = "LANDSCAPING"
    OTHER = "OTHER"


class RiskLabel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class AlertSeverity(str, Enum):
    CRITICAL = "CRITICAL"
    URGENT = "URGENT"
    WARNING = "WARNING"
    INFO = "INFO"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]


SEVERITY_RANK = {
    AlertSeverity.CRITICAL: 0,
    AlertSeverity.URGENT: 1,
    AlertSeverity.WARNING: 2,
    AlertSeverity.INFO: 3,
}

HIGH_RISK_LABELS = frozenset({RiskLabel.HIGH, RiskLabel.CRITICAL})


@dataclass(frozen=True)
class MaintenanceRecord:
    category: MaintenanceCategory
    created_at: datetime
    completed_at: Optional[datetime] = None
    actual_cost: Optional[float] = None


@dataclass(frozen=True)
class PropertySummary:
    id: int
    title: str
    address: str
    year_built: Optional[int]
    owner_id: int


@dataclass(frozen=True)
class CategoryPrediction:
    category: MaintenanceCategory
    risk_score: float
    risk_category: RiskLabel
    estimated_days_until_issue: int
    predicted_timeframe: str
    estimated_cost: int
    risk_factors: list[str]
    recommendation: str
    confidence: float

    @property
    def is_high_risk(self) -> bool:
        return self.risk_category in HIGH_RISK_LABELS


@dataclass(frozen=True)
class PropertyPrediction:
    property_id: int
    property_title: str
    property_address: str
    overall_risk_score: float
    high_risk_count: int
    predictions: list[CategoryPrediction]
    total_estimated_cost: int
    generated_at: datetime


@dataclass(frozen=True)
class PortfolioSummary:
    total_properties: int
    high_risk_properties: int
    total_estimated_costs: int
    most_common_issue_type: Optional[MaintenanceCategory]
    hvac_concern_count: int
    properties: list[PropertyPrediction] = field(default_factory=list)
    generated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Alert:
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


@dataclass(frozen=True)
class AlertsSummary:
    alerts: list[Alert]
    total_alerts: int
    critical_count: int
    urgent_count: int
