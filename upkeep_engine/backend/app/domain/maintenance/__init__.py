# backend/app/domain/maintenance/__init__.py
from .alerts import AlertProjector
from .history import MaintenanceHistory, summarize_history
from .hvac import HvacPrediction, assess_hvac
from .portfolio import HistorySource, PortfolioAggregator
from .prediction import PredictionEngine, risk_label
from .risk_model import DEFAULT_RISK_MODEL, RiskModel, RiskMultiplierTier, build_default_risk_model
from .types import (
    Alert,
    AlertSeverity,
    AlertsSummary,
    CategoryPrediction,
    MaintenanceCategory,
    MaintenanceRecord,
    PortfolioSummary,
    PropertyPrediction,
    PropertySummary,
    RiskLabel,
)

__all__ = [
    "Alert",
    "AlertProjector",
    "AlertSeverity",
    "AlertsSummary",
    "CategoryPrediction",
    "DEFAULT_RISK_MODEL",
    "HistorySource",
    "HvacPrediction",
    "MaintenanceCategory",
    "MaintenanceHistory",
    "MaintenanceRecord",
    "PortfolioAggregator",
    "PortfolioSummary",
    "PredictionEngine",
    "PropertyPrediction",
    "PropertySummary",
    "RiskLabel",
    "RiskModel",
    "RiskMultiplierTier",
    "assess_hvac",
    "build_default_risk_model",
    "risk_label",
    "summarize_history",
]
