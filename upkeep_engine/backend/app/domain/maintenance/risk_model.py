# backend/app/domain/maintenance/risk_model.py
from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .types import MaintenanceCategory as C


@dataclass(frozen=True)
class RiskMultiplierTier:
    max_age: float
    multiplier: float


@dataclass(frozen=True)
class RiskModel:
    """
    Static scoring tables.

    Mappings are read-only views and tiers a tuple, so one instance can be
    shared by every caller for the life of the process.
    """

    expected_interval_days: Mapping[C, int]
    average_repair_cost: Mapping[C, int]
    age_risk_multipliers: tuple[RiskMultiplierTier, ...]
    category_labels: Mapping[C, str]

    def interval_for(self, category: C) -> int:
        return self.expected_interval_days[category]

    def repair_cost_for(self, category: C) -> int:
        return self.average_repair_cost[category]

    def label_for(self, category: C) -> str:
        return self.category_labels[category]

    def age_multiplier(self, age: int) -> float:
        for tier in self.age_risk_multipliers:
            if age <= tier.max_age:
                return tier.multiplier
        return self.age_risk_multipliers[-1].multiplier


def build_default_risk_model() -> RiskModel:
    return RiskModel(
        expected_interval_days=MappingProxyType(
            {
                C.HVAC: 180,  # every 6 months
                C.PLUMBING: 365,
                C.ELECTRICAL: 365,
                C.APPLIANCE: 365,
                C.STRUCTURAL: 730,  # every 2 years
                C.PEST_CONTROL: 180,
                C.CLEANING: 90,  # quarterly
                C.LANDSCAPING: 30,  # monthly
                C.OTHER: 365,
            }
        ),
        average_repair_cost=MappingProxyType(
            {
                C.HVAC: 500,
                C.PLUMBING: 300,
                C.ELECTRICAL: 400,
                C.APPLIANCE: 350,
                C.STRUCTURAL: 1500,
                C.PEST_CONTROL: 200,
                C.CLEANING: 150,
                C.LANDSCAPING: 100,
                C.OTHER: 250,
            }
        ),
        age_risk_multipliers=(
            RiskMultiplierTier(max_age=5, multiplier=0.5),
            RiskMultiplierTier(max_age=10, multiplier=0.75),
            RiskMultiplierTier(max_age=20, multiplier=1.0),
            RiskMultiplierTier(max_age=30, multiplier=1.3),
            RiskMultiplierTier(max_age=50, multiplier=1.6),
            RiskMultiplierTier(max_age=math.inf, multiplier=2.0),
        ),
        category_labels=MappingProxyType(
            {
                C.PLUMBING: "plumbing system",
                C.ELECTRICAL: "electrical system",
                C.HVAC: "HVAC system",
                C.APPLIANCE: "appliances",
                C.STRUCTURAL: "structural elements",
                C.PEST_CONTROL: "pest control",
                C.CLEANING: "deep cleaning",
                C.LANDSCAPING: "landscaping",
                C.OTHER: "general maintenance",
            }
        ),
    )


DEFAULT_RISK_MODEL = build_default_risk_model()
