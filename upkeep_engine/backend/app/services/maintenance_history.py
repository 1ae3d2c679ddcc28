# backend/app/services/maintenance_history.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import asc, desc, select
from sqlalchemy.orm import Session

from ..domain.maintenance.types import MaintenanceCategory, MaintenanceRecord
from ..models import MaintenanceRequest

CONFIRMED = "CONFIRMED"


def to_record(row: MaintenanceRequest) -> MaintenanceRecord:
    return MaintenanceRecord(
        category=MaintenanceCategory(row.category),
        created_at=row.created_at,
        completed_at=row.completed_at,
        actual_cost=float(row.actual_cost) if row.actual_cost is not None else None,
    )


class SqlHistorySource:
    """
    Maintenance history backed by the maintenance_requests table.

    Ordering is part of the contract: scoring reads newest first, history
    statistics read oldest first. id breaks created_at ties so results are stable.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def records_for_property(
        self,
        property_id: int,
        category: Optional[MaintenanceCategory] = None,
    ) -> list[MaintenanceRecord]:
        q = select(MaintenanceRequest).where(MaintenanceRequest.property_id == property_id)
        if category is not None:
            q = q.where(MaintenanceRequest.category == category.value)
        q = q.order_by(desc(MaintenanceRequest.created_at), desc(MaintenanceRequest.id))
        return [to_record(r) for r in self.db.scalars(q).all()]

    def confirmed_records(self, property_id: int) -> list[MaintenanceRecord]:
        q = (
            select(MaintenanceRequest)
            .where(MaintenanceRequest.property_id == property_id, MaintenanceRequest.status == CONFIRMED)
            .order_by(asc(MaintenanceRequest.created_at), asc(MaintenanceRequest.id))
        )
        return [to_record(r) for r in self.db.scalars(q).all()]
