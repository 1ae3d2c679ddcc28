# backend/app/services/ownership.py
from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..domain.maintenance.types import PropertySummary
from ..models import Property


def must_get_owned_property(db: Session, *, user_id: int, property_id: int) -> Property:
    """
    404 for both a missing property and someone else's property, so
    non-owners cannot probe which ids exist.
    """
    row = db.scalar(select(Property).where(Property.id == property_id))
    if row is None or int(row.owner_user_id) != int(user_id):
        raise HTTPException(status_code=404, detail="property not found")
    return row


def list_owned_properties(db: Session, *, user_id: int) -> list[Property]:
    return list(
        db.scalars(select(Property).where(Property.owner_user_id == user_id).order_by(Property.id.asc())).all()
    )


def to_summary(row: Property) -> PropertySummary:
    return PropertySummary(
        id=int(row.id),
        title=str(row.title),
        address=str(row.address),
        year_built=int(row.year_built) if row.year_built is not None else None,
        owner_id=int(row.owner_user_id),
    )
