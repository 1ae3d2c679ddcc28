# backend/app/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.db import Base, engine, session_scope
from app.models import AppUser, MaintenanceRequest, Property


@dataclass(frozen=True)
class SeedResult:
    user_id: int
    user_email: str
    property_ids: list[int]


# (title, address, year_built)
DEMO_PROPERTIES: list[tuple[str, str, Optional[int]]] = [
    ("Maple Street Duplex", "12 Maple St", 1970),
    ("Riverside Condo", "400 River Rd #3B", 2020),
    ("Hillside Cottage", "7 Hillside Ln", None),
]

# (property index, category, status, days ago, completed after days, actual cost)
DEMO_HISTORY: list[tuple[int, str, str, int, Optional[int], Optional[float]]] = [
    (0, "PLUMBING", "CONFIRMED", 400, 2, 250.0),
    (0, "PLUMBING", "CONFIRMED", 220, 3, 300.0),
    (0, "HVAC", "CONFIRMED", 300, 1, 480.0),
    (0, "ELECTRICAL", "COMPLETED", 90, 2, 150.0),
    (1, "APPLIANCE", "CONFIRMED", 60, 1, 120.0),
    (2, "PEST_CONTROL", "CONFIRMED", 200, 1, 180.0),
]


def _get_or_create_user(db: Session, email: str, display_name: str) -> AppUser:
    row = db.query(AppUser).filter(AppUser.email == email).one_or_none()
    if row:
        return row
    row = AppUser(email=email, display_name=display_name)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _get_or_create_property(db: Session, owner_id: int, title: str, address: str, year_built: Optional[int]) -> Property:
    row = (
        db.query(Property)
        .filter(Property.owner_user_id == owner_id, Property.address == address)
        .one_or_none()
    )
    if row:
        return row
    row = Property(owner_user_id=owner_id, title=title, address=address, year_built=year_built)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def seed_demo(*, user_email: str, user_name: str, with_history: bool = True) -> SeedResult:
    Base.metadata.create_all(bind=engine)

    with session_scope() as db:
        user = _get_or_create_user(db, user_email, user_name)
        props = [_get_or_create_property(db, int(user.id), t, a, y) for (t, a, y) in DEMO_PROPERTIES]

        has_history = db.query(MaintenanceRequest).filter(
            MaintenanceRequest.property_id.in_([p.id for p in props])
        ).first()

        if with_history and has_history is None:
            now = datetime.utcnow()
            for idx, category, status, days_ago, completed_after, cost in DEMO_HISTORY:
                created = now - timedelta(days=days_ago)
                db.add(
                    MaintenanceRequest(
                        property_id=int(props[idx].id),
                        category=category,
                        status=status,
                        title=f"{category.replace('_', ' ').title()} service",
                        created_at=created,
                        completed_at=created + timedelta(days=completed_after) if completed_after else None,
                        actual_cost=cost,
                    )
                )
            db.commit()

        return SeedResult(user_id=int(user.id), user_email=str(user.email), property_ids=[int(p.id) for p in props])
