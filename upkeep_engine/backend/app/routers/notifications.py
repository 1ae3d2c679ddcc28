# backend/app/routers/notifications.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..schemas import NotificationOut
from ..services.notifications import list_notifications, mark_read

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationOut])
def list_mine(
    unread_only: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    rows = list_notifications(db, user_id=p.user_id, unread_only=unread_only, limit=limit)
    return [NotificationOut.model_validate(r) for r in rows]


@router.post("/{notification_id}/read", response_model=NotificationOut)
def read_one(notification_id: int, db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    row = mark_read(db, user_id=p.user_id, notification_id=notification_id)
    db.commit()
    db.refresh(row)
    return NotificationOut.model_validate(row)
