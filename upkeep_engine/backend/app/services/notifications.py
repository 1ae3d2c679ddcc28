# backend/app/services/notifications.py
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..models import Notification

PREDICTIVE_MAINTENANCE_ALERT = "PREDICTIVE_MAINTENANCE_ALERT"


def create_notification(
    db: Session,
    *,
    user_id: int,
    notification_type: str,
    title: str,
    message: str,
    data: Optional[dict[str, Any]] = None,
) -> Notification:
    """
    NOTE: flush-only, no commit. Callers decide when to commit.
    """
    row = Notification(
        user_id=int(user_id),
        notification_type=str(notification_type),
        title=title,
        message=message,
        data_json=json.dumps(data, ensure_ascii=False, default=str) if data is not None else None,
        is_read=False,
        created_at=datetime.utcnow(),
    )
    db.add(row)
    db.flush()
    return row


def list_notifications(db: Session, *, user_id: int, unread_only: bool = False, limit: int = 50) -> list[Notification]:
    q = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        q = q.where(Notification.is_read.is_(False))
    q = q.order_by(desc(Notification.created_at), desc(Notification.id)).limit(limit)
    return list(db.scalars(q).all())


def mark_read(db: Session, *, user_id: int, notification_id: int) -> Notification:
    row = db.scalar(
        select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
    )
    if row is None:
        raise HTTPException(status_code=404, detail="notification not found")
    if not row.is_read:
        row.is_read = True
        row.read_at = datetime.utcnow()
        db.add(row)
        db.flush()
    return row
