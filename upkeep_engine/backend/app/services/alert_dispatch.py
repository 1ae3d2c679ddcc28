# backend/app/services/alert_dispatch.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..middleware.request_id import bind_request_id, get_request_id, new_request_id
from ..models import AppUser, Property
from .notifications import PREDICTIVE_MAINTENANCE_ALERT, create_notification
from .predictive_maintenance import get_alerts

log = logging.getLogger(__name__)

ALERT_TITLE = "Predictive Maintenance Alert"

# (db, user_id, title, message, data) -> None
Dispatch = Callable[[Session, int, str, str, dict[str, Any]], None]


def _store_notification(db: Session, user_id: int, title: str, message: str, data: dict[str, Any]) -> None:
    create_notification(
        db,
        user_id=user_id,
        notification_type=PREDICTIVE_MAINTENANCE_ALERT,
        title=title,
        message=message,
        data=data,
    )


def owners_with_properties(db: Session) -> list[int]:
    q = (
        select(AppUser.id)
        .where(select(Property.id).where(Property.owner_user_id == AppUser.id).exists())
        .order_by(AppUser.id.asc())
    )
    return [int(x) for x in db.scalars(q).all()]


def alert_message(critical: int, urgent: int) -> str:
    return (
        f"You have {critical} critical and {urgent} urgent maintenance predictions "
        "for your properties."
    )


def send_proactive_alerts(
    db: Session,
    *,
    now: Optional[datetime] = None,
    dispatch: Optional[Dispatch] = None,
) -> dict[str, Any]:
    """
    Weekly job body: one summary notification per owner with critical or
    urgent alerts.

    - owners are processed sequentially
    - a failure for one owner is logged and rolled back; the job moves on
    - nothing is retried (the next scheduled run recomputes from scratch)
    """
    # keep an outer correlation id if one is bound (HTTP request, CLI)
    if get_request_id():
        return _run(db, now=now, dispatch=dispatch)
    with bind_request_id(new_request_id("alerts-")):
        return _run(db, now=now, dispatch=dispatch)


def _run(db: Session, *, now: Optional[datetime], dispatch: Optional[Dispatch]) -> dict[str, Any]:
    dispatch = dispatch or _store_notification
    now = now or datetime.utcnow()

    log.info("starting predictive maintenance alert job", extra={"job": "predictive_alerts"})

    try:
        user_ids = owners_with_properties(db)
    except Exception:
        log.exception("failed to list owners for alert job", extra={"job": "predictive_alerts"})
        db.rollback()
        return {"ok": False, "processed": 0, "notified": 0, "failed": 0, "failed_user_ids": []}

    notified = 0
    failed: list[int] = []

    for user_id in user_ids:
        try:
            summary = get_alerts(db, user_id=user_id, now=now)
            if summary.critical_count + summary.urgent_count > 0:
                dispatch(
                    db,
                    user_id,
                    ALERT_TITLE,
                    alert_message(summary.critical_count, summary.urgent_count),
                    {
                        "critical_count": summary.critical_count,
                        "urgent_count": summary.urgent_count,
                        "total_alerts": summary.total_alerts,
                    },
                )
                db.commit()
                notified += 1
                log.info(
                    "sent maintenance alerts",
                    extra={
                        "job": "predictive_alerts",
                        "user_id": user_id,
                        "critical_count": summary.critical_count,
                        "urgent_count": summary.urgent_count,
                    },
                )
        except Exception:
            db.rollback()
            failed.append(user_id)
            log.exception(
                "failed to process alerts for owner",
                extra={"job": "predictive_alerts", "user_id": user_id},
            )

    log.info(
        "completed predictive maintenance alert job",
        extra={"job": "predictive_alerts", "processed": len(user_ids), "notified": notified, "failed": len(failed)},
    )
    return {"ok": True, "processed": len(user_ids), "notified": notified, "failed": len(failed), "failed_user_ids": failed}
