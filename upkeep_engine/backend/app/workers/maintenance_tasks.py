# backend/app/workers/maintenance_tasks.py
from __future__ import annotations

from ..db import session_scope
from ..services.alert_dispatch import send_proactive_alerts
from .celery_app import celery_app


@celery_app.task(name="app.workers.maintenance_tasks.send_predictive_maintenance_alerts")
def send_predictive_maintenance_alerts() -> dict:
    """
    Weekly predictive maintenance sweep (celery-beat).

    No Celery retries: per-owner failures are already isolated and logged,
    and the next scheduled run recomputes everything.
    """
    with session_scope() as db:
        return send_proactive_alerts(db)
