# backend/tests/test_predictive_api.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from app.auth import issue_token
from app.db import SessionLocal
from app.models import AppUser, MaintenanceRequest, Property
from app.services.alert_dispatch import send_proactive_alerts


def _mk_user(email: str) -> int:
    db = SessionLocal()
    try:
        u = AppUser(email=email, display_name="Owner")
        db.add(u)
        db.commit()
        db.refresh(u)
        return int(u.id)
    finally:
        db.close()


def _mk_property(owner_id: int, address: str, year_built: Optional[int]) -> int:
    db = SessionLocal()
    try:
        p = Property(owner_user_id=owner_id, title=f"Home at {address}", address=address, year_built=year_built)
        db.add(p)
        db.commit()
        db.refresh(p)
        return int(p.id)
    finally:
        db.close()


def _mk_request(
    property_id: int, category: str, days_ago: int, cost: float, *, now: datetime, status: str = "CONFIRMED"
) -> None:
    db = SessionLocal()
    try:
        created = now - timedelta(days=days_ago)
        db.add(
            MaintenanceRequest(
                property_id=property_id,
                category=category,
                status=status,
                title=f"{category} repair",
                created_at=created,
                completed_at=created + timedelta(days=1),
                actual_cost=cost,
            )
        )
        db.commit()
    finally:
        db.close()


def _headers(user_id: int) -> dict[str, str]:
    return {"X-User-Id": str(user_id)}


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert r.headers.get("X-Request-ID")


def test_request_id_is_echoed_only_when_sane(client):
    ok = client.get("/api/health", headers={"X-Request-ID": "trace-42"})
    assert ok.headers["X-Request-ID"] == "trace-42"

    junk = client.get("/api/health", headers={"X-Request-ID": "x" * 500})
    assert junk.headers["X-Request-ID"] != "x" * 500
    assert len(junk.headers["X-Request-ID"]) == 32


def test_requests_without_identity_are_rejected(client):
    assert client.get("/api/maintenance/alerts").status_code == 401
    assert client.get("/api/maintenance/alerts", headers={"X-User-Id": "999999"}).status_code == 401


def test_property_predictions_for_old_building(client):
    uid = _mk_user("owner@demo.local")
    pid = _mk_property(uid, "12 Maple St", 1970)

    r = client.get(f"/api/maintenance/predictions/properties/{pid}", headers=_headers(uid))
    assert r.status_code == 200
    body = r.json()

    assert body["property_id"] == pid
    assert body["property_address"] == "12 Maple St"
    assert len(body["predictions"]) == 9
    assert body["high_risk_count"] == 9
    assert body["overall_risk_score"] == 1.0
    assert body["total_estimated_cost"] == 7500
    assert all(p["risk_category"] == "CRITICAL" for p in body["predictions"])


def test_months_ahead_is_validated(client):
    uid = _mk_user("owner@demo.local")
    pid = _mk_property(uid, "12 Maple St", 1970)

    r = client.get(f"/api/maintenance/predictions/properties/{pid}?months_ahead=0", headers=_headers(uid))
    assert r.status_code == 422


def test_foreign_and_missing_properties_look_the_same(client):
    owner = _mk_user("owner@demo.local")
    other = _mk_user("other@demo.local")
    pid = _mk_property(owner, "12 Maple St", 1970)

    for path in (
        f"/api/maintenance/predictions/properties/{pid}",
        f"/api/maintenance/history/{pid}",
        f"/api/maintenance/hvac/{pid}",
    ):
        foreign = client.get(path, headers=_headers(other))
        assert foreign.status_code == 404
        assert foreign.json()["detail"] == "property not found"

    missing = client.get("/api/maintenance/predictions/properties/987654", headers=_headers(owner))
    assert missing.status_code == 404


def test_empty_portfolio(client):
    uid = _mk_user("empty@demo.local")

    r = client.get("/api/maintenance/predictions/portfolio", headers=_headers(uid))
    assert r.status_code == 200
    body = r.json()
    assert body["total_properties"] == 0
    assert body["high_risk_properties"] == 0
    assert body["total_estimated_costs"] == 0
    assert body["most_common_issue_type"] is None
    assert body["hvac_concern_count"] == 0
    assert body["properties"] == []


def test_portfolio_only_includes_owned_properties(client):
    owner = _mk_user("owner@demo.local")
    other = _mk_user("other@demo.local")
    _mk_property(owner, "12 Maple St", 1970)
    _mk_property(other, "99 Elsewhere Ave", 1970)

    r = client.get("/api/maintenance/predictions/portfolio", headers=_headers(owner))
    body = r.json()
    assert body["total_properties"] == 1
    assert body["high_risk_properties"] == 1
    assert body["hvac_concern_count"] == 1
    assert body["total_estimated_costs"] == 7500


def test_alerts_endpoint(client):
    uid = _mk_user("owner@demo.local")
    _mk_property(uid, "12 Maple St", 1970)

    r = client.get("/api/maintenance/alerts", headers=_headers(uid))
    assert r.status_code == 200
    body = r.json()
    assert body["total_alerts"] == 9
    assert body["critical_count"] == 9
    assert body["urgent_count"] == 0
    assert {a["severity"] for a in body["alerts"]} == {"CRITICAL"}
    assert all(a["dismissed"] is False for a in body["alerts"])


def test_history_endpoint_counts_confirmed_work_only(client):
    uid = _mk_user("owner@demo.local")
    pid = _mk_property(uid, "12 Maple St", 1990)
    now = datetime.utcnow()
    _mk_request(pid, "PLUMBING", 400, 250.0, now=now)
    _mk_request(pid, "PLUMBING", 220, 300.0, now=now)
    _mk_request(pid, "HVAC", 30, 999.0, now=now, status="SUBMITTED")

    r = client.get(f"/api/maintenance/history/{pid}", headers=_headers(uid))
    assert r.status_code == 200
    body = r.json()
    assert body["total_requests"] == 2
    assert body["total_spent"] == 550.0
    assert [c["category"] for c in body["by_category"]] == ["PLUMBING"]
    assert body["by_category"][0]["avg_days_between"] == 180


def test_hvac_endpoint(client):
    uid = _mk_user("owner@demo.local")
    pid = _mk_property(uid, "12 Maple St", 1970)
    _mk_request(pid, "HVAC", 400, 480.0, now=datetime.utcnow())

    r = client.get(f"/api/maintenance/hvac/{pid}", headers=_headers(uid))
    assert r.status_code == 200
    body = r.json()
    assert body["estimated_hvac_age"] == 25
    assert body["historical_hvac_issues"] == 1
    assert body["estimated_replacement_cost"] == 7000
    assert body["health_status"] in ("POOR", "CRITICAL")


def test_bearer_token_auth(client):
    uid = _mk_user("owner@demo.local")
    pid = _mk_property(uid, "12 Maple St", 1970)

    r = client.get(
        f"/api/maintenance/predictions/properties/{pid}",
        headers={"Authorization": f"Bearer {issue_token(uid)}"},
    )
    assert r.status_code == 200

    bad = client.get("/api/maintenance/alerts", headers={"Authorization": "Bearer not.a.token"})
    assert bad.status_code == 401


def test_alert_job_feeds_notification_feed(client, db):
    uid = _mk_user("owner@demo.local")
    _mk_property(uid, "12 Maple St", 1970)

    send_proactive_alerts(db)

    r = client.get("/api/notifications", headers=_headers(uid))
    assert r.status_code == 200
    items = r.json()
    assert len(items) == 1
    assert items[0]["title"] == "Predictive Maintenance Alert"
    assert items[0]["data"]["critical_count"] == 9
    assert items[0]["is_read"] is False

    nid = items[0]["id"]
    read = client.post(f"/api/notifications/{nid}/read", headers=_headers(uid))
    assert read.status_code == 200
    assert read.json()["is_read"] is True

    unread = client.get("/api/notifications?unread_only=true", headers=_headers(uid))
    assert unread.json() == []
