# backend/app/auth.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt  # PyJWT
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .models import AppUser


@dataclass(frozen=True)
class Principal:
    user_id: int
    email: str


# -------------------------
# JWT helpers
# -------------------------
def jwt_sign(payload: dict[str, Any]) -> str:
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


def jwt_verify(token: str) -> dict[str, Any]:
    try:
        return dict(jwt.decode(token, settings.jwt_secret, algorithms=["HS256"]))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def issue_token(user_id: int, *, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    exp = now + timedelta(minutes=int(settings.jwt_exp_minutes))
    return jwt_sign({"sub": str(int(user_id)), "iat": int(now.timestamp()), "exp": int(exp.timestamp())})


# -------------------------
# get_principal
# -------------------------
def _principal_for_user_id(db: Session, raw_user_id: str) -> Principal:
    try:
        user_id = int(raw_user_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid user id")

    user = db.scalar(select(AppUser).where(AppUser.id == user_id))
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return Principal(user_id=int(user.id), email=str(user.email))


def get_principal(
    request: Request,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Principal:
    """
    Auth modes supported (in priority order):
      1) JWT cookie OR Authorization: Bearer <token>  (sub = user id)
      2) dev header X-User-Id (ONLY if settings.auth_mode == "dev")
    """
    token = request.cookies.get(settings.jwt_cookie_name) if settings.jwt_cookie_name else None
    if not token and authorization and str(authorization).lower().startswith("bearer "):
        token = str(authorization).split(" ", 1)[1].strip()

    if token:
        claims = jwt_verify(token)
        sub = str(claims.get("sub") or "")
        if not sub:
            raise HTTPException(status_code=401, detail="Token missing sub")
        return _principal_for_user_id(db, sub)

    if (settings.auth_mode or "").strip().lower() == "dev":
        raw = (request.headers.get(settings.dev_header_user_id) or "").strip()
        if not raw:
            raise HTTPException(status_code=401, detail=f"Missing {settings.dev_header_user_id} for dev auth")
        return _principal_for_user_id(db, raw)

    raise HTTPException(status_code=401, detail="Not authenticated")
