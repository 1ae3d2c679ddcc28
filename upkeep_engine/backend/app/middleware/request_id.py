# backend/app/middleware/request_id.py
from __future__ import annotations

import re
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# caller-supplied ids end up in every log line, so only accept short opaque tokens
_VALID_ID = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return request_id_ctx.get()


def new_request_id(prefix: str = "") -> str:
    return f"{prefix}{uuid.uuid4().hex}"


def accept_request_id(raw: Optional[str]) -> str:
    rid = (raw or "").strip()
    return rid if _VALID_ID.match(rid) else new_request_id()


@contextmanager
def bind_request_id(rid: str) -> Iterator[str]:
    """Correlation id for work outside HTTP (the weekly alert job, CLI runs)."""
    token = request_id_ctx.set(rid)
    try:
        yield rid
    finally:
        request_id_ctx.reset(token)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Per-request correlation id: taken from X-Request-ID when it looks sane,
    generated otherwise. Echoed on the response and kept on request.state
    and in a ContextVar for the JSON log formatter.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid

        with bind_request_id(rid):
            resp = await call_next(request)
        resp.headers[REQUEST_ID_HEADER] = rid
        return resp
