"""
Request correlation.

Every request gets an ID (taken from `X-Request-ID` when the client sends a
usable one) that is echoed in the response and attached to each log record
emitted while the request is served.
"""

import logging
import re
import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

HEADER_NAME = "X-Request-ID"

# Client-supplied IDs end up in logs; accept only short token-like values
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """ID of the request being served, or "" outside a request."""
    return request_id_var.get()


def resolve_request_id(incoming: str | None) -> str:
    """Reuse the client's ID when it is well formed, otherwise mint one."""
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return uuid.uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind a request ID for the duration of the request and echo it back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(HEADER_NAME))
        token = request_id_var.set(request_id)
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[HEADER_NAME] = request_id
        return response


class CorrelationIdFilter(logging.Filter):
    """Copy the current request ID onto log records ("-" outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True
