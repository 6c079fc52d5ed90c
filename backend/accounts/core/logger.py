"""
JSON logging for the accounts API.

Every record leaving the root handler is a single JSON line carrying the
request correlation id and, on authenticated routes, the verified identity
id. Anything shaped like a compact JWT is masked before it is rendered so a
careless ``log.info("...%s", token)`` never writes a credential to stdout.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# ``extra={...}`` keys promoted into the JSON payload
EXTRA_KEYS = ("endpoint", "elapsed_ms", "reason")

REDACTED = "[redacted-token]"
_JWT_SHAPE = re.compile(r"eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+")


def redact_tokens(text: str) -> str:
    """Mask every compact-JWT-shaped substring of ``text``."""
    return _JWT_SHAPE.sub(REDACTED, text)


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        identity_id = getattr(record, "identity_id", None)
        if identity_id is not None:
            payload["identity_id"] = identity_id
        for key in EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = redact_tokens(self.formatException(record.exc_info))
        return json.dumps(payload, default=str)


class RequestContextFilter(logging.Filter):
    """Stamp records with the request id and the authenticated identity."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not has_request_context():
            record.request_id = None
            return True
        record.request_id = ensure_request_id()
        if getattr(record, "identity_id", None) is None:
            record.identity_id = g.get("identity_id")
        return True


class TokenRedactionFilter(logging.Filter):
    """Rewrite the rendered message when it contains a bearer credential."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact_tokens(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def ensure_request_id() -> str:
    """Return the request's correlation id, adopting an inbound header or minting one."""

    if not has_request_context():
        return str(uuid4())
    request_id = g.get("request_id")
    if request_id is None:
        inbound = (request.headers.get(name) for name in CORRELATION_HEADERS)
        request_id = next((value for value in inbound if value), None) or str(uuid4())
        g.request_id = request_id
    return request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Replace the root handlers with a single JSON stdout handler."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(TokenRedactionFilter())
    handler.addFilter(RequestContextFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root.setLevel(level)


def init_app(app: Flask) -> None:
    """Seed per-request correlation state and echo the id back to clients."""

    app.logger.addFilter(RequestContextFilter())

    @app.before_request
    def _reset_request_state() -> None:
        # g outlives the request when an app context was already pushed
        g.pop("request_id", None)
        g.pop("identity_id", None)
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = [
    "configure_logging",
    "ensure_request_id",
    "init_app",
    "redact_tokens",
    "JSONFormatter",
    "RequestContextFilter",
    "TokenRedactionFilter",
]
