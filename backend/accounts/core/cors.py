"""Cross-origin policy for the ``/api`` routes."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from accounts.core.logger import REQUEST_ID_HEADER


def _allowed_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in (raw or "").split(",") if origin.strip()]


def init_app(app: Flask) -> None:
    """
    Attach Flask-Cors to ``/api/*``.

    Browsers only send the ``accessToken`` / ``refreshToken`` cookies on
    credentialed requests, and credentials cannot be combined with a
    wildcard origin. A blank or ``"*"`` ``CORS_ORIGINS`` therefore serves
    bearer-header clients only; cookie sessions need an explicit list.
    """
    origins = _allowed_origins(app.config.get("CORS_ORIGINS", ""))
    credentialed = bool(origins) and origins != ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": origins if credentialed else "*"}},
        supports_credentials=credentialed,
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
