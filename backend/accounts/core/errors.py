"""
Problem Details (RFC 7807) rendering for every error the API can raise.

Each handler builds a ``problem`` dict, logs it once (warning below 500,
error with traceback from 500 up) and answers with
``application/problem+json``. 401 answers also carry
``WWW-Authenticate: Bearer`` so clients know to log in or refresh.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from accounts.core.logger import ensure_request_id

log = logging.getLogger(__name__)

# Exceptions whose details must stay server-side: (status, code, client message)
_OPAQUE_ERRORS: tuple[tuple[type[Exception], HTTPStatus, str, str], ...] = (
    (IntegrityError, HTTPStatus.CONFLICT, "conflict", "Resource conflict"),
    (
        OperationalError,
        HTTPStatus.SERVICE_UNAVAILABLE,
        "service_unavailable",
        "Service temporarily unavailable",
    ),
    (Exception, HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"),
)


def _status_code_name(status: int) -> str:
    """``404`` -> ``"not_found"``; unknown codes fall back to ``"error"``."""
    try:
        return HTTPStatus(status).name.lower()
    except ValueError:
        return "error"


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build the Problem Details body.

    :param status: HTTP status code.
    :param code: Stable machine-readable code (``token_expired``, ``conflict``...).
    :param message: Client-safe summary, rendered as ``detail``.
    :param details: Optional structured extras such as field errors.
    :returns: JSON-serializable problem dict including ``request_id``.
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        problem["details"] = details
    return problem


def _problem_response(problem: dict[str, Any]) -> Response:
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    if problem["status"] == HTTPStatus.UNAUTHORIZED:
        resp.headers["WWW-Authenticate"] = "Bearer"
    return resp


def _respond(problem: dict[str, Any], source: str, *, exc_info: bool = False):
    status = problem["status"]
    if status >= 500:
        log.error(
            "%s: code=%s status=%s request_id=%s",
            source,
            problem["code"],
            status,
            problem["request_id"],
            exc_info=exc_info,
        )
    else:
        log.warning(
            "%s: code=%s status=%s detail=%s request_id=%s",
            source,
            problem["code"],
            status,
            problem["detail"],
            problem["request_id"],
        )
    return _problem_response(problem), status


class APIError(Exception):
    """
    Error raised (or translated to) at the HTTP boundary.

    Parameters
    ----------
    message : str
        Client-facing description.
    status_code : int, optional
        HTTP status, ``400`` by default.
    code : str, optional
        snake_case identifier clients can branch on.
    details : dict[str, Any] | None, optional
        Structured payload echoed as ``details``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        return _as_problem(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


class NotFound(APIError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class Conflict(APIError):
    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code="conflict")


def _register_opaque(
    app: Flask, exc_type: type[Exception], status: HTTPStatus, code: str, message: str
) -> None:
    def handler(err: Exception):
        problem = _as_problem(status=status, code=code, message=message)
        return _respond(problem, type(err).__name__, exc_info=True)

    app.register_error_handler(exc_type, handler)


def init_app(app: Flask) -> None:
    """
    Register the problem+json handlers on ``app``.

    Service errors (including every auth failure) go through
    :meth:`BaseService.translate_exceptions`, which keeps the status and
    code each auth error was raised with.
    """
    from accounts.services._shared.base import BaseService
    from accounts.services._shared.errors import ServiceError

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        return _respond(err.to_problem(), "APIError")

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        return _respond(BaseService.translate_exceptions(err).to_problem(), type(err).__name__)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = _status_code_name(status)
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        return _respond(_as_problem(status=status, code=code, message=message), "HTTPException")

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        problem = _as_problem(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Validation failed",
            details={"errors": err.messages},
        )
        return _respond(problem, "ValidationError")

    for exc_type, status, code, message in _OPAQUE_ERRORS:
        _register_opaque(app, exc_type, status, code, message)
