"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from flask import Flask, current_app
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)

TOKEN_PROVIDER_KEY = "token_provider"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, and the token signer.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`accounts.models` package to ensure SQLAlchemy metadata is ready
        for migrations.

    Notes
    -----
    The token configuration is read from ``app.config`` exactly once here and
    frozen into a :class:`~accounts.services.auth.dto.TokenConfig`; request
    handlers never look up secrets themselves.
    """
    db.init_app(app)

    from accounts import models as _models  # noqa: F401

    migrate.init_app(app, db)

    from accounts.infra.jwt.pyjwt_token_provider import PyJWTTokenProvider
    from accounts.services.auth.dto import TokenConfig

    token_cfg = TokenConfig.from_mapping(app.config)
    app.extensions[TOKEN_PROVIDER_KEY] = PyJWTTokenProvider(token_cfg)


def get_token_provider():
    """Return the token provider bound to the current application."""
    provider = current_app.extensions.get(TOKEN_PROVIDER_KEY)
    if provider is None:
        raise RuntimeError("Token provider is not initialized. Call init_app() first.")
    return provider
