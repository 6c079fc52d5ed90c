"""Session-wide fixtures: the testing app, a rolled-back database per test, token doubles."""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

import pytest
from accounts.core.config import TestingConfig
from accounts.core.extensions import db as _db
from accounts.factory import create_app
from accounts.infra.jwt import PyJWTTokenProvider
from accounts.services._shared.ports import InMemoryCredentialStore
from accounts.services.auth.dto import TokenConfig
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


def _let_sqlalchemy_own_sqlite_transactions(engine) -> None:
    """Make pysqlite emit ``BEGIN`` when SQLAlchemy opens a transaction.

    Left to itself the driver defers ``BEGIN`` until the first DML, so the
    session's SAVEPOINT becomes the outermost transaction and releasing it
    commits for good. With the driver in autocommit mode and an explicit
    ``BEGIN`` the per-test rollback discards every row.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _driver_autocommit(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    # drop pooled connections opened before the listeners existed
    engine.dispose()


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _let_sqlalchemy_own_sqlite_transactions(_db.engine)
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Swap ``db.session`` for one joined to a per-test outer transaction.

    ``join_transaction_mode="create_savepoint"`` makes every session-level
    transaction a SAVEPOINT on the shared connection: a unit of work's
    ``commit()`` releases its savepoint, its ``rollback()`` rewinds to it, and
    the outer transaction discards everything once the test finishes.
    """
    outer = connection.begin()
    scoped = scoped_session(
        sessionmaker(bind=connection, join_transaction_mode="create_savepoint")
    )

    original_session = db.session
    db.session.remove()
    db.session = scoped
    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        outer.rollback()


@pytest.fixture()
def client(app, session):
    """Return a Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Token core doubles ---------------------------------------------------------


@pytest.fixture()
def token_config() -> TokenConfig:
    """Short-lived, distinct-secret configuration used by unit tests."""
    return TokenConfig(
        access_secret="unit-access-secret-0123456789abcdef",
        refresh_secret="unit-refresh-secret-0123456789abcdef",
        access_expires=timedelta(minutes=15),
        refresh_expires=timedelta(days=10),
    )


@pytest.fixture()
def tokens(token_config) -> PyJWTTokenProvider:
    return PyJWTTokenProvider(token_config)


@pytest.fixture()
def past_tokens(token_config) -> PyJWTTokenProvider:
    """Provider whose clock sits far enough back that every token it mints is expired."""
    return PyJWTTokenProvider(
        token_config, clock=lambda: datetime.now(UTC) - timedelta(days=30)
    )


@pytest.fixture()
def memory_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper to the transactional session fixture.

    Tests that never touch the database (pure token-core tests) skip the
    database fixtures entirely.
    """
    if request.node.get_closest_marker("nodb"):
        yield
        return
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
