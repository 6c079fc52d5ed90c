"""Fixtures for HTTP-level tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from accounts.infra.jwt import PyJWTTokenProvider
from accounts.services.auth.dto import TokenConfig

from tests.factories.user import UserFactory
from tests.helpers.http import PASSWORD


@pytest.fixture()
def bare_client(app, session):
    """Test client that never stores or sends cookies."""
    return app.test_client(use_cookies=False)


@pytest.fixture()
def alice(session):
    return UserFactory(username="alice", email="alice@example.com", password=PASSWORD)


@pytest.fixture()
def app_tokens(app) -> PyJWTTokenProvider:
    """Provider using the application's secrets."""
    return PyJWTTokenProvider(TokenConfig.from_mapping(app.config))


@pytest.fixture()
def app_past_tokens(app) -> PyJWTTokenProvider:
    return PyJWTTokenProvider(
        TokenConfig.from_mapping(app.config),
        clock=lambda: datetime.now(UTC) - timedelta(days=30),
    )
