"""Unit tests for TokenConfig construction."""

from __future__ import annotations

from datetime import timedelta

import pytest
from accounts.core.config import TestingConfig
from accounts.services.auth.dto import TokenConfig

pytestmark = pytest.mark.nodb


def _config(**overrides):
    values = {
        "access_secret": "a" * 32,
        "refresh_secret": "r" * 32,
        "access_expires": timedelta(minutes=15),
        "refresh_expires": timedelta(days=10),
    }
    values.update(overrides)
    return TokenConfig(**values)


def test_defaults():
    cfg = _config()
    assert cfg.algorithm == "HS256"
    assert cfg.issuer is None
    assert cfg.leeway == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"access_secret": ""},
        {"refresh_secret": ""},
        {"refresh_secret": "a" * 32},
        {"access_expires": timedelta(0)},
        {"refresh_expires": timedelta(seconds=-1)},
        {"leeway": -5},
    ],
)
def test_rejects_unusable_settings(overrides):
    with pytest.raises(ValueError):
        _config(**overrides)


def test_is_immutable():
    cfg = _config()
    with pytest.raises(AttributeError):
        cfg.access_secret = "changed"  # type: ignore[misc]


def test_from_mapping_reads_flask_keys():
    cfg = TokenConfig.from_mapping(
        {
            "ACCESS_TOKEN_SECRET": "x" * 32,
            "REFRESH_TOKEN_SECRET": "y" * 32,
            "ACCESS_TOKEN_EXPIRES_SECONDS": "60",
            "REFRESH_TOKEN_EXPIRES_SECONDS": 3600,
            "JWT_ISSUER": "accounts-api",
            "JWT_LEEWAY_SECONDS": 2,
        }
    )
    assert cfg.access_expires == timedelta(seconds=60)
    assert cfg.refresh_expires == timedelta(hours=1)
    assert cfg.issuer == "accounts-api"
    assert cfg.leeway == 2


def test_from_mapping_testing_config():
    cfg = TokenConfig.from_mapping(
        {k: getattr(TestingConfig, k) for k in dir(TestingConfig) if k.isupper()}
    )
    assert cfg.access_secret != cfg.refresh_secret
    assert cfg.access_expires < cfg.refresh_expires


def test_from_mapping_missing_secret():
    with pytest.raises(ValueError):
        TokenConfig.from_mapping({"REFRESH_TOKEN_SECRET": "y" * 32})
