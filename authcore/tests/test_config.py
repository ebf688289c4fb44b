from __future__ import annotations

import pytest

from authcore.shared.config import AppConfig, TokenConfig
from authcore.shared.config.settings import SecurityConfig
from authcore.shared.errors import ConfigError

STRONG_SECRET = "0123456789abcdef0123456789abcdef-prod"


@pytest.mark.parametrize("secret", [None, "dev", "change-me", "short-but-random-9f3a"])
def test_production_refuses_weak_secret(secret: str | None) -> None:
    with pytest.raises(ConfigError) as exc_info:
        AppConfig(APP_ENV="production", token=TokenConfig(secret=secret))

    assert exc_info.value.code == "insecure_jwt_secret"


def test_production_accepts_long_secret() -> None:
    config = AppConfig(APP_ENV="production", token=TokenConfig(secret=STRONG_SECRET))

    assert config.is_production()
    assert config.token.secret == STRONG_SECRET


def test_development_tolerates_short_secret() -> None:
    config = AppConfig(APP_ENV="development", token=TokenConfig(secret="dev"))

    assert not config.is_production()


def test_token_defaults() -> None:
    config = TokenConfig(secret=STRONG_SECRET)

    assert config.ttl_seconds == 24 * 60 * 60
    assert config.leeway_seconds == 60
    assert config.algorithm == "HS256"


def test_token_config_is_immutable() -> None:
    config = TokenConfig(secret=STRONG_SECRET)

    with pytest.raises(ValueError):
        config.secret = "something-else"


def test_sections_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("ENABLE_HSTS", "yes")
    monkeypatch.setenv("TOKEN_TTL_SECONDS", "600")

    security = SecurityConfig()
    token = TokenConfig()

    assert security.allowed_origins == ["https://a.example", "https://b.example"]
    assert security.enable_hsts is True
    assert token.ttl_seconds == 600
    assert token.secret  # pinned by conftest
