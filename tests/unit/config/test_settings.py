# tests/unit/config/test_settings.py
from __future__ import annotations

import pytest
from pydantic import ValidationError

from wishlist_api.config.settings import (
    CacheBackend,
    Environment,
    Settings,
    StoreBackend,
    get_settings,
)


def test_defaults() -> None:
    settings = Settings(ENVIRONMENT="development")

    assert settings.service_name == "wishlist-api"
    assert settings.port == 3002
    assert settings.store_backend is StoreBackend.MEMORY
    assert settings.cache_backend is CacheBackend.MEMORY
    assert settings.cache_ttl_seconds == 300
    assert settings.product_service_url == "http://localhost:3001"
    assert settings.cart_service_url == "http://localhost:3003"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CACHE_TTL_SECONDS", "60")
    monkeypatch.setenv("PRODUCT_SERVICE_URL", "http://catalog:8080")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")

    settings = get_settings()

    assert settings.environment is Environment.TEST
    assert settings.cache_ttl_seconds == 60
    assert settings.product_service_url == "http://catalog:8080"
    assert settings.cors_allow_origins == ["https://a.example", "https://b.example"]
    assert get_settings() is settings


def test_wildcard_cors_rejected_in_production() -> None:
    with pytest.raises(ValidationError, match="only allowed"):
        Settings(ENVIRONMENT="production", ALLOWED_ORIGINS="*")


def test_sqlalchemy_backend_requires_database_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(ValidationError, match="DATABASE_URL"):
        Settings(WISHLIST_STORE_BACKEND="sqlalchemy")


def test_redis_backend_requires_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REDIS_URL", raising=False)
    with pytest.raises(ValidationError, match="REDIS_URL"):
        Settings(CACHE_BACKEND="redis")


def test_negative_ttl_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(CACHE_TTL_SECONDS=-1)


def test_invalid_env_surfaces_as_runtime_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "not-a-port")

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        get_settings()


@pytest.mark.parametrize("environment", ["production", "staging", "ci"])
def test_memory_store_rejected_outside_development_and_test(environment: str) -> None:
    with pytest.raises(ValidationError, match="WISHLIST_STORE_BACKEND=memory"):
        Settings(ENVIRONMENT=environment, WISHLIST_STORE_BACKEND="memory")


def test_production_accepts_sqlalchemy_store() -> None:
    settings = Settings(
        ENVIRONMENT="production",
        WISHLIST_STORE_BACKEND="sqlalchemy",
        DATABASE_URL="postgresql+asyncpg://u:p@db:5432/wishlist",
    )

    assert settings.store_backend is StoreBackend.SQLALCHEMY
