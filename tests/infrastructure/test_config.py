"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from catalog.infrastructure.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("CATALOG_STORE_BACKEND", "CATALOG_CACHE_BACKEND", "CATALOG_DATA_DIR"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:

    def test_defaults(self):
        settings = Settings()
        assert settings.store_backend == "json"
        assert settings.cache_backend == "redis"
        assert settings.cleanup_timeout_seconds == 5.0
        assert settings.products_file == Path("data") / "products.json"
        assert not settings.is_production

    def test_environment_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CATALOG_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("CATALOG_CACHE_BACKEND", "memory")
        monkeypatch.setenv("CATALOG_CLEANUP_TIMEOUT_SECONDS", "1.5")
        settings = Settings()
        assert settings.products_file == tmp_path / "products.json"
        assert settings.cache_backend == "memory"
        assert settings.cleanup_timeout_seconds == 1.5

    def test_rejects_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("CATALOG_STORE_BACKEND", "mongo")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
