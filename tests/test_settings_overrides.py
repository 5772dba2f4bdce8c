from __future__ import annotations

from typing import Iterable

from datastore.bin_table import build_default_table
from services.bins import build_default_service
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


_CACHES = (get_settings, build_default_table, build_default_service)


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    table_path = tmp_path / "bins.json"

    monkeypatch.setenv("BIN_TABLE_NAME", "custom-bins")
    monkeypatch.setenv("BIN_TABLE_PERSISTENCE_PATH", str(table_path))
    monkeypatch.setenv("SEARCH_WORKERS", "3")
    monkeypatch.setenv("SEARCH_OFFLOAD_THRESHOLD", "250")
    monkeypatch.setenv("SEED_SAMPLE_DATA", "yes")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.test, https://b.test")
    monkeypatch.setenv("APP_ENV", "Development")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    _clear_caches(_CACHES)

    settings = get_settings()
    table = build_default_table()
    service = build_default_service()

    try:
        assert settings.seed_sample_data is True
        assert settings.cors_allow_origins == ("https://a.test", "https://b.test")
        assert settings.is_development is True
        assert settings.log_level == "DEBUG"
        assert table.name == "custom-bins"
        assert table.persistence_path == table_path
        assert service.store.table is table
        assert service.offload_threshold == 250
        assert service.executor._max_workers == 3
    finally:
        service.shutdown()
        _clear_caches(_CACHES)


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("SEARCH_WORKERS", "zero")
    monkeypatch.setenv("SEARCH_OFFLOAD_THRESHOLD", "-10")
    monkeypatch.setenv("SEED_SAMPLE_DATA", "maybe")
    monkeypatch.setenv("BIN_TABLE_PERSISTENCE_PATH", "   ")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", " , ")
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.search_workers == 2
        assert settings.search_offload_threshold == 5000
        assert settings.seed_sample_data is False
        assert settings.table_persistence_path is None
        assert settings.cors_allow_origins == ("*",)
        assert settings.environment == "production"
    finally:
        get_settings.cache_clear()
