from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple


_TABLE_NAME_ENV = "BIN_TABLE_NAME"
_TABLE_PATH_ENV = "BIN_TABLE_PERSISTENCE_PATH"
_SEARCH_WORKERS_ENV = "SEARCH_WORKERS"
_OFFLOAD_THRESHOLD_ENV = "SEARCH_OFFLOAD_THRESHOLD"
_SEED_ENV = "SEED_SAMPLE_DATA"
_CORS_ENV = "CORS_ALLOW_ORIGINS"
_APP_ENV = "APP_ENV"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    table_name: str
    table_persistence_path: Optional[str]
    search_workers: int
    search_offload_threshold: int
    seed_sample_data: bool
    cors_allow_origins: Tuple[str, ...]
    environment: str
    log_level: str

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


def _read_origins(default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(_CORS_ENV)
    if value is None:
        return default
    origins = tuple(part.strip() for part in value.split(",") if part.strip())
    return origins or default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        table_name=_read_str_env(_TABLE_NAME_ENV, "bins"),
        table_persistence_path=_read_optional_env(_TABLE_PATH_ENV, "./tmp/bins.json"),
        search_workers=_read_positive_int(_SEARCH_WORKERS_ENV, 2),
        search_offload_threshold=_read_positive_int(_OFFLOAD_THRESHOLD_ENV, 5000),
        seed_sample_data=_read_bool(_SEED_ENV, False),
        cors_allow_origins=_read_origins(("*",)),
        environment=_read_str_env(_APP_ENV, "production").lower(),
        log_level=_read_log_level("INFO"),
    )
