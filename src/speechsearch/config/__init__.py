"""Configuration helpers for the speech search service."""
from __future__ import annotations

from .settings import (
    AppConfig,
    CacheConfig,
    IndexConfig,
    SearchConfig,
    load_config,
    resolve_config_path,
    save_config,
)

__all__ = [
    "AppConfig",
    "CacheConfig",
    "IndexConfig",
    "SearchConfig",
    "load_config",
    "resolve_config_path",
    "save_config",
]
