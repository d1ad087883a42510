"""Application configuration helpers for the speech search service."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
import types
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from ..core.parties import DEFAULT_CURRENT_PARTIES


_DEFAULT_CONFIG_LOCATIONS = (
    Path("speechsearch.json"),
    Path.home() / ".config" / "speechsearch" / "config.json",
)


@dataclass(slots=True)
class IndexConfig:
    """Connection settings for the Elasticsearch transcript index."""

    base_url: str = "http://localhost:9200"
    index_name: str = "hdo-transcripts"
    api_key: Optional[str] = None
    timeout: float = 30.0


@dataclass(slots=True)
class SearchConfig:
    """Tuning knobs for queries, aggregations and exports."""

    # Offset applied when bucketing the timeline by date.
    time_zone: str = "+02:00"
    terms_size: int = 1000
    presiding_officer: str = "Presidenten"
    export_page_size: int = 100
    current_parties: Tuple[str, ...] = field(default=DEFAULT_CURRENT_PARTIES)


@dataclass(slots=True)
class CacheConfig:
    """Configuration for the in-memory result cache."""

    max_entries: int = 500


@dataclass(slots=True)
class AppConfig:
    """High level application configuration."""

    index: IndexConfig
    search: SearchConfig
    cache: CacheConfig


def _load_from_env(prefix: str) -> Dict[str, Any]:
    """Load configuration entries for ``prefix`` from the environment."""

    data: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if key.startswith(prefix):
            normalized_key = key.removeprefix(prefix)
            data[normalized_key.lower()] = value
    return data


def _merge_dict(target: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    merged = target.copy()
    merged.update({k: v for k, v in updates.items() if v is not None})
    return merged


def _load_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf8") as fh:
        return json.load(fh)


T = TypeVar("T")

_TRUE_WORDS = frozenset({"true", "1", "yes", "y", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "n", "off"})


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"Cannot convert {value!r} to bool")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Refusing to read {value!r} as an integer")
    return value if isinstance(value, int) else int(float(value))


def _to_tuple(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(part) for part in value)
    raise ValueError(f"Cannot convert {value!r} to a list of strings")


_CONVERTERS: Dict[Any, Callable[[Any], Any]] = {
    bool: _to_bool,
    int: _to_int,
    float: float,
    str: str,
    tuple: _to_tuple,
}


def _coerce_value(value: Any, annotation: Any) -> Any:
    """Convert a raw file or environment value to the field's annotated type."""

    if value is None:
        return None
    if get_origin(annotation) in (Union, types.UnionType):
        # Optional[X]: convert to X.
        (inner,) = [arg for arg in get_args(annotation) if arg is not type(None)]  # noqa: E721
        return _coerce_value(value, inner)
    converter = _CONVERTERS.get(get_origin(annotation) or annotation)
    return value if converter is None else converter(value)


def _dataclass_from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
    """Build section ``cls`` from ``data``, ignoring keys it does not declare."""

    hints = get_type_hints(cls)
    kwargs: Dict[str, Any] = {}
    for name in (f.name for f in fields(cls)):
        if name not in data:
            continue
        try:
            kwargs[name] = _coerce_value(data[name], hints[name])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for {cls.__name__}.{name}: {data[name]!r}") from exc
    return cls(**kwargs)


def resolve_config_path(explicit_path: Optional[Path] = None) -> Path:
    """Return the effective configuration file path.

    If ``explicit_path`` is provided it is returned verbatim. Otherwise the
    first existing default location wins; when none exists the XDG-style
    location (``~/.config/speechsearch/config.json``) is returned.
    """

    if explicit_path:
        return explicit_path

    for candidate in _DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    return _DEFAULT_CONFIG_LOCATIONS[-1]


def load_config(explicit_path: Optional[Path] = None) -> AppConfig:
    """Create the application configuration.

    Defaults, an optional JSON configuration file and ``SPEECHSEARCH_*``
    environment variables are merged, in that order of precedence from low to
    high. Environment variables use the format ``SPEECHSEARCH_SECTION_FIELD``
    (e.g. ``SPEECHSEARCH_INDEX_BASE_URL``); tuple values such as
    ``SPEECHSEARCH_SEARCH_CURRENT_PARTIES`` are comma separated.
    """

    base = {
        "index": asdict(IndexConfig()),
        "search": asdict(SearchConfig()),
        "cache": asdict(CacheConfig()),
    }

    file_data: Dict[str, Any] = {}
    if explicit_path:
        file_data = _load_config_file(explicit_path)
    else:
        for candidate in _DEFAULT_CONFIG_LOCATIONS:
            file_data = _load_config_file(candidate)
            if file_data:
                break

    merged = _merge_dict(base, file_data)

    index_data = _merge_dict(merged.get("index", {}), _load_from_env("SPEECHSEARCH_INDEX_"))
    search_data = _merge_dict(merged.get("search", {}), _load_from_env("SPEECHSEARCH_SEARCH_"))
    cache_data = _merge_dict(merged.get("cache", {}), _load_from_env("SPEECHSEARCH_CACHE_"))

    return AppConfig(
        index=_dataclass_from_dict(IndexConfig, index_data),
        search=_dataclass_from_dict(SearchConfig, search_data),
        cache=_dataclass_from_dict(CacheConfig, cache_data),
    )


def save_config(config: AppConfig, path: Optional[Path] = None) -> Path:
    """Persist ``config`` as JSON and return the target path."""

    target = resolve_config_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "index": asdict(config.index),
        "search": asdict(config.search),
        "cache": asdict(config.cache),
    }
    with target.open("w", encoding="utf8") as fh:
        json.dump(data, fh, ensure_ascii=False, indent=2, sort_keys=True)
        fh.write("\n")
    return target


__all__ = [
    "AppConfig",
    "CacheConfig",
    "IndexConfig",
    "SearchConfig",
    "load_config",
    "resolve_config_path",
    "save_config",
]
