"""Shaping of ranked search responses into hit lists."""
from __future__ import annotations

from typing import Any, Mapping

from ..clients.index import total_hits
from ..core.types import Hit, HitsResult, SearchOptions
from .query import TEXT_FIELD


def extract_highlight(raw_hit: Mapping[str, Any]) -> str:
    """Return the first highlighted fragment of the text field, or ``""``."""

    fragments = (raw_hit.get("highlight") or {}).get(TEXT_FIELD) or ()
    return fragments[0] if fragments else ""


def build_hit(raw_hit: Mapping[str, Any]) -> Hit:
    return Hit(
        id=str(raw_hit.get("_id")),
        score=raw_hit.get("_score"),
        highlight=extract_highlight(raw_hit),
        source=dict(raw_hit.get("_source") or {}),
    )


def build_hits(response: Mapping[str, Any], options: SearchOptions) -> HitsResult:
    raw_hits = (response.get("hits") or {}).get("hits") or ()
    return HitsResult(
        query=options.query,
        hits=tuple(build_hit(raw_hit) for raw_hit in raw_hits),
        total=total_hits(response),
    )


__all__ = ["build_hit", "build_hits", "extract_highlight"]
