"""Clients for external services."""
from __future__ import annotations

from .base import SearchIndex
from .index import IndexClient, total_hits

__all__ = ["IndexClient", "SearchIndex", "total_hits"]
