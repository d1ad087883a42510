"""Helpers for telling current parties apart from historical ones."""
from __future__ import annotations

from typing import Iterable, Tuple

DEFAULT_CURRENT_PARTIES: Tuple[str, ...] = ("A", "FrP", "H", "KrF", "MDG", "R", "Sp", "SV", "V")


class PartyRegistry:
    """Authoritative list of the parties currently represented in parliament."""

    def __init__(self, current: Iterable[str] = DEFAULT_CURRENT_PARTIES) -> None:
        self._current = frozenset(current)

    def is_current(self, key: str) -> bool:
        return key in self._current

    @property
    def current(self) -> frozenset[str]:
        return self._current


__all__ = ["DEFAULT_CURRENT_PARTIES", "PartyRegistry"]
