"""Exceptions raised by soulforge."""

from __future__ import annotations


class SoulforgeError(Exception):
    """Base class for soulforge errors."""


class NotFound(SoulforgeError, LookupError):
    """An unknown soul, session or participant was addressed."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key!r}")
