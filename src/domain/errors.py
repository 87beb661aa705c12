"""Error types raised by the league domain and store layers."""

from __future__ import annotations

from typing import Any


class LeagueError(Exception):
    """Base class for league errors."""


class ValidationError(LeagueError, ValueError):
    """Input that must never reach the rating or standings math."""


class DuplicateMatchError(ValidationError):
    """A match with the same week and match code is already recorded."""


class PlayerLookupError(LeagueError, LookupError):
    """A match row references players that are not in the store."""

    def __init__(self, message: str, *, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


class ConcurrentUpdateError(LeagueError):
    """Another writer kept changing the same players; the row gave up retrying."""


class StoreError(LeagueError, RuntimeError):
    """A persistence round-trip failed; the batch is aborted."""

    def __init__(self, message: str, *, processed: int = 0, row: Any = None) -> None:
        super().__init__(message)
        self.processed = processed
        self.row = row


__all__ = [
    "ConcurrentUpdateError",
    "DuplicateMatchError",
    "LeagueError",
    "PlayerLookupError",
    "StoreError",
    "ValidationError",
]
