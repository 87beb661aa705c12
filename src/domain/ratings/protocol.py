"""Protocol shared by doubles rating engines."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from domain.ratings.common import DoublesRatingUpdate, Rating, Winner


@runtime_checkable
class DoublesRatingEngine(Protocol):
    """Pure mapping from two rated pairs and a winner to updated pairs."""

    algorithm: str

    def initial_rating(self) -> Rating: ...

    def update(
        self,
        team1: Sequence[Rating],
        team2: Sequence[Rating],
        winner: Winner,
    ) -> DoublesRatingUpdate: ...


__all__ = ["DoublesRatingEngine"]
