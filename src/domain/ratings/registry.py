"""Registry of available doubles rating engines."""

from __future__ import annotations

from typing import Any, Callable

from domain.ratings.openskill.calculator import DoublesOpenSkillCalculator
from domain.ratings.protocol import DoublesRatingEngine
from domain.ratings.trueskill.calculator import DoublesTrueSkillCalculator

CreateEngineFn = Callable[[Any], DoublesRatingEngine]

_REGISTRY: dict[str, CreateEngineFn] = {}


def register(algorithm: str, create_engine: CreateEngineFn) -> None:
    """Register one engine factory under an algorithm name."""
    key = algorithm.lower()
    if key in _REGISTRY:
        raise ValueError(f"Duplicate rating engine registration for algorithm={key}")
    _REGISTRY[key] = create_engine


def available() -> list[str]:
    return sorted(_REGISTRY)


def create(algorithm: str, params: Any) -> DoublesRatingEngine:
    """Build the engine registered for ``algorithm`` with its parameters."""
    try:
        factory = _REGISTRY[algorithm.lower()]
    except KeyError as exc:
        raise KeyError(
            f"No rating engine registered for {algorithm}. Available: {', '.join(available())}"
        ) from exc
    return factory(params)


def _register_defaults() -> None:
    if _REGISTRY:
        return
    register("trueskill", lambda params: DoublesTrueSkillCalculator(params=params))
    register("openskill", lambda params: DoublesOpenSkillCalculator(params=params))


_register_defaults()

__all__ = ["available", "create", "register"]
