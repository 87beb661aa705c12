"""Database repository helpers."""

from repositories.schema import ensure_league_schema

__all__ = ["ensure_league_schema"]
