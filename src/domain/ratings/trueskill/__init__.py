"""TrueSkill rating modules."""

from domain.ratings.trueskill.calculator import DoublesTrueSkillCalculator, TrueSkillParameters

__all__ = [
    "DoublesTrueSkillCalculator",
    "TrueSkillParameters",
]
