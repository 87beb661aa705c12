"""OpenSkill rating modules."""

from domain.ratings.openskill.calculator import DoublesOpenSkillCalculator, OpenSkillParameters

__all__ = [
    "DoublesOpenSkillCalculator",
    "OpenSkillParameters",
]
