"""
ICF credential ladder and progress towards the next level.

Pure functions with no database dependencies for easy testing.
"""

from dataclasses import dataclass
from typing import Optional

# ICF CCE hours required every three years to renew any credential
RENEWAL_CCE_HOURS = 40
RENEWAL_CORE_COMPETENCY_HOURS = 24
RENEWAL_MAX_RESOURCE_DEVELOPMENT_HOURS = 16


@dataclass(frozen=True)
class LevelRequirements:
    level: str
    coaching_hours: int
    training_hours: int


LEVEL_LADDER = {
    "none": LevelRequirements("ACC", coaching_hours=100, training_hours=60),
    "ACC": LevelRequirements("PCC", coaching_hours=500, training_hours=125),
    "PCC": LevelRequirements("MCC", coaching_hours=2500, training_hours=200),
}


@dataclass
class CredentialProgress:
    current_level: str
    next_level: Optional[str]
    coaching_hours: float
    cpd_hours: float
    required_coaching_hours: Optional[int]
    required_training_hours: Optional[int]
    coaching_percent: float
    training_percent: float
    renewal_cce_hours: int = RENEWAL_CCE_HOURS

    @property
    def ready(self) -> bool:
        return (
            self.next_level is not None
            and self.coaching_percent >= 100
            and self.training_percent >= 100
        )


def next_level_requirements(level: Optional[str]) -> Optional[LevelRequirements]:
    """Requirements for the level after ``level``; ``None`` at MCC."""
    return LEVEL_LADDER.get(level or "none")


def _percent(value: float, target: Optional[int]) -> float:
    if not target:
        return 100.0
    return round(min(value / target * 100, 100), 1)


def compute_progress(
    level: Optional[str], coaching_hours: float, cpd_hours: float
) -> CredentialProgress:
    level = level or "none"
    requirements = next_level_requirements(level)
    if requirements is None:
        return CredentialProgress(
            current_level=level,
            next_level=None,
            coaching_hours=round(coaching_hours, 1),
            cpd_hours=round(cpd_hours, 1),
            required_coaching_hours=None,
            required_training_hours=None,
            coaching_percent=100.0,
            training_percent=_percent(cpd_hours, RENEWAL_CCE_HOURS),
        )

    return CredentialProgress(
        current_level=level,
        next_level=requirements.level,
        coaching_hours=round(coaching_hours, 1),
        cpd_hours=round(cpd_hours, 1),
        required_coaching_hours=requirements.coaching_hours,
        required_training_hours=requirements.training_hours,
        coaching_percent=_percent(coaching_hours, requirements.coaching_hours),
        training_percent=_percent(cpd_hours, requirements.training_hours),
    )
