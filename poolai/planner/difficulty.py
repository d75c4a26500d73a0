"""
Difficulty tiers for the AI opponent.

Each tier resolves to an immutable DifficultyProfile. Angular errors are
declared in degrees below (that is how they are tuned) and converted to
radians right here; everything downstream works in radians.
"""

import enum
import math
from dataclasses import dataclass
from typing import Dict, Tuple, Union

from .base import PlannerConfigError


class Difficulty(enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    MEDIUM_HARD = "medium-hard"
    HARD = "hard"

    @classmethod
    def from_name(cls, name: Union[str, "Difficulty"]) -> "Difficulty":
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower().replace("_", "-")
        for member in cls:
            if member.value == key:
                return member
        valid = ", ".join(m.value for m in cls)
        raise PlannerConfigError(f"Unknown difficulty {name!r}, expected one of: {valid}")


@dataclass(frozen=True)
class DifficultyProfile:
    """
    Execution quality of one tier.

    Attributes:
        accuracy: Probability that the aim is executed without angular error
        angle_error: Max angular error (radians) applied on a missed roll
        power_error: Max relative power error, e.g. 0.1 for +-10%
        thinking_time_ms: (min, max) advisory delay before showing the move
        prefer_easy_shots: Always take the best-scoring candidate
    """

    accuracy: float
    angle_error: float
    power_error: float
    thinking_time_ms: Tuple[float, float]
    prefer_easy_shots: bool

    @property
    def angle_error_deg(self) -> float:
        return math.degrees(self.angle_error)


PROFILES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(
        accuracy=0.5,
        angle_error=math.radians(25),
        power_error=0.25,
        thinking_time_ms=(2000, 4000),
        prefer_easy_shots=True,
    ),
    Difficulty.MEDIUM: DifficultyProfile(
        accuracy=0.65,
        angle_error=math.radians(15),
        power_error=0.15,
        thinking_time_ms=(1500, 3000),
        prefer_easy_shots=True,
    ),
    Difficulty.MEDIUM_HARD: DifficultyProfile(
        accuracy=0.8,
        angle_error=math.radians(8),
        power_error=0.1,
        thinking_time_ms=(1500, 3500),
        prefer_easy_shots=False,
    ),
    Difficulty.HARD: DifficultyProfile(
        accuracy=0.92,
        angle_error=math.radians(3),
        power_error=0.05,
        thinking_time_ms=(1000, 2500),
        prefer_easy_shots=False,
    ),
}

DEFAULT_DIFFICULTY = Difficulty.MEDIUM_HARD


def get_profile(difficulty: Union[str, Difficulty]) -> DifficultyProfile:
    return PROFILES[Difficulty.from_name(difficulty)]
