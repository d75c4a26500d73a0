import enum
import math
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from poolai.utils.logger import get_logger

logger = get_logger()

# Table units are client pixels; the physics engine uses the same radius.
BALL_RADIUS: float = 14.0

MIN_POWER: float = 0.2
MAX_POWER: float = 1.0
SPIN_RANGE: float = 0.6

CUE_BALL_ID = 0
EIGHT_BALL_ID = 8
SOLID_IDS = range(1, 8)
STRIPE_IDS = range(9, 16)


class PlannerConfigError(ValueError):
    """Malformed planner configuration or table snapshot."""

    pass


class RandomSource(Protocol):
    """Anything that draws like ``numpy.random.Generator`` / ``random.Random``."""

    def random(self) -> float: ...

    def uniform(self, low: float, high: float) -> float: ...


# ============ Table entities ============
class BallGroup(enum.Enum):
    CUE = "cue"
    SOLID = "solid"
    EIGHT = "eight"
    STRIPE = "stripe"


@dataclass
class Ball:
    """A ball on (or off) the table, as reported by the physics layer."""

    id: int
    x: float
    y: float
    pocketed: bool = False
    active: bool = True

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    @property
    def is_cue(self) -> bool:
        return self.id == CUE_BALL_ID

    @property
    def on_table(self) -> bool:
        return self.active and not self.pocketed

    @property
    def group(self) -> BallGroup:
        if self.id == CUE_BALL_ID:
            return BallGroup.CUE
        if self.id == EIGHT_BALL_ID:
            return BallGroup.EIGHT
        if self.id in SOLID_IDS:
            return BallGroup.SOLID
        if self.id in STRIPE_IDS:
            return BallGroup.STRIPE
        raise PlannerConfigError(f"Ball id out of range: {self.id}")


@dataclass(frozen=True)
class Pocket:
    x: float
    y: float
    is_center: bool = False

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)


class TargetGroup(enum.Enum):
    NONE = "none"
    SOLIDS = "solids"
    STRIPES = "stripes"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "TargetGroup":
        """Parse the rule engine's group label (``None`` means open table)."""
        if name is None:
            return cls.NONE
        key = str(name).strip().lower()
        aliases = {
            "none": cls.NONE,
            "open": cls.NONE,
            "": cls.NONE,
            "solid": cls.SOLIDS,
            "solids": cls.SOLIDS,
            "stripe": cls.STRIPES,
            "stripes": cls.STRIPES,
        }
        if key not in aliases:
            raise PlannerConfigError(f"Unknown target group: {name!r}")
        return aliases[key]

    @property
    def ball_group(self) -> Optional[BallGroup]:
        return {
            TargetGroup.SOLIDS: BallGroup.SOLID,
            TargetGroup.STRIPES: BallGroup.STRIPE,
        }.get(self)


# ============ Shot plans ============
class ShotKind(enum.Enum):
    OFFENSIVE = "offensive"
    DEFENSIVE = "defensive"
    RANDOM = "random"


@dataclass(frozen=True)
class ShotPlan:
    """Common shape of every planner decision. Angles are radians."""

    angle: float
    power: float

    kind: ClassVar[ShotKind]

    @property
    def spin(self) -> Tuple[float, float]:
        return 0.0, 0.0

    @property
    def is_defensive(self) -> bool:
        return self.kind is ShotKind.DEFENSIVE

    def to_dict(self) -> Dict[str, Any]:
        spin_x, spin_y = self.spin
        data = asdict(self)
        data.update({"kind": self.kind.value, "spin_x": spin_x, "spin_y": spin_y})
        return data


@dataclass(frozen=True)
class OffensiveShot(ShotPlan):
    """A pocketing attempt at ``target_ball_id`` into ``pockets[pocket_index]``."""

    target_ball_id: int
    pocket_index: int
    score: float
    cut_angle: float
    ideal_angle: float
    spin_x: float = 0.0
    spin_y: float = 0.0

    kind: ClassVar[ShotKind] = ShotKind.OFFENSIVE

    @property
    def spin(self) -> Tuple[float, float]:
        return self.spin_x, self.spin_y


@dataclass(frozen=True)
class DefensiveShot(ShotPlan):
    """Soft safety into the nearest ball with draw."""

    target_ball_id: int
    spin_x: float = 0.0
    spin_y: float = -0.3

    kind: ClassVar[ShotKind] = ShotKind.DEFENSIVE

    @property
    def spin(self) -> Tuple[float, float]:
        return self.spin_x, self.spin_y


@dataclass(frozen=True)
class RandomShot(ShotPlan):
    kind: ClassVar[ShotKind] = ShotKind.RANDOM


# ============ Planner abstract base ============
class Planner(ABC):
    """
    Planner abstract base.

    One instance per AI opponent. Subclasses implement calculate_shot; the
    base holds the random source and the helpers every planner shares.
    """

    RANDOM_SHOT_POWER = 0.4

    def __init__(self, rng: Optional[RandomSource] = None):
        self.rng: RandomSource = rng if rng is not None else np.random.default_rng()

    @abstractmethod
    def calculate_shot(
        self,
        balls: Sequence[Ball],
        cue_ball: Ball,
        pockets: Sequence[Pocket],
        target_group: TargetGroup = TargetGroup.NONE,
    ) -> ShotPlan:
        """
        Decide the next shot.

        Args:
            balls: All balls, cue ball included (id 0)
            cue_ball: The cue ball's current state
            pockets: The six pocket positions
            target_group: Group assigned to this player, NONE on an open table

        Returns:
            ShotPlan: an OffensiveShot, DefensiveShot or RandomShot
        """
        raise NotImplementedError

    def _random_shot(self) -> RandomShot:
        """Last resort: any direction at medium-soft power."""
        angle = float(self.rng.uniform(0.0, 2 * math.pi)) % (2 * math.pi)
        return RandomShot(angle=angle, power=self.RANDOM_SHOT_POWER)

    @staticmethod
    def eligible_targets(balls: Sequence[Ball], target_group: TargetGroup) -> List[Ball]:
        """
        Legal target balls for the given group.

        Open table: every ball still on the table except the cue ball. With a
        group assigned, only that group; once the group is cleared the 8-ball
        is the sole target.
        """
        candidates = [b for b in balls if b.on_table and not b.is_cue]
        group = target_group.ball_group
        if group is None:
            return candidates

        own = [b for b in candidates if b.group is group]
        if own:
            return own
        logger.debug(f"Group {target_group.value} cleared, switching target to the 8-ball")
        return [b for b in candidates if b.id == EIGHT_BALL_ID]
