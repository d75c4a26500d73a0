"""
table.py - table snapshots handed to a planner

- DEFAULT_POCKETS / standard_pockets: the client's six-pocket layouts
- TableSnapshot: balls + pockets + target group, parsed from YAML/JSON data
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .base import CUE_BALL_ID, Ball, PlannerConfigError, Pocket, TargetGroup

# Fallback layout used when the physics engine has not published its pockets
DEFAULT_POCKETS: List[Pocket] = [
    Pocket(40, 40),
    Pocket(460, 40, is_center=True),
    Pocket(880, 40),
    Pocket(40, 460),
    Pocket(460, 460, is_center=True),
    Pocket(880, 460),
]

POCKET_RADIUS = 22.0


def standard_pockets(
    width: float, height: float, cushion: float, pocket_radius: float = POCKET_RADIUS
) -> List[Pocket]:
    """
    Pocket centres for a table of the given size.

    Corner pockets are inset by half a pocket radius from the cushion
    corner; centre pockets sit flush with the cushion edge. Index order
    matches the physics engine: top row left to right, then bottom row.
    """
    c = cushion
    inset = pocket_radius / 2
    return [
        Pocket(c + inset, c + inset),
        Pocket(width / 2, c, is_center=True),
        Pocket(width - c - inset, c + inset),
        Pocket(c + inset, height - c - inset),
        Pocket(width / 2, height - c, is_center=True),
        Pocket(width - c - inset, height - c - inset),
    ]


def _parse_ball(data: Mapping[str, Any]) -> Ball:
    try:
        ball = Ball(
            id=int(data["id"]),
            x=float(data["x"]),
            y=float(data["y"]),
            pocketed=bool(data.get("pocketed", False)),
            active=bool(data.get("active", True)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise PlannerConfigError(f"Malformed ball entry {data!r}: {e}") from e
    if not 0 <= ball.id <= 15:
        raise PlannerConfigError(f"Ball id must be in 0..15, got {ball.id}")
    return ball


def _parse_pocket(data: Mapping[str, Any]) -> Pocket:
    try:
        return Pocket(
            x=float(data["x"]),
            y=float(data["y"]),
            is_center=bool(data.get("is_center", False)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise PlannerConfigError(f"Malformed pocket entry {data!r}: {e}") from e


@dataclass
class TableSnapshot:
    """Everything a planner needs for one decision."""

    balls: List[Ball]
    pockets: List[Pocket] = field(default_factory=lambda: list(DEFAULT_POCKETS))
    target_group: TargetGroup = TargetGroup.NONE

    @property
    def cue_ball(self) -> Ball:
        for ball in self.balls:
            if ball.id == CUE_BALL_ID:
                return ball
        raise PlannerConfigError("Snapshot has no cue ball (id 0)")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "TableSnapshot":
        """
        Build a snapshot from a config mapping.

        Keys: ``balls`` (list of {id, x, y, pocketed?, active?}), then either
        ``pockets`` (list of {x, y, is_center?}) or ``width``/``height``/
        ``cushion`` (optional ``pocket_radius``); ``target_group`` optional.
        """
        if not data:
            raise PlannerConfigError("Empty table snapshot")

        raw_balls = data.get("balls")
        if not isinstance(raw_balls, list):
            raise PlannerConfigError("Table snapshot needs a 'balls' list")
        balls = [_parse_ball(b) for b in raw_balls]

        ids = [b.id for b in balls]
        if len(ids) != len(set(ids)):
            raise PlannerConfigError(f"Duplicate ball ids in snapshot: {ids}")

        pockets: List[Pocket]
        if data.get("pockets"):
            pockets = [_parse_pocket(p) for p in data["pockets"]]
        elif "width" in data and "height" in data:
            pockets = standard_pockets(
                float(data["width"]),
                float(data["height"]),
                float(data.get("cushion", 0.0)),
                float(data.get("pocket_radius", POCKET_RADIUS)),
            )
        else:
            pockets = list(DEFAULT_POCKETS)

        if CUE_BALL_ID not in ids:
            raise PlannerConfigError("Snapshot has no cue ball (id 0)")

        return cls(
            balls=balls,
            pockets=pockets,
            target_group=TargetGroup.from_name(data.get("target_group")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "balls": [
                {"id": b.id, "x": b.x, "y": b.y, "pocketed": b.pocketed, "active": b.active}
                for b in self.balls
            ],
            "pockets": [{"x": p.x, "y": p.y, "is_center": p.is_center} for p in self.pockets],
            "target_group": self.target_group.value,
        }
