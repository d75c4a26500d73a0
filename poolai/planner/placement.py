"""Ball-in-hand placement: set the cue ball up for a straight-in shot."""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from poolai.utils.logger import get_logger

from .base import EIGHT_BALL_ID, Ball, Pocket, TargetGroup

logger = get_logger()

# (x_min, y_min, x_max, y_max) on the 1000x500 client table
DEFAULT_BOUNDS: Tuple[float, float, float, float] = (50.0, 50.0, 950.0, 450.0)
DEFAULT_SETBACK = 80.0


def _placement_candidates(balls: Sequence[Ball], target_group: TargetGroup) -> List[Ball]:
    on_table = [b for b in balls if b.on_table and not b.is_cue]
    group = target_group.ball_group
    if group is None:
        # Open table: the 8 is never a legal first target
        return [b for b in on_table if b.id != EIGHT_BALL_ID]

    own = [b for b in on_table if b.group is group]
    if own:
        return own
    return [b for b in on_table if b.id == EIGHT_BALL_ID]


def _closest_pocket(ball: Ball, pockets: Sequence[Pocket]) -> Tuple[Optional[Pocket], float]:
    best, best_dist = None, float("inf")
    for pocket in pockets:
        dist = float(np.linalg.norm(pocket.position - ball.position))
        if dist < best_dist:
            best, best_dist = pocket, dist
    return best, best_dist


def choose_placement_target(
    balls: Sequence[Ball],
    pockets: Sequence[Pocket],
    target_group: TargetGroup = TargetGroup.NONE,
) -> Optional[Ball]:
    """Legal target ball closest to any pocket."""
    best, best_dist = None, float("inf")
    for ball in _placement_candidates(balls, target_group):
        _, dist = _closest_pocket(ball, pockets)
        if dist < best_dist:
            best, best_dist = ball, dist
    return best


def place_cue_ball(
    balls: Sequence[Ball],
    pockets: Sequence[Pocket],
    target_group: TargetGroup = TargetGroup.NONE,
    bounds: Tuple[float, float, float, float] = DEFAULT_BOUNDS,
    setback: float = DEFAULT_SETBACK,
) -> Optional[Tuple[float, float]]:
    """
    Position for the cue ball when the AI has ball in hand.

    The cue ball goes ``setback`` units behind the chosen target, on the
    line running from its closest pocket through the ball, clamped to bounds.

    Returns:
        Optional[Tuple[float, float]]: (x, y), or None if there is no target
        or the target sits exactly on a pocket
    """
    target = choose_placement_target(balls, pockets, target_group)
    if target is None:
        logger.debug("Ball in hand with no legal target, leaving cue ball in place")
        return None

    pocket, dist = _closest_pocket(target, pockets)
    if pocket is None or dist < 1e-9:
        return None

    direction = (pocket.position - target.position) / dist
    x, y = target.position - direction * setback

    x_min, y_min, x_max, y_max = bounds
    x = min(x_max, max(x_min, float(x)))
    y = min(y_max, max(y_min, float(y)))

    logger.info(f"Ball in hand: cue ball to ({x:.0f}, {y:.0f}) for ball {target.id}")
    return x, y
