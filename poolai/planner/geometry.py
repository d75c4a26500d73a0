"""
ShotPlanner - Geometry-Guided AI Opponent

Chooses one shot per AI turn from a snapshot of the table:
1. Enumerates every legal target ball x pocket pair
2. Computes the ghost-ball aim point and rejects obstructed lines
3. Scores each candidate (distance and cut angle penalties)
4. Picks a candidate with difficulty-dependent randomness
5. Perturbs angle, power and spin to imitate imperfect execution
6. Falls back to a soft safety, or a random shot on an empty table

Stateless apart from the difficulty profile and the random source, so one
instance can serve many independent snapshots.
"""

import math
from dataclasses import replace
from typing import Collection, List, Optional, Sequence, Tuple, Union, override

import numpy as np

from poolai.utils.logger import get_logger

from .base import (
    BALL_RADIUS,
    CUE_BALL_ID,
    MAX_POWER,
    MIN_POWER,
    SPIN_RANGE,
    Ball,
    DefensiveShot,
    OffensiveShot,
    Planner,
    PlannerConfigError,
    Pocket,
    RandomSource,
    ShotPlan,
    TargetGroup,
)
from .difficulty import DEFAULT_DIFFICULTY, Difficulty, DifficultyProfile, get_profile
from .placement import place_cue_ball

log = get_logger()


class ShotPlanner(Planner):
    """
    Ghost-ball shot planner with a difficulty-calibrated noise model.

    Pipeline: candidate generation -> evaluation -> selection -> noise,
    or the defensive fallback when no candidate survives.
    """

    # Scoring weights
    BASE_SCORE = 100.0
    GHOST_DISTANCE_WEIGHT = 1 / 10
    POCKET_DISTANCE_WEIGHT = 1 / 5
    CUT_ANGLE_WEIGHT = 30.0

    # Geometric power mapping
    POWER_DISTANCE_SCALE = 800.0
    MIN_GEOMETRIC_POWER = 0.3
    MAX_GEOMETRIC_POWER = 0.85

    # Selection policy
    BEST_SHOT_PROBABILITY = 0.7
    TOP_N = 3

    # Noise model
    SPIN_PROBABILITY = 0.3

    # Defensive fallback
    DEFENSIVE_POWER = 0.3
    DEFENSIVE_SPIN_Y = -0.3

    # Below this a vector has no usable direction
    EPSILON = 1e-9

    def __init__(
        self,
        difficulty: Union[str, Difficulty] = DEFAULT_DIFFICULTY,
        ball_radius: float = BALL_RADIUS,
        rng: Optional[RandomSource] = None,
        check_pocket_path: bool = False,
    ):
        """Initialize the planner.

        Args:
            difficulty: Tier name or enum, resolved once to a DifficultyProfile
            ball_radius: Ball radius in table units, shared with the physics engine
            rng: Random source (numpy Generator by default)
            check_pocket_path: Also reject candidates whose target->pocket lane is blocked
        """
        super().__init__(rng=rng)

        if ball_radius <= 0:
            raise PlannerConfigError(f"ball_radius must be positive, got {ball_radius}")

        self.difficulty = Difficulty.from_name(difficulty)
        self.profile: DifficultyProfile = get_profile(self.difficulty)
        self.ball_radius = float(ball_radius)
        self.check_pocket_path = check_pocket_path

        log.info(
            f"ShotPlanner initialized: difficulty={self.difficulty.value}, "
            f"accuracy={self.profile.accuracy}, "
            f"angle_error={self.profile.angle_error_deg:.1f}deg, "
            f"ball_radius={self.ball_radius}, check_pocket_path={check_pocket_path}"
        )

    @property
    def ghost_offset(self) -> float:
        """Distance from target centre to ghost-ball centre (one diameter)."""
        return 2 * self.ball_radius

    @property
    def obstruction_threshold(self) -> float:
        return 2 * self.ball_radius

    # ============================================================================
    # Obstruction test
    # ============================================================================

    def is_path_blocked(
        self,
        start: np.ndarray,
        end: np.ndarray,
        balls: Sequence[Ball],
        exclude_ids: Collection[int],
    ) -> bool:
        """
        Check whether any ball sits within two radii of the segment start->end.

        Args:
            start: Segment start (x, y)
            end: Segment end (x, y)
            balls: All balls
            exclude_ids: Ball ids that cannot block (cue ball, target ball)

        Returns:
            bool: True if the path is blocked
        """
        segment = end - start
        length_sq = float(np.dot(segment, segment))

        for ball in balls:
            if not ball.on_table or ball.id in exclude_ids:
                continue

            to_ball = ball.position - start
            # Zero-length segment: distance to the point itself
            if length_sq < self.EPSILON:
                t = 0.0
            else:
                t = float(np.clip(np.dot(to_ball, segment) / length_sq, 0.0, 1.0))

            closest = start + t * segment
            if float(np.linalg.norm(ball.position - closest)) < self.obstruction_threshold:
                return True

        return False

    # ============================================================================
    # Candidate evaluation
    # ============================================================================

    def evaluate_shot(
        self,
        cue_ball: Ball,
        target_ball: Ball,
        pocket: Pocket,
        pocket_index: int,
        balls: Sequence[Ball],
    ) -> Optional[OffensiveShot]:
        """
        Evaluate one cue -> target -> pocket combination.

        Returns:
            Optional[OffensiveShot]: the noise-free shot, or None when the
            line is obstructed or the geometry is degenerate
        """
        cue_pos = cue_ball.position
        target_pos = target_ball.position
        pocket_pos = pocket.position

        ball_to_pocket = pocket_pos - target_pos
        dist_to_pocket = float(np.linalg.norm(ball_to_pocket))
        if dist_to_pocket < self.EPSILON:
            log.debug(f"Ball {target_ball.id} sits on pocket {pocket_index}, skipping")
            return None

        ghost_pos = target_pos - (ball_to_pocket / dist_to_pocket) * self.ghost_offset

        cue_to_ghost = ghost_pos - cue_pos
        dist_to_ghost = float(np.linalg.norm(cue_to_ghost))

        exclude_ids = {CUE_BALL_ID, cue_ball.id, target_ball.id}
        if self.is_path_blocked(cue_pos, ghost_pos, balls, exclude_ids):
            return None
        if self.check_pocket_path and self.is_path_blocked(
            target_pos, pocket_pos, balls, exclude_ids
        ):
            return None

        cross = cue_to_ghost[0] * ball_to_pocket[1] - cue_to_ghost[1] * ball_to_pocket[0]
        dot = float(np.dot(cue_to_ghost, ball_to_pocket))
        cut_angle = abs(math.atan2(cross, dot))

        score = (
            self.BASE_SCORE
            - dist_to_ghost * self.GHOST_DISTANCE_WEIGHT
            - dist_to_pocket * self.POCKET_DISTANCE_WEIGHT
            - cut_angle * self.CUT_ANGLE_WEIGHT
        )

        angle = math.atan2(cue_to_ghost[1], cue_to_ghost[0])

        total_dist = dist_to_ghost + dist_to_pocket
        power = float(
            np.clip(
                total_dist / self.POWER_DISTANCE_SCALE,
                self.MIN_GEOMETRIC_POWER,
                self.MAX_GEOMETRIC_POWER,
            )
        )

        return OffensiveShot(
            angle=angle,
            power=power,
            target_ball_id=target_ball.id,
            pocket_index=pocket_index,
            score=float(score),
            cut_angle=cut_angle,
            ideal_angle=angle,
        )

    def find_candidates(
        self,
        balls: Sequence[Ball],
        cue_ball: Ball,
        pockets: Sequence[Pocket],
        target_group: TargetGroup = TargetGroup.NONE,
    ) -> List[OffensiveShot]:
        """Evaluate every eligible ball against every pocket, keeping viable shots."""
        candidates = []
        for target in self.eligible_targets(balls, target_group):
            for index, pocket in enumerate(pockets):
                shot = self.evaluate_shot(cue_ball, target, pocket, index, balls)
                if shot is not None:
                    candidates.append(shot)
        return candidates

    # ============================================================================
    # Selection and noise
    # ============================================================================

    def select_shot(self, candidates: Sequence[OffensiveShot]) -> Optional[OffensiveShot]:
        """
        Pick a candidate: the best one, or sometimes one of the top three.

        Returns:
            Optional[OffensiveShot]: None when there is nothing to choose from
        """
        if not candidates:
            return None

        ranked = sorted(candidates, key=lambda s: s.score, reverse=True)
        if self.profile.prefer_easy_shots or self.rng.random() < self.BEST_SHOT_PROBABILITY:
            return ranked[0]

        pool = min(self.TOP_N, len(ranked))
        index = min(int(self.rng.random() * pool), pool - 1)
        return ranked[index]

    def apply_difficulty_noise(self, shot: OffensiveShot) -> OffensiveShot:
        """
        Imitate imperfect execution. Draw order is fixed: accuracy roll,
        angle error (only on a miss), power error, spin roll, spin x, spin y.
        """
        profile = self.profile

        angle = shot.angle
        if self.rng.random() > profile.accuracy:
            angle += float(self.rng.uniform(-profile.angle_error, profile.angle_error))

        power_var = float(self.rng.uniform(-profile.power_error, profile.power_error))
        power = min(MAX_POWER, max(MIN_POWER, shot.power * (1 + power_var)))

        spin_x, spin_y = 0.0, 0.0
        if self.rng.random() < self.SPIN_PROBABILITY:
            spin_x = float(self.rng.uniform(-SPIN_RANGE, SPIN_RANGE))
            spin_y = float(self.rng.uniform(-SPIN_RANGE, SPIN_RANGE))

        return replace(shot, angle=angle, power=power, spin_x=spin_x, spin_y=spin_y)

    # ============================================================================
    # Defensive fallback
    # ============================================================================

    def calculate_defensive_shot(self, cue_ball: Ball, balls: Sequence[Ball]) -> ShotPlan:
        """Roll softly into the nearest ball, or shoot anywhere if none is left."""
        nearest = None
        nearest_dist = math.inf
        cue_pos = cue_ball.position

        for ball in balls:
            if not ball.on_table or ball.is_cue:
                continue
            dist = float(np.linalg.norm(ball.position - cue_pos))
            if dist < nearest_dist:
                nearest_dist = dist
                nearest = ball

        if nearest is None:
            log.info("No object balls left, playing a random shot")
            return self._random_shot()

        delta = nearest.position - cue_pos
        log.info(f"No viable pocketing shot, safety into ball {nearest.id}")
        return DefensiveShot(
            angle=math.atan2(delta[1], delta[0]),
            power=self.DEFENSIVE_POWER,
            target_ball_id=nearest.id,
            spin_y=self.DEFENSIVE_SPIN_Y,
        )

    # ============================================================================
    # Public interface
    # ============================================================================

    @override
    def calculate_shot(
        self,
        balls: Sequence[Ball],
        cue_ball: Ball,
        pockets: Sequence[Pocket],
        target_group: TargetGroup = TargetGroup.NONE,
    ) -> ShotPlan:
        candidates = self.find_candidates(balls, cue_ball, pockets, target_group)
        log.debug(f"{len(candidates)} viable candidates for group {target_group.value}")

        selected = self.select_shot(candidates)
        if selected is None:
            return self.calculate_defensive_shot(cue_ball, balls)

        shot = self.apply_difficulty_noise(selected)
        log.debug(
            f"Shot: ball {shot.target_ball_id} -> pocket {shot.pocket_index}, "
            f"score={shot.score:.1f}, cut={math.degrees(shot.cut_angle):.1f}deg, "
            f"angle={shot.angle:.3f} (ideal {shot.ideal_angle:.3f}), power={shot.power:.2f}"
        )
        return shot

    def get_thinking_time(self) -> float:
        """Advisory delay in ms before the move is shown; never slept on here."""
        low, high = self.profile.thinking_time_ms
        return float(self.rng.uniform(low, high))

    def place_cue_ball(
        self,
        balls: Sequence[Ball],
        pockets: Sequence[Pocket],
        target_group: TargetGroup = TargetGroup.NONE,
        **kwargs,
    ) -> Optional[Tuple[float, float]]:
        """Ball-in-hand: where to put the cue ball before calculate_shot."""
        return place_cue_ball(balls, pockets, target_group, **kwargs)
