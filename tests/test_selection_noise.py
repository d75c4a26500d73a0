"""
Tests for the selection policy and the difficulty noise model.
"""

import math

import numpy as np
import pytest

from poolai.planner import (
    PROFILES,
    Ball,
    Difficulty,
    OffensiveShot,
    Pocket,
    ShotPlanner,
    TargetGroup,
)


def _candidate(score, ball_id=1, power=0.5, angle=0.0):
    return OffensiveShot(
        angle=angle,
        power=power,
        target_ball_id=ball_id,
        pocket_index=0,
        score=score,
        cut_angle=0.0,
        ideal_angle=angle,
    )


@pytest.fixture
def candidates():
    # Deliberately unsorted
    return [_candidate(10, 1), _candidate(50, 2), _candidate(30, 3), _candidate(20, 4)]


class TestSelection:
    def test_empty_candidates(self, scripted_rng):
        planner = ShotPlanner("hard", rng=scripted_rng())
        assert planner.select_shot([]) is None

    def test_prefer_easy_always_best_without_drawing(self, scripted_rng, candidates):
        rng = scripted_rng()
        planner = ShotPlanner("easy", rng=rng)
        assert planner.select_shot(candidates).target_ball_id == 2
        assert rng.exhausted

    def test_best_shot_roll(self, scripted_rng, candidates):
        planner = ShotPlanner("hard", rng=scripted_rng(randoms=[0.69]))
        assert planner.select_shot(candidates).target_ball_id == 2

    def test_top_three_roll(self, scripted_rng, candidates):
        # Ranked: 2 (50), 3 (30), 4 (20), 1 (10)
        planner = ShotPlanner("hard", rng=scripted_rng(randoms=[0.7, 0.99]))
        assert planner.select_shot(candidates).target_ball_id == 4

        planner = ShotPlanner("hard", rng=scripted_rng(randoms=[0.8, 0.4]))
        assert planner.select_shot(candidates).target_ball_id == 3

        planner = ShotPlanner("hard", rng=scripted_rng(randoms=[0.8, 0.0]))
        assert planner.select_shot(candidates).target_ball_id == 2

    def test_top_pool_shrinks_with_few_candidates(self, scripted_rng):
        pair = [_candidate(5, 1), _candidate(9, 2)]
        planner = ShotPlanner("medium-hard", rng=scripted_rng(randoms=[0.9, 0.99]))
        assert planner.select_shot(pair).target_ball_id == 1

        single = [_candidate(5, 7)]
        planner = ShotPlanner("medium-hard", rng=scripted_rng(randoms=[0.9, 0.99]))
        assert planner.select_shot(single).target_ball_id == 7


class TestNoise:
    def test_accurate_roll_keeps_aim(self, scripted_rng):
        rng = scripted_rng(randoms=[0.5, 0.9], uniforms=[0.5])
        planner = ShotPlanner("hard", rng=rng)
        shot = planner.apply_difficulty_noise(_candidate(40, angle=0.25, power=0.6))

        assert shot.angle == pytest.approx(0.25)
        assert shot.power == pytest.approx(0.6)
        assert shot.spin == (0.0, 0.0)
        assert rng.exhausted

    def test_missed_roll_adds_bounded_angle_error(self, scripted_rng):
        rng = scripted_rng(randoms=[0.95, 0.9], uniforms=[1.0, 0.5])
        planner = ShotPlanner("hard", rng=rng)
        shot = planner.apply_difficulty_noise(_candidate(40, angle=0.25))

        assert shot.angle == pytest.approx(0.25 + math.radians(3))
        assert shot.ideal_angle == pytest.approx(0.25)

    def test_negative_angle_error(self, scripted_rng):
        rng = scripted_rng(randoms=[0.99, 0.9], uniforms=[0.0, 0.5])
        planner = ShotPlanner("easy", rng=rng)
        shot = planner.apply_difficulty_noise(_candidate(40, angle=1.0))
        assert shot.angle == pytest.approx(1.0 - math.radians(25))

    def test_power_variation_and_clamp(self, scripted_rng):
        planner = ShotPlanner("easy", rng=scripted_rng(randoms=[0.0, 0.9], uniforms=[1.0]))
        assert planner.apply_difficulty_noise(_candidate(1, power=0.6)).power == pytest.approx(0.75)

        planner = ShotPlanner("easy", rng=scripted_rng(randoms=[0.0, 0.9], uniforms=[1.0]))
        assert planner.apply_difficulty_noise(_candidate(1, power=0.85)).power == 1.0

        planner = ShotPlanner("easy", rng=scripted_rng(randoms=[0.0, 0.9], uniforms=[0.0]))
        assert planner.apply_difficulty_noise(_candidate(1, power=0.21)).power == 0.2

    def test_spin_roll(self, scripted_rng):
        rng = scripted_rng(randoms=[0.0, 0.29], uniforms=[0.5, 1.0, 0.0])
        planner = ShotPlanner("medium", rng=rng)
        shot = planner.apply_difficulty_noise(_candidate(1))
        assert shot.spin == (pytest.approx(0.6), pytest.approx(-0.6))

    def test_noise_returns_new_shot(self, scripted_rng):
        original = _candidate(1, angle=0.1, power=0.5)
        planner = ShotPlanner("easy", rng=scripted_rng(randoms=[0.99, 0.0], uniforms=[1.0, 1.0, 1.0, 1.0]))
        noisy = planner.apply_difficulty_noise(original)
        assert noisy is not original
        assert original.angle == 0.1
        assert original.spin == (0.0, 0.0)

    def test_same_draws_same_output(self, scripted_rng):
        draws = dict(randoms=[0.97, 0.1], uniforms=[0.3, 0.8, 0.2, 0.6])
        first = ShotPlanner("medium", rng=scripted_rng(**draws)).apply_difficulty_noise(_candidate(1))
        second = ShotPlanner("medium", rng=scripted_rng(**draws)).apply_difficulty_noise(_candidate(1))
        assert first == second


class TestDifficultyCalibration:
    """One ball, one pocket: every offensive shot comes from the same candidate."""

    @staticmethod
    def _mean_aim_error(difficulty, trials=3000):
        cue = Ball(0, 200.0, 250.0)
        target = Ball(3, 500.0, 250.0)
        pockets = [Pocket(600.0, 100.0)]
        planner = ShotPlanner(difficulty, rng=np.random.default_rng(2024))

        errors = []
        for _ in range(trials):
            shot = planner.calculate_shot([cue, target], cue, pockets, TargetGroup.SOLIDS)
            errors.append(abs(shot.angle - shot.ideal_angle))
        return sum(errors) / len(errors)

    def test_harder_tiers_aim_closer(self):
        easy = self._mean_aim_error(Difficulty.EASY)
        medium = self._mean_aim_error(Difficulty.MEDIUM)
        medium_hard = self._mean_aim_error(Difficulty.MEDIUM_HARD)
        hard = self._mean_aim_error(Difficulty.HARD)
        assert hard < medium_hard < medium < easy

    def test_mean_error_matches_profile(self):
        profile = PROFILES[Difficulty.EASY]
        expected = (1 - profile.accuracy) * profile.angle_error / 2
        assert self._mean_aim_error(Difficulty.EASY) == pytest.approx(expected, rel=0.15)

    def test_power_always_in_bounds(self):
        cue = Ball(0, 100.0, 250.0)
        balls = [cue, Ball(1, 300.0, 200.0), Ball(2, 700.0, 400.0), Ball(9, 850.0, 100.0)]
        pockets = [Pocket(40, 40), Pocket(460, 40), Pocket(880, 40), Pocket(40, 460)]
        planner = ShotPlanner("easy", rng=np.random.default_rng(5))
        for _ in range(500):
            shot = planner.calculate_shot(balls, cue, pockets, TargetGroup.NONE)
            assert 0.2 <= shot.power <= 1.0
            assert math.isfinite(shot.angle)
