import dataclasses
import math

import pytest

from poolai.planner import PROFILES, Difficulty, PlannerConfigError, ShotPlanner, get_profile


class TestDifficulty:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("easy", Difficulty.EASY),
            ("Medium", Difficulty.MEDIUM),
            ("medium-hard", Difficulty.MEDIUM_HARD),
            ("MEDIUM_HARD", Difficulty.MEDIUM_HARD),
            (Difficulty.HARD, Difficulty.HARD),
        ],
    )
    def test_from_name(self, name, expected):
        assert Difficulty.from_name(name) is expected

    def test_unknown_name_is_an_error(self):
        with pytest.raises(PlannerConfigError):
            Difficulty.from_name("expert")
        with pytest.raises(ValueError):
            ShotPlanner(difficulty="impossible")

    def test_every_tier_has_a_profile(self):
        assert set(PROFILES) == set(Difficulty)

    def test_angle_error_stored_in_radians(self):
        profile = get_profile("medium-hard")
        assert profile.angle_error == pytest.approx(math.radians(8))
        assert profile.angle_error_deg == pytest.approx(8)

    def test_tiers_get_stricter(self):
        ordered = [PROFILES[d] for d in (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.MEDIUM_HARD, Difficulty.HARD)]
        accuracies = [p.accuracy for p in ordered]
        angle_errors = [p.angle_error for p in ordered]
        power_errors = [p.power_error for p in ordered]
        assert accuracies == sorted(accuracies)
        assert angle_errors == sorted(angle_errors, reverse=True)
        assert power_errors == sorted(power_errors, reverse=True)

    def test_profiles_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            PROFILES[Difficulty.HARD].accuracy = 1.0

    def test_planner_default_tier(self):
        planner = ShotPlanner()
        assert planner.difficulty is Difficulty.MEDIUM_HARD
        assert planner.profile is PROFILES[Difficulty.MEDIUM_HARD]
