"""
Shared fixtures for planner tests.

ScriptedRng replays fixed draws so each stochastic step can be pinned down.
uniform() takes its draws as fractions of the requested interval, which
keeps the scripts independent of the difficulty constants.
"""

import numpy as np
import pytest

from poolai.planner import Ball, Pocket


class ScriptedRng:
    def __init__(self, randoms=(), uniforms=()):
        self.randoms = list(randoms)
        self.uniforms = list(uniforms)

    def random(self):
        return self.randoms.pop(0)

    def uniform(self, low, high):
        frac = self.uniforms.pop(0)
        return low + frac * (high - low)

    @property
    def exhausted(self):
        return not self.randoms and not self.uniforms


@pytest.fixture
def scripted_rng():
    return ScriptedRng


@pytest.fixture
def seeded_rng():
    return np.random.default_rng(1234)


@pytest.fixture
def cue_ball():
    return Ball(0, 200.0, 250.0)


@pytest.fixture
def straight_table(cue_ball):
    """Cue, one solid and a pocket all on y=250: a straight-in shot."""
    target = Ball(3, 500.0, 250.0)
    pockets = [Pocket(600.0, 250.0)]
    return [cue_ball, target], pockets
