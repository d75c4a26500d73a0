# RandomPlanner only plays the last-resort random shot; the evaluator uses it as a floor.

from typing import Optional, Sequence, override

from .base import Ball, Planner, Pocket, RandomSource, ShotPlan, TargetGroup


class RandomPlanner(Planner):
    def __init__(self, rng: Optional[RandomSource] = None):
        super().__init__(rng=rng)

    @override
    def calculate_shot(
        self,
        balls: Sequence[Ball],
        cue_ball: Ball,
        pockets: Sequence[Pocket],
        target_group: TargetGroup = TargetGroup.NONE,
    ) -> ShotPlan:
        return self._random_shot()
