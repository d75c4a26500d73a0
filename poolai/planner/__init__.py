from .base import (
    BALL_RADIUS,
    Ball,
    BallGroup,
    DefensiveShot,
    OffensiveShot,
    Planner,
    PlannerConfigError,
    Pocket,
    RandomShot,
    ShotKind,
    ShotPlan,
    TargetGroup,
)
from .difficulty import PROFILES, Difficulty, DifficultyProfile, get_profile
from .geometry import ShotPlanner
from .placement import choose_placement_target, place_cue_ball
from .random import RandomPlanner
from .table import DEFAULT_POCKETS, TableSnapshot, standard_pockets

__all__ = [
    "BALL_RADIUS",
    "Ball",
    "BallGroup",
    "Pocket",
    "TargetGroup",
    "ShotKind",
    "ShotPlan",
    "OffensiveShot",
    "DefensiveShot",
    "RandomShot",
    "Planner",
    "PlannerConfigError",
    "Difficulty",
    "DifficultyProfile",
    "PROFILES",
    "get_profile",
    "ShotPlanner",
    "RandomPlanner",
    "choose_placement_target",
    "place_cue_ball",
    "TableSnapshot",
    "DEFAULT_POCKETS",
    "standard_pockets",
]
