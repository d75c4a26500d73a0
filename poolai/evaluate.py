import argparse
import json
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Type

import yaml

from poolai.planner import Planner, RandomPlanner, ShotKind, ShotPlanner, TableSnapshot
from poolai.utils.logger import get_logger, setup_logger
from poolai.utils.seed import make_rng, set_random_seed

logger = get_logger()

PLANNER_REGISTRY: dict[str, Type[Planner]] = {
    "ShotPlanner": ShotPlanner,
    "RandomPlanner": RandomPlanner,
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Evaluate the AI shot planner on a fixed table snapshot",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default="configs/demo.yaml",
        help="Experiment config YAML",
    )

    parser.add_argument(
        "--n_trials",
        "-n",
        type=int,
        default=None,
        help="Number of decisions to sample, overrides n_trials in the config.",
    )

    parser.add_argument(
        "--experiment_name",
        "-e",
        type=str,
        default=None,
        help="Experiment name, overrides experiment_name in the config.",
    )

    parser.add_argument(
        "--random_seed",
        type=int,
        default=None,
        help="Random seed, overrides random_seed in the config.",
    )

    parser.add_argument(
        "--random_seed_enabled",
        action="store_true",
        default=None,
        help="Fix the random seed, overrides random_seed_enabled in the config.",
    )

    parser.add_argument(
        "--output_dir",
        "-o",
        type=str,
        default=None,
        help="Root directory for experiment folders, overrides output_dir in the config.",
    )

    return parser.parse_args(argv)


def load_config(config_path: str) -> Dict:
    """Load the full experiment config from YAML.

    Args:
        config_path: Path to the YAML file

    Returns:
        Config dict with planner, table, n_trials, ...
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse config {config_path}: {e}") from e

    if not config:
        raise ValueError(f"Config file is empty: {config_path}")
    return config


def merge_config(config: Dict, args: argparse.Namespace) -> Dict:
    """Override config values with command line arguments that were given."""
    for key, value in vars(args).items():
        if key != "config" and value is not None:
            # logger is not set up yet
            print(f"Override config: {key} = {value}")
            config[key] = value

    return config


def build_planner(planner_config: Dict[str, Any], seed: Optional[int]) -> Planner:
    planner_type = planner_config.get("type", "ShotPlanner")
    if planner_type not in PLANNER_REGISTRY:
        raise ValueError(
            f"Unknown planner type {planner_type!r}, expected one of {list(PLANNER_REGISTRY)}"
        )
    params = dict(planner_config.get("params", {}))
    return PLANNER_REGISTRY[planner_type](rng=make_rng(seed), **params)


def run_trials(planner: Planner, snapshot: TableSnapshot, n_trials: int) -> Dict[str, Any]:
    """Sample n_trials independent decisions on the same snapshot and summarize them."""
    counts = {kind.value: 0 for kind in ShotKind}
    aim_errors = []
    powers = []
    thinking_times = []

    for _ in range(n_trials):
        shot = planner.calculate_shot(
            snapshot.balls, snapshot.cue_ball, snapshot.pockets, snapshot.target_group
        )
        counts[shot.kind.value] += 1
        powers.append(shot.power)
        if shot.kind is ShotKind.OFFENSIVE:
            aim_errors.append(abs(math.degrees(shot.angle - shot.ideal_angle)))
        if isinstance(planner, ShotPlanner):
            thinking_times.append(planner.get_thinking_time())

    def mean(values):
        return sum(values) / len(values) if values else 0.0

    return {
        "N_TRIALS": n_trials,
        "SHOT_KINDS": counts,
        "MEAN_AIM_ERROR_DEG": mean(aim_errors),
        "MAX_AIM_ERROR_DEG": max(aim_errors, default=0.0),
        "MEAN_POWER": mean(powers),
        "MEAN_THINKING_TIME_MS": mean(thinking_times),
    }


def main(argv: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    args = parse_args(argv)

    config = load_config(args.config)
    config = merge_config(config, args)

    folder_name = config.get("experiment_name", "") + f"{datetime.now().strftime('_%Y%m%d_%H%M%S')}"
    run_dir = Path(config.get("output_dir", "experiments")) / folder_name
    n_trials = int(config.get("n_trials", 200))

    setup_logger(log_dir=str(run_dir), log_filename="evaluation.log")

    logger.info(f"Config loaded from {args.config} and command line args {args}: {config}")

    with open(run_dir / "config.yaml", "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f)

    seed_enabled = bool(config.get("random_seed_enabled", False))
    seed = config.get("random_seed", 42)
    set_random_seed(enable=seed_enabled, seed=seed)

    snapshot = TableSnapshot.from_dict(config.get("table"))
    planner = build_planner(config.get("planner", {}), seed if seed_enabled else None)

    logger.info(
        f"Running {n_trials} trials with {type(planner).__name__} "
        f"on {len(snapshot.balls)} balls, group={snapshot.target_group.value}"
    )
    results = run_trials(planner, snapshot, n_trials)

    with open(run_dir / "results.json", "w", encoding="utf-8") as f:
        json.dump(results, f, indent=4)

    return results


if __name__ == "__main__":
    results = main()
    logger.info(f"Evaluation completed. Results: {results}")
