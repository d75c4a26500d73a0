import random
from typing import Optional

import numpy as np

from poolai.utils.logger import get_logger

logger = get_logger()


def set_random_seed(enable: bool = False, seed: int = 42) -> None:
    """Seed the global random sources for reproducible runs.

    Args:
        enable: Fix the seed when True, otherwise reseed from system entropy.
        seed: Seed used when enable is True.
    """
    if enable:
        random.seed(seed)
        np.random.seed(seed)
        logger.info(f"Random seed set to {seed}")
    else:
        random.seed()
        np.random.seed(None)
        logger.info("Random seed disabled, running fully random")


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create an independent generator to hand to a planner."""
    return np.random.default_rng(seed)
