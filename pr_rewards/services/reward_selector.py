"""
Weighted Reward Selection

Picks one reward from the catalog with probability proportional to its
weight, using inverse sampling over the cumulative weights.

Design Decisions:
- The random source is injected so draws are reproducible in tests
- The catalog is walked in its fixed order
- Float drift past the last item falls back to the last item
"""

import math
import random
from typing import Callable

from pr_rewards.models import RewardCatalog, RewardItem

RandomSource = Callable[[], float]


class InvalidCatalogError(Exception):
    """Raised when the reward catalog is empty or has a non-positive weight."""
    pass


def validate_catalog(catalog: RewardCatalog) -> float:
    """
    Check that the catalog can be drawn from.

    Returns:
        The total weight of the catalog

    Raises:
        InvalidCatalogError: If the catalog is empty or any weight is not
            a positive finite number
    """
    if not catalog.items:
        raise InvalidCatalogError("Reward catalog is empty")

    for item in catalog.items:
        if not (item.weight > 0 and math.isfinite(item.weight)):
            raise InvalidCatalogError(
                f"Reward '{item.name}' has invalid weight {item.weight!r}"
            )

    return catalog.total_weight


def select_reward(
    catalog: RewardCatalog,
    random_source: RandomSource = random.random
) -> RewardItem:
    """
    Draw one reward from the catalog.

    Args:
        catalog: Reward catalog to draw from
        random_source: Callable returning a float in [0, 1)

    Returns:
        The selected reward item

    Raises:
        InvalidCatalogError: If the catalog cannot be drawn from
    """
    total = validate_catalog(catalog)
    remaining = random_source() * total

    for item in catalog.items:
        if remaining < item.weight:
            return item
        remaining -= item.weight

    # Rounding can leave a sliver past the final boundary
    return catalog.items[-1]
