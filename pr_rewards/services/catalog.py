"""
Reward Catalog Loader

Reads the static reward catalog from a JSON file once at startup.
"""

import json
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from pr_rewards.logging_config import get_logger
from pr_rewards.models import RewardCatalog
from pr_rewards.services.reward_selector import InvalidCatalogError, validate_catalog

logger = get_logger(__name__)


def load_reward_catalog(path: Union[str, Path]) -> RewardCatalog:
    """
    Load and validate the reward catalog.

    The file holds a JSON array of ``{"name", "weight", "rarity"}`` records.
    An object with an ``items`` array is accepted as well.

    Args:
        path: Path to the catalog file

    Returns:
        Immutable reward catalog

    Raises:
        InvalidCatalogError: If the file cannot be read, is not valid JSON,
            or does not describe a usable catalog
    """
    path = Path(path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise InvalidCatalogError(f"Cannot read reward catalog {path}: {e}") from e
    except ValueError as e:
        raise InvalidCatalogError(f"Reward catalog {path} is not valid JSON: {e}") from e

    if isinstance(data, list):
        data = {"items": data}

    try:
        catalog = RewardCatalog.model_validate(data)
    except ValidationError as e:
        raise InvalidCatalogError(f"Reward catalog {path} is invalid: {e}") from e

    total_weight = validate_catalog(catalog)

    logger.info(
        "Loaded reward catalog",
        path=str(path),
        num_items=len(catalog),
        total_weight=total_weight
    )

    return catalog
