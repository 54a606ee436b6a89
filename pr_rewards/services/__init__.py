"""
Services Package

This package contains the service modules for PR rewards:
- reward_selector: Weighted random reward selection
- catalog: Reward catalog loading
- notifier: Chat webhook client
"""

from pr_rewards.services.catalog import load_reward_catalog
from pr_rewards.services.notifier import ChatNotifier, NotificationDispatchError
from pr_rewards.services.reward_selector import (
    InvalidCatalogError,
    select_reward,
    validate_catalog,
)

__all__ = [
    "load_reward_catalog",
    "ChatNotifier",
    "NotificationDispatchError",
    "InvalidCatalogError",
    "select_reward",
    "validate_catalog",
]
