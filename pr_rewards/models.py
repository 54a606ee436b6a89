"""
Data Models Module

This module defines all Pydantic models used throughout the application.
Strong typing ensures data integrity and provides clear contracts between components.

Design Decisions:
- Use Pydantic models for all data transfer objects
- Reward models are frozen: the catalog is loaded once and shared read-only
- Webhook models only declare the fields we actually read
"""

import math
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enums
# =============================================================================

class Rarity(str, Enum):
    """Rarity tiers for reward items."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"

    @property
    def glyph(self) -> str:
        """Chat glyph shown in front of the reward announcement."""
        return RARITY_GLYPHS[self]


RARITY_GLYPHS = {
    Rarity.COMMON: "⚪",
    Rarity.UNCOMMON: "🟢",
    Rarity.RARE: "🔵",
    Rarity.LEGENDARY: "🟣✨",
}


# =============================================================================
# Reward Models
# =============================================================================

class RewardItem(BaseModel):
    """
    A single reward that can be drawn for an approved PR.

    Attributes:
        name: Display name of the reward
        weight: Relative draw weight (must be positive and finite)
        rarity: Rarity tier, mapped to a display glyph
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    weight: float = Field(gt=0, allow_inf_nan=False)
    rarity: Rarity

    @field_validator("weight", mode="before")
    @classmethod
    def reject_boolean_weight(cls, v):
        """JSON true/false are not weights."""
        if isinstance(v, bool):
            raise ValueError("Weight must be a number, not a boolean")
        return v


class RewardCatalog(BaseModel):
    """
    Ordered, immutable collection of reward items.

    Item order is the walk order used by weighted selection and never
    changes for the lifetime of the process.
    """
    model_config = ConfigDict(frozen=True)

    items: Tuple[RewardItem, ...]

    @field_validator("items")
    @classmethod
    def validate_not_empty(cls, v: Tuple[RewardItem, ...]) -> Tuple[RewardItem, ...]:
        """A catalog with nothing to draw is a configuration error."""
        if not v:
            raise ValueError("Reward catalog must contain at least one item")
        return v

    @property
    def total_weight(self) -> float:
        """Sum of all item weights."""
        return math.fsum(item.weight for item in self.items)

    def __len__(self) -> int:
        return len(self.items)


# =============================================================================
# GitHub Webhook Models
# =============================================================================

class GitHubUser(BaseModel):
    """GitHub user information."""
    login: str


class GitHubReview(BaseModel):
    """Pull request review information."""
    state: str


class GitHubPullRequest(BaseModel):
    """Pull request fields used in the reward announcement."""
    title: str
    html_url: str
    user: GitHubUser


class ReviewWebhookPayload(BaseModel):
    """
    A pull_request_review webhook payload.

    Only validated once the event has passed the approval filter, so every
    field needed to build the announcement is required here.
    """
    action: str
    review: GitHubReview
    pull_request: GitHubPullRequest


# =============================================================================
# Internal Processing Models
# =============================================================================

class InboundEvent(BaseModel):
    """
    A single inbound webhook request.

    The raw body is kept verbatim because the signature is computed over
    the exact bytes that were sent.
    """
    model_config = ConfigDict(frozen=True)

    raw_body: bytes
    signature: Optional[str] = Field(default=None, repr=False)
    delivery_id: Optional[str] = None
    event_type: Optional[str] = None


class NotificationMessage(BaseModel):
    """Body of the outbound chat webhook POST."""
    text: str = Field(min_length=1)
