"""
Review Reward Processor Module

This module orchestrates handling of a single review webhook delivery:
verify the signature, parse the payload, filter for approvals, draw a
reward and announce it in chat.

Design Decisions:
- Each stage reports a distinct outcome instead of raising
- No state is retained between deliveries
- The catalog and settings are read-only and shared across requests
- Notification failures are logged and surfaced, never retried
"""

import json
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import ValidationError

from pr_rewards.config import Settings
from pr_rewards.logging_config import get_logger
from pr_rewards.models import (
    InboundEvent,
    RewardCatalog,
    RewardItem,
    ReviewWebhookPayload,
)
from pr_rewards.services.notifier import ChatNotifier, NotificationDispatchError
from pr_rewards.services.reward_selector import RandomSource, select_reward
from pr_rewards.webhook.security import verify_signature

logger = get_logger(__name__)

APPROVAL_ACTION = "submitted"
APPROVAL_STATE = "approved"


class ReviewOutcome(str, Enum):
    """Terminal states of a webhook delivery."""
    UNAUTHORIZED = "unauthorized"
    MALFORMED = "malformed"
    IGNORED = "ignored"
    REWARDED = "rewarded"
    DISPATCH_FAILED = "dispatch_failed"


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of one delivery, plus what was drawn and sent when relevant."""
    outcome: ReviewOutcome
    reason: Optional[str] = None
    reward: Optional[RewardItem] = None
    message: Optional[str] = None


def format_reward_message(
    author: str,
    reward: RewardItem,
    pr_title: str,
    pr_url: str
) -> str:
    """Build the chat announcement for a reward."""
    return (
        f"{reward.rarity.glyph} 🎉 {author} caught a {reward.name} "
        f"for getting a PR approved!\n\nPR: {pr_title}\n{pr_url}"
    )


def is_approval(payload: Dict[str, Any]) -> bool:
    """Check whether a payload is a submitted, approving review."""
    review = payload.get("review")
    if not isinstance(review, dict):
        return False
    return (
        payload.get("action") == APPROVAL_ACTION
        and review.get("state") == APPROVAL_STATE
    )


class ReviewRewardProcessor:
    """
    Turns approved PR reviews into chat reward announcements.

    Usage:
        processor = ReviewRewardProcessor(settings, catalog, notifier)
        result = await processor.handle(event)
    """

    def __init__(
        self,
        settings: Settings,
        catalog: RewardCatalog,
        notifier: ChatNotifier,
        random_source: RandomSource = random.random
    ):
        self.settings = settings
        self.catalog = catalog
        self.notifier = notifier
        self.random_source = random_source
        self._secret = settings.webhook_secret_bytes

    async def handle(self, event: InboundEvent) -> ProcessingResult:
        """
        Run one delivery through every stage.

        Args:
            event: The inbound request

        Returns:
            ProcessingResult describing where processing stopped
        """
        log = logger.bind(delivery_id=event.delivery_id, event_type=event.event_type)

        # Stage 1: authenticate
        if not verify_signature(event.raw_body, event.signature, self._secret):
            log.warning("Rejected webhook with invalid signature")
            return ProcessingResult(ReviewOutcome.UNAUTHORIZED, reason="invalid signature")

        # Stage 2: parse
        payload = self._parse(event.raw_body)
        if payload is None:
            log.error("Failed to parse webhook payload")
            return ProcessingResult(ReviewOutcome.MALFORMED, reason="invalid JSON payload")

        # Stage 3: filter
        review = payload.get("review")
        review_state = review.get("state") if isinstance(review, dict) else None
        log = log.bind(action=payload.get("action"), review_state=review_state)

        if not is_approval(payload):
            log.debug("Ignoring non-approval event")
            return ProcessingResult(ReviewOutcome.IGNORED, reason="not an approval")

        try:
            approval = ReviewWebhookPayload.model_validate(payload)
        except ValidationError as e:
            log.error(
                "Invalid approval payload",
                error=str(e),
                error_count=e.error_count()
            )
            return ProcessingResult(ReviewOutcome.MALFORMED, reason="missing pull request fields")

        # Stage 4: reward
        reward = select_reward(self.catalog, self.random_source)
        author = approval.pull_request.user.login
        message = format_reward_message(
            author,
            reward,
            approval.pull_request.title,
            approval.pull_request.html_url
        )

        log.info(
            "Reward drawn",
            actor=author,
            reward=reward.name,
            rarity=reward.rarity.value
        )

        # Stage 5: dispatch
        try:
            await self.notifier.send(message)
        except NotificationDispatchError as e:
            log.error(
                "Failed to post reward notification",
                error=str(e),
                status_code=e.status_code
            )
            return ProcessingResult(
                ReviewOutcome.DISPATCH_FAILED,
                reason=str(e),
                reward=reward,
                message=message
            )

        log.info(
            "Posted reward notification",
            actor=author,
            reward=reward.name,
            rarity=reward.rarity.value
        )

        return ProcessingResult(ReviewOutcome.REWARDED, reward=reward, message=message)

    @staticmethod
    def _parse(raw_body: bytes) -> Optional[Dict[str, Any]]:
        """Decode the body as a JSON object, or None if it is not one."""
        try:
            payload = json.loads(raw_body)
        except (ValueError, RecursionError):
            return None
        if not isinstance(payload, dict):
            return None
        return payload
