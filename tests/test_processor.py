"""
Tests for the Review Reward Processor

Runs deliveries through the processor without HTTP.
"""

import json

import pytest

from conftest import RecordingNotifier, sign
from pr_rewards.models import InboundEvent, Rarity, RewardItem
from pr_rewards.services.notifier import NotificationDispatchError
from pr_rewards.webhook.processor import (
    ReviewOutcome,
    ReviewRewardProcessor,
    format_reward_message,
    is_approval,
)


def signed_event(body: bytes, **kwargs) -> InboundEvent:
    """Build an inbound event with a valid signature."""
    return InboundEvent(raw_body=body, signature=sign(body), **kwargs)


@pytest.fixture
def processor(settings, catalog, notifier) -> ReviewRewardProcessor:
    """Processor whose draws land on the last catalog item."""
    return ReviewRewardProcessor(settings, catalog, notifier, random_source=lambda: 0.99)


class TestFormatRewardMessage:
    """Test suite for format_reward_message."""

    def test_message_layout(self):
        """The announcement follows the fixed template."""
        reward = RewardItem(name="Pikachu", weight=1, rarity=Rarity.RARE)

        message = format_reward_message("alice", reward, "Fix bug", "https://x/pr/1")

        assert message == (
            "🔵 🎉 alice caught a Pikachu for getting a PR approved!"
            "\n\nPR: Fix bug\nhttps://x/pr/1"
        )

    @pytest.mark.parametrize("rarity,glyph", [
        (Rarity.COMMON, "⚪"),
        (Rarity.UNCOMMON, "🟢"),
        (Rarity.RARE, "🔵"),
        (Rarity.LEGENDARY, "🟣✨"),
    ])
    def test_rarity_glyph(self, rarity, glyph):
        """Each rarity leads with its glyph."""
        reward = RewardItem(name="Mew", weight=1, rarity=rarity)

        assert format_reward_message("a", reward, "t", "u").startswith(glyph + " ")


class TestIsApproval:
    """Test suite for the approval filter."""

    def test_submitted_approved(self):
        assert is_approval({"action": "submitted", "review": {"state": "approved"}})

    @pytest.mark.parametrize("payload", [
        {"action": "submitted", "review": {"state": "commented"}},
        {"action": "submitted", "review": {"state": "changes_requested"}},
        {"action": "edited", "review": {"state": "approved"}},
        {"action": "dismissed", "review": {"state": "approved"}},
        {"action": "submitted", "review": {"state": "APPROVED"}},
        {"action": "submitted"},
        {"action": "submitted", "review": None},
        {"action": "submitted", "review": "approved"},
        {"zen": "Keep it logically awesome."},
    ])
    def test_other_events(self, payload):
        assert not is_approval(payload)


class TestReviewRewardProcessor:
    """Test suite for ReviewRewardProcessor.handle."""

    async def test_approval_is_rewarded(self, processor, notifier, approved_body):
        """An approval draws a reward and sends exactly one message."""
        result = await processor.handle(signed_event(approved_body, delivery_id="d-1"))

        assert result.outcome == ReviewOutcome.REWARDED
        assert result.reward.name == "Mewtwo"
        assert notifier.sent == [result.message]
        assert "alice" in result.message
        assert "Fix bug" in result.message
        assert "https://x/pr/1" in result.message
        assert result.message.startswith("🟣✨")

    async def test_bad_signature(self, processor, notifier, approved_body):
        """A wrong signature stops before parsing."""
        event = InboundEvent(raw_body=approved_body, signature=sign(approved_body, "wrong"))

        result = await processor.handle(event)

        assert result.outcome == ReviewOutcome.UNAUTHORIZED
        assert notifier.sent == []

    async def test_missing_signature(self, processor, notifier, approved_body):
        """A missing signature is unauthorized."""
        result = await processor.handle(InboundEvent(raw_body=approved_body))

        assert result.outcome == ReviewOutcome.UNAUTHORIZED
        assert notifier.sent == []

    async def test_signature_over_exact_bytes(self, processor, notifier, approved_payload):
        """Re-serializing the payload invalidates the signature."""
        sent = json.dumps(approved_payload, indent=2).encode()
        signed = json.dumps(approved_payload).encode()

        result = await processor.handle(InboundEvent(raw_body=sent, signature=sign(signed)))

        assert result.outcome == ReviewOutcome.UNAUTHORIZED

    async def test_comment_review_ignored(self, processor, notifier):
        """A commented review is a valid but irrelevant event."""
        body = json.dumps({"action": "submitted", "review": {"state": "commented"}}).encode()

        result = await processor.handle(signed_event(body))

        assert result.outcome == ReviewOutcome.IGNORED
        assert notifier.sent == []

    @pytest.mark.parametrize("body", [
        b"",
        b"{not json",
        b"\xff\xfe\x00",
        b"[1, 2]",
        b'"text"',
        pytest.param(b"[" * 100000 + b"]" * 100000, id="deeply-nested"),
    ])
    async def test_malformed_payload(self, processor, notifier, body):
        """Bodies that are not JSON objects are malformed."""
        result = await processor.handle(signed_event(body))

        assert result.outcome == ReviewOutcome.MALFORMED
        assert notifier.sent == []

    async def test_approval_missing_pull_request(self, processor, notifier):
        """An approval without pull request details is malformed."""
        body = json.dumps({"action": "submitted", "review": {"state": "approved"}}).encode()

        result = await processor.handle(signed_event(body))

        assert result.outcome == ReviewOutcome.MALFORMED
        assert notifier.sent == []

    async def test_dispatch_failure(self, settings, catalog, approved_body):
        """A failed post is reported, not retried."""
        failing = RecordingNotifier(error=NotificationDispatchError("boom", status_code=502))
        processor = ReviewRewardProcessor(settings, catalog, failing, random_source=lambda: 0.0)

        result = await processor.handle(signed_event(approved_body))

        assert result.outcome == ReviewOutcome.DISPATCH_FAILED
        assert result.reward.name == "Pidgey"
        assert failing.sent == []

    async def test_no_state_between_deliveries(self, processor, notifier, approved_body):
        """Duplicate deliveries are each processed in full."""
        event = signed_event(approved_body, delivery_id="dup")

        first = await processor.handle(event)
        second = await processor.handle(event)

        assert first.outcome == second.outcome == ReviewOutcome.REWARDED
        assert len(notifier.sent) == 2
