"""
Test Configuration

Pytest configuration and fixtures for the test suite.
"""

import hashlib
import hmac
import json
from typing import Generator, List, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pr_rewards.config import Settings
from pr_rewards.main import create_app
from pr_rewards.models import Rarity, RewardCatalog, RewardItem
from pr_rewards.services.notifier import NotificationDispatchError

TEST_SECRET = "test_webhook_secret_1234567890abcdef"
TEST_CHAT_URL = "https://chat.example.com/hooks/test-token"


def sign(body: bytes, secret: str = TEST_SECRET) -> str:
    """Compute a valid X-Hub-Signature-256 header for a body."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


class RecordingNotifier:
    """Stand-in for ChatNotifier that records every message."""

    def __init__(self, error: Optional[NotificationDispatchError] = None):
        self.sent: List[str] = []
        self.error = error

    async def send(self, text: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(text)


@pytest.fixture
def settings() -> Settings:
    """Settings built explicitly, ignoring any local .env file."""
    return Settings(
        _env_file=None,
        github_webhook_secret=TEST_SECRET,
        chat_webhook_url=TEST_CHAT_URL,
        log_json_format=False,
    )


@pytest.fixture
def catalog() -> RewardCatalog:
    """Small catalog covering every rarity."""
    return RewardCatalog(items=(
        RewardItem(name="Pidgey", weight=50, rarity=Rarity.COMMON),
        RewardItem(name="Eevee", weight=30, rarity=Rarity.UNCOMMON),
        RewardItem(name="Pikachu", weight=15, rarity=Rarity.RARE),
        RewardItem(name="Mewtwo", weight=5, rarity=Rarity.LEGENDARY),
    ))


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Notifier that records messages instead of posting them."""
    return RecordingNotifier()


@pytest.fixture
def app(settings: Settings, catalog: RewardCatalog, notifier: RecordingNotifier) -> FastAPI:
    """Application whose draws always land on the first catalog item."""
    return create_app(
        settings=settings,
        catalog=catalog,
        notifier=notifier,
        random_source=lambda: 0.0,
    )


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create a test client for synchronous tests."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def approved_payload() -> dict:
    """Sample pull_request_review payload for an approval."""
    return {
        "action": "submitted",
        "review": {
            "id": 80,
            "state": "approved",
            "user": {"login": "bob", "id": 2}
        },
        "pull_request": {
            "number": 1,
            "title": "Fix bug",
            "html_url": "https://x/pr/1",
            "user": {"login": "alice", "id": 1}
        },
        "repository": {"full_name": "owner/repo"}
    }


@pytest.fixture
def approved_body(approved_payload: dict) -> bytes:
    """Serialized approval payload."""
    return json.dumps(approved_payload).encode("utf-8")
