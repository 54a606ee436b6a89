"""
Chat Notification Client

Posts reward announcements to a chat incoming-webhook (Teams, Slack and
similar services all accept a ``{"text": ...}`` body).

Design Decisions:
- Use httpx for async HTTP requests
- One attempt per announcement, failures are surfaced to the caller
- Never log the webhook URL, it embeds the channel token
"""

from typing import Optional

import httpx

from pr_rewards.logging_config import get_logger
from pr_rewards.models import NotificationMessage

logger = get_logger(__name__)


class NotificationDispatchError(Exception):
    """Raised when the chat webhook could not be reached or rejected the post."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ChatNotifier:
    """
    Async client for a chat incoming-webhook.

    Usage:
        notifier = ChatNotifier("https://chat.example.com/hooks/abc")
        await notifier.send("Hello!")
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the notifier.

        Args:
            webhook_url: Destination incoming-webhook URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport

    async def send(self, text: str) -> None:
        """
        Post a single message.

        Raises:
            NotificationDispatchError: On network failure or a non-2xx response
        """
        message = NotificationMessage(text=text)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport
            ) as client:
                response = await client.post(
                    self.webhook_url,
                    json=message.model_dump()
                )
        except httpx.HTTPError as e:
            logger.error(
                "Chat webhook request failed",
                error_type=type(e).__name__
            )
            raise NotificationDispatchError(
                f"Chat webhook request failed: {type(e).__name__}"
            ) from e

        if not response.is_success:
            logger.error(
                "Chat webhook rejected notification",
                status_code=response.status_code,
                error=response.text[:500]
            )
            raise NotificationDispatchError(
                f"Chat webhook returned {response.status_code}",
                status_code=response.status_code
            )

        logger.debug("Chat notification delivered", status_code=response.status_code)
