"""
Webhook Handler Module

This module defines the FastAPI endpoint that receives GitHub review
webhooks and maps each processing outcome to an HTTP response.

Design Decisions:
- Read the raw body before anything else (signature covers exact bytes)
- Keep the route thin: all decisions live in the processor
- Plain-text responses, matching what GitHub shows in its delivery log
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import PlainTextResponse

from pr_rewards.logging_config import get_logger
from pr_rewards.models import InboundEvent
from pr_rewards.webhook.processor import ReviewOutcome, ReviewRewardProcessor
from pr_rewards.webhook.security import extract_delivery_id

logger = get_logger(__name__)

router = APIRouter(tags=["webhook"])

OUTCOME_RESPONSES = {
    ReviewOutcome.REWARDED: (status.HTTP_200_OK, "OK"),
    ReviewOutcome.IGNORED: (status.HTTP_200_OK, "OK"),
    ReviewOutcome.UNAUTHORIZED: (status.HTTP_401_UNAUTHORIZED, "Invalid signature"),
    ReviewOutcome.MALFORMED: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Error"),
    ReviewOutcome.DISPATCH_FAILED: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Error"),
}


def get_processor(request: Request) -> ReviewRewardProcessor:
    """Return the processor built at application startup."""
    return request.app.state.processor


@router.post("/github-webhook", response_class=PlainTextResponse)
async def github_webhook(
    request: Request,
    x_hub_signature_256: Optional[str] = Header(default=None),
    x_github_event: Optional[str] = Header(default=None),
    processor: ReviewRewardProcessor = Depends(get_processor)
) -> PlainTextResponse:
    """
    GitHub pull_request_review webhook endpoint.

    Returns:
        200 "OK" for rewarded and ignored events, 401 for a bad signature,
        500 for malformed payloads and failed notifications
    """
    delivery_id = extract_delivery_id(request)

    logger.info(
        "Received GitHub webhook",
        delivery_id=delivery_id,
        event_type=x_github_event,
        remote_addr=request.client.host if request.client else "unknown"
    )

    event = InboundEvent(
        raw_body=await request.body(),
        signature=x_hub_signature_256,
        delivery_id=delivery_id,
        event_type=x_github_event
    )

    result = await processor.handle(event)
    status_code, body = OUTCOME_RESPONSES[result.outcome]

    return PlainTextResponse(body, status_code=status_code)


@router.get("/webhook/health")
async def webhook_health() -> dict:
    """Health check endpoint for the webhook service."""
    return {"status": "healthy", "service": "webhook"}
