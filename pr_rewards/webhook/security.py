"""
Webhook Security Module

This module handles secure verification of GitHub webhook payloads.
It implements HMAC-SHA256 signature verification to ensure requests
are genuinely from GitHub.

Design Decisions:
- Use constant-time comparison to prevent timing attacks
- Verify signature before any payload processing
- Report failures as False, never as an exception
"""

import hashlib
import hmac
from typing import Optional, Union

from fastapi import Request

from pr_rewards.logging_config import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


def compute_signature(raw_body: bytes, secret: Union[str, bytes]) -> str:
    """
    Compute the X-Hub-Signature-256 value for a payload.

    Args:
        raw_body: Raw request body bytes
        secret: Shared webhook secret

    Returns:
        ``"sha256=<hex digest>"``
    """
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    digest = hmac.new(secret, raw_body, hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(
    raw_body: bytes,
    signature_header: Optional[str],
    secret: Union[str, bytes]
) -> bool:
    """
    Verify a GitHub webhook signature.

    The header is compared byte-for-byte, untrimmed, against the expected
    value with ``hmac.compare_digest``, so timing does not depend on where
    (or whether, for differing lengths) the two values first differ.

    Args:
        raw_body: Raw request body bytes, exactly as received
        signature_header: Value of the X-Hub-Signature-256 header, if any
        secret: Shared webhook secret

    Returns:
        True if the signature is valid, False otherwise (including a
        missing or malformed header)
    """
    if signature_header is None:
        logger.warning("Missing webhook signature header")
        return False

    try:
        received = signature_header.encode("utf-8")
    except UnicodeEncodeError:
        logger.warning("Undecodable webhook signature header")
        return False

    expected = compute_signature(raw_body, secret).encode("ascii")

    if not hmac.compare_digest(received, expected):
        logger.warning("Webhook signature mismatch")
        return False

    logger.debug("Webhook signature verified successfully")
    return True


def extract_delivery_id(request: Request) -> Optional[str]:
    """
    Extract the webhook delivery ID from headers.

    This is useful for correlating log lines with GitHub's delivery log.

    Args:
        request: FastAPI request object

    Returns:
        Delivery ID or None
    """
    return request.headers.get("X-GitHub-Delivery")
