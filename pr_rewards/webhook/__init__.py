"""
Webhook Package

This package contains webhook handling components:
- handler: FastAPI route handlers
- security: Webhook signature verification
- processor: Approval-to-reward processing logic
"""

from pr_rewards.webhook.handler import router

__all__ = ["router"]
