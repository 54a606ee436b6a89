"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.
It sets up all routes, shared collaborators, and exception handlers.

Design Decisions:
- Application factory: settings and collaborators are passed in explicitly
- Configuration and the reward catalog are validated before serving
- Use lifespan events for startup/shutdown logging
- Expose health check endpoints
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from pr_rewards import __version__
from pr_rewards.config import Settings, get_settings
from pr_rewards.logging_config import get_logger, setup_logging
from pr_rewards.models import RewardCatalog
from pr_rewards.services.catalog import load_reward_catalog
from pr_rewards.services.notifier import ChatNotifier
from pr_rewards.services.reward_selector import RandomSource, validate_catalog
from pr_rewards.webhook import router as webhook_router
from pr_rewards.webhook.processor import ReviewRewardProcessor

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events for the application.
    """
    settings: Settings = app.state.processor.settings
    logger.info(
        "Starting PR rewards service",
        host=settings.host,
        port=settings.port,
        num_rewards=len(app.state.processor.catalog)
    )

    yield

    logger.info("Shutting down PR rewards service")


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[RewardCatalog] = None,
    notifier: Optional[ChatNotifier] = None,
    random_source: Optional[RandomSource] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit settings (defaults to the environment)
        catalog: Reward catalog (defaults to loading settings.reward_catalog_path)
        notifier: Chat notifier (defaults to one targeting settings.chat_webhook_url)
        random_source: Random source for reward draws

    Returns:
        Configured FastAPI application instance

    Raises:
        pydantic.ValidationError: If required settings are missing
        InvalidCatalogError: If the reward catalog is unusable
    """
    settings = settings or get_settings()
    setup_logging(settings)

    if catalog is None:
        catalog = load_reward_catalog(settings.reward_catalog_path)
    else:
        validate_catalog(catalog)

    if notifier is None:
        notifier = ChatNotifier(
            settings.chat_webhook_url,
            timeout=settings.notification_timeout
        )

    processor_kwargs = {}
    if random_source is not None:
        processor_kwargs["random_source"] = random_source

    app = FastAPI(
        title="PR Rewards",
        description="Rewards approved pull requests with a random catch",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None
    )
    app.state.processor = ReviewRewardProcessor(
        settings,
        catalog,
        notifier,
        **processor_kwargs
    )

    # Register routes
    app.include_router(webhook_router)

    # Add global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception
    ) -> PlainTextResponse:
        """Handle unexpected exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__
        )

        return PlainTextResponse(
            "Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    # Add root endpoint
    @app.get("/")
    async def root():
        """Root endpoint with basic info."""
        return {
            "name": "PR Rewards",
            "version": __version__,
            "status": "running"
        }

    # Add health check endpoint
    @app.get("/health")
    async def health_check():
        """
        Health check endpoint.

        Returns basic health status for load balancers and monitors.
        """
        return {
            "status": "healthy",
            "service": "pr-rewards",
            "version": __version__
        }

    return app
