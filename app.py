"""
app.py — FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn. It loads the
booking policy configuration once, wires the services and registers the
routers.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from booking_policy.controllers.admin_controller import router as admin_router
from booking_policy.controllers.policy_controller import router as policy_router
from booking_policy.domain.models import BookingPolicyConfig
from booking_policy.services.config_loader import load_policy_config
from booking_policy.services.policy_service import BookingPolicyService
from booking_policy.utils.config import Settings, get_settings
from booking_policy.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    policy_config: Optional[BookingPolicyConfig] = None,
) -> FastAPI:
    """
    Build and wire the FastAPI application.

    The policy snapshot is read from ``settings.policy_config_path`` unless
    one is passed in. An invalid configuration raises PolicyConfigError
    here, before the server accepts any request.
    """
    settings = settings or get_settings()
    config = policy_config or load_policy_config(settings.policy_config_path)

    policy_service = BookingPolicyService(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(policy_router)
    app.include_router(admin_router)

    app.state.policy_service = policy_service
    app.state.settings = settings

    return app


def _startup(app: FastAPI) -> None:
    policy_service: BookingPolicyService = app.state.policy_service
    settings: Settings = app.state.settings

    snapshot = policy_service.describe_policy()
    restricted = sorted(
        action for action, required in snapshot["admin_only_actions"].items() if required
    )
    logger.info(
        "Startup: booking policy active (timezone=%s, window=%s, slots=%s)",
        snapshot["timezone"],
        snapshot["window"],
        snapshot["slots"],
    )
    logger.info("Startup: admin-only actions: %s", ", ".join(restricted) or "none")
    if not settings.admin_token:
        logger.warning("Startup: ADMIN_TOKEN not set, operator endpoints are unauthenticated")


# Module-level app object for uvicorn
app = create_app()
