"""Shared FastAPI dependency providers for the controller layer."""

from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from booking_policy.domain.models import Actor
from booking_policy.services.policy_service import BookingPolicyService
from booking_policy.utils.config import Settings


bearer_scheme = HTTPBearer(auto_error=False)


def get_policy_service(request: Request) -> BookingPolicyService:
    service = getattr(request.app.state, "policy_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Booking policy service is not initialized",
        )
    return service


def get_app_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Application settings are not initialized",
        )
    return settings


def resolve_operator(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> Actor:
    """Map the bearer token onto an actor; the configured ADMIN_TOKEN marks an admin.

    Without ADMIN_TOKEN every caller is treated as an admin.
    """
    if not settings.admin_token:
        return Actor(is_admin=True)
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header with Bearer token is required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    matches = secrets.compare_digest(
        credentials.credentials.encode("utf-8"),
        settings.admin_token.encode("utf-8"),
    )
    return Actor(is_admin=matches)


def require_admin(actor: Actor = Depends(resolve_operator)) -> Actor:
    if not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator token required",
        )
    return actor
