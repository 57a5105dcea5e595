"""Operator endpoint for inspecting the active booking policy."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from booking_policy.controllers.dependencies import get_policy_service, require_admin
from booking_policy.services.policy_service import BookingPolicyService


router = APIRouter(tags=["admin"])


class PolicySnapshotResponse(BaseModel):
    timezone: str
    window: dict[str, Any]
    slots: dict[str, Any]
    admin_only_actions: dict[str, bool]


@router.get(
    "/policy",
    response_model=PolicySnapshotResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def policy_snapshot(
    service: BookingPolicyService = Depends(get_policy_service),
) -> PolicySnapshotResponse:
    return PolicySnapshotResponse(**service.describe_policy())
