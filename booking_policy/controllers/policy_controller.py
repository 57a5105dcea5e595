"""HTTP controller layer for booking policy evaluation."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import AwareDatetime, BaseModel, Field

from booking_policy.controllers.dependencies import get_policy_service
from booking_policy.domain.models import Actor, BookingRequest, PolicyDecision
from booking_policy.services.policy_service import BookingPolicyService


router = APIRouter(tags=["policy"])


class ActorPayload(BaseModel):
    is_admin: bool = False
    owns_entry: bool = False

    def to_domain(self) -> Actor:
        return Actor(is_admin=self.is_admin, owns_entry=self.owns_entry)


class BookingPayload(BaseModel):
    """Candidate booking; instants must carry a UTC offset."""

    start_time: AwareDatetime
    end_time: AwareDatetime
    spans_multiple_days: bool = False
    is_repeat: bool = False
    room_count: int = Field(default=1, ge=1)

    def to_domain(self) -> BookingRequest:
        return BookingRequest(
            start_time=self.start_time,
            end_time=self.end_time,
            spans_multiple_days=self.spans_multiple_days,
            is_repeat=self.is_repeat,
            room_count=self.room_count,
        )


class EvaluateTimingRequest(BaseModel):
    start_time: AwareDatetime
    end_time: AwareDatetime


class EvaluateActionRequest(BaseModel):
    # Plain string so unknown actions reach the evaluator instead of a 422.
    action: str = Field(min_length=1)
    actor: ActorPayload = Field(default_factory=ActorPayload)
    booking: BookingPayload | None = None


class EvaluateBookingRequest(BaseModel):
    actor: ActorPayload = Field(default_factory=ActorPayload)
    booking: BookingPayload


class ViolationResponse(BaseModel):
    rule: str
    reason: str


class DecisionResponse(BaseModel):
    allowed: bool
    violations: list[ViolationResponse]

    @classmethod
    def from_decision(cls, decision: PolicyDecision) -> "DecisionResponse":
        return cls(
            allowed=decision.allowed,
            violations=[
                ViolationResponse(rule=item.rule, reason=item.reason.value)
                for item in decision.violations
            ],
        )


@router.post(
    "/evaluate_timing",
    response_model=DecisionResponse,
    status_code=status.HTTP_200_OK,
)
async def evaluate_timing(
    payload: EvaluateTimingRequest,
    service: BookingPolicyService = Depends(get_policy_service),
) -> DecisionResponse:
    """Check the advance booking window only."""
    request = BookingRequest(start_time=payload.start_time, end_time=payload.end_time)
    decision = service.check_timing(request)
    return DecisionResponse.from_decision(decision)


@router.post(
    "/evaluate_action",
    response_model=DecisionResponse,
    status_code=status.HTTP_200_OK,
)
async def evaluate_action(
    payload: EvaluateActionRequest,
    service: BookingPolicyService = Depends(get_policy_service),
) -> DecisionResponse:
    booking = payload.booking.to_domain() if payload.booking is not None else None
    decision = service.check_action(payload.action, payload.actor.to_domain(), booking)
    return DecisionResponse.from_decision(decision)


@router.post(
    "/evaluate_booking",
    response_model=DecisionResponse,
    status_code=status.HTTP_200_OK,
)
async def evaluate_booking(
    payload: EvaluateBookingRequest,
    service: BookingPolicyService = Depends(get_policy_service),
) -> DecisionResponse:
    """Run timing, slot and admin-only checks for a new booking in one pass."""
    decision = service.check_booking(payload.actor.to_domain(), payload.booking.to_domain())
    return DecisionResponse.from_decision(decision)
