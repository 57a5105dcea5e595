"""Booking policy service bound to one immutable configuration snapshot."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union
from zoneinfo import ZoneInfo

from booking_policy.domain.models import (
    Actor,
    BookingAction,
    BookingPolicyConfig,
    BookingRequest,
    PolicyDecision,
)
from booking_policy.services.policy_evaluator import (
    evaluate_action,
    evaluate_slot,
    evaluate_timing,
    spans_local_days,
)
from booking_policy.utils.logger import get_logger


logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookingPolicyService:
    """Applies the configured policy to incoming booking requests.

    The service holds no mutable state besides the snapshot it was built
    with, so one instance can be shared across concurrent requests.
    """

    def __init__(self, config: BookingPolicyConfig, clock: Optional[Clock] = None) -> None:
        self._config = config
        self._clock = clock or _utc_now
        self._tz = ZoneInfo(config.timezone)

    @property
    def config(self) -> BookingPolicyConfig:
        return self._config

    def now(self) -> datetime:
        return self._clock()

    def check_timing(self, request: BookingRequest) -> PolicyDecision:
        decision = evaluate_timing(request, self._config.window, self.now())
        self._log_denial("timing", decision)
        return decision

    def check_action(
        self,
        action: Union[BookingAction, str],
        actor: Actor,
        request: Optional[BookingRequest] = None,
    ) -> PolicyDecision:
        decision = evaluate_action(action, actor, request, self._config.permissions)
        label = action.value if isinstance(action, BookingAction) else str(action)
        self._log_denial(label, decision)
        return decision

    def check_slot(self, request: BookingRequest) -> PolicyDecision:
        decision = evaluate_slot(request, self._config.slots, self._tz)
        self._log_denial("slot", decision)
        return decision

    def check_booking(self, actor: Actor, request: BookingRequest) -> PolicyDecision:
        """Run every check a new booking goes through and report all violations."""
        # The multi-day gate follows the booking instants, not only the caller flag.
        if not request.spans_multiple_days and spans_local_days(request, self._tz):
            request = replace(request, spans_multiple_days=True)
        now = self.now()
        decision = PolicyDecision.merge(
            evaluate_timing(request, self._config.window, now),
            evaluate_slot(request, self._config.slots, self._tz),
            evaluate_action(
                BookingAction.BOOK_REPEAT_MULTIDAY_MULTIROOM,
                actor,
                request,
                self._config.permissions,
            ),
        )
        self._log_denial("booking", decision)
        return decision

    def describe_policy(self) -> dict[str, Any]:
        config = self._config
        return {
            "timezone": config.timezone,
            "window": {
                "min_create_ahead_enabled": config.window.min_advance_enabled,
                "min_create_ahead_secs": config.window.min_advance_seconds,
                "max_create_ahead_enabled": config.window.max_advance_enabled,
                "max_create_ahead_secs": config.window.max_advance_seconds,
            },
            "slots": {
                "resolution": config.slots.slot_resolution_seconds,
                "morningstarts": config.slots.day_start_hour,
                "morningstarts_minutes": config.slots.day_start_minute,
                "eveningends": config.slots.day_end_hour,
                "eveningends_minutes": config.slots.day_end_minute,
            },
            "admin_only_actions": {
                action.value: required
                for action, required in config.permissions.flags.items()
            },
        }

    @staticmethod
    def _log_denial(check: str, decision: PolicyDecision) -> None:
        if decision.allowed:
            return
        logger.info(
            "Policy check %s denied: %s",
            check,
            ", ".join(f"{item.rule}={item.reason.value}" for item in decision.violations),
        )
