"""Pure booking policy checks: advance window, admin-only actions, slot grid.

Every function here is a total function of its arguments. None of them
reads configuration or the clock; callers pass the policy snapshot and
the current instant in.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo

from booking_policy.domain.models import (
    Actor,
    AdminPermissionPolicy,
    BookingAction,
    BookingRequest,
    BookingWindowPolicy,
    DenialReason,
    PolicyDecision,
    SlotPolicy,
    Violation,
)
from booking_policy.utils.logger import get_logger


logger = get_logger(__name__)

MIN_CREATE_AHEAD_RULE = "min_create_ahead"
MAX_CREATE_AHEAD_RULE = "max_create_ahead"
INTERVAL_RULE = "interval"
SLOT_BOUNDS_RULE = "slot_bounds"
SLOT_ALIGNMENT_RULE = "slot_alignment"


def _require_aware(value: datetime, name: str) -> None:
    if value.tzinfo is None or value.utcoffset() is None:
        raise TypeError(f"{name} must be a timezone-aware datetime")


def evaluate_timing(
    request: BookingRequest,
    policy: BookingWindowPolicy,
    now: datetime,
) -> PolicyDecision:
    """Check the lead time between ``now`` and the booking start."""
    _require_aware(request.start_time, "request.start_time")
    _require_aware(now, "now")

    delta = (request.start_time - now).total_seconds()
    if policy.min_advance_enabled and delta < policy.min_advance_seconds:
        return PolicyDecision.deny(Violation(MIN_CREATE_AHEAD_RULE, DenialReason.TOO_SOON))
    if policy.max_advance_enabled and delta > policy.max_advance_seconds:
        return PolicyDecision.deny(Violation(MAX_CREATE_AHEAD_RULE, DenialReason.TOO_FAR_AHEAD))
    return PolicyDecision.allow()


def _resolve_action(action: Union[BookingAction, str]) -> Optional[BookingAction]:
    if isinstance(action, BookingAction):
        return action
    try:
        return BookingAction(action)
    except ValueError:
        return None


def _check_single_action(
    action: BookingAction,
    actor: Actor,
    policy: AdminPermissionPolicy,
) -> PolicyDecision:
    if not policy.requires_admin(action):
        return PolicyDecision.allow()
    if actor.is_admin:
        return PolicyDecision.allow()
    # Ordinary users may still copy their own entries.
    if action is BookingAction.COPY_OTHERS_ENTRIES and actor.owns_entry:
        return PolicyDecision.allow()
    return PolicyDecision.deny(Violation(action.value, DenialReason.ADMIN_ONLY))


def _composite_sub_actions(request: BookingRequest) -> list[BookingAction]:
    sub_actions: list[BookingAction] = []
    if request.is_repeat:
        sub_actions.append(BookingAction.BOOK_REPEAT)
    if request.spans_multiple_days:
        sub_actions.append(BookingAction.BOOK_MULTIDAY)
    if request.room_count > 1:
        sub_actions.append(BookingAction.SELECT_MULTIROOM)
    return sub_actions


def evaluate_action(
    action: Union[BookingAction, str],
    actor: Actor,
    request: Optional[BookingRequest],
    policy: AdminPermissionPolicy,
) -> PolicyDecision:
    """Decide whether ``actor`` may perform ``action``.

    Unrecognised action identifiers are treated as unrestricted and logged
    at WARNING. The composite ``book_repeat_multiday_multiroom`` action
    checks each applicable sub-action and reports every denial.

    ``see_other_users`` is answered like any other flag here; hiding user
    details is left to the presentation layer that asks.
    """
    resolved = _resolve_action(action)
    if resolved is None:
        logger.warning("Unrecognised action %r treated as unrestricted", action)
        return PolicyDecision.allow()

    if resolved is BookingAction.BOOK_REPEAT_MULTIDAY_MULTIROOM:
        if request is None:
            return PolicyDecision.allow()
        return PolicyDecision.merge(
            *(
                _check_single_action(sub_action, actor, policy)
                for sub_action in _composite_sub_actions(request)
            )
        )

    return _check_single_action(resolved, actor, policy)


def spans_local_days(request: BookingRequest, tz: ZoneInfo) -> bool:
    """True when the booking covers more than one local calendar day.

    A booking ending exactly at local midnight belongs to the day it started.
    """
    _require_aware(request.start_time, "request.start_time")
    _require_aware(request.end_time, "request.end_time")

    start_date = request.start_time.astimezone(tz).date()
    local_end = request.end_time.astimezone(tz)
    end_date = local_end.date()
    if local_end.time() == time(0) and end_date > start_date:
        end_date -= timedelta(days=1)
    return end_date > start_date


def _offset_from_midnight(value: datetime) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def evaluate_slot(
    request: BookingRequest,
    slots: SlotPolicy,
    tz: ZoneInfo,
) -> PolicyDecision:
    """Check that the booking sits on the slot grid of the bookable day.

    The grid starts at the first slot of each local day and steps by the
    slot resolution; the day closes one resolution after the start of the
    last slot.
    """
    _require_aware(request.start_time, "request.start_time")
    _require_aware(request.end_time, "request.end_time")

    if request.end_time <= request.start_time:
        return PolicyDecision.deny(Violation(INTERVAL_RULE, DenialReason.EMPTY_INTERVAL))

    local_start = request.start_time.astimezone(tz)
    local_end = request.end_time.astimezone(tz)
    start_offset = _offset_from_midnight(local_start)
    end_offset = _offset_from_midnight(local_end)
    # A booking ending exactly at midnight closes the previous day.
    if end_offset == 0 and local_end.date() > local_start.date():
        end_offset = 24 * 3600

    violations: list[Violation] = []
    if (
        start_offset < slots.first_slot_offset_seconds
        or start_offset > slots.last_slot_offset_seconds
        or end_offset <= slots.first_slot_offset_seconds
        or end_offset > slots.day_close_offset_seconds
    ):
        violations.append(Violation(SLOT_BOUNDS_RULE, DenialReason.OUTSIDE_BOOKABLE_DAY))

    resolution = slots.slot_resolution_seconds
    first_slot = slots.first_slot_offset_seconds
    if (
        (start_offset - first_slot) % resolution
        or (end_offset - first_slot) % resolution
        or local_start.microsecond
        or local_end.microsecond
    ):
        violations.append(Violation(SLOT_ALIGNMENT_RULE, DenialReason.MISALIGNED_SLOT))

    return PolicyDecision(violations=tuple(violations))
