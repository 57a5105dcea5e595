"""Load-time validation rules for booking policy objects."""

from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from booking_policy.domain.models import BookingPolicyConfig, BookingWindowPolicy, SlotPolicy


SECONDS_PER_DAY = 24 * 3600


def validate_booking_window_policy(policy: BookingWindowPolicy) -> None:
    if policy.min_advance_seconds < 0:
        raise ValueError("min_create_ahead_secs must be >= 0")
    if policy.max_advance_seconds < 0:
        raise ValueError("max_create_ahead_secs must be >= 0")
    if (
        policy.min_advance_enabled
        and policy.max_advance_enabled
        and policy.min_advance_seconds > policy.max_advance_seconds
    ):
        raise ValueError("min_create_ahead_secs must not exceed max_create_ahead_secs")


def validate_slot_policy(policy: SlotPolicy) -> None:
    if policy.slot_resolution_seconds <= 0:
        raise ValueError("resolution must be > 0")
    if not 0 <= policy.day_start_hour <= 23:
        raise ValueError("morningstarts must be between 0 and 23")
    if not 0 <= policy.day_end_hour <= 23:
        raise ValueError("eveningends must be between 0 and 23")
    if not 0 <= policy.day_start_minute <= 59:
        raise ValueError("morningstarts_minutes must be between 0 and 59")
    if not 0 <= policy.day_end_minute <= 59:
        raise ValueError("eveningends_minutes must be between 0 and 59")
    if (policy.day_start_hour, policy.day_start_minute) >= (
        policy.day_end_hour,
        policy.day_end_minute,
    ):
        raise ValueError("morningstarts must be earlier than eveningends")
    if policy.day_close_offset_seconds > SECONDS_PER_DAY:
        raise ValueError("the last slot (eveningends + resolution) must end by midnight")
    day_span = policy.last_slot_offset_seconds - policy.first_slot_offset_seconds
    if day_span % policy.slot_resolution_seconds:
        raise ValueError("eveningends must fall on the resolution grid starting at morningstarts")


def validate_timezone(name: str) -> None:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown timezone: {name!r}") from exc


def validate_booking_policy_config(config: BookingPolicyConfig) -> None:
    validate_timezone(config.timezone)
    validate_booking_window_policy(config.window)
    validate_slot_policy(config.slots)
