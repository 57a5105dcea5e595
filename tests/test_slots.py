"""Tests for slot-grid and bookable-day checks."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from booking_policy.domain.models import BookingRequest, DenialReason, SlotPolicy
from booking_policy.services.policy_evaluator import evaluate_slot, spans_local_days


BERLIN = ZoneInfo("Europe/Berlin")

# One-hour slots from 07:00; the last slot starts at 23:00 and ends at midnight.
HOURLY = SlotPolicy(
    slot_resolution_seconds=3600,
    day_start_hour=7,
    day_start_minute=0,
    day_end_hour=23,
    day_end_minute=0,
)

# Half-hour slots from 07:00; the last slot starts at 18:30.
HALF_HOURLY = SlotPolicy(
    slot_resolution_seconds=1800,
    day_start_hour=7,
    day_start_minute=0,
    day_end_hour=18,
    day_end_minute=30,
)


def local(hour: int, minute: int = 0, day: int = 3) -> datetime:
    return datetime(2026, 3, day, hour, minute, tzinfo=BERLIN)


def between(start: datetime, end: datetime) -> BookingRequest:
    return BookingRequest(start_time=start, end_time=end)


def test_single_slot_is_allowed() -> None:
    assert evaluate_slot(between(local(9), local(10)), HOURLY, BERLIN).allowed


def test_several_slots_are_allowed() -> None:
    assert evaluate_slot(between(local(9), local(12)), HOURLY, BERLIN).allowed


def test_last_slot_ending_at_midnight_is_allowed() -> None:
    request = between(local(23), local(0, day=4))
    assert evaluate_slot(request, HOURLY, BERLIN).allowed


def test_booking_before_first_slot_is_outside_day() -> None:
    decision = evaluate_slot(between(local(6), local(7)), HOURLY, BERLIN)
    assert decision.reasons == (DenialReason.OUTSIDE_BOOKABLE_DAY,)


def test_booking_running_past_day_close_is_outside_day() -> None:
    decision = evaluate_slot(between(local(23), local(1, day=4)), HOURLY, BERLIN)
    assert decision.reasons == (DenialReason.OUTSIDE_BOOKABLE_DAY,)


def test_start_after_last_slot_is_outside_day() -> None:
    decision = evaluate_slot(between(local(19), local(19, 30)), HALF_HOURLY, BERLIN)
    assert decision.reasons == (DenialReason.OUTSIDE_BOOKABLE_DAY,)


def test_last_half_hour_slot_is_allowed() -> None:
    assert evaluate_slot(between(local(18, 30), local(19)), HALF_HOURLY, BERLIN).allowed


def test_off_grid_booking_is_misaligned() -> None:
    decision = evaluate_slot(between(local(9, 30), local(10, 30)), HOURLY, BERLIN)
    assert decision.reasons == (DenialReason.MISALIGNED_SLOT,)


def test_sub_second_start_is_misaligned() -> None:
    start = local(9) + timedelta(microseconds=500)
    decision = evaluate_slot(between(start, local(10)), HOURLY, BERLIN)
    assert decision.reasons == (DenialReason.MISALIGNED_SLOT,)


def test_out_of_day_and_off_grid_are_both_reported() -> None:
    decision = evaluate_slot(between(local(5, 15), local(6, 15)), HOURLY, BERLIN)
    assert set(decision.reasons) == {
        DenialReason.OUTSIDE_BOOKABLE_DAY,
        DenialReason.MISALIGNED_SLOT,
    }


def test_zero_length_booking_is_empty_interval() -> None:
    decision = evaluate_slot(between(local(9), local(9)), HOURLY, BERLIN)
    assert decision.reasons == (DenialReason.EMPTY_INTERVAL,)


def test_reversed_booking_is_empty_interval() -> None:
    decision = evaluate_slot(between(local(10), local(9)), HOURLY, BERLIN)
    assert decision.reasons == (DenialReason.EMPTY_INTERVAL,)


def test_utc_input_is_judged_in_local_time() -> None:
    # 06:00 UTC is 07:00 in Berlin in March (CET).
    start = datetime(2026, 3, 3, 6, 0, tzinfo=timezone.utc)
    request = between(start, start + timedelta(hours=1))
    assert evaluate_slot(request, HOURLY, BERLIN).allowed
    assert not evaluate_slot(request, HOURLY, ZoneInfo("UTC")).allowed


def test_multiday_booking_checks_both_ends() -> None:
    assert evaluate_slot(between(local(9), local(10, day=4)), HOURLY, BERLIN).allowed
    decision = evaluate_slot(between(local(9), local(6, day=4)), HOURLY, BERLIN)
    assert decision.reasons == (DenialReason.OUTSIDE_BOOKABLE_DAY,)


def test_overnight_booking_spans_local_days() -> None:
    assert spans_local_days(between(local(18), local(9, day=4)), BERLIN)


def test_booking_ending_at_midnight_stays_on_its_day() -> None:
    assert not spans_local_days(between(local(23), local(0, day=4)), BERLIN)


def test_day_span_is_judged_in_local_time() -> None:
    # 22:30-23:30 UTC crosses midnight in Berlin but not in UTC.
    start = datetime(2026, 3, 3, 22, 30, tzinfo=timezone.utc)
    request = between(start, start + timedelta(hours=1))
    assert spans_local_days(request, BERLIN)
    assert not spans_local_days(request, ZoneInfo("UTC"))
