"""Tests for the advance booking window check."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from booking_policy.domain.models import BookingRequest, BookingWindowPolicy, DenialReason
from booking_policy.services.policy_evaluator import evaluate_timing


NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)
ONE_WEEK = 60 * 60 * 24 * 7


def window(**overrides) -> BookingWindowPolicy:
    defaults = {
        "min_advance_enabled": True,
        "min_advance_seconds": 0,
        "max_advance_enabled": True,
        "max_advance_seconds": ONE_WEEK,
    }
    defaults.update(overrides)
    return BookingWindowPolicy(**defaults)


def booking_starting_in(seconds: int) -> BookingRequest:
    start = NOW + timedelta(seconds=seconds)
    return BookingRequest(start_time=start, end_time=start + timedelta(hours=1))


def test_start_just_beyond_one_week_is_too_far_ahead() -> None:
    decision = evaluate_timing(booking_starting_in(ONE_WEEK + 1), window(), NOW)
    assert not decision.allowed
    assert decision.reasons == (DenialReason.TOO_FAR_AHEAD,)


def test_start_in_the_past_is_too_soon() -> None:
    decision = evaluate_timing(booking_starting_in(-1), window(), NOW)
    assert not decision.allowed
    assert decision.reasons == (DenialReason.TOO_SOON,)


@pytest.mark.parametrize("lead_seconds", [0, 1, 3600, ONE_WEEK - 1, ONE_WEEK])
def test_lead_time_inside_window_is_allowed(lead_seconds: int) -> None:
    assert evaluate_timing(booking_starting_in(lead_seconds), window(), NOW).allowed


def test_lead_below_minimum_is_too_soon() -> None:
    policy = window(min_advance_seconds=3600)
    decision = evaluate_timing(booking_starting_in(3599), policy, NOW)
    assert decision.reasons == (DenialReason.TOO_SOON,)
    assert evaluate_timing(booking_starting_in(3600), policy, NOW).allowed


def test_disabled_minimum_never_denies_too_soon() -> None:
    policy = window(min_advance_enabled=False, min_advance_seconds=3600)
    for lead in (-86400, -1, 0, 10):
        assert evaluate_timing(booking_starting_in(lead), policy, NOW).allowed


def test_disabled_maximum_never_denies_too_far_ahead() -> None:
    policy = window(max_advance_enabled=False)
    assert evaluate_timing(booking_starting_in(ONE_WEEK * 52), policy, NOW).allowed


def test_offsets_are_compared_as_instants() -> None:
    berlin_offset = timezone(timedelta(hours=1))
    start = (NOW + timedelta(hours=2)).astimezone(berlin_offset)
    request = BookingRequest(start_time=start, end_time=start + timedelta(hours=1))
    assert evaluate_timing(request, window(min_advance_seconds=7200), NOW).allowed


def test_violation_names_the_bound() -> None:
    decision = evaluate_timing(booking_starting_in(ONE_WEEK + 60), window(), NOW)
    assert decision.violations[0].rule == "max_create_ahead"


def test_naive_start_time_is_rejected() -> None:
    naive = datetime(2026, 3, 3, 9, 0)
    request = BookingRequest(start_time=naive, end_time=naive + timedelta(hours=1))
    with pytest.raises(TypeError):
        evaluate_timing(request, window(), NOW)


def test_repeated_calls_are_deterministic() -> None:
    request = booking_starting_in(ONE_WEEK + 1)
    assert evaluate_timing(request, window(), NOW) == evaluate_timing(request, window(), NOW)
