#!/usr/bin/env python3
"""Validate a booking policy configuration file before deploying it.

    python scripts/validate_policy_config.py [path/to/booking_policy.json]

Without an argument the path from BOOKING_POLICY_CONFIG (or the shipped
default) is checked.
"""

from __future__ import annotations

import importlib
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from booking_policy.domain.models import Actor, BookingAction, BookingPolicyConfig, BookingRequest
from booking_policy.services.config_loader import PolicyConfigError, load_policy_config
from booking_policy.services.policy_service import BookingPolicyService
from booking_policy.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def _probe_booking(config: BookingPolicyConfig, now: datetime) -> BookingRequest:
    """One-slot booking starting at the first slot of tomorrow, local time."""
    local_now = now.astimezone(ZoneInfo(config.timezone))
    start = (local_now + timedelta(days=1)).replace(
        hour=config.slots.day_start_hour,
        minute=config.slots.day_start_minute,
        second=0,
        microsecond=0,
    )
    end = start + timedelta(seconds=config.slots.slot_resolution_seconds)
    return BookingRequest(start_time=start, end_time=end)


def main(argv: list[str]) -> int:
    results: list[str] = []
    all_passed = True

    # CHECK 1 — Required packages importable
    missing: list[str] = []
    for module_name in ("fastapi", "pydantic", "uvicorn"):
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            missing.append(f"{module_name} ({exc})")
    ok, line = _result(
        "Required packages",
        not missing,
        "missing -> " + "; ".join(missing) if missing else ": all importable",
    )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2 — Configuration loads and validates
    config_path = Path(argv[1]) if len(argv) > 1 else get_settings().policy_config_path
    config: BookingPolicyConfig | None = None
    try:
        config = load_policy_config(config_path)
        ok, line = _result("Policy configuration", True, f": {config_path}")
    except PolicyConfigError as exc:
        ok, line = _result("Policy configuration", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 3 — A plain one-slot booking for tomorrow is bookable by a regular user
    if config is not None:
        now = datetime.now(timezone.utc)
        service = BookingPolicyService(config, clock=lambda: now)
        probe = _probe_booking(config, now)
        decision = service.check_booking(Actor(is_admin=False), probe)
        detail = ", ".join(f"{v.rule}={v.reason.value}" for v in decision.violations)
        ok, line = _result(
            "Probe booking for tomorrow",
            decision.allowed,
            f": {probe.start_time.isoformat()}" if decision.allowed else detail,
        )
        results.append(line)
        all_passed = all_passed and ok

        restricted = sorted(
            action.value
            for action in BookingAction
            if config.permissions.requires_admin(action)
        )
        results.append(f"[INFO] Admin-only actions: {', '.join(restricted) or 'none'}")

    print(SEPARATOR_LINE)
    print(" Booking Policy Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Configuration is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
