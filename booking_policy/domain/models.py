"""Domain models for booking-window and admin-permission policy decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class BookingAction(str, Enum):
    BOOK_REPEAT = "book_repeat"
    BOOK_MULTIDAY = "book_multiday"
    SELECT_MULTIROOM = "select_multiroom"
    COPY_OTHERS_ENTRIES = "copy_others_entries"
    SEE_OTHER_USERS = "see_other_users"
    CLICK_PAST_SLOT_NO_ENTRY = "click_past_slot_no_entry"
    CLICK_SLOT_EXISTING_ENTRY = "click_slot_existing_entry"
    RESIZE_ENTRIES = "resize_entries"
    # Expands to book_repeat / book_multiday / select_multiroom per request.
    BOOK_REPEAT_MULTIDAY_MULTIROOM = "book_repeat_multiday_multiroom"


class DenialReason(str, Enum):
    TOO_SOON = "too_soon"
    TOO_FAR_AHEAD = "too_far_ahead"
    ADMIN_ONLY = "admin_only"
    EMPTY_INTERVAL = "empty_interval"
    OUTSIDE_BOOKABLE_DAY = "outside_bookable_day"
    MISALIGNED_SLOT = "misaligned_slot"


@dataclass(frozen=True)
class Violation:
    rule: str
    reason: DenialReason


@dataclass(frozen=True)
class PolicyDecision:
    """Outcome of a policy check; allowed exactly when nothing was violated."""

    violations: tuple[Violation, ...] = ()

    @property
    def allowed(self) -> bool:
        return not self.violations

    @property
    def reasons(self) -> tuple[DenialReason, ...]:
        return tuple(violation.reason for violation in self.violations)

    @classmethod
    def allow(cls) -> "PolicyDecision":
        return cls()

    @classmethod
    def deny(cls, *violations: Violation) -> "PolicyDecision":
        if not violations:
            raise ValueError("deny() requires at least one violation")
        return cls(violations=tuple(violations))

    @classmethod
    def merge(cls, *decisions: "PolicyDecision") -> "PolicyDecision":
        return cls(
            violations=tuple(
                violation for decision in decisions for violation in decision.violations
            )
        )


@dataclass(frozen=True)
class BookingWindowPolicy:
    min_advance_enabled: bool
    min_advance_seconds: int
    max_advance_enabled: bool
    max_advance_seconds: int


@dataclass(frozen=True)
class SlotPolicy:
    slot_resolution_seconds: int
    day_start_hour: int
    day_start_minute: int
    day_end_hour: int
    day_end_minute: int

    @property
    def first_slot_offset_seconds(self) -> int:
        return self.day_start_hour * 3600 + self.day_start_minute * 60

    @property
    def last_slot_offset_seconds(self) -> int:
        return self.day_end_hour * 3600 + self.day_end_minute * 60

    @property
    def day_close_offset_seconds(self) -> int:
        """End of the last slot, measured from local midnight."""
        return self.last_slot_offset_seconds + self.slot_resolution_seconds


@dataclass(frozen=True)
class AdminPermissionPolicy:
    flags: Mapping[BookingAction, bool] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))

    def requires_admin(self, action: BookingAction) -> bool:
        return bool(self.flags.get(action, False))


@dataclass(frozen=True)
class Actor:
    is_admin: bool
    owns_entry: bool = False


@dataclass(frozen=True)
class BookingRequest:
    start_time: datetime
    end_time: datetime
    spans_multiple_days: bool = False
    is_repeat: bool = False
    room_count: int = 1


@dataclass(frozen=True)
class BookingPolicyConfig:
    timezone: str
    window: BookingWindowPolicy
    slots: SlotPolicy
    permissions: AdminPermissionPolicy
