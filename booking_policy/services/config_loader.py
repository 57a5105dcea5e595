"""Parse and validate the booking policy option mapping."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    ValidationError,
    model_validator,
)

from booking_policy.domain.constraints import validate_booking_policy_config
from booking_policy.domain.models import (
    AdminPermissionPolicy,
    BookingAction,
    BookingPolicyConfig,
    BookingWindowPolicy,
    SlotPolicy,
)
from booking_policy.utils.logger import get_logger


logger = get_logger(__name__)

AUTH_PREFIX = "auth."

# Option name -> gated action.
AUTH_FLAG_ACTIONS: dict[str, BookingAction] = {
    "only_admin_can_book_repeat": BookingAction.BOOK_REPEAT,
    "only_admin_can_book_multiday": BookingAction.BOOK_MULTIDAY,
    "only_admin_can_select_multiroom": BookingAction.SELECT_MULTIROOM,
    "only_admin_can_copy_others_entries": BookingAction.COPY_OTHERS_ENTRIES,
    "only_admin_can_see_other_users": BookingAction.SEE_OTHER_USERS,
    "only_admin_can_click_past_slots_no_entry": BookingAction.CLICK_PAST_SLOT_NO_ENTRY,
    "only_admin_can_click_slots_existing_entry": BookingAction.CLICK_SLOT_EXISTING_ENTRY,
    "only_admin_can_resize_entries": BookingAction.RESIZE_ENTRIES,
}


class PolicyConfigError(Exception):
    """Raised when a policy configuration cannot be loaded or is invalid."""


class AuthFlagsModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    only_admin_can_book_repeat: StrictBool = False
    only_admin_can_book_multiday: StrictBool = False
    only_admin_can_select_multiroom: StrictBool = False
    only_admin_can_copy_others_entries: StrictBool = False
    only_admin_can_see_other_users: StrictBool = False
    only_admin_can_click_past_slots_no_entry: StrictBool = False
    only_admin_can_click_slots_existing_entry: StrictBool = False
    only_admin_can_resize_entries: StrictBool = False


class PolicyConfigModel(BaseModel):
    """Recognised options; anything else in the mapping is rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    timezone: str = Field(default="UTC", min_length=1)
    resolution: StrictInt = Field(default=1800, gt=0)
    morningstarts: StrictInt = Field(default=7, ge=0, le=23)
    morningstarts_minutes: StrictInt = Field(default=0, ge=0, le=59)
    eveningends: StrictInt = Field(default=18, ge=0, le=23)
    eveningends_minutes: StrictInt = Field(default=30, ge=0, le=59)
    min_create_ahead_enabled: StrictBool = False
    min_create_ahead_secs: StrictInt = Field(default=0, ge=0)
    max_create_ahead_enabled: StrictBool = False
    max_create_ahead_secs: StrictInt = Field(default=60 * 60 * 24 * 7, ge=0)
    auth: AuthFlagsModel = Field(default_factory=AuthFlagsModel)

    @model_validator(mode="before")
    @classmethod
    def fold_dotted_auth_keys(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        folded: dict[str, Any] = {}
        dotted: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(key, str) and key.startswith(AUTH_PREFIX):
                dotted[key[len(AUTH_PREFIX):]] = value
            else:
                folded[key] = value
        if dotted:
            nested = folded.get("auth") or {}
            if not isinstance(nested, Mapping):
                raise ValueError("auth must be an object of flags")
            overlap = set(nested).intersection(dotted)
            if overlap:
                raise ValueError(f"auth flags given twice: {sorted(overlap)}")
            folded["auth"] = {**nested, **dotted}
        return folded


def _to_domain(model: PolicyConfigModel) -> BookingPolicyConfig:
    flags = {
        action: getattr(model.auth, option)
        for option, action in AUTH_FLAG_ACTIONS.items()
    }
    return BookingPolicyConfig(
        timezone=model.timezone,
        window=BookingWindowPolicy(
            min_advance_enabled=model.min_create_ahead_enabled,
            min_advance_seconds=model.min_create_ahead_secs,
            max_advance_enabled=model.max_create_ahead_enabled,
            max_advance_seconds=model.max_create_ahead_secs,
        ),
        slots=SlotPolicy(
            slot_resolution_seconds=model.resolution,
            day_start_hour=model.morningstarts,
            day_start_minute=model.morningstarts_minutes,
            day_end_hour=model.eveningends,
            day_end_minute=model.eveningends_minutes,
        ),
        permissions=AdminPermissionPolicy(flags=flags),
    )


def parse_policy_config(options: Mapping[str, Any]) -> BookingPolicyConfig:
    try:
        model = PolicyConfigModel.model_validate(options)
        config = _to_domain(model)
        validate_booking_policy_config(config)
    except (ValidationError, ValueError) as exc:
        raise PolicyConfigError(f"Invalid booking policy configuration: {exc}") from exc
    return config


def load_policy_config(path: Union[str, Path]) -> BookingPolicyConfig:
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise PolicyConfigError(f"Policy configuration not found: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise PolicyConfigError(f"Policy configuration is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise PolicyConfigError("Policy configuration must be a JSON object")

    config = parse_policy_config(raw)
    logger.info("Loaded booking policy configuration from %s", config_path)
    return config
