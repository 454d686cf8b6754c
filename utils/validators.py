"""
utils/validators.py
-------------------
Validation of raw subscription form input.
Everything that reaches SubscriptionService.create/update passes through here,
so unknown categories and recurrences are rejected at the boundary.
"""

import math
import re
from datetime import date, datetime
from typing import Any

from errors import ValidationError
from models.subscription import Category, Recurrence

MAX_NAME_LENGTH = 255

# Fields the caller may never set through an update
IMMUTABLE_FIELDS = frozenset({"id", "user_id", "created_at", "start_date"})

_OPTIONAL_TEXT_FIELDS = ("description", "notes")
_KNOWN_FIELDS = frozenset({
    "name", "amount", "category", "recurrence", "next_due_date", "start_date",
    "description", "notes", "is_free_trial", "trial_end_date", "previous_amount",
    "auto_renew", "reminder_days", "is_paid",
})


def parse_name(value: Any) -> str:
    """Strip and check a display name."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Name is required", field="name")
    name = value.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Name must be less than {MAX_NAME_LENGTH} characters", field="name"
        )
    return name


def parse_amount(value: Any, field: str = "amount") -> float:
    """
    Parse a positive amount from a number or a form string.

    Currency symbols, spaces and thousands separators are ignored,
    so "$15.99" and "1,200" are accepted.

    Raises:
        ValidationError: If the value is empty, not numeric, or not > 0.
    """
    if isinstance(value, bool):
        raise ValidationError("Please enter a valid amount", field=field)
    if isinstance(value, (int, float)):
        amount = float(value)
    elif isinstance(value, str):
        cleaned = re.sub(r"[^\d.\-]", "", value)
        if not cleaned:
            raise ValidationError("Please enter a valid amount", field=field)
        try:
            amount = float(cleaned)
        except ValueError:
            raise ValidationError("Please enter a valid amount", field=field) from None
    else:
        raise ValidationError("Please enter a valid amount", field=field)

    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be a positive number", field=field)
    return amount


def parse_category(value: Any) -> Category:
    """Map a form value to a Category (case-insensitive)."""
    if isinstance(value, Category):
        return value
    if isinstance(value, str):
        for category in Category:
            if category.value.lower() == value.strip().lower():
                return category
    raise ValidationError(f"Invalid category: {value!r}", field="category")


def parse_recurrence(value: Any) -> Recurrence:
    """Map a form value to a Recurrence (case-insensitive)."""
    if isinstance(value, Recurrence):
        return value
    if isinstance(value, str):
        for recurrence in Recurrence:
            if recurrence.value.lower() == value.strip().lower():
                return recurrence
    raise ValidationError(f"Invalid recurrence: {value!r}", field="recurrence")


def parse_date(value: Any, field: str) -> date:
    """Accept a date, a datetime, or an ISO-8601 string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field} must be a valid date", field=field)


def parse_reminder_days(value: Any) -> list[int]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError("reminder_days must be a list", field="reminder_days")
    days = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int) or item < 0:
            raise ValidationError(
                "reminder_days must contain non-negative integers", field="reminder_days"
            )
        days.append(item)
    return sorted(set(days), reverse=True)


def _parse_optional_text(value: Any, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", field=field)
    return value.strip() or None


def _parse_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be a boolean", field=field)
    return value


def _parse_field(key: str, value: Any) -> Any:
    """Validate a single known field."""
    if key == "name":
        return parse_name(value)
    if key == "amount":
        return parse_amount(value)
    if key == "previous_amount":
        return None if value is None else parse_amount(value, field=key)
    if key == "category":
        return parse_category(value)
    if key == "recurrence":
        return parse_recurrence(value)
    if key in ("next_due_date", "start_date"):
        return parse_date(value, key)
    if key == "trial_end_date":
        return None if value is None else parse_date(value, key)
    if key in _OPTIONAL_TEXT_FIELDS:
        return _parse_optional_text(value, key)
    if key in ("is_free_trial", "auto_renew", "is_paid"):
        return _parse_bool(value, key)
    if key == "reminder_days":
        return parse_reminder_days(value)
    raise ValidationError(f"Unknown field: {key}", field=key)


def validate_subscription_form(form: dict) -> dict:
    """
    Validate input for a new subscription.

    Args:
        form: Raw values keyed by field name. `name`, `amount`, `category`
            and `recurrence` are required; `start_date` defaults to today.

    Returns:
        A dict of cleaned values ready for the Subscription constructor.

    Raises:
        ValidationError: On the first invalid or missing field.
    """
    unknown = set(form) - _KNOWN_FIELDS
    if unknown:
        raise ValidationError(f"Unknown field: {sorted(unknown)[0]}", field=sorted(unknown)[0])

    for required in ("name", "amount", "category", "recurrence"):
        if form.get(required) in (None, ""):
            raise ValidationError("Please fill in all required fields", field=required)

    cleaned = {key: _parse_field(key, value) for key, value in form.items()}
    cleaned.setdefault("start_date", date.today())

    if cleaned.get("is_free_trial") and cleaned.get("trial_end_date") is None:
        raise ValidationError(
            "trial_end_date is required for a free trial", field="trial_end_date"
        )
    return cleaned


def validate_subscription_changes(changes: dict) -> dict:
    """
    Validate a partial update. Only the supplied fields are checked.

    Raises:
        ValidationError: If a field is immutable, unknown, or invalid.
    """
    if not changes:
        raise ValidationError("No changes supplied")
    for key in changes:
        if key in IMMUTABLE_FIELDS:
            raise ValidationError(f"{key} cannot be changed", field=key)
    return {key: _parse_field(key, value) for key, value in changes.items()}
