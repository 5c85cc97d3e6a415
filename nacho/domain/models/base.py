"""
Base domain model helpers for the Nacho engine.

Purpose
-------
Provide the validation framework and time helpers shared by every domain
value object. Domain models are frozen dataclasses: they validate their own
invariants on construction and never change afterwards. Services produce
updated copies with `dataclasses.replace`.

Responsibilities
----------------
- Define DomainValidationError for invariant violations
- Provide small validators used from `__post_init__`
- Normalise datetimes so that aware and naive values compare safely

Non-Responsibilities
--------------------
- Persistence (the host application stores `to_dict()` output)
- Translating errors for callers (services wrap DomainValidationError)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


# ============================================================================
# DOMAIN MODEL VALIDATION
# ============================================================================


class DomainValidationError(Exception):
    """
    Exception raised when domain model validation fails.

    This is the base exception for all invariant violations in domain
    models. Services translate it into `MalformedStateError`.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def validate_int(value: Any, field_name: str) -> None:
    """
    Validate that a value is a real integer.

    bool is rejected even though it subclasses int: `True` as a stat value
    is always a data error.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise DomainValidationError(
            f"{field_name} must be an integer, got {type(value).__name__}",
            field=field_name,
        )


def validate_positive(value: int, field_name: str) -> None:
    """
    Validate that a value is a positive integer.

    Raises
    ------
    DomainValidationError
        If value is not an int or not positive
    """
    validate_int(value, field_name)
    if value <= 0:
        raise DomainValidationError(
            f"{field_name} must be positive, got {value}",
            field=field_name,
        )


def validate_non_negative(value: int, field_name: str) -> None:
    """
    Validate that a value is a non-negative integer.

    Raises
    ------
    DomainValidationError
        If value is not an int or is negative
    """
    validate_int(value, field_name)
    if value < 0:
        raise DomainValidationError(
            f"{field_name} must be non-negative, got {value}",
            field=field_name,
        )


def validate_not_empty(value: str, field_name: str) -> None:
    """Validate that a string is not empty or whitespace-only."""
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError(
            f"{field_name} cannot be empty",
            field=field_name,
        )


# ============================================================================
# TIME
# ============================================================================


def ensure_utc(value: datetime) -> datetime:
    """
    Return `value` as an aware UTC datetime.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(value: Any, field_name: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 string (or pass through a datetime) into aware UTC.

    `None` stays `None`. A trailing `Z` is accepted.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError as exc:
            raise DomainValidationError(
                f"{field_name} is not an ISO-8601 datetime: {value!r}",
                field=field_name,
            ) from exc
    raise DomainValidationError(
        f"{field_name} must be a datetime or ISO string, got {type(value).__name__}",
        field=field_name,
    )


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return ensure_utc(value).isoformat() if value is not None else None
