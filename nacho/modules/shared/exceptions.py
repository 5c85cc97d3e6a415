"""
Domain exceptions for the Nacho progression engine.

Purpose
-------
Define the structured, domain-specific exception hierarchy for progression
logic. These exceptions are raised by services for rule violations and
malformed player state. The host application translates them into
player-facing messages.

Design Notes
------------
- All domain exceptions inherit from `NachoDomainException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict-like)
  - `severity`: `ErrorSeverity` value for logging/alerting
  - `is_retryable`: whether the operation can be retried
  - `error_code`: short, stable identifier for programmatic use
- Computations are total wherever a fallback exists (unknown rarity,
  unknown passive). Only structurally malformed input raises.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from nacho.core.exceptions import ErrorSeverity


class NachoDomainException(Exception):
    """
    Base exception for all Nacho domain-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error (dict-like)
        severity: Error severity level for logging handlers
        is_retryable: Whether the operation can be retried
        error_code: Optional code for programmatic handling

    Example:
        >>> raise NachoDomainException(
        ...     "Mission rejected",
        ...     {"reason": "already completed today"}
        ... )
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE: bool = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        is_retryable: Optional[bool] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.is_retryable: bool = (
            is_retryable if is_retryable is not None else self.DEFAULT_RETRYABLE
        )
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
        }

    def __str__(self) -> str:
        """String representation for logging."""
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}, "
            f"is_retryable={self.is_retryable!r}"
            ")"
        )


class NotFoundError(NachoDomainException):
    """
    Raised when a requested definition cannot be found.

    Only explicit lookups raise this (activating a buff id, upgrading a
    passive id). Computations treat unknown ids as zero contribution.

    Args:
        resource_type: Type of resource (e.g., "Buff", "Passive")
        identifier: Optional identifier for the missing resource
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False

    def __init__(self, resource_type: str, identifier: Optional[Any] = None) -> None:
        self.resource_type = resource_type
        self.identifier = identifier

        if identifier is not None:
            message = f"{resource_type} not found: {identifier}"
        else:
            message = f"{resource_type} not found"

        super().__init__(
            message,
            details={
                "resource_type": resource_type,
                "identifier": identifier,
            },
            error_code=f"{resource_type.upper()}_NOT_FOUND",
        )


class ValidationError(NachoDomainException):
    """
    Raised when an input fails domain validation.

    Args:
        field: Name of the field that failed validation
        message: Explanation of why validation failed
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.validation_message = message
        error_message = f"Validation error for {field}: {message}"
        super().__init__(
            error_message,
            details={
                "field": field,
                "validation_message": message,
            },
            error_code=f"VALIDATION_{field.upper()}",
        )


class MalformedStateError(ValidationError):
    """
    Raised when player state is structurally broken.

    A missing attribute, a non-integer or negative stat, or a level below 1
    would otherwise propagate a corrupted power or dungeon value into
    player-facing numbers. This is the one case the engine fails fast.
    """

    DEFAULT_SEVERITY = ErrorSeverity.ERROR

    def __init__(self, field: str, message: str) -> None:
        super().__init__(field, message)
        self.error_code = f"MALFORMED_{field.upper()}"


class InvalidOperationError(NachoDomainException):
    """
    Raised when a caller attempts an action that violates game rules.

    Args:
        action: Description of the invalid action
        reason: Explanation of why it's not allowed

    Example:
        >>> raise InvalidOperationError(
        ...     "upgrade_passive",
        ...     "Passive iron_muscle is already at max level 10"
        ... )
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False

    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        message = f"Invalid operation '{action}': {reason}"
        super().__init__(
            message,
            details={
                "action": action,
                "reason": reason,
            },
            error_code=f"INVALID_{action.upper()}",
        )


class MissionUnavailableError(InvalidOperationError):
    """
    Raised when a mission cannot be completed right now.

    Either the mission is not scheduled for today (weekly missions) or a
    daily-gated mission was already completed today.
    """

    def __init__(self, mission_id: str, reason: str) -> None:
        self.mission_id = mission_id
        super().__init__("complete_mission", reason)
        self.details["mission_id"] = mission_id
        self.error_code = "MISSION_UNAVAILABLE"


class QuestNotCompletedError(InvalidOperationError):
    """Raised when claiming the reward of a quest that is not completed."""

    def __init__(self, quest_id: str) -> None:
        self.quest_id = quest_id
        super().__init__("claim_quest", f"Quest {quest_id} is not completed")
        self.details["quest_id"] = quest_id
        self.error_code = "QUEST_NOT_COMPLETED"


class QuestAlreadyClaimedError(InvalidOperationError):
    """Raised when a quest's reward was already paid out."""

    DEFAULT_SEVERITY = ErrorSeverity.WARNING

    def __init__(self, quest_id: str, claimed_at: Any) -> None:
        self.quest_id = quest_id
        self.claimed_at = claimed_at
        super().__init__("claim_quest", f"Quest {quest_id} was already claimed")
        self.details.update({"quest_id": quest_id, "claimed_at": str(claimed_at)})
        self.error_code = "QUEST_ALREADY_CLAIMED"


# Utility functions for exception handling patterns


def is_transient_error(exc: Exception) -> bool:
    """Check if an exception represents a transient error that can be retried."""
    if isinstance(exc, NachoDomainException):
        return exc.is_retryable
    return False


def get_error_severity(exc: Exception) -> ErrorSeverity:
    """Get the severity level of an exception for logging."""
    if isinstance(exc, NachoDomainException):
        return exc.severity
    return ErrorSeverity.ERROR


def should_alert(exc: Exception) -> bool:
    """Determine if an exception should trigger alerting (ERROR or CRITICAL)."""
    severity = get_error_severity(exc)
    return severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)
