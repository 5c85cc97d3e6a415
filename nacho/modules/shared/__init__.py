"""
Nacho Shared Module

Purpose
-------
Domain-level foundations for all feature modules:
- Domain exceptions and error handling
- Base service pattern
- Pure progression formulas
- Time window policy (availability, expiry, day boundaries)

Usage
-----
    from nacho.modules.shared import (
        BaseService,
        ValidationError,
        calculate_xp_for_next_level,
        can_complete,
    )
"""

from __future__ import annotations

from .base_service import BaseService
from .exceptions import (
    InvalidOperationError,
    MalformedStateError,
    MissionUnavailableError,
    NachoDomainException,
    NotFoundError,
    QuestAlreadyClaimedError,
    QuestNotCompletedError,
    ValidationError,
    get_error_severity,
    is_transient_error,
    should_alert,
)
from .formulas import (
    calculate_level_scaled,
    calculate_polynomial_growth,
    calculate_triangular,
    calculate_xp_for_next_level,
    clamp,
)
from .time_window import (
    can_complete,
    is_available_today,
    is_buff_active,
    is_completed_today,
    is_new_day,
    previous_scheduled_date,
    weekday_index,
)

__all__ = [
    # Base patterns
    "BaseService",
    # Exceptions
    "NachoDomainException",
    "NotFoundError",
    "ValidationError",
    "MalformedStateError",
    "InvalidOperationError",
    "MissionUnavailableError",
    "QuestNotCompletedError",
    "QuestAlreadyClaimedError",
    "is_transient_error",
    "get_error_severity",
    "should_alert",
    # Formulas
    "clamp",
    "calculate_xp_for_next_level",
    "calculate_polynomial_growth",
    "calculate_level_scaled",
    "calculate_triangular",
    # Time windows
    "weekday_index",
    "is_available_today",
    "is_completed_today",
    "can_complete",
    "previous_scheduled_date",
    "is_buff_active",
    "is_new_day",
]
