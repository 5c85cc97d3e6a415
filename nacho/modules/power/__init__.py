"""
Power Module
============

Single source of truth for the player's total power rating.
"""

from .service import PowerBreakdown, PowerService

__all__ = ["PowerService", "PowerBreakdown"]
