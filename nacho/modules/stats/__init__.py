"""
Stats Module
============

Effective attributes and timed modifiers.

Services:
- StatResolver: passive multipliers and live buffs over base stats
- BuffService: buff activation, expiry, XP multiplier and health score
"""

from .buffs import BuffDefinition, BuffService
from .resolver import StatResolver

__all__ = [
    "StatResolver",
    "BuffService",
    "BuffDefinition",
]
