"""
Combat Module
=============

Procedural boss generation with element-driven stat spreads and
extractable shadows.
"""

from .boss_generator import BossGenerator
from .elements import ElementResolver

__all__ = [
    "BossGenerator",
    "ElementResolver",
]
