"""
Element Resolver
================

Purpose
-------
Decide a boss's element from the dungeon it guards, using the ordered
keyword table in config, and expose the per-element lookup tables (names,
moves, stat bias, shadow bonus stat).

Design Decisions
----------------
- Keyword rules are checked in config order; the first rule with any
  keyword contained in the (lowercased) dungeon id wins
- No match is not an error: the element is drawn uniformly from the
  element set using the caller's random source
- Unknown elements in lookup tables resolve to empty tables

Dependencies
------------
- ConfigManager: `boss.elements`, `boss.element_keywords`, `boss.names`,
  `boss.moves`, `boss.stat_bias`, `boss.shadow_bonus_stat`
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple

from nacho.core.config.manager import ConfigManager
from nacho.core.exceptions import ConfigurationError
from nacho.core.logging.logger import get_logger
from nacho.domain.models.player import StatType

logger = get_logger(__name__)


class ElementResolver:
    """
    Config-driven element tables for boss generation.

    Public Methods
    --------------
    - match_keyword(dungeon_id) -> Element from keywords, or None
    - resolve(dungeon_id, rng) -> Element (keyword match or random fallback)
    - names_for(element), moves_for(element) -> Authored lists
    - stat_bias(element) -> {StatType: pool fraction}
    - shadow_bonus_stat(element) -> StatType
    """

    def __init__(self, config_manager: ConfigManager) -> None:
        self._config = config_manager
        self._logger = logger

        self.elements: List[str] = [str(e).lower() for e in config_manager.get("boss.elements", [])]
        if not self.elements:
            raise ConfigurationError("boss.elements", "At least one element is required")

        self._keyword_rules: List[Tuple[str, Tuple[str, ...]]] = [
            (
                str(rule["element"]).lower(),
                tuple(str(keyword).lower() for keyword in rule.get("keywords", [])),
            )
            for rule in config_manager.get("boss.element_keywords", [])
        ]

        self._names: Dict[str, List[str]] = dict(config_manager.get("boss.names", {}))
        self._moves: Dict[str, List[str]] = dict(config_manager.get("boss.moves", {}))

        self._stat_bias: Dict[str, Dict[StatType, float]] = {
            element: {StatType.parse(stat): float(fraction) for stat, fraction in bias.items()}
            for element, bias in config_manager.get("boss.stat_bias", {}).items()
        }
        self._bonus_stat: Dict[str, StatType] = {
            element: StatType.parse(stat)
            for element, stat in config_manager.get("boss.shadow_bonus_stat", {}).items()
        }

        for element in self.elements:
            if not self._names.get(element):
                raise ConfigurationError(f"boss.names.{element}", "Every element needs boss names")

    def match_keyword(self, dungeon_id: str) -> Optional[str]:
        haystack = (dungeon_id or "").lower()
        for element, keywords in self._keyword_rules:
            if any(keyword in haystack for keyword in keywords):
                return element
        return None

    def resolve(self, dungeon_id: str, rng: random.Random) -> str:
        element = self.match_keyword(dungeon_id)
        if element is not None:
            return element

        element = rng.choice(self.elements)
        self._logger.debug(
            "No element keyword matched; picked random element",
            extra={"dungeon_id": dungeon_id, "element": element},
        )
        return element

    def names_for(self, element: str) -> List[str]:
        return list(self._names.get(element, []))

    def moves_for(self, element: str) -> List[str]:
        return list(self._moves.get(element, []))

    def stat_bias(self, element: str) -> Dict[StatType, float]:
        return dict(self._stat_bias.get(element, {}))

    def shadow_bonus_stat(self, element: str) -> StatType:
        return self._bonus_stat.get(element, StatType.STRENGTH)
