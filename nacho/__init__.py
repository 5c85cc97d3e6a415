"""
Sistema Nacho progression engine.

Turns real-world habits into RPG progression: effective stats and total
power, procedurally generated tower floors, bosses and daily quests, and
the time windows (buffs, streaks, mission cadences) that govern them.

Every service takes a `ConfigManager` holding the balance tables:

    from nacho.core.config import ConfigManager
    from nacho.modules.dungeon import DungeonFloorGenerator

    config = ConfigManager.from_yaml()
    dungeon = DungeonFloorGenerator(config).generate(10)
"""

__version__ = "1.0.0"
