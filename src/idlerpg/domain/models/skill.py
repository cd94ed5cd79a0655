from __future__ import annotations

import math
from dataclasses import dataclass


XP_CURVE_BASE = 100
XP_CURVE_GROWTH = 1.15
MAX_SKILL_LEVEL = 99

SKILL_NAMES: tuple[str, ...] = (
    "Attack",
    "Strength",
    "Defense",
    "Hitpoints",
    "Agility",
    "Mining",
    "Smelting",
    "Smithing",
)


def required_xp(level: int) -> int:
    """XP needed to advance from ``level`` to ``level + 1``."""
    safe_level = min(max(1, int(level)), MAX_SKILL_LEVEL)
    return math.floor(XP_CURVE_BASE * math.pow(XP_CURVE_GROWTH, safe_level - 1))


@dataclass
class Skill:
    name: str
    level: int = 1
    xp: int | float = 0

    def __post_init__(self) -> None:
        if int(self.level) < 1:
            raise ValueError("Skill level must be at least 1")
        if self.xp < 0:
            raise ValueError("Skill xp cannot be negative")
        self.level = int(self.level)

    def xp_for_next_level(self) -> int:
        return required_xp(self.level)

    def progress(self) -> float:
        return min(self.xp / self.xp_for_next_level(), 1.0)

    def add_xp(self, amount: int | float) -> bool:
        """Grant XP and roll over as many levels as it covers.

        Returns True when at least one level was gained.
        """
        if amount < 0:
            raise ValueError("Cannot grant negative experience")
        if amount == 0:
            return False
        self.xp += amount
        leveled_up = False
        while self.level < MAX_SKILL_LEVEL and self.xp >= self.xp_for_next_level():
            self.xp -= self.xp_for_next_level()
            self.level += 1
            leveled_up = True
        return leveled_up


def fresh_skills() -> dict[str, Skill]:
    return {name: Skill(name=name) for name in SKILL_NAMES}
