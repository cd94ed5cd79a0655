from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from idlerpg.domain.models.inventory import DEFAULT_INVENTORY_CAPACITY, Inventory
from idlerpg.domain.models.skill import Skill, fresh_skills


DEFAULT_PLAYER_NAME = "Adventurer"
DEFAULT_MAX_HP = 30
DEFAULT_GOLD = 20


@dataclass
class Player:
    name: str = DEFAULT_PLAYER_NAME
    max_hp: int = DEFAULT_MAX_HP
    hp: int = DEFAULT_MAX_HP
    gold: int = DEFAULT_GOLD
    inventory: Inventory = field(default_factory=lambda: Inventory(capacity=DEFAULT_INVENTORY_CAPACITY))
    skills: Dict[str, Skill] = field(default_factory=fresh_skills)

    def get_skill(self, name: str) -> Optional[Skill]:
        return self.skills.get(name)

    def skill_level(self, name: str) -> int:
        skill = self.skills.get(name)
        return skill.level if skill is not None else 1

    def take_damage(self, amount: int) -> None:
        self.hp = max(0, self.hp - int(amount))

    def heal_full(self) -> None:
        self.hp = self.max_hp

    def is_alive(self) -> bool:
        return self.hp > 0
