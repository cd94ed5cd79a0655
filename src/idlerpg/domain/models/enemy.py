from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class LootEntry:
    id: str
    name: str
    chance: float


@dataclass(frozen=True)
class EnemyTemplate:
    id: str
    name: str
    max_hp: int
    attack: int
    defense: int
    loot: tuple[LootEntry, ...] = ()

    def spawn(self) -> "Enemy":
        return Enemy(
            template_id=self.id,
            name=self.name,
            max_hp=self.max_hp,
            hp=self.max_hp,
            attack=self.attack,
            defense=self.defense,
            loot=list(self.loot),
        )


@dataclass
class Enemy:
    template_id: str
    name: str
    max_hp: int
    hp: int
    attack: int
    defense: int
    loot: List[LootEntry] = field(default_factory=list)

    def take_damage(self, amount: int) -> None:
        self.hp -= int(amount)

    def is_alive(self) -> bool:
        return self.hp > 0
