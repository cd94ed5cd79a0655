from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from idlerpg.domain.models.enemy import Enemy


class CombatStance(str, Enum):
    ACCURATE = "accurate"
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    CONTROLLED = "controlled"

    @classmethod
    def normalize(cls, value: "CombatStance | str | None") -> Optional["CombatStance"]:
        raw = str(getattr(value, "value", value) or "").strip().lower()
        return next((item for item in cls if item.value == raw), None)


class CombatPhase(str, Enum):
    IDLE = "idle"
    PLAYER_TURN = "player_turn"
    ENEMY_TURN = "enemy_turn"
    ENDED = "ended"


class CombatOutcome(str, Enum):
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"


@dataclass
class CombatSession:
    enemy: Enemy
    phase: CombatPhase = CombatPhase.PLAYER_TURN
    outcome: Optional[CombatOutcome] = None

    @property
    def player_turn(self) -> bool:
        return self.phase is CombatPhase.PLAYER_TURN

    @property
    def is_over(self) -> bool:
        return self.phase is CombatPhase.ENDED
