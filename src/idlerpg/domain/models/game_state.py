from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from idlerpg.domain.models.activity import IDLE, CurrentActivity, Traveling
from idlerpg.domain.models.combat import CombatSession, CombatStance
from idlerpg.domain.models.inventory import Bank
from idlerpg.domain.models.player import Player


DEFAULT_MENU = "main"


@dataclass
class GameState:
    player: Player
    current_location_id: str
    bank: Bank = field(default_factory=Bank)
    activity: CurrentActivity = IDLE
    combat: Optional[CombatSession] = None
    combat_stance: CombatStance = CombatStance.ACCURATE
    time_minutes: float = 0.0
    current_menu: str = DEFAULT_MENU
    recipe_search: str = ""

    @property
    def in_combat(self) -> bool:
        return self.combat is not None and not self.combat.is_over

    @property
    def is_traveling(self) -> bool:
        return isinstance(self.activity, Traveling)

    @property
    def is_busy(self) -> bool:
        return self.activity.is_active
