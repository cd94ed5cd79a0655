from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class LocationAction(str, Enum):
    MINE = "mine"
    BANK = "bank"
    SMELT = "smelt"
    CRAFT = "craft"
    COMBAT = "combat"
    SHOP = "shop"


@dataclass(frozen=True)
class EncounterTableEntry:
    enemy_id: str
    weight: float = 1

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError("Encounter weights cannot be negative")


@dataclass
class Location:
    id: str
    name: str
    type: str = "hub"
    description: str = ""
    emoji: str = ""
    connections: Dict[str, int] = field(default_factory=dict)
    parent: Optional[str] = None
    actions: List[str] = field(default_factory=list)
    mining_options: List[str] = field(default_factory=list)
    encounters: List[EncounterTableEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.actions = [LocationAction(getattr(action, "value", action)).value for action in self.actions]

    def travel_time_to(self, destination_id: str) -> Optional[int]:
        value = self.connections.get(destination_id)
        if value is None or value <= 0:
            return None
        return int(value)

    def add_connection(self, location_id: str, travel_time_ms: int) -> None:
        if int(travel_time_ms) <= 0:
            raise ValueError("Travel time must be positive")
        self.connections[location_id] = int(travel_time_ms)

    def has_action(self, action: LocationAction | str) -> bool:
        key = action.value if isinstance(action, LocationAction) else str(action)
        return key in self.actions
