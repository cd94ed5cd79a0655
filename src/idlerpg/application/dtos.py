from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class VitalsView:
    name: str
    hp: int
    max_hp: int
    gold: int


@dataclass
class SkillView:
    name: str
    level: int
    xp: float
    xp_for_next_level: int
    progress_ratio: float


@dataclass
class ItemView:
    id: str
    name: str
    quantity: int


@dataclass
class InventoryView:
    items: List[ItemView] = field(default_factory=list)
    capacity: int = 0
    used: int = 0


@dataclass
class BankView:
    gold: int = 0
    items: List[ItemView] = field(default_factory=list)


@dataclass
class ConnectionView:
    location_id: str
    name: str
    base_travel_time: int


@dataclass
class EncounterView:
    enemy_id: str
    weight: float


@dataclass
class LocationView:
    id: str
    name: str
    type: str
    description: str
    emoji: str
    actions: List[str] = field(default_factory=list)
    connections: List[ConnectionView] = field(default_factory=list)
    mining_options: List[str] = field(default_factory=list)
    encounters: List[EncounterView] = field(default_factory=list)
    parent: Optional[str] = None


@dataclass
class ActivityView:
    kind: str
    target_id: Optional[str] = None
    target_name: str = ""
    progress_ratio: float = 0.0
    total_duration: int = 0
    remaining_ms: float = 0.0


@dataclass
class CombatView:
    enemy_id: str
    enemy_name: str
    enemy_hp: int
    enemy_max_hp: int
    enemy_attack: int
    enemy_defense: int
    phase: str
    player_turn: bool
    stance: str


@dataclass
class RecipeView:
    id: str
    name: str
    kind: str
    skill_name: str
    level_req: int
    xp: int
    base_time: int
    ingredients: Dict[str, int] = field(default_factory=dict)
    success_chance: float = 1.0
    tier: Optional[str] = None
    item_type: Optional[str] = None
    capture_chance: Optional[float] = None
    meets_level: bool = True
    has_ingredients: bool = True


@dataclass
class GameSnapshotView:
    vitals: VitalsView
    skills: List[SkillView]
    inventory: InventoryView
    bank: BankView
    location: Optional[LocationView]
    activity: ActivityView
    combat: Optional[CombatView]
    stance: str
    time_minutes: float
    time_label: str
    current_menu: str
    recipe_search: str
    messages: List[str] = field(default_factory=list)
