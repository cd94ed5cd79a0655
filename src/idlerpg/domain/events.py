from dataclasses import dataclass
from typing import Optional


@dataclass
class SkillLevelledUp:
    skill_name: str
    from_level: int
    to_level: int


@dataclass
class TravelCompleted:
    from_location_id: str
    to_location_id: str
    agility_xp: int


@dataclass
class ActivityCompleted:
    kind: str
    target_id: str
    success: bool
    item_awarded: bool
    xp: int


@dataclass
class CombatStarted:
    enemy_id: str
    location_id: str


@dataclass
class CombatEnded:
    enemy_id: str
    outcome: str
    location_id: str


@dataclass
class BankTransactionCompleted:
    action: str
    item_id: Optional[str]
    amount: int


@dataclass
class GameSaved:
    version: int


@dataclass
class GameReset:
    reason: str = "user"
