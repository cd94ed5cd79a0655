from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ActivityKind(str, Enum):
    IDLE = "idle"
    TRAVELING = "traveling"
    MINING = "mining"
    SMELTING = "smelting"
    CRAFTING = "crafting"


@dataclass(frozen=True)
class Idle:
    kind: ActivityKind = ActivityKind.IDLE

    @property
    def is_active(self) -> bool:
        return False


@dataclass
class TimedActivity:
    target_id: str
    total_duration: int
    progress: float = 0.0

    def __post_init__(self) -> None:
        if int(self.total_duration) <= 0:
            raise ValueError("Activity duration must be positive")
        if not 0.0 <= float(self.progress) < 1.0:
            raise ValueError("Activity progress must be within [0, 1)")

    @property
    def is_active(self) -> bool:
        return True

    def advance(self, delta_ms: float) -> bool:
        """Accumulate elapsed time; True once the activity has finished."""
        if delta_ms > 0:
            self.progress += float(delta_ms) / float(self.total_duration)
        return self.progress >= 1.0

    def remaining_ms(self) -> float:
        return max(0.0, (1.0 - self.progress) * self.total_duration)


@dataclass
class Traveling(TimedActivity):
    base_travel_time: int = 0
    kind: ActivityKind = ActivityKind.TRAVELING

    @property
    def destination_id(self) -> str:
        return self.target_id


@dataclass
class Mining(TimedActivity):
    kind: ActivityKind = ActivityKind.MINING


@dataclass
class Smelting(TimedActivity):
    kind: ActivityKind = ActivityKind.SMELTING


@dataclass
class Crafting(TimedActivity):
    kind: ActivityKind = ActivityKind.CRAFTING


CurrentActivity = Union[Idle, Traveling, Mining, Smelting, Crafting]
ProductionActivity = Union[Mining, Smelting, Crafting]

IDLE = Idle()
