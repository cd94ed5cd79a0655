from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from idlerpg.application.services.balance_tables import DEFAULT_TRAVEL_TIME_MS
from idlerpg.domain.models.location import Location
from idlerpg.domain.models.recipe import RecipeKind
from idlerpg.domain.repositories import EnemyRepository, LocationRepository, RecipeRepository


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TravelEstimate:
    base_travel_time: int
    from_fallback: bool = False


class LocationGraph:
    def __init__(self, location_repo: LocationRepository, *, default_travel_time: int = DEFAULT_TRAVEL_TIME_MS) -> None:
        self.location_repo = location_repo
        self.default_travel_time = int(default_travel_time)
        self.integrity_gaps: List[str] = []

    def get(self, location_id: str | None) -> Optional[Location]:
        if not location_id:
            return None
        return self.location_repo.get(location_id)

    def starting_location_id(self) -> str:
        start = self.location_repo.get_starting_location()
        if start is None:
            raise LookupError("Location repository has no starting location")
        return start.id

    def _flag_gap(self, message: str) -> None:
        self.integrity_gaps.append(message)
        logger.warning("Location data gap: %s", message)

    def travel_time_between(self, from_id: str, to_id: str) -> TravelEstimate:
        origin = self.get(from_id)
        destination = self.get(to_id)

        base = origin.travel_time_to(to_id) if origin is not None else None
        if base is None and destination is not None:
            base = destination.travel_time_to(from_id)
        if base is None:
            self._flag_gap(f"no travel edge between {from_id!r} and {to_id!r}; using {self.default_travel_time} ms")
            return TravelEstimate(base_travel_time=self.default_travel_time, from_fallback=True)
        return TravelEstimate(base_travel_time=int(base))

    def weighted_random_encounter(self, location: Location | None, rng: random.Random | None = None) -> Optional[str]:
        if location is None or not location.encounters:
            return None
        rng = rng or random
        entries = [entry for entry in location.encounters if entry.weight > 0]
        if not entries:
            return None
        total_weight = sum(entry.weight for entry in entries)
        remainder = rng.random() * total_weight
        for entry in entries:
            remainder -= entry.weight
            if remainder <= 0:
                return entry.enemy_id
        # float rounding can leave a sliver of weight past the last entry
        return entries[-1].enemy_id

    def exit_target(self, location_id: str) -> str:
        current = self.get(location_id)
        if current is not None and current.parent:
            if self.get(current.parent) is not None:
                return current.parent
            self._flag_gap(f"location {location_id!r} has unknown parent {current.parent!r}")
        return self.starting_location_id()

    def validate(
        self,
        *,
        recipe_repo: RecipeRepository | None = None,
        enemy_repo: EnemyRepository | None = None,
    ) -> List[str]:
        problems: List[str] = []
        for location in self.location_repo.list_all():
            if location.parent and self.get(location.parent) is None:
                problems.append(f"{location.id}: parent {location.parent!r} does not exist")
            for destination_id, travel_time in location.connections.items():
                if self.get(destination_id) is None:
                    problems.append(f"{location.id}: connection to unknown location {destination_id!r}")
                if int(travel_time) <= 0:
                    problems.append(f"{location.id}: non-positive travel time to {destination_id!r}")
            if recipe_repo is not None:
                for ore_id in location.mining_options:
                    if recipe_repo.get(RecipeKind.ORE, ore_id) is None:
                        problems.append(f"{location.id}: mining option {ore_id!r} is not a known ore")
            if enemy_repo is not None:
                for entry in location.encounters:
                    if enemy_repo.get(entry.enemy_id) is None:
                        problems.append(f"{location.id}: encounter references unknown enemy {entry.enemy_id!r}")
        for problem in problems:
            logger.warning("Location data integrity: %s", problem)
        return problems

    def add_connection(self, from_id: str, to_id: str, travel_time_ms: int, *, mirrored: bool = True) -> None:
        origin = self.get(from_id)
        destination = self.get(to_id)
        if origin is None or destination is None:
            raise KeyError(f"Cannot connect unknown locations {from_id!r} -> {to_id!r}")
        origin.add_connection(to_id, travel_time_ms)
        if mirrored:
            destination.add_connection(from_id, travel_time_ms)
