from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional


DEFAULT_RECIPE_TIME_MS = 3000


class RecipeKind(str, Enum):
    ORE = "ore"
    INGOT = "ingot"
    CRAFTING = "crafting"


SKILL_BY_KIND = {
    RecipeKind.ORE: "Mining",
    RecipeKind.INGOT: "Smelting",
    RecipeKind.CRAFTING: "Smithing",
}

_LEATHER_BY_TIER = {"Copper": 1, "Bronze": 2, "Iron": 3}
_LEATHER_DEFAULT = 4
_LEATHER_TYPES = ("Armor", "Shield")


@dataclass(frozen=True)
class Ingredient:
    id: str
    name: str
    qty: int = 1


@dataclass
class Recipe:
    id: str
    name: str
    kind: RecipeKind
    base_time: int = DEFAULT_RECIPE_TIME_MS
    level_req: int = 1
    xp: int = 0
    ingredients: List[Ingredient] = field(default_factory=list)
    # ingot only
    success_chance: float = 1.0
    # crafting only
    tier: Optional[str] = None
    item_type: Optional[str] = None
    ingot_id: Optional[str] = None
    ingot_name: Optional[str] = None
    ingots: int = 1
    capture_chance: Optional[float] = None

    def __post_init__(self) -> None:
        self.kind = RecipeKind(self.kind)
        if not 0.0 <= float(self.success_chance) <= 1.0:
            raise ValueError("success_chance must be within [0, 1]")
        if self.kind is RecipeKind.CRAFTING and not self.ingredients and self.ingot_id:
            self.ingredients = self._derive_crafting_ingredients()

    def _derive_crafting_ingredients(self) -> List[Ingredient]:
        rows = [Ingredient(id=str(self.ingot_id), name=self.ingot_name or str(self.ingot_id), qty=int(self.ingots))]
        if self.item_type in _LEATHER_TYPES:
            leather = _LEATHER_BY_TIER.get(str(self.tier), _LEATHER_DEFAULT)
            rows.append(Ingredient(id="leather", name="Leather", qty=leather))
        return rows

    @property
    def skill_name(self) -> str:
        return SKILL_BY_KIND[self.kind]

    def meets_level_requirement(self, level: int) -> bool:
        return int(level) >= int(self.level_req)

    def has_ingredients(self, check: Callable[[str, int], bool]) -> bool:
        return all(check(ingredient.id, ingredient.qty) for ingredient in self.ingredients)

    def time_required(self) -> int:
        return int(self.base_time)
