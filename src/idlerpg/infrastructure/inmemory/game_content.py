from __future__ import annotations

from idlerpg.domain.models.enemy import EnemyTemplate, LootEntry
from idlerpg.domain.models.recipe import Ingredient, Recipe, RecipeKind


def _ore(ore_id: str, name: str, base_time: int, level_req: int, xp: int) -> Recipe:
    return Recipe(id=ore_id, name=name, kind=RecipeKind.ORE, base_time=base_time, level_req=level_req, xp=xp)


def _ingot(ingot_id: str, name: str, base_time: int, level_req: int, xp: int, ingredients, success_chance: float = 1.0) -> Recipe:
    return Recipe(
        id=ingot_id,
        name=name,
        kind=RecipeKind.INGOT,
        base_time=base_time,
        level_req=level_req,
        xp=xp,
        ingredients=[Ingredient(id=row[0], name=row[1], qty=row[2]) for row in ingredients],
        success_chance=success_chance,
    )


ORES: tuple[Recipe, ...] = (
    _ore("copper_ore", "Copper Ore", 4000, 1, 5),
    _ore("tin_ore", "Tin Ore", 4500, 1, 6),
    _ore("iron_ore", "Iron Ore", 6500, 15, 15),
    _ore("coal", "Coal", 7000, 30, 25),
)

INGOTS: tuple[Recipe, ...] = (
    _ingot("copper_ingot", "Copper Ingot", 3500, 1, 8, [("copper_ore", "Copper Ore", 1)]),
    _ingot("bronze_ingot", "Bronze Ingot", 4500, 1, 12, [("copper_ore", "Copper Ore", 1), ("tin_ore", "Tin Ore", 1)]),
    _ingot("iron_ingot", "Iron Ingot", 5500, 15, 20, [("iron_ore", "Iron Ore", 1)], success_chance=0.5),
    _ingot("steel_ingot", "Steel Ingot", 7000, 30, 35, [("iron_ore", "Iron Ore", 1), ("coal", "Coal", 2)]),
)

_INGOT_NAMES = {recipe.id: recipe.name for recipe in INGOTS}

# (suffix, label, ingots, level req, xp, type, base time) per tier
_EQUIPMENT_TIERS = {
    "Copper": (
        ("dagger", "Dagger", 1, 1, 5, "Weapon", 3000),
        ("sword", "Sword", 2, 3, 10, "Weapon", 4000),
        ("helm", "Helm", 2, 4, 12, "Armor", 4500),
        ("chainbody", "Chainbody", 3, 6, 18, "Armor", 5500),
        ("platelegs", "Platelegs", 2, 5, 14, "Armor", 5000),
        ("kiteshield", "Kiteshield", 3, 7, 20, "Shield", 6000),
        ("boots", "Boots", 1, 2, 6, "Armor", 3500),
    ),
    "Bronze": (
        ("dagger", "Dagger", 1, 5, 12, "Weapon", 4000),
        ("sword", "Sword", 2, 8, 18, "Weapon", 5000),
        ("helm", "Helm", 2, 9, 20, "Armor", 5500),
        ("chainbody", "Chainbody", 3, 11, 26, "Armor", 6500),
        ("platelegs", "Platelegs", 2, 10, 22, "Armor", 6000),
        ("kiteshield", "Kiteshield", 3, 12, 28, "Shield", 7000),
        ("boots", "Boots", 1, 6, 14, "Armor", 4500),
    ),
    "Iron": (
        ("dagger", "Dagger", 1, 15, 30, "Weapon", 5500),
        ("sword", "Sword", 2, 18, 40, "Weapon", 6500),
        ("helm", "Helm", 2, 19, 42, "Armor", 7000),
        ("chainbody", "Chainbody", 3, 21, 50, "Armor", 8000),
        ("platelegs", "Platelegs", 2, 20, 46, "Armor", 7500),
        ("kiteshield", "Kiteshield", 3, 23, 55, "Shield", 8500),
        ("boots", "Boots", 1, 16, 32, "Armor", 6000),
    ),
    "Steel": (
        ("dagger", "Dagger", 1, 30, 60, "Weapon", 7000),
        ("sword", "Sword", 2, 33, 72, "Weapon", 8000),
        ("helm", "Helm", 2, 34, 75, "Armor", 8500),
        ("chainbody", "Chainbody", 3, 36, 84, "Armor", 9500),
        ("platelegs", "Platelegs", 2, 35, 80, "Armor", 9000),
        ("kiteshield", "Kiteshield", 3, 38, 90, "Shield", 10000),
        ("boots", "Boots", 1, 31, 64, "Armor", 7500),
    ),
}


def _build_equipment_recipes() -> list[Recipe]:
    rows: list[Recipe] = []
    for tier, pieces in _EQUIPMENT_TIERS.items():
        ingot_id = f"{tier.lower()}_ingot"
        for suffix, label, ingots, level_req, xp, item_type, base_time in pieces:
            rows.append(
                Recipe(
                    id=f"{tier.lower()}_{suffix}",
                    name=f"{tier} {label}",
                    kind=RecipeKind.CRAFTING,
                    base_time=base_time,
                    level_req=level_req,
                    xp=xp,
                    tier=tier,
                    item_type=item_type,
                    ingot_id=ingot_id,
                    ingot_name=_INGOT_NAMES.get(ingot_id),
                    ingots=ingots,
                )
            )
    return rows


BOX_CAPTURE_CHANCES: dict[str, float] = {
    "box_copper": 0.2,
    "box_tin": 0.25,
    "box_bronze": 0.3,
    "box_iron": 0.4,
    "box_steel": 0.5,
}


def _box(box_id: str, name: str, tier: str, level_req: int, xp: int, base_time: int, ingredients) -> Recipe:
    return Recipe(
        id=box_id,
        name=name,
        kind=RecipeKind.CRAFTING,
        base_time=base_time,
        level_req=level_req,
        xp=xp,
        tier=tier,
        item_type="Box",
        ingredients=[Ingredient(id=row[0], name=row[1], qty=row[2]) for row in ingredients],
        capture_chance=BOX_CAPTURE_CHANCES.get(box_id),
    )


BOXES: tuple[Recipe, ...] = (
    _box("box_copper", "Copper Box", "Copper", 1, 3, 2500, [("copper_ingot", "Copper Ingot", 1), ("leather", "Leather", 1)]),
    _box("box_tin", "Tin Box", "Tin", 2, 3, 2500, [("tin_ore", "Tin Ore", 2), ("leather", "Leather", 1)]),
    _box("box_bronze", "Bronze Box", "Bronze", 5, 6, 3000, [("bronze_ingot", "Bronze Ingot", 1), ("leather", "Leather", 1)]),
    _box("box_iron", "Iron Box", "Iron", 15, 12, 4000, [("iron_ingot", "Iron Ingot", 1), ("leather", "Leather", 2)]),
    _box("box_steel", "Steel Box", "Steel", 30, 20, 5000, [("steel_ingot", "Steel Ingot", 1), ("leather", "Leather", 3)]),
)

CRAFTING_RECIPES: tuple[Recipe, ...] = tuple(_build_equipment_recipes()) + BOXES

ENEMIES: dict[str, EnemyTemplate] = {
    "goblin": EnemyTemplate(
        id="goblin",
        name="Goblin",
        max_hp=20,
        attack=3,
        defense=2,
        loot=(LootEntry(id="copper_ore", name="Copper Ore", chance=0.3),),
    ),
    "swamp_creature": EnemyTemplate(
        id="swamp_creature",
        name="Swamp Creature",
        max_hp=25,
        attack=4,
        defense=3,
        loot=(LootEntry(id="tin_ore", name="Tin Ore", chance=0.25),),
    ),
    "mad_cow": EnemyTemplate(
        id="mad_cow",
        name="Mad Cow",
        max_hp=30,
        attack=5,
        defense=2,
        loot=(LootEntry(id="leather", name="Leather", chance=0.5),),
    ),
    "small_rat": EnemyTemplate(
        id="small_rat",
        name="Small Rat",
        max_hp=5,
        attack=1,
        defense=0,
    ),
}
