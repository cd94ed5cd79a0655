from __future__ import annotations

from typing import Callable, Optional, Sequence

from idlerpg.application.dtos import (
    ActivityView,
    BankView,
    CombatView,
    ConnectionView,
    EncounterView,
    InventoryView,
    ItemView,
    LocationView,
    RecipeView,
    SkillView,
    VitalsView,
)
from idlerpg.domain.models.activity import CurrentActivity
from idlerpg.domain.models.combat import CombatSession, CombatStance
from idlerpg.domain.models.inventory import Bank, Inventory, ItemStack
from idlerpg.domain.models.location import Location
from idlerpg.domain.models.player import Player
from idlerpg.domain.models.recipe import Recipe


def to_vitals_view(player: Player) -> VitalsView:
    return VitalsView(name=player.name, hp=player.hp, max_hp=player.max_hp, gold=player.gold)


def to_skill_views(player: Player) -> list[SkillView]:
    return [
        SkillView(
            name=skill.name,
            level=skill.level,
            xp=skill.xp,
            xp_for_next_level=skill.xp_for_next_level(),
            progress_ratio=skill.progress(),
        )
        for skill in player.skills.values()
    ]


def _item_views(stacks: Sequence[ItemStack]) -> list[ItemView]:
    return [ItemView(id=stack.id, name=stack.name, quantity=stack.quantity) for stack in stacks]


def to_inventory_view(inventory: Inventory) -> InventoryView:
    return InventoryView(
        items=_item_views(inventory.items),
        capacity=inventory.capacity,
        used=inventory.total_quantity(),
    )


def to_bank_view(bank: Bank) -> BankView:
    return BankView(gold=bank.gold, items=_item_views(bank.items))


def to_location_view(location: Location, *, name_of: Callable[[str], str]) -> LocationView:
    return LocationView(
        id=location.id,
        name=location.name,
        type=location.type,
        description=location.description,
        emoji=location.emoji,
        actions=list(location.actions),
        connections=[
            ConnectionView(location_id=target_id, name=name_of(target_id), base_travel_time=int(travel_time))
            for target_id, travel_time in location.connections.items()
        ],
        mining_options=list(location.mining_options),
        encounters=[EncounterView(enemy_id=entry.enemy_id, weight=entry.weight) for entry in location.encounters],
        parent=location.parent,
    )


def to_activity_view(activity: CurrentActivity, *, target_name: str = "") -> ActivityView:
    if not activity.is_active:
        return ActivityView(kind=activity.kind.value)
    return ActivityView(
        kind=activity.kind.value,
        target_id=activity.target_id,
        target_name=target_name or activity.target_id,
        progress_ratio=min(1.0, activity.progress),
        total_duration=activity.total_duration,
        remaining_ms=activity.remaining_ms(),
    )


def to_combat_view(session: Optional[CombatSession], stance: CombatStance) -> Optional[CombatView]:
    if session is None:
        return None
    enemy = session.enemy
    return CombatView(
        enemy_id=enemy.template_id,
        enemy_name=enemy.name,
        enemy_hp=max(0, enemy.hp),
        enemy_max_hp=enemy.max_hp,
        enemy_attack=enemy.attack,
        enemy_defense=enemy.defense,
        phase=session.phase.value,
        player_turn=session.player_turn,
        stance=stance.value,
    )


def to_recipe_view(recipe: Recipe, player: Player) -> RecipeView:
    inventory = player.inventory
    return RecipeView(
        id=recipe.id,
        name=recipe.name,
        kind=recipe.kind.value,
        skill_name=recipe.skill_name,
        level_req=recipe.level_req,
        xp=recipe.xp,
        base_time=recipe.base_time,
        ingredients={ingredient.name: ingredient.qty for ingredient in recipe.ingredients},
        success_chance=recipe.success_chance,
        tier=recipe.tier,
        item_type=recipe.item_type,
        capture_chance=recipe.capture_chance,
        meets_level=recipe.meets_level_requirement(player.skill_level(recipe.skill_name)),
        has_ingredients=recipe.has_ingredients(inventory.has_item),
    )
