from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from idlerpg.domain.models.activity import IDLE, Crafting, CurrentActivity, Mining, Smelting, Traveling
from idlerpg.domain.models.combat import CombatStance
from idlerpg.domain.models.game_state import DEFAULT_MENU, GameState
from idlerpg.domain.models.inventory import DEFAULT_INVENTORY_CAPACITY, Bank, Inventory, ItemStack
from idlerpg.domain.models.player import DEFAULT_GOLD, DEFAULT_MAX_HP, DEFAULT_PLAYER_NAME, Player
from idlerpg.domain.models.skill import MAX_SKILL_LEVEL, Skill, fresh_skills


logger = logging.getLogger(__name__)

SAVE_VERSION = 2
SUPPORTED_SAVE_VERSIONS = (1, 2)

_ACTIVITY_TYPES = {
    "traveling": Traveling,
    "mining": Mining,
    "smelting": Smelting,
    "crafting": Crafting,
}


class SaveFormatError(ValueError):
    """Raised when a persisted blob cannot be turned back into a game state."""


def _items_payload(stacks: List[ItemStack]) -> List[Dict[str, Any]]:
    return [{"id": stack.id, "name": stack.name, "quantity": stack.quantity} for stack in stacks]


def _activity_payload(activity: CurrentActivity) -> Dict[str, Any]:
    if not activity.is_active:
        return {"kind": "idle"}
    payload: Dict[str, Any] = {
        "kind": activity.kind.value,
        "targetId": activity.target_id,
        "progress": activity.progress,
        "totalDuration": activity.total_duration,
    }
    if isinstance(activity, Traveling):
        payload["baseTravelTime"] = activity.base_travel_time
        payload["effectiveTravelTime"] = activity.total_duration
    return payload


def encode_game_state(state: GameState) -> Dict[str, Any]:
    player = state.player
    activity = state.activity
    active_ore = activity.target_id if isinstance(activity, Mining) else None
    active_ingot = activity.target_id if isinstance(activity, Smelting) else None
    active_recipe = activity.target_id if isinstance(activity, Crafting) else None
    return {
        "version": SAVE_VERSION,
        "timeMinutes": state.time_minutes,
        "currentLocation": state.current_location_id,
        "currentMenu": state.current_menu,
        "player": {
            "name": player.name,
            "maxHp": player.max_hp,
            "hp": player.hp,
            "gold": player.gold,
            "inventoryCapacity": player.inventory.capacity,
            "inventory": _items_payload(player.inventory.items),
            "stats": {name: {"level": skill.level, "xp": skill.xp} for name, skill in player.skills.items()},
        },
        "bank": {"gold": state.bank.gold, "items": _items_payload(state.bank.items)},
        "mining": {"activeOreId": active_ore},
        "smelting": {"activeIngotId": active_ingot},
        "armory": {"activeRecipeId": active_recipe, "search": state.recipe_search},
        "combat": {"inCombat": state.in_combat, "stance": state.combat_stance.value},
        "activity": _activity_payload(activity),
    }


def migrate_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Upgrade an older blob to the current layout, one version at a time."""
    if not isinstance(payload, Mapping):
        raise SaveFormatError("Save data must be a mapping")
    data = dict(payload)
    try:
        version = int(data.get("version", 1) or 1)
    except (TypeError, ValueError) as exc:
        raise SaveFormatError(f"Unreadable save version {data.get('version')!r}") from exc
    if version > SAVE_VERSION:
        raise SaveFormatError(f"Save version {version} is newer than supported version {SAVE_VERSION}")
    if version not in SUPPORTED_SAVE_VERSIONS:
        raise SaveFormatError(f"Unknown save version {version}")

    if version == 1:
        combat = dict(data.get("combat") or {})
        combat.setdefault("stance", CombatStance.ACCURATE.value)
        data["combat"] = combat
        # v1 kept the selected ids but never resumed the timers
        data["activity"] = {"kind": "idle"}
        version = 2
        logger.info("Migrated save data from version 1 to 2")

    data["version"] = version
    return data


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def _stacks(rows: Any) -> List[ItemStack]:
    stacks: Dict[str, ItemStack] = {}
    for row in rows or []:
        quantity = int(row.get("quantity", 0) or 0)
        if quantity <= 0:
            continue
        item_id = str(row["id"])
        if item_id in stacks:
            stacks[item_id].quantity += quantity
            continue
        stacks[item_id] = ItemStack(id=item_id, name=str(row.get("name") or item_id), quantity=quantity)
    return list(stacks.values())


def _decode_player(data: Mapping[str, Any]) -> Player:
    max_hp = int(data.get("maxHp") or DEFAULT_MAX_HP)
    if max_hp < 1:
        logger.warning("Save data has max hp %s; using %s", max_hp, DEFAULT_MAX_HP)
        max_hp = DEFAULT_MAX_HP
    hp = data.get("hp")
    hp = max_hp if hp is None else max(0, min(int(hp), max_hp))

    items = _stacks(data.get("inventory"))
    held = sum(stack.quantity for stack in items)
    capacity = int(data.get("inventoryCapacity") or DEFAULT_INVENTORY_CAPACITY)
    if capacity < 1:
        capacity = DEFAULT_INVENTORY_CAPACITY
    if held > capacity:
        logger.warning("Save data holds %s items with capacity %s; raising capacity", held, capacity)
        capacity = held

    skills = fresh_skills()
    for name, row in _section(data, "stats").items():
        if name not in skills:
            logger.info("Ignoring unknown skill %r in save data", name)
            continue
        if not isinstance(row, Mapping):
            continue
        level = max(1, int(row.get("level") or 1))
        if level > MAX_SKILL_LEVEL:
            logger.warning("Save data has %s at level %s; capping at %s", name, level, MAX_SKILL_LEVEL)
            level = MAX_SKILL_LEVEL
        skill = Skill(name=name, level=level)
        # rolls over any xp past the level threshold
        raw_xp = row.get("xp") or 0
        skill.add_xp(max(0, raw_xp if isinstance(raw_xp, (int, float)) else float(raw_xp)))
        skills[name] = skill

    gold = data.get("gold")
    return Player(
        name=str(data.get("name") or DEFAULT_PLAYER_NAME),
        max_hp=max_hp,
        hp=hp,
        gold=DEFAULT_GOLD if gold is None else max(0, int(gold)),
        inventory=Inventory(items=items, capacity=capacity),
        skills=skills,
    )


def _decode_activity(data: Mapping[str, Any]) -> CurrentActivity:
    kind = str(data.get("kind") or "idle")
    activity_type = _ACTIVITY_TYPES.get(kind)
    target_id = data.get("targetId")
    if activity_type is None or not target_id:
        return IDLE
    progress = min(max(0.0, float(data.get("progress") or 0.0)), 0.999)
    duration = int(data.get("totalDuration") or data.get("effectiveTravelTime") or 0)
    if duration <= 0:
        return IDLE
    if activity_type is Traveling:
        return Traveling(
            target_id=str(target_id),
            total_duration=duration,
            progress=progress,
            base_travel_time=int(data.get("baseTravelTime") or duration),
        )
    return activity_type(target_id=str(target_id), total_duration=duration, progress=progress)


def decode_game_state(payload: Mapping[str, Any], *, starting_location_id: str) -> GameState:
    """Rebuild a game state; missing fields take fresh-game defaults.

    Combat sessions are never restored, the player comes back out of combat.
    """
    data = migrate_payload(payload)
    try:
        combat = _section(data, "combat")
        stance = CombatStance.normalize(combat.get("stance")) or CombatStance.ACCURATE
        bank_data = _section(data, "bank")
        return GameState(
            player=_decode_player(_section(data, "player")),
            current_location_id=str(data.get("currentLocation") or starting_location_id),
            bank=Bank(items=_stacks(bank_data.get("items")), gold=max(0, int(bank_data.get("gold") or 0))),
            activity=_decode_activity(_section(data, "activity")),
            combat_stance=stance,
            time_minutes=max(0.0, float(data.get("timeMinutes") or 0.0)),
            current_menu=str(data.get("currentMenu") or DEFAULT_MENU),
            recipe_search=str(_section(data, "armory").get("search") or ""),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SaveFormatError(f"Corrupt save data: {exc}") from exc
