import json
import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from idlerpg.application.services.save_codec import (
    SAVE_VERSION,
    SaveFormatError,
    decode_game_state,
    encode_game_state,
    migrate_payload,
)
from idlerpg.domain.models.activity import IDLE, Mining, Traveling
from idlerpg.domain.models.combat import CombatSession, CombatStance
from idlerpg.domain.models.game_state import GameState
from idlerpg.domain.models.player import Player
from idlerpg.domain.models.skill import MAX_SKILL_LEVEL, required_xp
from idlerpg.infrastructure.inmemory.game_content import ENEMIES


def _decode(payload):
    return decode_game_state(payload, starting_location_id="lumbridge")


class SaveCodecTests(unittest.TestCase):
    def _populated_state(self) -> GameState:
        player = Player(name="Zezima", hp=17, gold=140)
        player.inventory.add_item("copper_ore", "Copper Ore", 3)
        player.get_skill("Mining").add_xp(250)
        state = GameState(player=player, current_location_id="lumbridge_swamp_mine")
        state.bank.gold = 75
        state.bank.add_item("bronze_ingot", "Bronze Ingot", 6)
        state.activity = Mining(target_id="tin_ore", total_duration=4500, progress=0.4)
        state.combat_stance = CombatStance.DEFENSIVE
        state.time_minutes = 62.5
        state.recipe_search = "helm"
        return state

    def test_encoded_layout_has_persisted_sections(self) -> None:
        payload = encode_game_state(self._populated_state())

        self.assertEqual(SAVE_VERSION, payload["version"])
        self.assertEqual("lumbridge_swamp_mine", payload["currentLocation"])
        self.assertEqual("tin_ore", payload["mining"]["activeOreId"])
        self.assertIsNone(payload["smelting"]["activeIngotId"])
        self.assertEqual("helm", payload["armory"]["search"])
        self.assertEqual({"gold": 75, "items": [{"id": "bronze_ingot", "name": "Bronze Ingot", "quantity": 6}]}, payload["bank"])
        self.assertEqual(20, payload["player"]["inventoryCapacity"])
        self.assertEqual({"level": 3, "xp": 36}, payload["player"]["stats"]["Mining"])
        json.dumps(payload)

    def test_round_trip_restores_equivalent_state(self) -> None:
        original = self._populated_state()
        restored = _decode(json.loads(json.dumps(encode_game_state(original))))

        self.assertEqual(original.player, restored.player)
        self.assertEqual(original.bank, restored.bank)
        self.assertEqual(original.current_location_id, restored.current_location_id)
        self.assertEqual(original.activity, restored.activity)
        self.assertIs(CombatStance.DEFENSIVE, restored.combat_stance)
        self.assertEqual(62.5, restored.time_minutes)

    def test_travel_keeps_base_time_for_agility_reward(self) -> None:
        state = GameState(player=Player(), current_location_id="lumbridge")
        state.activity = Traveling(target_id="varrock", total_duration=14925, progress=0.5, base_travel_time=15000)
        restored = _decode(encode_game_state(state))
        self.assertEqual(15000, restored.activity.base_travel_time)
        self.assertEqual(14925, restored.activity.total_duration)

    def test_combat_is_not_restored(self) -> None:
        state = GameState(player=Player(), current_location_id="wilderness")
        state.combat = CombatSession(enemy=ENEMIES["goblin"].spawn())
        payload = encode_game_state(state)
        self.assertTrue(payload["combat"]["inCombat"])
        self.assertIsNone(_decode(payload).combat)

    def test_missing_fields_take_fresh_defaults(self) -> None:
        state = _decode({"version": 2})
        self.assertEqual("Adventurer", state.player.name)
        self.assertEqual((30, 30, 20), (state.player.hp, state.player.max_hp, state.player.gold))
        self.assertEqual(20, state.player.inventory.capacity)
        self.assertEqual("lumbridge", state.current_location_id)
        self.assertIs(IDLE, state.activity)
        self.assertEqual(8, len(state.player.skills))

    def test_overflowing_skill_xp_rolls_into_levels(self) -> None:
        state = _decode({"version": 2, "player": {"stats": {"Mining": {"level": 1, "xp": 250}, "Fishing": {"level": 9, "xp": 1}}}})
        mining = state.player.get_skill("Mining")
        self.assertEqual((3, 36), (mining.level, mining.xp))
        self.assertNotIn("Fishing", state.player.skills)

    def test_zero_quantity_rows_are_dropped(self) -> None:
        state = _decode({"player": {"inventory": [{"id": "coal", "name": "Coal", "quantity": 0}]}})
        self.assertEqual([], state.player.inventory.items)

    def test_version_one_is_migrated(self) -> None:
        migrated = migrate_payload({"version": 1, "mining": {"activeOreId": "copper_ore"}, "combat": {"inCombat": True}})
        self.assertEqual(2, migrated["version"])
        self.assertEqual("accurate", migrated["combat"]["stance"])
        self.assertEqual({"kind": "idle"}, migrated["activity"])

    def test_unversioned_blob_is_treated_as_version_one(self) -> None:
        self.assertEqual(2, migrate_payload({})["version"])

    def test_newer_or_garbled_versions_are_refused(self) -> None:
        with self.assertRaises(SaveFormatError):
            migrate_payload({"version": SAVE_VERSION + 1})
        with self.assertRaises(SaveFormatError):
            migrate_payload({"version": "two"})
        with self.assertRaises(SaveFormatError):
            migrate_payload(["not", "a", "mapping"])

    def test_corrupt_rows_raise_save_format_error(self) -> None:
        with self.assertRaises(SaveFormatError):
            _decode({"version": 2, "player": {"hp": "lots"}})
        with self.assertRaises(SaveFormatError):
            _decode({"version": 2, "bank": {"items": [{"quantity": 2}]}})

    def test_skill_levels_are_capped_at_ninety_nine(self) -> None:
        with self.assertLogs("idlerpg.application.services.save_codec", level="WARNING"):
            state = _decode({"version": 2, "player": {"stats": {"Attack": {"level": 100000, "xp": 0}}}})
        attack = state.player.get_skill("Attack")
        self.assertEqual(MAX_SKILL_LEVEL, attack.level)
        self.assertEqual(required_xp(MAX_SKILL_LEVEL), attack.xp_for_next_level())
        self.assertEqual(0.0, attack.progress())

    def test_duplicate_item_rows_are_merged(self) -> None:
        rows = [{"id": "copper_ore", "name": "Copper Ore", "quantity": 2}, {"id": "copper_ore", "name": "Copper Ore", "quantity": 3}]
        state = _decode({"version": 2, "player": {"inventory": rows}, "bank": {"items": rows}})
        self.assertEqual(1, len(state.player.inventory.items))
        self.assertEqual(1, len(state.bank.items))
        self.assertTrue(state.player.inventory.remove_item("copper_ore", 2))
        self.assertEqual(3, state.player.inventory.quantity_of("copper_ore"))

    def test_capacity_is_raised_to_cover_held_items(self) -> None:
        rows = [{"id": "copper_ore", "name": "Copper Ore", "quantity": 20}]
        with self.assertLogs("idlerpg.application.services.save_codec", level="WARNING"):
            state = _decode({"version": 2, "player": {"inventoryCapacity": 5, "inventory": rows}})
        inventory = state.player.inventory
        self.assertEqual(20, inventory.capacity)
        self.assertLessEqual(inventory.total_quantity(), inventory.capacity)
        self.assertFalse(inventory.add_item("coal", "Coal", 1))

    def test_non_positive_max_hp_falls_back_to_default(self) -> None:
        with self.assertLogs("idlerpg.application.services.save_codec", level="WARNING"):
            state = _decode({"version": 2, "player": {"maxHp": -5, "hp": -5}})
        self.assertEqual((0, 30), (state.player.hp, state.player.max_hp))
        state.player.heal_full()
        self.assertEqual(30, state.player.hp)

    def test_unknown_activity_kind_decodes_idle(self) -> None:
        state = _decode({"version": 2, "activity": {"kind": "fishing", "targetId": "shrimp", "totalDuration": 100}})
        self.assertIs(IDLE, state.activity)


if __name__ == "__main__":
    unittest.main()
