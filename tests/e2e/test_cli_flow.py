import io
import random
import sys
from pathlib import Path
import unittest
from unittest import mock

from rich.console import Console

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from idlerpg.application.services.game_service import GameService
from idlerpg.infrastructure.inmemory.inmemory_enemy_repo import InMemoryEnemyRepository
from idlerpg.infrastructure.inmemory.inmemory_location_repo import InMemoryLocationRepository
from idlerpg.infrastructure.inmemory.inmemory_recipe_repo import InMemoryRecipeRepository
from idlerpg.infrastructure.inmemory.inmemory_save_store import InMemorySaveStore
from idlerpg.presentation import game_loop
from idlerpg.presentation.game_loop import (
    GameLoop,
    render_bank,
    render_combat,
    render_dashboard,
    render_inventory,
    render_skills,
)
from idlerpg.presentation.main_menu import help_lines


class _SteppingClock:
    def __init__(self, step_s: float = 0.5) -> None:
        self.now = 0.0
        self.step_s = step_s

    def __call__(self) -> float:
        self.now += self.step_s
        return self.now


def _game() -> tuple[GameService, InMemorySaveStore]:
    store = InMemorySaveStore()
    service = GameService(
        InMemoryLocationRepository(),
        InMemoryRecipeRepository(),
        InMemoryEnemyRepository(),
        store,
        rng=random.Random(3),
    )
    return service, store


def _console() -> Console:
    return Console(file=io.StringIO(), width=120, force_terminal=False, color_system=None)


def _text(renderable) -> str:
    console = _console()
    console.print(renderable)
    return console.file.getvalue()


class CliFlowTests(unittest.TestCase):
    def _loop(self, game: GameService) -> GameLoop:
        return GameLoop(game, console=_console(), frame_interval_s=0.01, clock=_SteppingClock(), sleep=lambda _s: None)

    def test_travel_then_quit_saves(self) -> None:
        game, store = _game()
        with mock.patch.object(game_loop, "arrow_menu", side_effect=[0, 0, -1]) as menu:
            self._loop(game).run()

        self.assertEqual("lumbridge_castle", game.state.current_location_id)
        self.assertEqual(3, game.player.get_skill("Agility").xp)
        self.assertEqual("Lumbridge", menu.call_args_list[0].args[0])
        self.assertIn("Lumbridge Castle (1.5s)", menu.call_args_list[1].args[1])
        self.assertEqual("lumbridge_castle", store.load()["currentLocation"])

    def test_mining_runs_until_ore_is_mined(self) -> None:
        game, _store = _game()
        game.state.current_location_id = "lumbridge_swamp_mine"
        with mock.patch.object(game_loop, "arrow_menu", side_effect=[2, 0, -1]) as menu:
            self._loop(game).run()

        self.assertEqual(["Travel", "Go back", "Mine"], menu.call_args_list[0].args[1][:3])
        self.assertEqual(1, game.player.inventory.quantity_of("copper_ore"))
        self.assertEqual("main", game.state.current_menu)

    def test_fight_and_flee(self) -> None:
        game, _store = _game()
        game.state.current_location_id = "wilderness"
        with mock.patch.object(game_loop, "arrow_menu", side_effect=[2, 2, -1]) as menu, mock.patch.object(
            game_loop, "prompt_continue"
        ):
            self._loop(game).run()

        self.assertEqual("Combat", menu.call_args_list[1].args[0])
        self.assertIsNone(game.state.combat)
        self.assertEqual("edgeville", game.state.current_location_id)

    def test_attack_waits_for_enemy_reply(self) -> None:
        game, _store = _game()
        game.state.current_location_id = "wilderness"
        with mock.patch.object(game_loop, "arrow_menu", side_effect=[2, 0, 2, -1]), mock.patch.object(
            game_loop, "prompt_continue"
        ):
            self._loop(game).run()

        self.assertLess(game.player.hp, game.player.max_hp)
        self.assertFalse(game.combat_service.enemy_turn_pending)

    def test_bank_gold_deposit(self) -> None:
        game, store = _game()
        game.state.current_location_id = "lumbridge_castle_bank"
        with mock.patch.object(game_loop, "arrow_menu", side_effect=[2, 2, -1, -1]), mock.patch.object(
            game_loop, "prompt_amount", return_value=5
        ):
            self._loop(game).run()

        self.assertEqual(15, game.player.gold)
        self.assertEqual(5, game.state.bank.gold)
        self.assertGreaterEqual(store.save_count, 2)

    def test_skill_sheet_is_printed(self) -> None:
        game, _store = _game()
        loop = self._loop(game)
        with mock.patch.object(game_loop, "arrow_menu", side_effect=[1, -1]), mock.patch.object(
            game_loop, "prompt_continue"
        ), mock.patch.object(game_loop, "clear_screen"):
            loop.run()

        transcript = loop.console.file.getvalue()
        self.assertIn("Skills", transcript)
        self.assertIn("Agility", transcript)
        self.assertIn("Inventory (0/20)", transcript)

    def test_interrupting_activity_cancels_it(self) -> None:
        game, _store = _game()
        game.state.current_location_id = "lumbridge_swamp_mine"
        game.start_mining("copper_ore")
        loop = self._loop(game)
        loop._sleep = mock.Mock(side_effect=KeyboardInterrupt)

        loop.wait_for_activity()

        self.assertFalse(game.state.is_busy)
        self.assertEqual("main", game.state.current_menu)


class RenderTests(unittest.TestCase):
    def test_dashboard_shows_vitals_activity_and_log(self) -> None:
        game, _store = _game()
        game.travel_to("lumbridge_castle")
        game.tick(746)

        transcript = _text(render_dashboard(game.snapshot()))

        self.assertIn("30/30", transcript)
        self.assertIn("Lumbridge Castle (50%)", transcript)
        self.assertIn("You begin traveling to Lumbridge Castle...", transcript)
        self.assertIn("Day 1", transcript)

    def test_sheet_tables_include_xp_progress(self) -> None:
        game, _store = _game()
        game.player.get_skill("Mining").add_xp(42)
        game.player.inventory.add_item("coal", "Coal", 3)
        snapshot = game.snapshot()

        skills = _text(render_skills(snapshot))
        inventory = _text(render_inventory(snapshot))

        self.assertIn("42/100", skills)
        self.assertIn("Coal", inventory)
        self.assertIn("Inventory (3/20)", inventory)

    def test_empty_sheet_titles_stay_on_one_line(self) -> None:
        game, _store = _game()
        game.state.bank.gold = 123456
        snapshot = game.snapshot()

        self.assertIn("Inventory (0/20)", _text(render_inventory(snapshot)))
        self.assertIn("Bank (123456 gold)", _text(render_bank(snapshot)))

    def test_help_reports_configured_autosave_interval(self) -> None:
        self.assertIn("- Saves happen every 45 seconds and after every bank transaction", help_lines(45_000))
        self.assertIn("- Saves happen every 30 seconds and after every bank transaction", help_lines(30_000))
        self.assertFalse(any("every" in line and "seconds" in line for line in help_lines(0)))

    def test_combat_panel(self) -> None:
        game, _store = _game()
        self.assertIn("not fighting", _text(render_combat(game.snapshot())))

        game.state.current_location_id = "wilderness"
        game.start_combat()
        transcript = _text(render_combat(game.snapshot()))
        self.assertIn(game.state.combat.enemy.name, transcript)
        self.assertIn("Yours", transcript)


if __name__ == "__main__":
    unittest.main()
