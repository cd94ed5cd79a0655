import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from idlerpg.application.services.balance_tables import (
    agility_speed_factor,
    controlled_stance_xp,
    effective_travel_time,
    format_game_time,
    hitpoints_xp,
    stance_xp,
    travel_agility_xp,
)


class BalanceTablesTests(unittest.TestCase):
    def test_agility_shortens_travel_half_a_percent_per_level(self) -> None:
        self.assertAlmostEqual(0.995, agility_speed_factor(1))
        self.assertEqual(1492, effective_travel_time(1500, 1))
        self.assertEqual(1417, effective_travel_time(1500, 11))

    def test_travel_xp_is_two_per_base_second(self) -> None:
        self.assertEqual(3, travel_agility_xp(1500))
        self.assertEqual(30, travel_agility_xp(15000))
        self.assertEqual(0, travel_agility_xp(400))

    def test_combat_xp_tables(self) -> None:
        self.assertEqual(20, stance_xp(5))
        self.assertEqual(6, controlled_stance_xp(5))
        self.assertEqual(6, hitpoints_xp(5))
        self.assertEqual(1, hitpoints_xp(1))

    def test_game_clock_label(self) -> None:
        self.assertEqual("Day 1 • 00:00", format_game_time(0))
        self.assertEqual("Day 1 • 01:02", format_game_time(62.5))
        self.assertEqual("Day 2 • 00:30", format_game_time(1470))


if __name__ == "__main__":
    unittest.main()
