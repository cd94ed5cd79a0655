import random
import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from idlerpg.application.services.location_graph import LocationGraph
from idlerpg.domain.models.location import EncounterTableEntry, Location
from idlerpg.infrastructure.inmemory.inmemory_enemy_repo import InMemoryEnemyRepository
from idlerpg.infrastructure.inmemory.inmemory_location_repo import InMemoryLocationRepository
from idlerpg.infrastructure.inmemory.inmemory_recipe_repo import InMemoryRecipeRepository


class _FixedRandom(random.Random):
    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def _graph(*locations: Location, start: str = "town") -> LocationGraph:
    repo = InMemoryLocationRepository({loc.id: loc for loc in locations}, starting_location_id=start)
    return LocationGraph(repo)


class LocationGraphTests(unittest.TestCase):
    def test_forward_edge_is_used(self) -> None:
        graph = _graph(
            Location(id="town", name="Town", connections={"mine": 3000}),
            Location(id="mine", name="Mine", connections={"town": 9999}),
        )
        estimate = graph.travel_time_between("town", "mine")
        self.assertEqual(3000, estimate.base_travel_time)
        self.assertFalse(estimate.from_fallback)

    def test_reverse_edge_is_used_when_forward_missing(self) -> None:
        graph = _graph(
            Location(id="town", name="Town"),
            Location(id="mine", name="Mine", connections={"town": 2500}),
        )
        self.assertEqual(2500, graph.travel_time_between("town", "mine").base_travel_time)
        self.assertEqual([], graph.integrity_gaps)

    def test_missing_edge_falls_back_and_is_flagged(self) -> None:
        graph = _graph(Location(id="town", name="Town"), Location(id="mine", name="Mine"))
        with self.assertLogs("idlerpg.application.services.location_graph", level="WARNING"):
            estimate = graph.travel_time_between("town", "mine")
        self.assertEqual(5000, estimate.base_travel_time)
        self.assertTrue(estimate.from_fallback)
        self.assertEqual(1, len(graph.integrity_gaps))

    def test_weighted_encounter_walks_cumulative_weights(self) -> None:
        cave = Location(
            id="cave",
            name="Cave",
            encounters=[EncounterTableEntry("rat", 1), EncounterTableEntry("goblin", 3)],
        )
        graph = _graph(Location(id="town", name="Town"), cave)
        self.assertEqual("rat", graph.weighted_random_encounter(cave, _FixedRandom(0.0)))
        self.assertEqual("rat", graph.weighted_random_encounter(cave, _FixedRandom(0.2)))
        self.assertEqual("goblin", graph.weighted_random_encounter(cave, _FixedRandom(0.3)))
        self.assertEqual("goblin", graph.weighted_random_encounter(cave, _FixedRandom(0.999999)))

    def test_weighted_encounter_clamps_to_last_entry_on_overshoot(self) -> None:
        cave = Location(id="cave", name="Cave", encounters=[EncounterTableEntry("rat", 0.1), EncounterTableEntry("goblin", 0.2)])
        graph = _graph(Location(id="town", name="Town"), cave)
        self.assertEqual("goblin", graph.weighted_random_encounter(cave, _FixedRandom(1.0)))

    def test_empty_encounter_table_means_no_encounter(self) -> None:
        town = Location(id="town", name="Town")
        graph = _graph(town)
        self.assertIsNone(graph.weighted_random_encounter(town, _FixedRandom(0.5)))
        self.assertIsNone(graph.weighted_random_encounter(None))

    def test_exit_target_prefers_parent_then_start(self) -> None:
        graph = _graph(
            Location(id="town", name="Town"),
            Location(id="mine", name="Mine", parent="town"),
            Location(id="shed", name="Shed", parent="nowhere"),
        )
        self.assertEqual("town", graph.exit_target("mine"))
        self.assertEqual("town", graph.exit_target("town"))
        self.assertEqual("town", graph.exit_target("shed"))
        self.assertTrue(any("nowhere" in gap for gap in graph.integrity_gaps))

    def test_add_connection_mirrors_edge(self) -> None:
        graph = _graph(Location(id="town", name="Town"), Location(id="mine", name="Mine"))
        graph.add_connection("town", "mine", 1200)
        self.assertEqual(1200, graph.get("town").travel_time_to("mine"))
        self.assertEqual(1200, graph.get("mine").travel_time_to("town"))
        with self.assertRaises(KeyError):
            graph.add_connection("town", "atlantis", 100)

    def test_validate_reports_dangling_references(self) -> None:
        graph = _graph(
            Location(id="town", name="Town", connections={"ghost": 100}),
            Location(
                id="mine",
                name="Mine",
                parent="void",
                actions=["mine"],
                mining_options=["mithril_ore"],
                encounters=[EncounterTableEntry("dragon", 1)],
            ),
        )
        problems = graph.validate(recipe_repo=InMemoryRecipeRepository(), enemy_repo=InMemoryEnemyRepository())
        joined = "\n".join(problems)
        self.assertIn("ghost", joined)
        self.assertIn("void", joined)
        self.assertIn("mithril_ore", joined)
        self.assertIn("dragon", joined)

    def test_shipped_world_has_no_integrity_problems(self) -> None:
        graph = LocationGraph(InMemoryLocationRepository())
        self.assertEqual([], graph.validate(recipe_repo=InMemoryRecipeRepository(), enemy_repo=InMemoryEnemyRepository()))
        self.assertEqual("lumbridge", graph.starting_location_id())


if __name__ == "__main__":
    unittest.main()
