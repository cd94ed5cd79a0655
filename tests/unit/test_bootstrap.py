import io
import os
import sys
import tempfile
from pathlib import Path
import unittest
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from idlerpg import bootstrap
from idlerpg.domain.repositories import SaveStoreError
from idlerpg.infrastructure.db.sql_save_store import SqlSaveStore
from idlerpg.infrastructure.file_save_store import FileSaveStore
from idlerpg.infrastructure.inmemory.inmemory_save_store import InMemorySaveStore


class BootstrapSaveStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.save_path = str(Path(self._tmp.name) / "save.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _env(self, **values: str):
        env = {"RPG_DATABASE_URL": "", "RPG_SAVE_BACKEND": "", "RPG_SAVE_PATH": self.save_path}
        env.update(values)
        return mock.patch.dict(os.environ, env, clear=False)

    def test_file_store_is_default(self) -> None:
        with self._env():
            store = bootstrap.create_save_store()
        self.assertIsInstance(store, FileSaveStore)
        self.assertEqual(Path(self.save_path), store.path)

    def test_memory_backend(self) -> None:
        with self._env(RPG_SAVE_BACKEND="memory"):
            self.assertIsInstance(bootstrap.create_save_store(), InMemorySaveStore)

    def test_unknown_backend_falls_back_to_file(self) -> None:
        with self._env(RPG_SAVE_BACKEND="cloud"), self.assertLogs("idlerpg.bootstrap", level="WARNING"):
            self.assertIsInstance(bootstrap.create_save_store(), FileSaveStore)

    def test_database_url_selects_sql_store(self) -> None:
        url = f"sqlite:///{Path(self._tmp.name) / 'saves.db'}"
        with self._env(RPG_DATABASE_URL=url, RPG_SAVE_KEY="slot-a"):
            store = bootstrap.create_save_store()
        self.assertIsInstance(store, SqlSaveStore)
        self.assertEqual("slot-a", store.save_key)
        store.dispose()

    def test_sql_backend_without_url_uses_file(self) -> None:
        output = io.StringIO()
        with self._env(RPG_SAVE_BACKEND="sql"), mock.patch("sys.stdout", output):
            self.assertIsInstance(bootstrap.create_save_store(), FileSaveStore)
        self.assertIn("falling back to file saves", output.getvalue())

    def test_unreachable_local_mysql_skips_sql_store(self) -> None:
        output = io.StringIO()
        with self._env(RPG_DATABASE_URL="mysql+mysqlconnector://root@127.0.0.1:3307/idle"), mock.patch(
            "idlerpg.bootstrap.socket.create_connection", side_effect=OSError("refused")
        ), mock.patch(
            "idlerpg.infrastructure.db.sql_save_store.SqlSaveStore", side_effect=AssertionError("sql path should be skipped")
        ), mock.patch("sys.stdout", output):
            store = bootstrap.create_save_store()

        self.assertIsInstance(store, FileSaveStore)
        self.assertIn("MySQL appears unreachable", output.getvalue())

    def test_sql_store_failure_falls_back_to_file(self) -> None:
        output = io.StringIO()
        with self._env(RPG_DATABASE_URL="postgresql://db.example/idle"), mock.patch(
            "idlerpg.infrastructure.db.sql_save_store.SqlSaveStore", side_effect=SaveStoreError("no driver")
        ), mock.patch("sys.stdout", output):
            store = bootstrap.create_save_store()

        self.assertIsInstance(store, FileSaveStore)
        self.assertIn("no driver", output.getvalue())

    def test_remote_mysql_is_not_probed(self) -> None:
        with mock.patch("idlerpg.bootstrap.socket.create_connection") as probe:
            self.assertFalse(bootstrap._looks_like_local_mysql_unreachable("mysql+mysqlconnector://u@db.internal/idle"))
        probe.assert_not_called()


class BootstrapGameServiceTests(unittest.TestCase):
    def test_create_game_service_with_memory_store(self) -> None:
        with mock.patch.dict(os.environ, {"RPG_AUTOSAVE_INTERVAL_MS": "500", "RPG_ENEMY_TURN_DELAY_MS": "oops"}, clear=False):
            service = bootstrap.create_game_service(InMemorySaveStore())

        self.assertEqual(500, service.autosave_interval_ms)
        self.assertEqual(1000, service.combat_service.enemy_turn_delay_ms)
        self.assertEqual("lumbridge", service.state.current_location_id)

    def test_rng_seed_makes_encounters_repeatable(self) -> None:
        picks = []
        for _ in range(2):
            with mock.patch.dict(os.environ, {"RPG_RNG_SEED": "42"}, clear=False):
                service = bootstrap.create_game_service(InMemorySaveStore())
            service.state.current_location_id = "wilderness"
            service.start_combat()
            picks.append(service.state.combat.enemy.template_id)
        self.assertEqual(picks[0], picks[1])

    def test_existing_save_is_loaded(self) -> None:
        store = InMemorySaveStore({"version": 2, "currentLocation": "varrock", "player": {"gold": 77}})
        service = bootstrap.create_game_service(store)
        self.assertEqual("varrock", service.state.current_location_id)
        self.assertEqual(77, service.player.gold)

    def test_frame_interval_has_floor(self) -> None:
        with mock.patch.dict(os.environ, {"RPG_FRAME_INTERVAL_S": "0"}, clear=False):
            self.assertEqual(0.01, bootstrap.frame_interval_seconds())


if __name__ == "__main__":
    unittest.main()
