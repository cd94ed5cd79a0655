import logging
import os
import socket
from urllib.parse import urlparse

from idlerpg.application.services.balance_tables import AUTOSAVE_INTERVAL_MS, ENEMY_TURN_DELAY_MS
from idlerpg.application.services.event_bus import EventBus
from idlerpg.application.services.game_service import GameService
from idlerpg.application.services.message_log import MessageLog
from idlerpg.domain.repositories import SaveStore, SaveStoreError
from idlerpg.infrastructure.file_save_store import DEFAULT_SAVE_KEY, FileSaveStore
from idlerpg.infrastructure.inmemory.inmemory_enemy_repo import InMemoryEnemyRepository
from idlerpg.infrastructure.inmemory.inmemory_location_repo import InMemoryLocationRepository
from idlerpg.infrastructure.inmemory.inmemory_recipe_repo import InMemoryRecipeRepository
from idlerpg.infrastructure.inmemory.inmemory_save_store import InMemorySaveStore


logger = logging.getLogger(__name__)

SAVE_BACKENDS = ("memory", "file", "sql")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return default


def frame_interval_seconds() -> float:
    return max(0.01, _env_float("RPG_FRAME_INTERVAL_S", 0.1))


def _looks_like_local_mysql_unreachable(database_url: str) -> bool:
    if not database_url:
        return False

    parsed = urlparse(database_url)
    if not parsed.scheme.startswith("mysql"):
        return False

    host = (parsed.hostname or "").strip().lower()
    if host not in {"localhost", "127.0.0.1", "::1"}:
        return False

    port = parsed.port or 3306
    timeout = _env_float("RPG_DB_CONNECT_PROBE_TIMEOUT_S", 0.35)

    try:
        with socket.create_connection((host, port), timeout=timeout):
            return False
    except OSError:
        return True


def _file_store(save_key: str) -> FileSaveStore:
    path = os.getenv("RPG_SAVE_PATH", "").strip() or None
    return FileSaveStore(path, save_key=save_key)


def create_save_store() -> SaveStore:
    save_key = os.getenv("RPG_SAVE_KEY", "").strip() or DEFAULT_SAVE_KEY
    database_url = os.getenv("RPG_DATABASE_URL", "").strip()
    backend = os.getenv("RPG_SAVE_BACKEND", "").strip().lower() or ("sql" if database_url else "file")
    if backend not in SAVE_BACKENDS:
        logger.warning("Unknown RPG_SAVE_BACKEND %r; using file saves", backend)
        backend = "file"

    if backend == "memory":
        return InMemorySaveStore()

    if backend == "sql":
        if not database_url:
            print("RPG_SAVE_BACKEND=sql needs RPG_DATABASE_URL, falling back to file saves.")
            return _file_store(save_key)
        if _looks_like_local_mysql_unreachable(database_url):
            print("MySQL appears unreachable, falling back to file saves.")
            return _file_store(save_key)
        from idlerpg.infrastructure.db.sql_save_store import SqlSaveStore

        try:
            return SqlSaveStore(database_url, save_key=save_key)
        except SaveStoreError as exc:
            print(f"Save database unavailable, falling back to file saves. Reason: {exc}")

    return _file_store(save_key)


def create_game_service(save_store: SaveStore | None = None, *, load: bool = True) -> GameService:
    location_repo = InMemoryLocationRepository()
    recipe_repo = InMemoryRecipeRepository()
    enemy_repo = InMemoryEnemyRepository()

    game_service = GameService(
        location_repo,
        recipe_repo,
        enemy_repo,
        save_store or create_save_store(),
        message_log=MessageLog(),
        event_bus=EventBus(),
        autosave_interval_ms=_env_int("RPG_AUTOSAVE_INTERVAL_MS", AUTOSAVE_INTERVAL_MS),
        enemy_turn_delay_ms=_env_int("RPG_ENEMY_TURN_DELAY_MS", ENEMY_TURN_DELAY_MS),
    )

    seed = os.getenv("RPG_RNG_SEED", "").strip()
    if seed:
        game_service.set_seed(seed)

    game_service.location_graph.validate(recipe_repo=recipe_repo, enemy_repo=enemy_repo)

    if load:
        game_service.load_game()
    return game_service
