import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def disable_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("time.sleep", lambda *_args, **_kwargs: None)


@pytest.fixture(autouse=True)
def isolated_save_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("RPG_DATABASE_URL", "RPG_SAVE_BACKEND", "RPG_SAVE_KEY", "RPG_RNG_SEED"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RPG_SAVE_PATH", str(tmp_path / "save.json"))
