import json
import os
import time
from pathlib import Path
from typing import Any, Dict, Optional

from idlerpg.domain.repositories import SaveStore, SaveStoreError


DEFAULT_SAVE_KEY = "idleRpgSave"


def default_save_path() -> Path:
    return Path.home() / ".lumbridge_idle" / "save.json"


class FileSaveStore(SaveStore):
    """JSON save file; every write goes through a temp file and ``os.replace``."""

    def __init__(self, path: str | Path | None = None, *, save_key: str = DEFAULT_SAVE_KEY) -> None:
        self.path = Path(path) if path is not None else default_save_path()
        self.save_key = str(save_key or DEFAULT_SAVE_KEY)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            envelope = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise SaveStoreError(f"Could not read save file {self.path}: {exc}") from exc
        if not isinstance(envelope, dict):
            raise SaveStoreError(f"Save file {self.path} does not hold a JSON object")
        slots = envelope.get("slots")
        if not isinstance(slots, dict):
            return None
        return slots.get(self.save_key)

    def save(self, payload: Dict[str, Any]) -> None:
        slots = self._read_slots_for_update()
        slots[self.save_key] = payload
        envelope = {"stored_at": int(time.time()), "slots": slots}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".tmp")
            tmp_path.write_text(json.dumps(envelope, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise SaveStoreError(f"Could not write save file {self.path}: {exc}") from exc

    def delete(self) -> None:
        slots = self._read_slots_for_update()
        if self.save_key not in slots:
            return
        slots.pop(self.save_key, None)
        if not slots:
            try:
                self.path.unlink(missing_ok=True)
            except OSError as exc:
                raise SaveStoreError(f"Could not delete save file {self.path}: {exc}") from exc
            return
        envelope = {"stored_at": int(time.time()), "slots": slots}
        try:
            tmp_path = self.path.with_suffix(".tmp")
            tmp_path.write_text(json.dumps(envelope, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise SaveStoreError(f"Could not rewrite save file {self.path}: {exc}") from exc

    def _read_slots_for_update(self) -> Dict[str, Any]:
        # a corrupt file is overwritten rather than blocking new saves
        if not self.path.exists():
            return {}
        try:
            envelope = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        if not isinstance(envelope, dict) or not isinstance(envelope.get("slots"), dict):
            return {}
        return dict(envelope["slots"])
