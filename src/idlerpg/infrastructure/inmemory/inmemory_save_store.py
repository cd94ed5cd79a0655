from __future__ import annotations

import copy
import json
from typing import Any, Dict, Optional

from idlerpg.domain.repositories import SaveStore, SaveStoreError


class InMemorySaveStore(SaveStore):
    """Keeps the serialised blob in process memory, like a browser key-value store."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._blob: Optional[str] = None
        self.save_count = 0
        if initial is not None:
            self._blob = json.dumps(initial)

    def load(self) -> Optional[Dict[str, Any]]:
        if self._blob is None:
            return None
        try:
            return json.loads(self._blob)
        except ValueError as exc:
            raise SaveStoreError(f"Stored save is not valid JSON: {exc}") from exc

    def save(self, payload: Dict[str, Any]) -> None:
        try:
            self._blob = json.dumps(copy.deepcopy(payload), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise SaveStoreError(f"Save payload is not serialisable: {exc}") from exc
        self.save_count += 1

    def delete(self) -> None:
        self._blob = None

    def put_raw(self, blob: str) -> None:
        self._blob = blob
