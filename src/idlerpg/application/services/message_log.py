from __future__ import annotations

from collections import deque
from typing import Deque, List


DEFAULT_MAX_ENTRIES = 50


class MessageLog:
    """Player-facing action log; keeps only the most recent entries."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.max_entries = max(1, int(max_entries))
        self._entries: Deque[str] = deque(maxlen=self.max_entries)

    def log(self, message: str) -> None:
        self._entries.append(str(message))

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> List[str]:
        return list(self._entries)

    def last(self) -> str | None:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)
