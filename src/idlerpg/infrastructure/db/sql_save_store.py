from __future__ import annotations

import json
import time
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from idlerpg.domain.repositories import SaveStore, SaveStoreError


SAVE_TABLE = "save_slot"

_CREATE_TABLE = f"""
CREATE TABLE IF NOT EXISTS {SAVE_TABLE} (
    slot_key VARCHAR(64) NOT NULL PRIMARY KEY,
    version INTEGER NOT NULL,
    payload_json TEXT NOT NULL,
    updated_at BIGINT NOT NULL
)
"""


class SqlSaveStore(SaveStore):
    """Save blob kept as one row per slot in a SQL database."""

    def __init__(self, database_url: str | None = None, *, engine: Engine | None = None, save_key: str = "idleRpgSave") -> None:
        if engine is None and not database_url:
            raise ValueError("SqlSaveStore needs a database URL or an engine")
        if engine is None:
            try:
                engine = create_engine(str(database_url), echo=False, future=True)
            except (SQLAlchemyError, ImportError) as exc:
                raise SaveStoreError(f"Could not open save database: {exc}") from exc
        self.engine = engine
        self.save_key = str(save_key)
        self.ensure_schema()

    def ensure_schema(self) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(text(_CREATE_TABLE))
        except SQLAlchemyError as exc:
            raise SaveStoreError(f"Could not prepare save table: {exc}") from exc

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    text(f"SELECT payload_json FROM {SAVE_TABLE} WHERE slot_key = :slot_key"),
                    {"slot_key": self.save_key},
                ).first()
        except SQLAlchemyError as exc:
            raise SaveStoreError(f"Could not read save slot {self.save_key}: {exc}") from exc
        if row is None:
            return None
        try:
            return json.loads(row.payload_json)
        except (TypeError, ValueError) as exc:
            raise SaveStoreError(f"Save slot {self.save_key} holds invalid JSON: {exc}") from exc

    def save(self, payload: Dict[str, Any]) -> None:
        try:
            payload_json = json.dumps(payload, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise SaveStoreError(f"Save payload is not serialisable: {exc}") from exc

        params = {
            "slot_key": self.save_key,
            "version": int(payload.get("version", 0) or 0),
            "payload_json": payload_json,
            "updated_at": int(time.time()),
        }
        try:
            with self.engine.begin() as conn:
                dialect = conn.dialect.name
                if dialect == "mysql":
                    statement = text(
                        f"""
                        INSERT INTO {SAVE_TABLE} (slot_key, version, payload_json, updated_at)
                        VALUES (:slot_key, :version, :payload_json, :updated_at)
                        ON DUPLICATE KEY UPDATE
                            version = VALUES(version),
                            payload_json = VALUES(payload_json),
                            updated_at = VALUES(updated_at)
                        """
                    )
                    conn.execute(statement, params)
                elif dialect in {"sqlite", "postgresql"}:
                    statement = text(
                        f"""
                        INSERT INTO {SAVE_TABLE} (slot_key, version, payload_json, updated_at)
                        VALUES (:slot_key, :version, :payload_json, :updated_at)
                        ON CONFLICT(slot_key) DO UPDATE SET
                            version = excluded.version,
                            payload_json = excluded.payload_json,
                            updated_at = excluded.updated_at
                        """
                    )
                    conn.execute(statement, params)
                else:
                    conn.execute(text(f"DELETE FROM {SAVE_TABLE} WHERE slot_key = :slot_key"), {"slot_key": self.save_key})
                    conn.execute(
                        text(
                            f"INSERT INTO {SAVE_TABLE} (slot_key, version, payload_json, updated_at) "
                            "VALUES (:slot_key, :version, :payload_json, :updated_at)"
                        ),
                        params,
                    )
        except SQLAlchemyError as exc:
            raise SaveStoreError(f"Could not write save slot {self.save_key}: {exc}") from exc

    def delete(self) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(text(f"DELETE FROM {SAVE_TABLE} WHERE slot_key = :slot_key"), {"slot_key": self.save_key})
        except SQLAlchemyError as exc:
            raise SaveStoreError(f"Could not delete save slot {self.save_key}: {exc}") from exc

    def dispose(self) -> None:
        self.engine.dispose()
