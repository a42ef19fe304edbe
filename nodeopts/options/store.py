"""SQLite store for persisted option overrides.

Only options that differ from their default are stored. Keys are kept
exactly as written (case-sensitive) so that legacy keys can be found and
migrated by the option manager; new keys are always canonical names.
"""

import json
import os
from datetime import datetime
from typing import List, Optional, Tuple

import aiosqlite

from nodeopts.options.constants import STORE_OPTIONS_TABLE
from nodeopts.options.value import OptionKind, OptionScope, OptionValue


class OptionStore:
    """Durable key -> OptionValue mapping backed by SQLite."""

    def __init__(self, db_path: str, table: str = STORE_OPTIONS_TABLE):
        """Initialize option store.

        Args:
            db_path: Path to SQLite database file
            table: Table holding the overrides
        """
        self.db_path = str(db_path)
        self.table = table
        self._conn: Optional[aiosqlite.Connection] = None

    async def initialize(self):
        """Open the database and ensure the schema exists."""
        if self._conn:
            return

        os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)

        self._conn = await aiosqlite.connect(self.db_path)
        self._conn.row_factory = aiosqlite.Row

        # WAL for concurrent readers, busy timeout for lock contention
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute("PRAGMA busy_timeout=5000")

        await self._conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                name TEXT PRIMARY KEY,
                kind TEXT NOT NULL,
                scope TEXT NOT NULL,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        await self._conn.commit()

    async def close(self):
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _require_conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Option store not initialized. Call initialize() first.")
        return self._conn

    async def get(self, key: str) -> Optional[OptionValue]:
        """Get the stored value for key.

        Args:
            key: Store key (compared case-sensitively)

        Returns:
            The stored OptionValue, or None if there is no entry
        """
        conn = self._require_conn()
        cursor = await conn.execute(
            f"SELECT * FROM {self.table} WHERE name = ?", (key,)
        )
        row = await cursor.fetchone()
        if not row:
            return None
        return self._value_from_row(row)

    async def put(self, key: str, value: OptionValue) -> None:
        """Insert or replace the entry for key."""
        conn = self._require_conn()
        await conn.execute(
            f"""
            INSERT INTO {self.table} (name, kind, scope, value, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET
                kind = excluded.kind,
                scope = excluded.scope,
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (
                key,
                value.kind.value,
                value.scope.value,
                json.dumps(value.value),
                datetime.now().isoformat(),
            ),
        )
        await conn.commit()

    async def delete(self, key: str) -> bool:
        """Delete the entry for key.

        Returns:
            True if deleted, False if not found
        """
        conn = self._require_conn()
        cursor = await conn.execute(
            f"DELETE FROM {self.table} WHERE name = ?", (key,)
        )
        await conn.commit()
        return cursor.rowcount > 0

    async def get_all(self) -> List[Tuple[str, OptionValue]]:
        """Return every (key, value) entry, ordered by key."""
        conn = self._require_conn()
        cursor = await conn.execute(
            f"SELECT * FROM {self.table} ORDER BY name"
        )
        rows = await cursor.fetchall()
        return [(row["name"], self._value_from_row(row)) for row in rows]

    @staticmethod
    def _value_from_row(row: aiosqlite.Row) -> OptionValue:
        return OptionValue(
            name=row["name"],
            kind=OptionKind(row["kind"]),
            value=json.loads(row["value"]),
            scope=OptionScope(row["scope"]),
        )
