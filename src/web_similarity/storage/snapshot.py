"""SQLite snapshot of document frequency vectors."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from web_similarity.core.frequency import FrequencyVector
from web_similarity.errors import SnapshotCorruptionError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

SCHEMA = """
CREATE TABLE IF NOT EXISTS meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS documents (
    id TEXT PRIMARY KEY,
    saved_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS word_counts (
    document_id TEXT NOT NULL REFERENCES documents(id) ON DELETE CASCADE,
    word TEXT NOT NULL,
    count INTEGER NOT NULL,
    PRIMARY KEY (document_id, word)
);
"""


class SnapshotStore:
    """
    Persists (document id -> frequency vector) pairs in SQLite.

    ``save`` replaces the whole snapshot in one commit. ``load`` raises
    SnapshotCorruptionError when the file is not a readable snapshot;
    recovering from that is the caller's job.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._conn: aiosqlite.Connection | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _ensure_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("SnapshotStore not initialized. Call initialize() first.")
        return self._conn

    async def initialize(self) -> None:
        """Open the database and create the schema if needed."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(self._db_path)
        try:
            await self._conn.executescript(SCHEMA)
            await self._conn.execute(
                "INSERT OR IGNORE INTO meta (key, value) VALUES ('schema_version', ?)",
                (str(SCHEMA_VERSION),),
            )
            await self._conn.commit()
        except sqlite3.DatabaseError as e:
            await self.close()
            raise SnapshotCorruptionError(f"Cannot open snapshot {self._db_path}: {e}") from e

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def __aenter__(self) -> SnapshotStore:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def save(self, vectors: Mapping[str, FrequencyVector]) -> None:
        conn = self._ensure_conn()
        saved_at = datetime.now(UTC).isoformat(timespec="seconds")

        try:
            await conn.execute("DELETE FROM word_counts")
            await conn.execute("DELETE FROM documents")
            await conn.executemany(
                "INSERT INTO documents (id, saved_at) VALUES (?, ?)",
                [(document_id, saved_at) for document_id in vectors],
            )
            await conn.executemany(
                "INSERT INTO word_counts (document_id, word, count) VALUES (?, ?, ?)",
                [
                    (document_id, word, count)
                    for document_id, vector in vectors.items()
                    for word, count in vector.items()
                ],
            )
            await conn.commit()
        except sqlite3.DatabaseError:
            await conn.rollback()
            raise

        logger.info("Saved snapshot of %d documents to %s", len(vectors), self._db_path)

    async def load(self) -> dict[str, FrequencyVector]:
        """
        Read every stored vector.

        Raises:
            SnapshotCorruptionError: If the database or its rows are malformed
        """
        conn = self._ensure_conn()
        vectors: dict[str, FrequencyVector] = {}

        try:
            async with conn.execute(
                "SELECT value FROM meta WHERE key = 'schema_version'"
            ) as cursor:
                row = await cursor.fetchone()
            if row is None or row[0] != str(SCHEMA_VERSION):
                found = None if row is None else row[0]
                raise SnapshotCorruptionError(
                    f"Unsupported snapshot schema version {found!r} in {self._db_path}"
                )

            async with conn.execute("SELECT id FROM documents ORDER BY rowid") as cursor:
                async for (document_id,) in cursor:
                    if not isinstance(document_id, str):
                        raise SnapshotCorruptionError(
                            f"Malformed document row: {document_id!r}"
                        )
                    vectors[document_id] = FrequencyVector()

            async with conn.execute(
                "SELECT document_id, word, count FROM word_counts"
            ) as cursor:
                async for document_id, word, count in cursor:
                    vector = vectors.get(document_id)
                    if (
                        vector is None
                        or not isinstance(word, str)
                        or not isinstance(count, int)
                        or count < 0
                    ):
                        raise SnapshotCorruptionError(
                            f"Malformed word count row for {document_id!r}: {word!r}={count!r}"
                        )
                    vector.add_word(word, count)
        except sqlite3.DatabaseError as e:
            raise SnapshotCorruptionError(f"Cannot read snapshot {self._db_path}: {e}") from e

        logger.debug("Loaded snapshot of %d documents", len(vectors))
        return vectors
