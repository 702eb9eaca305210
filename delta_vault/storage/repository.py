"""
Event Repository.

SQLite-based storage for committed vault events.
"""

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

from ..core import get_logger
from ..vault.events import EventBus, VaultEvent

logger = get_logger(__name__)

DEFAULT_DB_PATH = "data/vault_events.db"


class EventRepository:
    """
    SQLite repository for vault events.

    Example:
        >>> repo = EventRepository("data/vault_events.db")
        >>> repo.initialize()
        >>> repo.attach(vault.events)
        >>> deposits = repo.get_events(name="Deposit", owner="alice")
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """The parent directory of db_path is created if needed."""
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialized = False

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create the events table and its indexes if missing."""
        if self._initialized:
            return

        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS vault_events (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    name TEXT NOT NULL,
                    owner TEXT,
                    payload TEXT NOT NULL,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_vault_events_name
                ON vault_events(name)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_vault_events_owner
                ON vault_events(owner)
            """)

        self._initialized = True
        logger.info(f"EventRepository initialized: {self._db_path}")

    def save_event(self, event: VaultEvent) -> None:
        """Persist a single event."""
        data = event.to_dict()
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO vault_events (timestamp, name, owner, payload)
                VALUES (?, ?, ?, ?)
                """,
                (
                    data["timestamp"],
                    event.name,
                    data.get("owner"),
                    json.dumps(data, default=str),
                ),
            )

    def get_events(
        self,
        name: Optional[str] = None,
        owner: Optional[str] = None,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """
        Query stored events, oldest first.

        Args:
            name: Filter by event name (e.g. "Deposit")
            owner: Filter by owner account
            limit: Maximum rows to return

        Returns:
            Event payloads as dictionaries
        """
        query = "SELECT payload FROM vault_events WHERE 1=1"
        params: List[Any] = []
        if name:
            query += " AND name = ?"
            params.append(name)
        if owner:
            query += " AND owner = ?"
            params.append(owner)
        query += " ORDER BY id ASC LIMIT ?"
        params.append(limit)

        with self._get_connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [json.loads(row["payload"]) for row in rows]

    def count_events(self, name: Optional[str] = None) -> int:
        """Number of stored events, optionally by name."""
        with self._get_connection() as conn:
            if name:
                row = conn.execute(
                    "SELECT COUNT(*) FROM vault_events WHERE name = ?", (name,)
                ).fetchone()
            else:
                row = conn.execute("SELECT COUNT(*) FROM vault_events").fetchone()
        return row[0]

    def attach(self, bus: EventBus) -> None:
        """Persist every event published on bus from now on."""
        self.initialize()
        bus.subscribe(self.save_event)
