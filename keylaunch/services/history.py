"""
History Store - Track activations and rank them by frecency.

Implements a Firefox-style frecency algorithm:
  frecency_score = launch_count * recency_weight

Where recency_weight depends on how recently the entry was activated:
  - < 4 days: 100x multiplier
  - < 14 days: 70x multiplier
  - < 31 days: 50x multiplier
  - < 90 days: 30x multiplier
  - 90+ days: 10x multiplier

Keys are exec lines, so any module can look up the bias for the entries
it produces.
"""

import sqlite3
import threading
import time
from pathlib import Path
from typing import Optional

from loguru import logger

from keylaunch.utils.helpers import data_dir


class HistoryStore:
    """
    Usage history backed by SQLite.

    Methods:
        record(key): Record an activation
        scores(): Frecency score for every known key
        top(limit): Top N keys by frecency score
    """

    def __init__(self, db_path: Optional[Path] = None):
        if db_path is None:
            directory = data_dir()
            directory.mkdir(parents=True, exist_ok=True)
            db_path = directory / "history.db"
        self.db_path = db_path

        # Module threads read scores while the UI thread records
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_database()
        logger.debug(f"HistoryStore initialized with db at {self.db_path}")

    def _init_database(self):
        """Create database schema if it doesn't exist."""
        with self._lock:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS history (
                    key TEXT PRIMARY KEY,
                    launch_count INTEGER DEFAULT 0,
                    last_launch INTEGER,
                    created_at INTEGER
                )
            """)
            self._conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_frecency
                ON history(last_launch DESC, launch_count DESC)
            """)
            self._conn.commit()

    def record(self, key: str) -> None:
        """
        Record an activation.

        Args:
            key: Exec line of the activated entry
        """
        now = int(time.time())

        try:
            with self._lock:
                self._conn.execute("""
                    INSERT INTO history (key, launch_count, last_launch, created_at)
                    VALUES (?, 1, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        launch_count = launch_count + 1,
                        last_launch = excluded.last_launch
                """, (key, now, now))
                self._conn.commit()
            logger.debug(f"Recorded activation of {key!r}")
        except sqlite3.Error:
            logger.exception(f"Failed to record activation of {key!r}")

    def scores(self, min_launches: int = 1) -> dict[str, float]:
        """Frecency score per key, for keys launched at least min_launches times."""
        try:
            with self._lock:
                rows = self._conn.execute("""
                    SELECT key, launch_count, last_launch
                    FROM history
                    WHERE launch_count >= ?
                """, (min_launches,)).fetchall()
        except sqlite3.Error:
            logger.exception("Failed to read history")
            return {}

        return {
            key: calculate_frecency(launch_count, last_launch)
            for key, launch_count, last_launch in rows
        }

    def top(self, limit: int = 12, min_launches: int = 1) -> list[tuple[str, float]]:
        """
        Get keys ranked by frecency score.

        Returns:
            List of (key, frecency_score), highest first
        """
        ranked = sorted(self.scores(min_launches).items(), key=lambda item: item[1], reverse=True)
        return ranked[:limit]

    def clear(self, key: Optional[str] = None) -> None:
        """Forget one key, or everything when key is None."""
        try:
            with self._lock:
                if key:
                    self._conn.execute("DELETE FROM history WHERE key = ?", (key,))
                else:
                    self._conn.execute("DELETE FROM history")
                self._conn.commit()
        except sqlite3.Error:
            logger.exception(f"Failed to clear history for {key or 'all keys'}")

    def close(self) -> None:
        with self._lock:
            self._conn.close()


def calculate_frecency(launch_count: int, last_launch: int, now: Optional[float] = None) -> float:
    """
    Calculate frecency score using Firefox's algorithm.

    Args:
        launch_count: Number of activations
        last_launch: Unix timestamp of the last activation
        now: Reference time, defaults to the current time

    Returns:
        Frecency score (float)
    """
    if now is None:
        now = time.time()
    age_days = (now - last_launch) / (24 * 3600)

    if age_days < 4:
        recency_weight = 100
    elif age_days < 14:
        recency_weight = 70
    elif age_days < 31:
        recency_weight = 50
    elif age_days < 90:
        recency_weight = 30
    else:
        recency_weight = 10

    return launch_count * recency_weight
