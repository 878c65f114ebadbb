import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

from utils.constants import DB_FILE, DEFAULT_CURRENCY_SYMBOL
from utils.logging_setup import get_logger

logger = get_logger("budget_tracker.database")


class DatabaseManager:
    """Owns the single sqlite connection shared by every DAO.

    Writes go through ``transaction()``, which serialises them behind a
    re-entrant lock so worker threads (the rollover pool) can share the
    connection. Nested ``transaction()`` blocks join the outermost one.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._depth = 0

    def get_connection(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is None:
                self._conn = sqlite3.connect(
                    self.db_path, check_same_thread=False, isolation_level=None
                )
                self._conn.row_factory = sqlite3.Row
                self._conn.execute("PRAGMA foreign_keys = ON")
                if self.db_path != ":memory:":
                    self._conn.execute("PRAGMA journal_mode = WAL")
            return self._conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """BEGIN/COMMIT around the block; ROLLBACK and re-raise on error."""
        with self._lock:
            conn = self.get_connection()
            outermost = self._depth == 0
            if outermost:
                conn.execute("BEGIN")
            self._depth += 1
            try:
                yield conn
            except BaseException:
                self._depth -= 1
                if outermost and conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            self._depth -= 1
            if outermost:
                conn.execute("COMMIT")

    def query(self, sql: str, params: tuple | list = ()) -> list[sqlite3.Row]:
        with self._lock:
            return self.get_connection().execute(sql, params).fetchall()

    def query_one(self, sql: str, params: tuple | list = ()) -> sqlite3.Row | None:
        with self._lock:
            return self.get_connection().execute(sql, params).fetchone()

    def initialize(self):
        """Create schema and seed defaults."""
        with self.transaction() as conn:
            self._create_schema(conn)
            self._seed_defaults(conn)
        logger.debug("database ready at %s", self.db_path)

    def _create_schema(self, conn: sqlite3.Connection):
        # executescript() would COMMIT the open transaction; run statements one by one.
        statements = [
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id                   INTEGER PRIMARY KEY AUTOINCREMENT,
                owner_id             TEXT NOT NULL,
                kind                 TEXT NOT NULL CHECK(kind IN ('expense','income')),
                category             TEXT NOT NULL CHECK(length(category) > 0),
                amount               REAL NOT NULL CHECK(amount <> 0),
                date                 TEXT NOT NULL,
                note                 TEXT NOT NULL DEFAULT '',
                recurrence_frequency TEXT,
                recurrence_end_date  TEXT,
                created_at           TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS archived_transactions (
                id                   INTEGER PRIMARY KEY AUTOINCREMENT,
                source_id            INTEGER,
                owner_id             TEXT NOT NULL,
                archive_month        TEXT NOT NULL,
                kind                 TEXT NOT NULL CHECK(kind IN ('expense','income')),
                category             TEXT NOT NULL,
                amount               REAL NOT NULL,
                date                 TEXT NOT NULL,
                note                 TEXT NOT NULL DEFAULT '',
                recurrence_frequency TEXT,
                recurrence_end_date  TEXT,
                created_at           TEXT NOT NULL DEFAULT '',
                archived_at          TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS rollover_markers (
                owner_id         TEXT PRIMARY KEY,
                last_reset_month TEXT NOT NULL
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS custom_categories (
                id       INTEGER PRIMARY KEY AUTOINCREMENT,
                owner_id TEXT NOT NULL,
                name     TEXT NOT NULL,
                UNIQUE(owner_id, name)
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_transactions_owner ON transactions(owner_id, date)",
            "CREATE INDEX IF NOT EXISTS idx_archive_partition ON archived_transactions(owner_id, archive_month)",
        ]
        for stmt in statements:
            conn.execute(stmt)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("currency_symbol", DEFAULT_CURRENCY_SYMBOL),
            ("rollover_atomic", "0"),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        row = self.query_one("SELECT value FROM app_settings WHERE key = ?", (key,))
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        with self.transaction() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    @staticmethod
    def open(db_path: str | None = None) -> "DatabaseManager":
        """Startup factory: open (creating if needed) and initialise the database."""
        db = DatabaseManager(db_path)
        db.initialize()
        return db

    def close(self):
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
