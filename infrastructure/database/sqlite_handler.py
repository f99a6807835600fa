import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from flask import Flask

from app.constants import Seeds
from app.utils.time import iso_now
from infrastructure.database.ops.configurations import ConfigurationOperations
from infrastructure.database.ops.devices import DeviceOperations
from infrastructure.database.ops.habits import HabitOperations
from infrastructure.database.ops.sensors import SensorOperations
from infrastructure.database.ops.users import UserOperations

logger = logging.getLogger(__name__)


class SQLiteDatabaseHandler(
    UserOperations,
    HabitOperations,
    ConfigurationOperations,
    DeviceOperations,
    SensorOperations,
):
    """Thread-safe SQLite handler decoupled from Flask globals.

    Every thread gets its own connection, except for an in-memory database,
    which exists only inside one connection and is therefore shared by all
    threads. Writes go through :meth:`connection`, which commits on success
    and rolls back on error; inside :meth:`transaction` those commits are
    deferred so a group of writes lands atomically.
    """

    def __init__(self, database_path: str) -> None:
        self._database_path = database_path
        self._local = threading.local()
        self._shared: Optional[sqlite3.Connection] = None
        self._shared_lock = threading.Lock()

        if database_path != ":memory:":
            db_path = Path(database_path)
            if not db_path.parent.exists():
                db_path.parent.mkdir(parents=True, exist_ok=True)
                logger.info("Created database directory: %s", db_path.parent)

    # --- Lifecycle ------------------------------------------------------------
    def init_app(self, app: Flask | None = None) -> None:
        if app is not None:
            app.teardown_appcontext(self.close_db)
        self.create_tables()

    def get_db(self) -> sqlite3.Connection:
        if self._database_path == ":memory:":
            with self._shared_lock:
                if self._shared is None:
                    self._shared = self._open_connection()
                return self._shared
        connection: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if connection is None:
            connection = self._open_connection()
            self._local.connection = connection
        return connection

    def _open_connection(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._database_path, check_same_thread=False)
        try:
            connection.row_factory = sqlite3.Row
            self._configure_connection(connection)
            return connection
        except Exception:
            connection.close()
            raise

    def _configure_connection(self, connection: sqlite3.Connection) -> None:
        """Enforce foreign keys and use WAL for concurrent readers."""
        connection.execute("PRAGMA foreign_keys=ON")
        connection.execute("PRAGMA journal_mode=WAL")
        connection.execute("PRAGMA synchronous=NORMAL")
        connection.commit()

    def close_db(self, _e: Optional[BaseException] = None) -> None:
        # Connections opened inside a transaction stay open until it finishes.
        if getattr(self._local, "tx_depth", 0):
            return
        connection: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if connection is not None and self._database_path != ":memory:":
            connection.close()
            delattr(self._local, "connection")

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = self.get_db()
        if getattr(self._local, "tx_depth", 0):
            # The enclosing transaction() owns commit / rollback.
            yield conn
            return
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        else:
            conn.commit()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a group of writes atomically; nested calls join the outer one."""
        conn = self.get_db()
        depth = getattr(self._local, "tx_depth", 0)
        self._local.tx_depth = depth + 1
        try:
            yield conn
        except BaseException:
            if depth == 0:
                conn.rollback()
                logger.debug("Transaction rolled back")
            raise
        else:
            if depth == 0:
                conn.commit()
        finally:
            self._local.tx_depth = depth

    def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        try:
            self.get_db().execute("SELECT 1").fetchone()
            return True
        except sqlite3.Error as exc:
            logger.error("Database ping failed: %s", exc)
            return False

    # --- Schema ----------------------------------------------------------------
    def create_tables(self) -> None:
        """Creates the necessary tables if they do not already exist and seeds
        the reference rows (sensor, device and configuration types)."""
        with self.connection() as db:
            db.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    lastname TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    verification_code TEXT,
                    email_verified_at TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS api_tokens (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    token_hash TEXT NOT NULL UNIQUE,
                    name TEXT NOT NULL DEFAULT 'api',
                    expires_at TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_api_tokens_user ON api_tokens(user_id);

                CREATE TABLE IF NOT EXISTS habits (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    description TEXT NOT NULL,
                    user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS configuration_types (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS configurations (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    configuration_type_id INTEGER NOT NULL
                        REFERENCES configuration_types(id) ON DELETE RESTRICT,
                    data TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_configurations_user ON configurations(user_id);

                CREATE TABLE IF NOT EXISTS device_types (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS devices (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    device_type_id INTEGER NOT NULL REFERENCES device_types(id) ON DELETE RESTRICT,
                    name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_devices_user ON devices(user_id);

                CREATE TABLE IF NOT EXISTS sensor_types (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    unit TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS sensors (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    device_id INTEGER NOT NULL REFERENCES devices(id) ON DELETE CASCADE,
                    sensor_type_id INTEGER NOT NULL REFERENCES sensor_types(id) ON DELETE RESTRICT,
                    value REAL NOT NULL DEFAULT 0,
                    active INTEGER NOT NULL DEFAULT 1 CHECK (active IN (0, 1)),
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_sensors_device ON sensors(device_id);
                """
            )
            self._seed_reference_data(db)
        logger.info("Database schema ready at %s", self._database_path)

    def _seed_reference_data(self, db: sqlite3.Connection) -> None:
        now = iso_now()
        db.executemany(
            "INSERT OR IGNORE INTO sensor_types (name, unit, created_at, updated_at) VALUES (?, ?, ?, ?)",
            [(name, unit, now, now) for name, unit in Seeds.SENSOR_TYPES],
        )
        db.executemany(
            "INSERT OR IGNORE INTO device_types (name, created_at, updated_at) VALUES (?, ?, ?)",
            [(name, now, now) for name in Seeds.DEVICE_TYPES],
        )
        db.executemany(
            "INSERT OR IGNORE INTO configuration_types (name, created_at, updated_at) VALUES (?, ?, ?)",
            [(name, now, now) for name in Seeds.CONFIGURATION_TYPES],
        )
