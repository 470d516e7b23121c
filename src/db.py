"""
Database utilities with dual backend support.

Backends:
- sqlite (default): self-contained local file, schema created by initialize_database()
- postgres: networked database mode via psycopg2

All SQL in the project is written Postgres-flavored (``%s`` placeholders,
``SERIAL``, ``NOW()``) and translated on the fly for sqlite.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import sqlite3
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Iterator, TypeVar

from werkzeug.security import generate_password_hash

from .config.settings import get_settings
from .errors import ContentFailure, PersistenceFailure

try:
    import psycopg2
    from psycopg2.extras import RealDictCursor
except ImportError:  # pragma: no cover - optional when running sqlite only
    psycopg2 = None
    RealDictCursor = None


logger = logging.getLogger(__name__)

T = TypeVar("T")

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_DEFAULT_SQLITE_PATH = _PROJECT_ROOT / "data" / "showcase.db"

DB_BACKEND = os.getenv("DB_BACKEND", "sqlite").strip().lower()
SQLITE_DB_PATH = Path(os.getenv("SQLITE_DB_PATH", str(_DEFAULT_SQLITE_PATH)))

PG_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "5432")),
    "dbname": os.getenv("DB_NAME", "showcase"),
}
if os.getenv("DB_USER"):
    PG_CONFIG["user"] = os.getenv("DB_USER")
if os.getenv("DB_PASSWORD"):
    PG_CONFIG["password"] = os.getenv("DB_PASSWORD")

HERO_ID = 1
DEFAULT_HERO_TITLE = "Precision meets \nPerfection."
DEFAULT_HERO_SUBTITLE = "Upgrade your workspace with our limited winter collection."
DEFAULT_ADMIN_USERNAME = "admin"

if psycopg2 is not None:
    STORAGE_ERRORS: tuple[type[BaseException], ...] = (sqlite3.Error, psycopg2.Error)
else:  # pragma: no cover - depends on installed extras
    STORAGE_ERRORS = (sqlite3.Error,)


def _is_sqlite() -> bool:
    return DB_BACKEND == "sqlite"


def _normalize_sql_for_sqlite(sql: str) -> str:
    """Convert Postgres-flavored SQL to sqlite-compatible SQL."""
    normalized = sql
    normalized = re.sub(r"%s", "?", normalized)
    normalized = re.sub(
        r"\bSERIAL\s+PRIMARY\s+KEY\b",
        "INTEGER PRIMARY KEY AUTOINCREMENT",
        normalized,
        flags=re.IGNORECASE,
    )
    normalized = re.sub(
        r"\bTIMESTAMP\s+WITH\s+TIME\s+ZONE\b",
        "TEXT",
        normalized,
        flags=re.IGNORECASE,
    )
    normalized = re.sub(r"\bNOW\(\)", "CURRENT_TIMESTAMP", normalized, flags=re.IGNORECASE)
    return normalized


def _adapt_sqlite_value(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Decimal):
        return float(value)
    return value


def _adapt_sqlite_params(params: Any) -> Any:
    if params is None:
        return None
    return tuple(_adapt_sqlite_value(val) for val in params)


class SQLiteCursorWrapper:
    """DB-API compatible cursor wrapper with SQL/param translation."""

    def __init__(self, cursor: sqlite3.Cursor):
        self._cursor = cursor

    def __enter__(self) -> "SQLiteCursorWrapper":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def execute(self, sql: str, params: Any = None) -> "SQLiteCursorWrapper":
        normalized = _normalize_sql_for_sqlite(sql)
        adapted_params = _adapt_sqlite_params(params)
        if adapted_params is None:
            self._cursor.execute(normalized)
        else:
            self._cursor.execute(normalized, adapted_params)
        return self

    def fetchone(self):
        return self._cursor.fetchone()

    def fetchall(self):
        return self._cursor.fetchall()

    def close(self) -> None:
        self._cursor.close()

    @property
    def description(self):
        return self._cursor.description

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount


class SQLiteConnectionWrapper:
    """Connection wrapper exposing context-manager cursors like psycopg2."""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    def cursor(self, *args, **kwargs) -> SQLiteCursorWrapper:
        return SQLiteCursorWrapper(self._connection.cursor())

    def commit(self) -> None:
        self._connection.commit()

    def rollback(self) -> None:
        self._connection.rollback()

    def close(self) -> None:
        self._connection.close()


def _sqlite_connect_raw() -> sqlite3.Connection:
    SQLITE_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(
        str(SQLITE_DB_PATH),
        detect_types=sqlite3.PARSE_DECLTYPES,
        check_same_thread=False,
    )
    # Payload and product cleanup depends on ON DELETE CASCADE.
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


_SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        username VARCHAR(255) UNIQUE NOT NULL,
        password_hash VARCHAR(255) NOT NULL,
        role VARCHAR(50) NOT NULL DEFAULT 'admin',
        created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
        updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS hero (
        id INTEGER PRIMARY KEY,
        title TEXT NOT NULL,
        subtitle TEXT,
        updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sections (
        id VARCHAR(255) PRIMARY KEY,
        type VARCHAR(50) NOT NULL CHECK (type IN ('spotlight', 'grid')),
        sort_order INTEGER NOT NULL DEFAULT 0,
        created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
        updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS spotlight_data (
        id SERIAL PRIMARY KEY,
        section_id VARCHAR(255) NOT NULL UNIQUE REFERENCES sections(id) ON DELETE CASCADE,
        title VARCHAR(255) NOT NULL DEFAULT '',
        subtext TEXT,
        image TEXT,
        media TEXT,
        media_type VARCHAR(20) DEFAULT 'image' CHECK (media_type IN ('image', 'video')),
        updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS grid_data (
        id SERIAL PRIMARY KEY,
        section_id VARCHAR(255) NOT NULL UNIQUE REFERENCES sections(id) ON DELETE CASCADE,
        title VARCHAR(255) NOT NULL DEFAULT '',
        grid_columns INTEGER NOT NULL DEFAULT 0 CHECK (grid_columns >= 0),
        updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS products (
        id SERIAL PRIMARY KEY,
        grid_id INTEGER NOT NULL REFERENCES grid_data(id) ON DELETE CASCADE,
        name VARCHAR(255) NOT NULL,
        old_price DECIMAL(10, 2) CHECK (old_price >= 0),
        new_price DECIMAL(10, 2) CHECK (new_price >= 0),
        image TEXT,
        link TEXT DEFAULT '#',
        badge TEXT DEFAULT '',
        strike_old_price BOOLEAN DEFAULT TRUE,
        show_old_price BOOLEAN DEFAULT TRUE,
        sort_order INTEGER NOT NULL DEFAULT 0,
        created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
        updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_sections_sort_order ON sections(sort_order)",
    "CREATE INDEX IF NOT EXISTS idx_products_grid_sort ON products(grid_id, sort_order)",
)

# Columns added after the first release. Older databases pick them up here.
_COLUMN_MIGRATIONS = (
    ("products", "link", "TEXT DEFAULT '#'"),
    ("products", "badge", "TEXT DEFAULT ''"),
    ("products", "strike_old_price", "BOOLEAN DEFAULT TRUE"),
    ("products", "show_old_price", "BOOLEAN DEFAULT TRUE"),
    ("spotlight_data", "media", "TEXT"),
    ("spotlight_data", "media_type", "VARCHAR(20) DEFAULT 'image'"),
)


def ensure_column(cur, table_name: str, column_name: str, column_definition: str) -> None:
    """
    Add a column if missing for both sqlite and postgres backends.

    Args:
        cur: active DB cursor
        table_name: table to alter
        column_name: plain column name
        column_definition: SQL fragment after column name
    """
    if _is_sqlite():
        cur.execute(f"PRAGMA table_info({table_name})")
        existing = {row[1] for row in cur.fetchall()}
        if column_name in existing:
            return
        cur.execute(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_definition}")
        return

    cur.execute(
        f"ALTER TABLE {table_name} ADD COLUMN IF NOT EXISTS {column_name} {column_definition}"
    )


def _seed_hero(cur) -> None:
    cur.execute("SELECT COUNT(*) FROM hero")
    if int(cur.fetchone()[0] or 0) > 0:
        return

    cur.execute(
        "INSERT INTO hero (id, title, subtitle) VALUES (%s, %s, %s)",
        (HERO_ID, DEFAULT_HERO_TITLE, DEFAULT_HERO_SUBTITLE),
    )
    logger.info("Seeded default hero content")


def _seed_default_admin(cur) -> None:
    cur.execute("SELECT COUNT(*) FROM users WHERE username = %s", (DEFAULT_ADMIN_USERNAME,))
    if int(cur.fetchone()[0] or 0) > 0:
        return

    password = get_settings().DEFAULT_ADMIN_PASSWORD
    cur.execute(
        "INSERT INTO users (username, password_hash, role) VALUES (%s, %s, %s)",
        (DEFAULT_ADMIN_USERNAME, generate_password_hash(password), "admin"),
    )
    logger.info("Default admin user created (username: %s)", DEFAULT_ADMIN_USERNAME)


def initialize_database() -> None:
    """
    Create schema and seed singletons for the configured backend.

    Safe to call repeatedly: tables, indexes and columns are only created
    when absent and seed rows are only inserted when missing. Call once at
    process start; connections never trigger it implicitly.
    """
    with transaction() as cur:
        for statement in _SCHEMA_STATEMENTS:
            cur.execute(statement)
        for table_name, column_name, column_definition in _COLUMN_MIGRATIONS:
            ensure_column(cur, table_name, column_name, column_definition)
        _seed_hero(cur)
        _seed_default_admin(cur)

    logger.info("Database initialized (backend=%s)", DB_BACKEND)


def get_connection():
    """Get a DB connection for the configured backend."""
    if _is_sqlite():
        return SQLiteConnectionWrapper(_sqlite_connect_raw())

    if DB_BACKEND != "postgres":
        raise ValueError(
            f"Unsupported DB_BACKEND '{DB_BACKEND}'. Expected 'sqlite' or 'postgres'."
        )

    if psycopg2 is None:
        raise RuntimeError("psycopg2 is required for postgres backend but is not installed")

    return psycopg2.connect(**PG_CONFIG)


def _rollback_quietly(conn) -> None:
    try:
        conn.rollback()
    except STORAGE_ERRORS as exc:
        # A dropped connection discards the transaction server-side.
        logger.warning("Rollback failed: %s", exc)


@contextmanager
def transaction() -> Iterator[Any]:
    """
    Run a block of statements as one transaction.

    Yields a cursor. Commits when the block exits normally; on any
    exception raised inside the block the transaction is rolled back
    and nothing is committed. Storage errors are re-raised as
    PersistenceFailure, domain failures propagate unchanged.
    """
    try:
        conn = get_connection()
    except STORAGE_ERRORS as exc:
        logger.exception("Could not open a database connection")
        raise PersistenceFailure("Database unavailable") from exc

    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except ContentFailure:
        _rollback_quietly(conn)
        raise
    except STORAGE_ERRORS as exc:
        _rollback_quietly(conn)
        logger.exception("Transaction rolled back after storage error")
        raise PersistenceFailure("Storage error; no changes were saved") from exc
    except BaseException:
        _rollback_quietly(conn)
        raise
    finally:
        conn.close()


def query(sql: str, params: tuple | None = None) -> list[dict]:
    """Execute query and return rows as dictionaries."""
    try:
        conn = get_connection()
    except STORAGE_ERRORS as exc:
        logger.exception("Could not open a database connection")
        raise PersistenceFailure("Database unavailable") from exc

    try:
        if _is_sqlite():
            with conn.cursor() as cur:
                cur.execute(sql, params)
                rows = cur.fetchall()
                columns = [desc[0] for desc in (cur.description or [])]
                return [dict(zip(columns, row)) for row in rows]

        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(sql, params)
            return [dict(row) for row in cur.fetchall()]
    except STORAGE_ERRORS as exc:
        logger.exception("Query failed")
        raise PersistenceFailure("Storage error while reading") from exc
    finally:
        conn.close()


def _call_in_transaction(fn: Callable[[Any], T]) -> T:
    with transaction() as cur:
        return fn(cur)


async def run_query(sql: str, params: tuple | None = None) -> list[dict]:
    """Async form of query(); the blocking driver runs in a worker thread."""
    return await asyncio.to_thread(query, sql, params)


async def run_in_transaction(fn: Callable[[Any], T]) -> T:
    """
    Run ``fn(cursor)`` inside one transaction on a worker thread.

    Cancelling the awaiting task does not stop the worker; the transaction
    still commits or rolls back on its own.
    """
    return await asyncio.to_thread(_call_in_transaction, fn)
