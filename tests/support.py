from __future__ import annotations

import asyncio
import sqlite3
import tempfile
import unittest
from pathlib import Path

import src.db as db


class TempDatabaseTestCase(unittest.TestCase):
    """Runs each test against a fresh, initialized sqlite file."""

    initialize = True

    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self._original_backend = db.DB_BACKEND
        self._original_sqlite_path = db.SQLITE_DB_PATH

        db.DB_BACKEND = "sqlite"
        db.SQLITE_DB_PATH = Path(self._tmpdir.name) / "showcase.db"

        if self.initialize:
            db.initialize_database()

    def tearDown(self) -> None:
        db.DB_BACKEND = self._original_backend
        db.SQLITE_DB_PATH = self._original_sqlite_path
        self._tmpdir.cleanup()

    def run_async(self, coro):
        return asyncio.run(coro)

    def raw_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(db.SQLITE_DB_PATH))
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def execute(self, sql: str, params: tuple = ()) -> None:
        conn = self.raw_connection()
        try:
            conn.execute(sql, params)
            conn.commit()
        finally:
            conn.close()

    def fetchall(self, sql: str, params: tuple = ()) -> list[tuple]:
        conn = self.raw_connection()
        try:
            return conn.execute(sql, params).fetchall()
        finally:
            conn.close()

    def count_rows(self, table_name: str) -> int:
        return self.fetchall(f"SELECT COUNT(*) FROM {table_name}")[0][0]
