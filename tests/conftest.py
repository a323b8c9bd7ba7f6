import pytest

from mysql_demo.config import Config
from mysql_demo.infra.db import connect

DB_VARS = (
    "DB_DRIVER",
    "DB_HOST",
    "DB_PORT",
    "DB_NAME",
    "DB_USER",
    "DB_PASSWORD",
    "DB_USE_SSL",
    "DB_TABLE",
)


class FakeCursor:
    """Records statements instead of sending them anywhere."""

    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self.rowcount = 0
        self.closed = False
        self._rows = []

    def execute(self, sql, params=()):
        self.conn.statements.append((sql, params))
        self._rows = list(self.conn.rows)
        self.description = [(c,) for c in self.conn.columns] or None

    def executemany(self, sql, seq):
        self.conn.batches.append((sql, list(seq)))

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def tables(self, table=None, tableType=None):
        self.conn.statements.append(("tables", (table, tableType)))
        self._rows = [(None, None, table, tableType)] if table in self.conn.known_tables else []
        return self

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, rows=(), columns=(), known_tables=()):
        self.rows = list(rows)
        self.columns = list(columns)
        self.known_tables = set(known_tables)
        self.statements = []
        self.batches = []
        self.cursors = []
        self.closed = False

    def cursor(self):
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def close(self):
        self.closed = True


@pytest.fixture
def clean_env(monkeypatch):
    """Remove DB_* variables; monkeypatch restores them afterwards."""
    for name in DB_VARS:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def sqlite_cfg(tmp_path):
    return Config(DB_DRIVER="sqlite", DB_NAME=str(tmp_path / "demo.db"))


@pytest.fixture
def db(sqlite_cfg):
    conn = connect(sqlite_cfg)
    yield conn
    conn.close()


@pytest.fixture
def write_env(tmp_path, clean_env):
    """Write a .env file; variables it sets are undone after the test."""

    def _write(**values):
        path = tmp_path / "demo.env"
        path.write_text("".join(f"{k}={v}\n" for k, v in values.items()), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def fake_connection():
    """Factory for ``FakeConnection`` objects standing in for a driver connection."""
    return FakeConnection
