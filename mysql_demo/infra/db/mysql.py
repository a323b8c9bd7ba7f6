"""
MySQL connection utilities.

This module wraps a DB-API connection from one of the supported
drivers in a small ``Db`` class.  ``PyMySQL`` is the default driver;
``pyodbc`` can be used together with the MySQL ODBC driver.  The
``sqlite`` driver opens a local database file through the standard
library and exists so a session can be pointed at a throwaway database.

The ``connect`` function returns an instance of ``Db``, which exposes
``query``, ``iter_query``, ``execute``, ``execute_batch``,
``table_exists`` and ``close``.  SQL strings use ``?`` placeholders.
PyMySQL expects ``%s`` instead, so the placeholders are rewritten before
the statement is sent when that driver is active.

Example usage::

    from mysql_demo.config import config
    from mysql_demo.infra.db import connect
    with connect(config) as db:
        rows = db.query("SELECT NAME FROM JDBC_TEST WHERE AGE > ?", (30,))

All connections are opened in autocommit mode; there are no explicit
transactions.
"""

from __future__ import annotations

import logging
import re
from contextlib import closing
from typing import Any, Dict, Iterator, Optional, Sequence

from ...config import Config
from ...config.queries import TABLE_EXISTS

ODBC_DRIVER = "MySQL ODBC 8.0 Unicode Driver"


class Db:
    """Lightweight wrapper around a DB connection.

    Instances of this class are returned by the ``connect`` function
    defined below and can be used as context managers, closing the
    underlying connection on exit.
    """

    def __init__(self, conn: Any, driver: str) -> None:
        self._conn = conn
        self._driver = driver

    @property
    def driver(self) -> str:
        return self._driver

    def __enter__(self) -> "Db":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _prepare(self, sql: str) -> str:
        if self._driver == "pymysql":
            return re.sub(r"\?", "%s", sql)
        return sql

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> Dict[str, Any]:
        """Execute a query and return a dict with a ``rows`` list.

        Args:
            sql: The SQL statement with ``?`` placeholders.
            params: Positional values for the placeholders.

        Returns:
            A dictionary containing a ``rows`` key whose value is a list
            of rows returned by the query.  Each row is a mapping from
            column name to value.
        """
        return {"rows": list(self.iter_query(sql, params))}

    def iter_query(self, sql: str, params: Optional[Sequence[Any]] = None) -> Iterator[Dict[str, Any]]:
        """Execute a query and yield its rows one at a time.

        Nothing is sent to the server until the first row is requested.
        The cursor is closed once the rows are exhausted or the generator
        is closed early.
        """
        with closing(self._conn.cursor()) as cursor:
            cursor.execute(self._prepare(sql), tuple(params or ()))
            columns = [col[0] for col in cursor.description] if cursor.description else []
            if not columns:
                return
            for row in iter(cursor.fetchone, None):
                yield dict(zip(columns, row))

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> int:
        """Run a statement that returns no rows (CREATE/INSERT/DROP/...).

        Returns:
            The driver's row count for the statement.
        """
        with closing(self._conn.cursor()) as cursor:
            cursor.execute(self._prepare(sql), tuple(params or ()))
            return cursor.rowcount

    def execute_batch(self, sql: str, rows: Sequence[Sequence[Any]]) -> int:
        """Run one parameterized statement for every entry of ``rows``.

        The whole batch is handed to the driver's ``executemany`` in a
        single call.  An empty batch is not sent to the server at all.

        Returns:
            The number of parameter sets submitted.
        """
        if not rows:
            logging.info("[db] empty batch, nothing to execute", extra={"sql": sql})
            return 0
        with closing(self._conn.cursor()) as cursor:
            cursor.executemany(self._prepare(sql), [tuple(r) for r in rows])
        return len(rows)

    def table_exists(self, name: str) -> bool:
        """Look ``name`` up in the database catalog (exact match)."""
        if self._driver == "pyodbc":
            with closing(self._conn.cursor()) as cursor:
                return cursor.tables(table=name, tableType="TABLE").fetchone() is not None
        rows = self.query(TABLE_EXISTS[self._driver], (name,))["rows"]
        return bool(rows)

    def close(self) -> None:
        self._conn.close()


def _connect_pymysql(pymysql: Any, cfg: Config) -> Db:
    kwargs: Dict[str, Any] = {
        "host": cfg.DB_HOST,
        "port": cfg.DB_PORT,
        "user": cfg.DB_USER,
        "password": cfg.DB_PASSWORD,
        "database": cfg.DB_NAME,
        "autocommit": True,
    }
    if cfg.DB_USE_SSL:
        # Encrypt without verifying the server certificate
        kwargs["ssl"] = {"check_hostname": False}
    else:
        kwargs["ssl_disabled"] = True
    conn = pymysql.connect(**kwargs)
    return Db(conn, "pymysql")


def odbc_connection_string(cfg: Config) -> str:
    """Build a MySQL ODBC connection string from ``cfg``."""
    return (
        f"DRIVER={{{ODBC_DRIVER}}};"
        f"SERVER={cfg.DB_HOST};"
        f"PORT={cfg.DB_PORT};"
        f"DATABASE={cfg.DB_NAME};"
        f"UID={cfg.DB_USER};PWD={cfg.DB_PASSWORD};"
        f"SSLMODE={'REQUIRED' if cfg.DB_USE_SSL else 'DISABLED'};"
    )


def _connect_pyodbc(pyodbc: Any, cfg: Config) -> Db:
    conn = pyodbc.connect(odbc_connection_string(cfg), autocommit=True)
    return Db(conn, "pyodbc")


def _connect_sqlite(cfg: Config) -> Db:
    import sqlite3

    # isolation_level=None keeps sqlite3 in autocommit mode
    conn = sqlite3.connect(cfg.DB_NAME, isolation_level=None)
    return Db(conn, "sqlite")


def connect(cfg: Config) -> Db:
    """Connect to the database described by ``cfg``.

    ``cfg.DB_DRIVER`` selects the driver.  With ``auto`` PyMySQL is
    tried first and ``pyodbc`` second; if neither is installed an
    ``ImportError`` is raised.  Driver errors (bad credentials, refused
    connection, ...) propagate unchanged.

    Args:
        cfg: The connection settings.

    Returns:
        A ``Db`` instance.
    """
    driver = cfg.DB_DRIVER
    logging.info(
        "[db] connecting",
        extra={"driver": driver, "host": cfg.DB_HOST, "port": cfg.DB_PORT, "database": cfg.DB_NAME},
    )
    if driver == "sqlite":
        return _connect_sqlite(cfg)
    if driver == "pymysql":
        import pymysql  # type: ignore[import]
        return _connect_pymysql(pymysql, cfg)
    if driver == "pyodbc":
        import pyodbc  # type: ignore[import]
        return _connect_pyodbc(pyodbc, cfg)
    # auto: try PyMySQL first
    try:
        import pymysql  # type: ignore[import]
    except ImportError:
        pass
    else:
        return _connect_pymysql(pymysql, cfg)
    # Fallback to pyodbc
    try:
        import pyodbc  # type: ignore[import]
    except ImportError:
        raise ImportError(
            "Neither PyMySQL nor pyodbc is installed. Install one of them to connect to MySQL."
        ) from None
    return _connect_pyodbc(pyodbc, cfg)
