"""
SQL statement templates for the demo session.

Each function takes the table name and returns the raw SQL string.
Parameters use ``?`` placeholders; ``mysql_demo.infra.db.mysql``
rewrites them for drivers with a different paramstyle.  The table name
is interpolated as-is and must already be a validated identifier (see
``mysql_demo.config.env.Config``).
"""

from __future__ import annotations

from typing import Callable, Dict


def createTable(table: str) -> str:
    return (
        f"CREATE TABLE {table} ( "
        "NAME varchar(40) NOT NULL, "
        "AGE INTEGER NOT NULL, "
        "PRIMARY KEY (NAME))"
    )


def hasRecord(table: str) -> str:
    return f"SELECT 1 FROM {table} WHERE NAME = ?"


def insertRecord(table: str) -> str:
    return f"INSERT INTO {table} (NAME, AGE) VALUES (?,?)"


def oldest(table: str) -> str:
    return f"SELECT NAME FROM {table} WHERE AGE = (SELECT MAX(AGE) FROM {table})"


def dropTable(table: str) -> str:
    return f"DROP TABLE {table}"


# Table lookups used by ``Db.table_exists``, keyed by driver.
TABLE_EXISTS: Dict[str, str] = {
    "pymysql": """
        SELECT 1
        FROM information_schema.tables
        WHERE table_schema = DATABASE()
          AND table_name = ?
    """.strip(),
    "sqlite": """
        SELECT 1
        FROM sqlite_master
        WHERE type = 'table'
          AND name = ?
    """.strip(),
}


queries: Dict[str, Callable[[str], str]] = {
    "createTable": createTable,
    "hasRecord": hasRecord,
    "insertRecord": insertRecord,
    "oldest": oldest,
    "dropTable": dropTable,
}
