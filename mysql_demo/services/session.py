"""
The demo session: connect, create, insert, query, drop.

Each stage is a plain function taking an open ``Db`` and the table
name.  Stages raise a ``SessionError`` subclass that wraps the driver
exception, so callers can tell which step failed without knowing which
driver is in use.  ``run_session`` chains the stages, stops at the
first failure and reports the result as a ``SessionOutcome`` rather
than raising.

Typical use::

    from mysql_demo.config import config
    from mysql_demo.services.session import run_session
    outcome = run_session(config)
    print(outcome.state, outcome.oldest)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Set, Tuple

from ..config import Config, config as default_config
from ..config.queries import queries
from ..infra.db import Db, connect
from .records import Record, SEED_RECORDS


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    TABLE_ENSURED = "table_ensured"
    DATA_INSERTED = "data_inserted"
    QUERIED = "queried"
    DROPPED = "dropped"
    DONE = "done"
    FAILED = "failed"


class SessionError(RuntimeError):
    """Base class for a failed session stage."""

    message = "Session stage failed"

    def __init__(self, detail: str = "") -> None:
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


class ConnectionFailure(SessionError):
    message = "Could not connect to the database"


class SchemaError(SessionError):
    message = "Could not create the table"


class InsertError(SessionError):
    message = "Could not insert into the table"


class QueryError(SessionError):
    message = "Could not query the table"


class DropError(SessionError):
    message = "Could not drop the table"


def open_session(cfg: Config, connector: Callable[[Config], Db] = connect) -> Db:
    """Open the session's single connection."""
    try:
        return connector(cfg)
    except Exception as err:
        raise ConnectionFailure(f"{cfg.DB_HOST}:{cfg.DB_PORT}/{cfg.DB_NAME}") from err


def ensure_table(db: Db, table_name: str) -> bool:
    """Create ``table_name`` unless the catalog already lists it.

    Returns:
        ``True`` if a ``CREATE TABLE`` was issued, ``False`` if the table
        was already there.
    """
    try:
        if db.table_exists(table_name):
            logging.info("[session] table already exists", extra={"table": table_name})
            return False
        db.execute(queries['createTable'](table_name))
    except Exception as err:
        raise SchemaError(table_name) from err
    return True


def has_record(db: Db, table_name: str, name: str) -> bool:
    rows = db.query(queries['hasRecord'](table_name), (name,))['rows']
    return bool(rows)


def insert_missing(db: Db, table_name: str, records: Iterable[Record]) -> int:
    """Insert every record whose name is not stored yet.

    Existing names are left untouched, and when ``records`` repeats a
    name only its first occurrence is queued.  The remaining rows are
    sent as one batch; nothing is sent when every name already exists.
    Rows written before a failure stay written.

    Returns:
        The number of rows inserted.
    """
    try:
        batch: List[Tuple[str, int]] = []
        queued: Set[str] = set()
        for record in records:
            if record.name in queued:
                logging.info("[session] skipping repeated record", extra={"record": record.name})
                continue
            if has_record(db, table_name, record.name):
                logging.info("[session] skipping existing record", extra={"record": record.name})
                continue
            queued.add(record.name)
            batch.append((record.name, record.age))
        return db.execute_batch(queries['insertRecord'](table_name), batch)
    except Exception as err:
        raise InsertError(table_name) from err


def query_oldest(db: Db, table_name: str) -> Iterator[str]:
    """Yield the name of every person sharing the maximum age.

    The query runs when the first name is requested.  An empty table
    yields nothing.
    """
    try:
        for row in db.iter_query(queries['oldest'](table_name)):
            yield row['NAME']
    except Exception as err:
        raise QueryError(table_name) from err


def drop_table(db: Db, table_name: str) -> None:
    """Drop ``table_name``.  Fails if the table does not exist."""
    try:
        db.execute(queries['dropTable'](table_name))
    except Exception as err:
        raise DropError(table_name) from err


@dataclass
class SessionOutcome:
    """What a ``run_session`` call did and where it stopped."""

    state: SessionState = SessionState.DISCONNECTED
    created: bool = False
    inserted: int = 0
    oldest: List[str] = field(default_factory=list)
    error: Optional[SessionError] = None

    @property
    def ok(self) -> bool:
        return self.state is SessionState.DONE


def _fail(outcome: SessionOutcome, err: SessionError) -> SessionOutcome:
    logging.error('ERROR: %s', err, exc_info=err)
    outcome.error = err
    outcome.state = SessionState.FAILED
    return outcome


def run_session(
    cfg: Optional[Config] = None,
    records: Iterable[Record] = SEED_RECORDS,
    connector: Callable[[Config], Db] = connect,
) -> SessionOutcome:
    """Run the whole walkthrough once.

    Stages run in order and the first failure ends the session in
    ``SessionState.FAILED``; later stages are skipped.  The connection
    is closed on every exit path.  Matching names are printed to stdout
    as ``Name: <name>``.

    Args:
        cfg: Connection settings; the module-level ``config`` when omitted.
        records: Rows to insert when their name is missing.
        connector: Callable opening a ``Db`` from ``cfg``.

    Returns:
        The ``SessionOutcome`` describing how far the session got.
    """
    cfg = cfg or default_config
    table = cfg.DB_TABLE
    outcome = SessionOutcome()

    try:
        db = open_session(cfg, connector)
    except ConnectionFailure as err:
        return _fail(outcome, err)
    outcome.state = SessionState.CONNECTED
    logging.info('Connected to database', extra={"driver": db.driver})

    try:
        outcome.created = ensure_table(db, table)
        if outcome.created:
            logging.info('Created a table', extra={"table": table})
        outcome.state = SessionState.TABLE_ENSURED

        outcome.inserted = insert_missing(db, table, records)
        logging.info('Inserted into the table', extra={"table": table, "count": outcome.inserted})
        outcome.state = SessionState.DATA_INSERTED

        logging.info(queries['oldest'](table))
        for name in query_oldest(db, table):
            outcome.oldest.append(name)
            print(f"Name: {name}")
        logging.info('Queried the table', extra={"table": table, "count": len(outcome.oldest)})
        outcome.state = SessionState.QUERIED

        drop_table(db, table)
        logging.info('Dropped the table', extra={"table": table})
        outcome.state = SessionState.DROPPED
    except SessionError as err:
        return _fail(outcome, err)
    finally:
        db.close()

    outcome.state = SessionState.DONE
    return outcome
