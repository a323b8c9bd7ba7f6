"""
Database abstractions for MySQL connections.

This subpackage defines a small wrapper around the ``PyMySQL`` or
``pyodbc`` drivers.  It exposes a ``connect`` function that returns an
object with ``query``, ``execute``, ``execute_batch``, ``table_exists``
and ``close`` methods.
"""

from .mysql import connect, Db  # noqa: F401
from .connection_factory import get_connection  # noqa: F401
