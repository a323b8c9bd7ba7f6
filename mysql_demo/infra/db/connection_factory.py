"""
Database connection factory.

Connections are created lazily by alias.  ``default`` honours
``Config.DB_DRIVER``; ``mysql`` and ``odbc`` force PyMySQL and pyodbc
respectively.  See ``mysql_demo.config.env.Config`` for configuration
variables.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Optional

from ...config import Config, config
from .mysql import connect, Db


# Registry mapping aliases to callables that return a ``Db`` instance.
_registry: Dict[str, Callable[[Config], Db]] = {
    'default': connect,
    'mysql': lambda cfg: connect(replace(cfg, DB_DRIVER='pymysql')),
    'odbc': lambda cfg: connect(replace(cfg, DB_DRIVER='pyodbc')),
}


def get_connection(alias: str = 'default', cfg: Optional[Config] = None) -> Db:
    """Obtain a new database connection by alias.

    Args:
        alias: One of ``'default'``, ``'mysql'`` or ``'odbc'``.
        cfg: Settings to connect with; the module-level ``config`` when omitted.

    Returns:
        A new ``Db`` instance.

    Raises:
        KeyError: If the alias is not registered.
    """
    try:
        factory = _registry[alias]
    except KeyError:
        raise KeyError(f"No connection defined for alias: {alias}") from None
    return factory(cfg or config)
