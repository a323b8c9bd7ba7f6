"""
Environment configuration loader.

Connection settings are read from the environment (and from a ``.env``
file, if present) and exposed via a simple ``Config`` class.  Every
variable is optional; the defaults describe a local MySQL install with
the stock ``test`` database and a ``root``/``root`` account.

Supported variables:

* ``DB_DRIVER`` – ``pymysql`` (default), ``pyodbc``, ``auto`` or ``sqlite``.
* ``DB_HOST`` – server host name (default ``'localhost'``).
* ``DB_PORT`` – server port (default ``3306``).
* ``DB_NAME`` – database name, or the file path for ``sqlite`` (default ``'test'``).
* ``DB_USER`` – account name (default ``'root'``).
* ``DB_PASSWORD`` – account password (default ``'root'``).
* ``DB_USE_SSL`` – ``true``/``false``, encrypt the transport (default ``false``).
* ``DB_TABLE`` – name of the demo table (default ``'JDBC_TEST'``).

The resulting ``config`` instance can be imported from
``mysql_demo.config``.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv
load_dotenv()

DRIVERS = ("pymysql", "pyodbc", "auto", "sqlite")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,63}$")


@dataclass
class Config:
    """Holds connection settings for a demo session."""

    DB_DRIVER: str = "pymysql"
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_NAME: str = "test"
    DB_USER: str = "root"
    DB_PASSWORD: str = "root"
    DB_USE_SSL: bool = False
    DB_TABLE: str = "JDBC_TEST"

    def __post_init__(self) -> None:
        if self.DB_DRIVER not in DRIVERS:
            raise ValueError(f"Unsupported DB_DRIVER {self.DB_DRIVER!r}; expected one of {', '.join(DRIVERS)}")
        # The table name is interpolated into SQL text, so only plain identifiers are accepted
        if not _IDENTIFIER.match(self.DB_TABLE or ""):
            raise ValueError(f"DB_TABLE {self.DB_TABLE!r} is not a valid table identifier")
        if not 0 < int(self.DB_PORT) < 65536:
            raise ValueError(f"DB_PORT {self.DB_PORT} is out of range")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("true", "yes", "1", "on"):
        return True
    if value in ("false", "no", "0", "off", ""):
        return False
    raise ValueError(f"Environment variable {name} must be a boolean, got {raw!r}")


def _load_env() -> Config:
    """Load configuration from environment variables.

    Raises:
        ValueError: If a variable is present but cannot be parsed.

    Returns:
        Config: A populated configuration dataclass.
    """
    defaults = Config()

    port_raw = os.environ.get("DB_PORT")
    try:
        port = int(port_raw) if port_raw else defaults.DB_PORT
    except ValueError:
        raise ValueError(f"Environment variable DB_PORT must be an integer, got {port_raw!r}") from None

    ssl_raw = os.environ.get("DB_USE_SSL")
    use_ssl = _parse_bool("DB_USE_SSL", ssl_raw) if ssl_raw is not None else defaults.DB_USE_SSL

    return Config(
        DB_DRIVER=os.environ.get("DB_DRIVER", defaults.DB_DRIVER).strip().lower(),
        DB_HOST=os.environ.get("DB_HOST", defaults.DB_HOST),
        DB_PORT=port,
        DB_NAME=os.environ.get("DB_NAME", defaults.DB_NAME),
        DB_USER=os.environ.get("DB_USER", defaults.DB_USER),
        DB_PASSWORD=os.environ.get("DB_PASSWORD", defaults.DB_PASSWORD),
        DB_USE_SSL=use_ssl,
        DB_TABLE=os.environ.get("DB_TABLE", defaults.DB_TABLE),
    )


def load_config(env_file: Optional[str] = None) -> Config:
    """Re-read the environment, optionally loading ``env_file`` first.

    Values from ``env_file`` override variables already set in the
    process environment.
    """
    if env_file:
        if not os.path.isfile(env_file):
            raise ValueError(f"Env file not found: {env_file}")
        load_dotenv(env_file, override=True)
    return _load_env()


# Create a single configuration instance when this module is imported.
config: Config = _load_env()
