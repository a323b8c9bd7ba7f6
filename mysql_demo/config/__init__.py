"""
Expose the loaded configuration as ``config``.

Importing from this module will load environment variables and
populate a singleton ``Config`` instance. Example:

    from mysql_demo.config import config
    print(config.DB_HOST, config.DB_PORT)
"""

from .env import config, Config, load_config  # noqa: F401
