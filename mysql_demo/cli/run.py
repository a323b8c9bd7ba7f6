"""
Run the full demo session from the command line.

Connects with the configured settings, ensures the demo table exists,
inserts the seed people, prints the oldest and drops the table.  The
optional ``--env-file`` argument loads settings from a specific
``.env`` file and ``--table`` overrides the table name.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from ..config import load_config
from ..services.session import run_session


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Run the MySQL connectivity demo')
    parser.add_argument('--env-file', type=str, help='Path to a .env file with DB_* settings')
    parser.add_argument('--table', type=str, help='Name of the demo table (overrides DB_TABLE)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        cfg = load_config(args.env_file)
        if args.table:
            cfg = replace(cfg, DB_TABLE=args.table)
    except ValueError as err:
        logging.error('[cli/run] Invalid configuration', exc_info=err)
        return 2
    logging.info('[cli/run] Parsed arguments', extra={'env_file': args.env_file, 'table': cfg.DB_TABLE})
    outcome = run_session(cfg)
    return 0 if outcome.ok else 1


if __name__ == '__main__':
    try:
        sys.exit(main())
    except Exception as err:
        logging.error('Error executing cli/run', exc_info=err)
        sys.exit(2)
