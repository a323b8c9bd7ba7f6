"""
People stored in the demo table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Record:
    """One row of the demo table; ``name`` is the primary key."""

    name: str
    age: int


# Insertion order carries no meaning.
SEED_RECORDS: Tuple[Record, ...] = (
    Record("Tom", 36),
    Record("Jerry", 32),
    Record("Tony", 40),
    Record("Steve", 35),
)
