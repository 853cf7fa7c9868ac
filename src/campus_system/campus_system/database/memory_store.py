from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator

TABLES = (
    "users",
    "students",
    "teachers",
    "subjects",
    "semesters",
    "attendance",
    "qr_sessions",
    "fee_types",
    "fee_records",
    "leave_applications",
    "notifications",
    "marks",
)

Table = Dict[str, Any]


class InMemoryStore:
    """Process-local table store.

    Each table maps an entity id to a frozen dataclass. One re-entrant lock guards
    every table, so a single repository call is atomic. Build one store per
    container; tests build their own.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._tables: Dict[str, Table] = {name: {} for name in TABLES}

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def table_sizes(self) -> Dict[str, int]:
        with self._lock:
            return {name: len(rows) for name, rows in self._tables.items()}


@contextmanager
def db_tables(store: InMemoryStore) -> Iterator[Dict[str, Table]]:
    """Hold the store lock for the duration of the block and yield the tables."""
    with store.lock:
        yield store._tables
