# apps/tracking/repositories/memory.py
import copy
import threading
from typing import Any, Dict, List, Optional

from .base import Row, StoreError, TabularStore


class InMemoryTabularStore(TabularStore):
    """
    Process-local stand-in for the spreadsheet.

    Each primitive is individually thread-safe and returns copies, so callers
    doing read-modify-write see exactly the lost-update window a remote store
    has. With ``atomic_increment=True`` the store also offers ``increment``.
    """

    def __init__(self, tables: Optional[Dict[str, List[Row]]] = None, atomic_increment: bool = False):
        self._lock = threading.Lock()
        self._tables: Dict[str, List[Row]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self.supports_atomic_increment = atomic_increment

    def list_all(self, table: str) -> List[Row]:
        with self._lock:
            return copy.deepcopy(self._tables.get(table, []))

    def update_fields(self, table: str, row_id: Any, fields: Row) -> Row:
        with self._lock:
            row = self._get(table, row_id)
            row.update(fields)
            return dict(row)

    def create(self, table: str, fields: Row) -> Row:
        with self._lock:
            rows = self._tables.setdefault(table, [])
            # row 1 of a sheet is its header, so data rows start at 2
            next_id = max((row.get("id", 0) for row in rows), default=1) + 1
            row = {**fields, "id": next_id}
            rows.append(row)
            return dict(row)

    def increment(self, table: str, row_id: Any, field: str, amount: int = 1) -> Row:
        if not self.supports_atomic_increment:
            return super().increment(table, row_id, field, amount)
        with self._lock:
            row = self._get(table, row_id)
            row[field] = int(row.get(field) or 0) + amount
            return dict(row)

    def _get(self, table: str, row_id: Any) -> Row:
        for row in self._tables.get(table, []):
            if row.get("id") == row_id:
                return row
        raise StoreError(f"No row {row_id} in {table}")
