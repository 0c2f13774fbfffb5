# apps/tracking/repositories/base.py
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

Row = Dict[str, Any]


class StoreError(Exception):
    """A tabular store call failed (transport error or non-2xx answer)."""


class TabularStore(ABC):
    """
    Row-oriented store addressed by table name.

    Rows are plain dicts carrying an ``id``. The interface has no query
    parameters and no uniqueness constraints; ``find_one`` is a linear scan
    over ``list_all``. Stores that can bump a counter server-side advertise
    it with ``supports_atomic_increment`` and implement ``increment``.
    """

    supports_atomic_increment = False

    @abstractmethod
    def list_all(self, table: str) -> List[Row]:
        pass

    def find_one(self, table: str, predicate: Callable[[Row], bool]) -> Optional[Row]:
        for row in self.list_all(table):
            if predicate(row):
                return row
        return None

    @abstractmethod
    def update_fields(self, table: str, row_id: Any, fields: Row) -> Row:
        pass

    @abstractmethod
    def create(self, table: str, fields: Row) -> Row:
        pass

    def increment(self, table: str, row_id: Any, field: str, amount: int = 1) -> Row:
        raise NotImplementedError(f"{type(self).__name__} has no atomic increment")
