"""In-memory table registry: one independently owned Table per id."""

import logging
from uuid import uuid4

from blackjack.game.table import Table
from config import config

logger = logging.getLogger(__name__)


class TableNotFoundError(LookupError):
    """No table is registered under the id."""

    def __init__(self, table_id: str) -> None:
        super().__init__(f"Table {table_id} not found")
        self.table_id = table_id


class TableLimitError(RuntimeError):
    """The registry is full."""


class TableRegistry:
    """Holds open tables; tables never share engines, shoes or ledgers."""

    def __init__(self, max_tables: int | None = None) -> None:
        self._tables: dict[str, Table] = {}
        self._max_tables = config.max_tables if max_tables is None else max_tables

    def add(self, table: Table) -> str:
        if len(self._tables) >= self._max_tables:
            raise TableLimitError(f"At most {self._max_tables} tables can be open")
        table_id = str(uuid4())
        self._tables[table_id] = table
        logger.info("Opened table %s with %d player(s)", table_id, len(table.players))
        return table_id

    def get(self, table_id: str) -> Table:
        try:
            return self._tables[table_id]
        except KeyError:
            raise TableNotFoundError(table_id) from None

    def remove(self, table_id: str) -> None:
        if self._tables.pop(table_id, None) is None:
            raise TableNotFoundError(table_id)
        logger.info("Closed table %s", table_id)

    def __len__(self) -> int:
        return len(self._tables)


# Global registry instance
_registry: TableRegistry | None = None


def get_registry() -> TableRegistry:
    """Get or create the table registry."""
    global _registry
    if _registry is None:
        _registry = TableRegistry()
    return _registry
