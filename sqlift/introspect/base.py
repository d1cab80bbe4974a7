"""
Introspection contract.

An introspector reads a live database catalog and returns a
:class:`~sqlift.schema.Schema`. Each supported database engine provides one
implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Collection, Iterable, List, Optional

from ..schema import Schema


@dataclass(frozen=True)
class TableFilter:
    """
    Table name filter applied before any per-table catalog query.

    ``include`` keeps only the listed tables; ``exclude`` removes the listed
    tables even if they are included. ``None`` disables either list.
    """

    include: Optional[Collection[str]] = None
    exclude: Optional[Collection[str]] = None

    def should_include(self, table_name: str) -> bool:
        """Check if a table passes the filter."""
        if self.include is not None and table_name not in self.include:
            return False
        if self.exclude is not None and table_name in self.exclude:
            return False
        return True

    def apply(self, table_names: Iterable[str]) -> List[str]:
        """Return the names that pass the filter, keeping their order."""
        return [name for name in table_names if self.should_include(name)]

    @property
    def is_active(self) -> bool:
        return self.include is not None or self.exclude is not None


class Introspector(ABC):
    """Abstract base class for database introspectors."""

    @property
    @abstractmethod
    def database_name(self) -> str:
        """Return the engine name (e.g. 'postgres')."""
        pass

    @abstractmethod
    def introspect(
        self, schema_name: str, table_filter: Optional[TableFilter] = None
    ) -> Schema:
        """
        Introspect a database schema.

        Implementations must apply ``table_filter`` to the table names before
        querying columns or keys of individual tables, and must keep enum
        values in the order the database declares them.

        Args:
            schema_name: Namespace to read (e.g. 'public')
            table_filter: Optional table filter

        Returns:
            Populated Schema

        Raises:
            IntrospectionError: If any catalog query fails
        """
        pass
