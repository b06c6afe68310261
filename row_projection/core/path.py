"""Relational path descriptors.

A RelationalPath names the columns a query exposes for one entity. Path
holder classes publish a singleton instance by convention::

    class QMoney:
        money = RelationalPath.of("money", "amount_minor", "currency")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from row_projection.core.exceptions import DuplicateColumnError


@dataclass(frozen=True)
class Column:
    """A named column expression."""

    name: str
    type: Any = Any
    table: str | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.table}.{self.name}" if self.table else self.name


@dataclass(frozen=True)
class RelationalPath:
    """Column set of a table or view, in declaration order."""

    table: str
    columns: tuple[Column, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        seen: set[str] = set()
        for column in self.columns:
            if column.name in seen:
                raise DuplicateColumnError(self.table, column.name)
            seen.add(column.name)

    @classmethod
    def of(cls, table: str, *columns: str | Column) -> RelationalPath:
        """Build a path from column names or Column instances."""
        return cls(
            table=table,
            columns=tuple(
                c if isinstance(c, Column) else Column(name=c, table=table) for c in columns
            ),
        )

    def column_map(self) -> dict[str, Column]:
        """Column name to column, freshly built per call."""
        return {column.name: column for column in self.columns}

    def __getitem__(self, name: str) -> Column:
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(name)

    def __len__(self) -> int:
        return len(self.columns)
