"""Projection expressions.

A ProjectionExpression is a reusable recipe binding each parameter of a
type's preferred constructor to an argument source:

- ColumnReference: the value of a column in the row
- ProjectionExpression: a nested object built from the same row
- NullPlaceholder: None, for values filled in by a separate query

It implements the Mapper protocol, so it can be handed to anything that
maps row dicts to objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, TypeVar, Union

from row_projection.core.exceptions import ColumnMismatchError
from row_projection.core.path import Column
from row_projection.mapping.discoverer import ConstructorParameter, PreferredConstructor

T = TypeVar("T")

_MISSING = object()


def _read(row: Mapping[str, Any], name: str) -> Any:
    # sqlite3.Row raises IndexError for unknown keys
    try:
        return row[name]
    except (KeyError, IndexError):
        return _MISSING


@dataclass(frozen=True)
class ColumnReference:
    """Reads one column of the row.

    ``owner`` names the type whose constructor receives the value; it is
    reported when the column is missing.
    """

    column: Column
    owner: str = field(default="", compare=False)

    def evaluate(self, row: Mapping[str, Any]) -> Any:
        value = _read(row, self.column.name)
        if value is _MISSING:
            target = self.owner or self.column.qualified_name
            raise ColumnMismatchError(target, [self.column.name])
        return value


@dataclass(frozen=True)
class NullPlaceholder:
    """Always None; typed after the parameter it stands in for."""

    type: Any

    def evaluate(self, row: Mapping[str, Any]) -> Any:
        return None


@dataclass(frozen=True)
class ProjectionArgument:
    """A constructor parameter paired with its argument source."""

    parameter: ConstructorParameter
    source: ArgumentSource


@dataclass(frozen=True)
class ProjectionExpression(Generic[T]):
    """Construction recipe for ``target_type`` from a query row."""

    target_type: type[T]
    constructor: PreferredConstructor
    arguments: tuple[ProjectionArgument, ...] = ()

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        return tuple(argument.parameter.type for argument in self.arguments)

    @property
    def sources(self) -> tuple[ArgumentSource, ...]:
        return tuple(argument.source for argument in self.arguments)

    def columns(self) -> tuple[Column, ...]:
        """Distinct columns read by this projection and nested ones, in argument order."""
        seen: dict[str, Column] = {}
        for source in self.sources:
            if isinstance(source, ColumnReference):
                seen.setdefault(source.column.name, source.column)
            elif isinstance(source, ProjectionExpression):
                for column in source.columns():
                    seen.setdefault(column.name, column)
        return tuple(seen.values())

    def evaluate(self, row: Mapping[str, Any]) -> T:
        """Build one instance from a row."""
        values = []
        missing = []
        for source in self.sources:
            if isinstance(source, ColumnReference):
                value = _read(row, source.column.name)
                if value is _MISSING:
                    missing.append(source.column.name)
                    continue
                values.append(value)
            else:
                values.append(source.evaluate(row))

        if missing:
            raise ColumnMismatchError(self.target_type.__name__, missing)
        return self.constructor.new_instance(*values)  # type: ignore[no-any-return]

    def map_one(self, row: Mapping[str, Any]) -> T:
        """Map a single row to a target_type instance."""
        return self.evaluate(row)

    def map_many(self, rows: list[Mapping[str, Any]]) -> list[T]:
        """Map all rows via map_one."""
        return [self.map_one(row) for row in rows]


ArgumentSource = Union[ColumnReference, ProjectionExpression, NullPlaceholder]
