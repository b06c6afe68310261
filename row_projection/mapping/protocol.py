"""Mapper protocol.

Anything that turns query rows into objects. ProjectionExpression
implements it; repositories hand it to the engine collaborator.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, TypeVar

T = TypeVar("T")


class Mapper(Protocol[T]):
    """Base mapper protocol."""

    def map_one(self, row: Mapping[str, Any]) -> T:
        """Map a single row to a target object."""
        ...

    def map_many(self, rows: list[Mapping[str, Any]]) -> list[T]:
        """Map multiple rows to a list of target objects."""
        ...
