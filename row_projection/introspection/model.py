"""Introspected constructor and field metadata.

Frozen dataclasses produced by a TypeIntrospector and consumed by the
constructor discoverer and projection builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(frozen=True)
class ConstructorInfo:
    """One declared way of building instances of ``declaring_type``.

    ``factory`` takes the constructor's parameters positionally and returns
    the new instance. ``handle`` is opaque to everything but the introspector
    that produced it.
    """

    declaring_type: type
    name: str
    parameter_count: int
    factory: Callable[..., Any] = field(compare=False, repr=False)
    synthetic: bool = False
    annotations: tuple[Any, ...] = ()
    handle: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class FieldInfo:
    """A declared field and the markers attached to it."""

    name: str
    type: Any
    annotations: tuple[Any, ...] = ()
