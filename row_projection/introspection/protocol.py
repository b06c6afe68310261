"""Type introspector protocol.

The discoverer and builder only see types through this interface, so they
run unchanged against runtime reflection or an in-memory metadata store.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_projection.introspection.model import ConstructorInfo, FieldInfo


@runtime_checkable
class TypeIntrospector(Protocol):
    """Read-only access to constructor and field metadata of a type."""

    def constructors(self, target: type) -> list[ConstructorInfo]:
        """Declared constructors in declaration order."""
        ...

    def fields(self, target: type) -> list[FieldInfo]:
        """Declared fields, inherited ones included."""
        ...

    def is_canonical_shape(self, target: type) -> bool:
        """Whether the type follows a canonical-primary-constructor convention."""
        ...

    def has_primary_constructor(self, target: type) -> bool:
        """Whether a canonical-shape type declares its primary constructor."""
        ...

    def primary_constructor(self, target: type) -> ConstructorInfo | None:
        """Concrete constructor backing the primary constructor, if any."""
        ...

    def parameter_types(self, constructor: ConstructorInfo) -> list[Any]:
        """Declared parameter types in order."""
        ...

    def parameter_names(self, constructor: ConstructorInfo) -> list[str] | None:
        """Parameter names in order, or None when they cannot be recovered."""
        ...

    def parameter_annotations(self, constructor: ConstructorInfo) -> list[tuple[Any, ...]]:
        """Markers attached to each parameter, in order."""
        ...
