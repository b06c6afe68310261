"""In-memory type metadata.

Declares constructor and field metadata explicitly instead of reading it
from the runtime, e.g. for types whose parameter names are not available
or for metadata loaded from elsewhere::

    introspector = InMemoryIntrospector([
        DeclaredType(
            target=Money,
            constructors=(
                DeclaredConstructor(
                    factory=Money,
                    parameter_types=(int, str),
                    parameter_names=("amount_minor", "currency"),
                ),
            ),
        ),
    ])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from row_projection.introspection.model import ConstructorInfo, FieldInfo


@dataclass(frozen=True)
class DeclaredConstructor:
    """Constructor metadata. ``parameter_names=None`` means names were stripped."""

    factory: Callable[..., Any]
    parameter_types: tuple[Any, ...] = ()
    parameter_names: tuple[str, ...] | None = None
    parameter_annotations: tuple[tuple[Any, ...], ...] = ()
    annotations: tuple[Any, ...] = ()
    synthetic: bool = False
    name: str = "__init__"


@dataclass(frozen=True)
class DeclaredType:
    """Type metadata.

    For canonical shapes, ``primary`` is the index of the primary constructor
    in ``constructors``; ``primary_backed=False`` declares a primary
    constructor without a concrete backing constructor.
    """

    target: type
    constructors: tuple[DeclaredConstructor, ...] = ()
    fields: tuple[FieldInfo, ...] = ()
    canonical: bool = False
    primary: int | None = None
    primary_backed: bool = True


class InMemoryIntrospector:
    """TypeIntrospector over explicitly declared metadata.

    Types that were not declared have no constructors and no fields.
    """

    def __init__(self, declared: Iterable[DeclaredType] = ()) -> None:
        self._types: dict[type, DeclaredType] = {}
        for declared_type in declared:
            self.register(declared_type)

    def register(self, declared_type: DeclaredType) -> None:
        self._types[declared_type.target] = declared_type

    def constructors(self, target: type) -> list[ConstructorInfo]:
        declared = self._types.get(target)
        if declared is None:
            return []
        return [self._info(target, c) for c in declared.constructors]

    def fields(self, target: type) -> list[FieldInfo]:
        declared = self._types.get(target)
        return list(declared.fields) if declared is not None else []

    def is_canonical_shape(self, target: type) -> bool:
        declared = self._types.get(target)
        return declared is not None and declared.canonical

    def has_primary_constructor(self, target: type) -> bool:
        declared = self._types.get(target)
        return declared is not None and declared.canonical and declared.primary is not None

    def primary_constructor(self, target: type) -> ConstructorInfo | None:
        if not self.has_primary_constructor(target):
            return None
        declared = self._types[target]
        if not declared.primary_backed:
            return None
        return self._info(target, declared.constructors[declared.primary])  # type: ignore[index]

    def parameter_types(self, constructor: ConstructorInfo) -> list[Any]:
        return list(constructor.handle.parameter_types)

    def parameter_names(self, constructor: ConstructorInfo) -> list[str] | None:
        names = constructor.handle.parameter_names
        return list(names) if names is not None else None

    def parameter_annotations(self, constructor: ConstructorInfo) -> list[tuple[Any, ...]]:
        return [tuple(a) for a in constructor.handle.parameter_annotations]

    @staticmethod
    def _info(target: type, declared: DeclaredConstructor) -> ConstructorInfo:
        return ConstructorInfo(
            declaring_type=target,
            name=declared.name,
            parameter_count=len(declared.parameter_types),
            factory=declared.factory,
            synthetic=declared.synthetic,
            annotations=declared.annotations,
            handle=declared,
        )
