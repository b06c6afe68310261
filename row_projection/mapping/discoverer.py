"""Preferred constructor discovery.

Finds the single constructor used to build instances of a type from rows:

1. A non-synthetic constructor marked ``@persistence_creator`` wins
   (first one in declaration order).
2. Canonical shapes (dataclasses, Pydantic models, NamedTuples) use their
   primary constructor. A canonical type without one is treated as plain.
3. Plain classes use the constructor with the most parameters, ties going
   to the one declared first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from row_projection.core.annotations import DEFAULT_PREDICATES, AnnotationPredicates
from row_projection.core.exceptions import NoUsableConstructorError
from row_projection.introspection.model import ConstructorInfo
from row_projection.introspection.protocol import TypeIntrospector
from row_projection.introspection.reflection import ReflectionIntrospector

logger = logging.getLogger(__name__)


class ClassShape(Enum):
    """Constructor convention a type follows."""

    PLAIN = "plain"
    CANONICAL = "canonical"


@dataclass(frozen=True)
class ConstructorParameter:
    """A formal parameter of the preferred constructor."""

    name: str | None
    type: Any
    annotations: tuple[Any, ...] = ()


@dataclass(frozen=True)
class PreferredConstructor:
    """The selected constructor with its resolved parameters."""

    constructor: ConstructorInfo
    parameters: tuple[ConstructorParameter, ...] = ()

    @property
    def target_type(self) -> type:
        return self.constructor.declaring_type

    @property
    def is_no_arg(self) -> bool:
        return not self.parameters

    def new_instance(self, *args: Any) -> Any:
        """Build an instance from positional arguments in parameter order."""
        return self.constructor.factory(*args)


class ConstructorDiscoverer:
    """Selects the preferred constructor of a type.

    Args:
        introspector: Source of constructor and field metadata.
        predicates: Marker predicates; only ``is_designated_creator`` is used.
    """

    def __init__(
        self,
        introspector: TypeIntrospector | None = None,
        predicates: AnnotationPredicates | None = None,
    ) -> None:
        self._introspector = introspector or ReflectionIntrospector()
        self._predicates = predicates or DEFAULT_PREDICATES

    def shape_of(self, target: type) -> ClassShape:
        if self._introspector.is_canonical_shape(target):
            return ClassShape.CANONICAL
        return ClassShape.PLAIN

    def discover(self, target: type) -> PreferredConstructor | None:
        """Return the preferred constructor, or None if the type has none usable."""
        candidates = [c for c in self._introspector.constructors(target) if not c.synthetic]

        selected = next(
            (c for c in candidates if self._predicates.is_designated_creator(c)),
            None,
        )
        if selected is None:
            selected = self._select_by_shape(target, candidates)

        if selected is None:
            logger.debug("No usable constructor for %s", target)
            return None

        logger.debug(
            "Selected constructor %s of %s with %d parameters",
            selected.name,
            target,
            selected.parameter_count,
        )
        return self._build(selected)

    def _select_by_shape(
        self, target: type, candidates: list[ConstructorInfo]
    ) -> ConstructorInfo | None:
        if self.shape_of(target) is ClassShape.CANONICAL and (
            self._introspector.has_primary_constructor(target)
        ):
            # A primary constructor without concrete backing is not-found
            return self._introspector.primary_constructor(target)
        return self._widest(candidates)

    @staticmethod
    def _widest(candidates: list[ConstructorInfo]) -> ConstructorInfo | None:
        if not candidates:
            return None
        # max() keeps the first of equal maxima
        return max(candidates, key=lambda c: c.parameter_count)

    def _build(self, constructor: ConstructorInfo) -> PreferredConstructor:
        if constructor.parameter_count == 0:
            return PreferredConstructor(constructor=constructor)

        types = self._introspector.parameter_types(constructor)
        names = self._introspector.parameter_names(constructor)
        annotations = self._introspector.parameter_annotations(constructor)

        parameters = []
        for i, type_ in enumerate(types):
            name = None if names is None or len(names) <= i else names[i]
            markers = annotations[i] if i < len(annotations) else ()
            parameters.append(ConstructorParameter(name=name, type=type_, annotations=markers))

        return PreferredConstructor(constructor=constructor, parameters=tuple(parameters))


def discover_preferred_constructor(
    target: type,
    introspector: TypeIntrospector | None = None,
    predicates: AnnotationPredicates | None = None,
) -> PreferredConstructor:
    """Discover the preferred constructor of ``target``.

    Raises:
        NoUsableConstructorError: If the type declares no usable constructor.
    """
    preferred = ConstructorDiscoverer(introspector, predicates).discover(target)
    if preferred is None:
        raise NoUsableConstructorError(target)
    return preferred
