"""Persistence markers and the predicates that read them.

Fields are marked with ``typing.Annotated``::

    @dataclass(frozen=True)
    class Order:
        id: int
        ship_to: Annotated[Address, Embedded()]
        items: Annotated[list[Item], MappedCollection()]

Constructors are marked with decorators. ``@constructor`` declares a
classmethod as an alternate constructor, ``@persistence_creator`` designates
the constructor the persistence layer must use::

    class Money:
        def __init__(self, amount_minor: int, currency: str) -> None: ...

        @persistence_creator
        @constructor
        @classmethod
        def of(cls, amount_minor: int) -> Money: ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

_ANNOTATIONS_ATTR = "__persistence_annotations__"
_CONSTRUCTOR_ATTR = "__alternate_constructor__"


@dataclass(frozen=True)
class PersistenceCreator:
    """Designates the constructor used to build instances from rows."""


@dataclass(frozen=True)
class Embedded:
    """Field value is built from columns of the same row."""


@dataclass(frozen=True)
class MappedCollection:
    """Field value is loaded by a separate query, not from the row."""


def _function_of(member: Any) -> Any:
    if isinstance(member, (classmethod, staticmethod)):
        return member.__func__
    return member


def constructor(member: Any) -> Any:
    """Declare a classmethod as an alternate constructor."""
    setattr(_function_of(member), _CONSTRUCTOR_ATTR, True)
    return member


def persistence_creator(member: Any) -> Any:
    """Designate ``__init__`` or an alternate constructor as the persistence creator."""
    func = _function_of(member)
    setattr(func, _ANNOTATIONS_ATTR, (*annotations_of(func), PersistenceCreator()))
    if isinstance(member, classmethod):
        setattr(func, _CONSTRUCTOR_ATTR, True)
    return member


def annotations_of(member: Any) -> tuple[Any, ...]:
    """Markers attached to a constructor by decorators."""
    return tuple(getattr(_function_of(member), _ANNOTATIONS_ATTR, ()))


def is_alternate_constructor(member: Any) -> bool:
    return getattr(_function_of(member), _CONSTRUCTOR_ATTR, False) is True


def _has_marker(marker: type) -> Callable[[Any], bool]:
    def predicate(element: Any) -> bool:
        return any(isinstance(a, marker) for a in element.annotations)

    predicate.__name__ = f"has_{marker.__name__}"
    return predicate


@dataclass(frozen=True)
class AnnotationPredicates:
    """Capability object answering marker questions for constructors and fields.

    Each predicate receives an element exposing an ``annotations`` tuple
    (``ConstructorInfo`` or ``FieldInfo``).
    """

    is_designated_creator: Callable[[Any], bool] = _has_marker(PersistenceCreator)
    is_embedded: Callable[[Any], bool] = _has_marker(Embedded)
    is_externally_populated_collection: Callable[[Any], bool] = _has_marker(MappedCollection)


DEFAULT_PREDICATES = AnnotationPredicates()
