"""Introspection layer - constructor and field metadata of target types."""

from __future__ import annotations

from row_projection.introspection.memory import (
    DeclaredConstructor,
    DeclaredType,
    InMemoryIntrospector,
)
from row_projection.introspection.model import ConstructorInfo, FieldInfo
from row_projection.introspection.protocol import TypeIntrospector
from row_projection.introspection.reflection import ReflectionIntrospector

__all__ = [
    "TypeIntrospector",
    "ReflectionIntrospector",
    "InMemoryIntrospector",
    "DeclaredType",
    "DeclaredConstructor",
    "ConstructorInfo",
    "FieldInfo",
]
