"""Mapping layer - constructor discovery and projection expressions."""

from __future__ import annotations

from row_projection.mapping.discoverer import (
    ClassShape,
    ConstructorDiscoverer,
    ConstructorParameter,
    PreferredConstructor,
    discover_preferred_constructor,
)
from row_projection.mapping.factory import ProjectionBuilder, build_constructor_projection
from row_projection.mapping.projection import (
    ColumnReference,
    NullPlaceholder,
    ProjectionArgument,
    ProjectionExpression,
)
from row_projection.mapping.protocol import Mapper

__all__ = [
    "ConstructorDiscoverer",
    "ClassShape",
    "PreferredConstructor",
    "ConstructorParameter",
    "discover_preferred_constructor",
    "ProjectionBuilder",
    "build_constructor_projection",
    "ProjectionExpression",
    "ProjectionArgument",
    "ColumnReference",
    "NullPlaceholder",
    "Mapper",
]
