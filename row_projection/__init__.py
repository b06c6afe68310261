"""RowProjection - constructor discovery and row projection for typed domain objects."""

from __future__ import annotations

from row_projection.core.annotations import (
    DEFAULT_PREDICATES,
    AnnotationPredicates,
    Embedded,
    MappedCollection,
    PersistenceCreator,
    constructor,
    persistence_creator,
)
from row_projection.core.exceptions import (
    ColumnCollisionError,
    ColumnMismatchError,
    ConfigurationError,
    DuplicateColumnError,
    EmbeddingCycleError,
    MappingError,
    MissingGeneratedPathTypeError,
    MissingPathSingletonFieldError,
    NoUsableConstructorError,
    PathResolutionError,
    RowProjectionError,
    UnresolvableEntityTypeError,
    UnresolvableParameterError,
)
from row_projection.core.path import Column, RelationalPath
from row_projection.core.settings import ProjectionSettings
from row_projection.introspection import (
    DeclaredConstructor,
    DeclaredType,
    InMemoryIntrospector,
    ReflectionIntrospector,
    TypeIntrospector,
)
from row_projection.mapping import (
    ClassShape,
    ColumnReference,
    ConstructorDiscoverer,
    NullPlaceholder,
    PreferredConstructor,
    ProjectionBuilder,
    ProjectionExpression,
    build_constructor_projection,
    discover_preferred_constructor,
)
from row_projection.repository import QueryPathResolver, Repository

__all__ = [
    # Markers
    "Embedded",
    "MappedCollection",
    "PersistenceCreator",
    "constructor",
    "persistence_creator",
    "AnnotationPredicates",
    "DEFAULT_PREDICATES",
    # Paths
    "Column",
    "RelationalPath",
    "QueryPathResolver",
    # Settings
    "ProjectionSettings",
    # Introspection
    "TypeIntrospector",
    "ReflectionIntrospector",
    "InMemoryIntrospector",
    "DeclaredType",
    "DeclaredConstructor",
    # Discovery
    "ConstructorDiscoverer",
    "ClassShape",
    "PreferredConstructor",
    "discover_preferred_constructor",
    # Projection
    "ProjectionBuilder",
    "ProjectionExpression",
    "ColumnReference",
    "NullPlaceholder",
    "build_constructor_projection",
    # Repository
    "Repository",
    # Exceptions
    "RowProjectionError",
    "ConfigurationError",
    "NoUsableConstructorError",
    "UnresolvableParameterError",
    "EmbeddingCycleError",
    "ColumnCollisionError",
    "DuplicateColumnError",
    "PathResolutionError",
    "UnresolvableEntityTypeError",
    "MissingGeneratedPathTypeError",
    "MissingPathSingletonFieldError",
    "MappingError",
    "ColumnMismatchError",
]
