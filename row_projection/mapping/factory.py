"""Projection expression builder.

Binds every parameter of a type's preferred constructor to an argument
source taken from a RelationalPath:

1. a column whose name equals the parameter name;
2. otherwise, if the same-named field is ``Embedded``, a nested projection
   built recursively for the field type against the same path;
3. otherwise, if the same-named field is a ``MappedCollection``, a null
   placeholder typed after the parameter;
4. otherwise the build fails with UnresolvableParameterError.

Embedded types share the root path: their column names must not collide
with columns used elsewhere unless the reuse is intended. Strict mode
rejects any column read by more than one parameter.
"""

from __future__ import annotations

import logging
import types
import typing
from typing import Any

from row_projection.core.annotations import DEFAULT_PREDICATES, AnnotationPredicates
from row_projection.core.exceptions import (
    ColumnCollisionError,
    EmbeddingCycleError,
    NoUsableConstructorError,
    UnresolvableParameterError,
)
from row_projection.core.path import Column, RelationalPath
from row_projection.core.settings import ProjectionSettings
from row_projection.introspection.model import FieldInfo
from row_projection.introspection.protocol import TypeIntrospector
from row_projection.introspection.reflection import ReflectionIntrospector
from row_projection.mapping.discoverer import (
    ConstructorDiscoverer,
    ConstructorParameter,
    PreferredConstructor,
)
from row_projection.mapping.projection import (
    ArgumentSource,
    ColumnReference,
    NullPlaceholder,
    ProjectionArgument,
    ProjectionExpression,
)

logger = logging.getLogger(__name__)


def _unwrap_optional(type_: Any) -> Any:
    """``X | None`` -> ``X``; anything else unchanged."""
    if typing.get_origin(type_) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(type_) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return type_


class ProjectionBuilder:
    """Builds ProjectionExpressions for target types.

    Args:
        introspector: Source of constructor and field metadata.
        predicates: Marker predicates for creators, embedded and collection fields.
        settings: Projection settings; ``strict`` enables the column collision check.
    """

    def __init__(
        self,
        introspector: TypeIntrospector | None = None,
        predicates: AnnotationPredicates | None = None,
        settings: ProjectionSettings | None = None,
    ) -> None:
        self._introspector = introspector or ReflectionIntrospector()
        self._predicates = predicates or DEFAULT_PREDICATES
        self._settings = settings or ProjectionSettings()
        self._discoverer = ConstructorDiscoverer(self._introspector, self._predicates)

    def build(self, target: type, path: RelationalPath) -> ProjectionExpression[Any]:
        """Build the projection of ``target`` over ``path``.

        Raises:
            NoUsableConstructorError: If ``target`` or an embedded type has no constructor.
            UnresolvableParameterError: If a parameter cannot be bound.
            EmbeddingCycleError: If embedded types embed themselves.
            ColumnCollisionError: In strict mode, if a column feeds several parameters.
        """
        expression = self._build(target, path, ())
        if self._settings.strict:
            _check_collisions(expression)
        return expression

    def _build(
        self, target: type, path: RelationalPath, lineage: tuple[type, ...]
    ) -> ProjectionExpression[Any]:
        if target in lineage:
            raise EmbeddingCycleError((*lineage, target))
        lineage = (*lineage, target)

        preferred = self._discoverer.discover(target)
        if preferred is None:
            raise NoUsableConstructorError(target)

        columns = path.column_map()
        fields = {f.name: f for f in self._introspector.fields(target)}
        embedded = self._embedded_projections(preferred, path, columns, fields, lineage)

        arguments = tuple(
            ProjectionArgument(
                parameter=parameter,
                source=self._source(target, parameter, position, columns, embedded, fields),
            )
            for position, parameter in enumerate(preferred.parameters)
        )

        logger.debug(
            "Built projection for %s over '%s' with %d arguments",
            target,
            path.table,
            len(arguments),
        )
        return ProjectionExpression(target_type=target, constructor=preferred, arguments=arguments)

    def _embedded_projections(
        self,
        preferred: PreferredConstructor,
        path: RelationalPath,
        columns: dict[str, Column],
        fields: dict[str, FieldInfo],
        lineage: tuple[type, ...],
    ) -> dict[str, ProjectionExpression[Any]]:
        """Nested projections for unmatched parameters named after embedded fields."""
        embedded: dict[str, ProjectionExpression[Any]] = {}
        for parameter in preferred.parameters:
            name = parameter.name
            if name is None or name in columns:
                continue
            field = fields.get(name)
            if field is not None and self._predicates.is_embedded(field):
                embedded[name] = self._build(_unwrap_optional(field.type), path, lineage)
        return embedded

    def _source(
        self,
        target: type,
        parameter: ConstructorParameter,
        position: int,
        columns: dict[str, Column],
        embedded: dict[str, ProjectionExpression[Any]],
        fields: dict[str, FieldInfo],
    ) -> ArgumentSource:
        name = parameter.name
        if name is None:
            raise UnresolvableParameterError(target, None, position)

        column = columns.get(name)
        if column is not None:
            return ColumnReference(column, owner=target.__name__)

        if name in embedded:
            return embedded[name]

        field = fields.get(name)
        if field is not None and self._predicates.is_externally_populated_collection(field):
            return NullPlaceholder(parameter.type)

        raise UnresolvableParameterError(target, name, position)


def _check_collisions(expression: ProjectionExpression[Any]) -> None:
    bound: dict[str, list[str]] = {}

    def walk(node: ProjectionExpression[Any]) -> None:
        for argument in node.arguments:
            source = argument.source
            if isinstance(source, ColumnReference):
                label = f"{node.target_type.__name__}.{argument.parameter.name}"
                bound.setdefault(source.column.name, []).append(label)
            elif isinstance(source, ProjectionExpression):
                walk(source)

    walk(expression)
    for column_name, parameters in bound.items():
        if len(parameters) > 1:
            raise ColumnCollisionError(column_name, parameters)


def build_constructor_projection(
    target: type,
    path: RelationalPath,
    introspector: TypeIntrospector | None = None,
    predicates: AnnotationPredicates | None = None,
    settings: ProjectionSettings | None = None,
) -> ProjectionExpression[Any]:
    """Build the projection of ``target`` over ``path`` with default collaborators."""
    return ProjectionBuilder(introspector, predicates, settings).build(target, path)
