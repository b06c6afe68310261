"""Repository base class.

Thin wrapper binding an engine collaborator to the projection of the
repository's entity type.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from row_projection.core.settings import ProjectionSettings
from row_projection.mapping.factory import ProjectionBuilder
from row_projection.mapping.projection import ProjectionExpression
from row_projection.repository.paths import QueryPathResolver

T = TypeVar("T")


class Repository(Generic[T]):
    """Base repository class for typed projections.

    Subclasses name their entity as the type argument and define concrete
    data access methods that delegate to the engine::

        class MoneyRepository(Repository[Money]):
            def list_all(self) -> list[Money]:
                return self.engine.fetch_all("money.list", mapper=self.mapper)

    The entity type, its relational path and its projection are resolved
    at construction, so a domain type that does not fit the schema fails
    here rather than on first query.
    """

    def __init__(
        self,
        engine: Any,
        builder: ProjectionBuilder | None = None,
        settings: ProjectionSettings | None = None,
    ) -> None:
        self.engine = engine
        settings = settings or ProjectionSettings()
        resolver = QueryPathResolver(Repository, settings)
        self.entity_type: type[T] = resolver.resolve_entity_type(type(self))
        self.path = resolver.path_for_entity(self.entity_type)
        builder = builder or ProjectionBuilder(settings=settings)
        self.mapper: ProjectionExpression[T] = builder.build(self.entity_type, self.path)

    @property
    def column_names(self) -> list[str]:
        """Columns the mapper reads, for building SELECT lists."""
        return [column.name for column in self.mapper.columns()]
