"""Relational path lookup.

Path holder naming convention:
    entity  shop.models.OrderLine
    holder  shop.models.QOrderLine
    path    QOrderLine.orderLine
"""

from __future__ import annotations

import importlib
import inspect
import logging
import typing
from typing import Any

from row_projection.core.exceptions import (
    MissingGeneratedPathTypeError,
    MissingPathSingletonFieldError,
    UnresolvableEntityTypeError,
)
from row_projection.core.path import RelationalPath
from row_projection.core.settings import ProjectionSettings

logger = logging.getLogger(__name__)


def decapitalize(name: str) -> str:
    """UpperCamel to lowerCamel: ``OrderLine`` -> ``orderLine``."""
    return name[:1].lower() + name[1:]


class QueryPathResolver:
    """Locates the RelationalPath of entities and repositories.

    Args:
        repository_base: Generic base class whose first type argument is the
            repository's entity type.
        settings: Naming conventions for path holder types.
    """

    def __init__(
        self,
        repository_base: type,
        settings: ProjectionSettings | None = None,
    ) -> None:
        self._repository_base = repository_base
        self._settings = settings or ProjectionSettings()

    def resolve_entity_type(self, repository_type: type) -> type:
        """First type argument given to ``repository_base`` in the repository's bases."""
        for klass in inspect.getmro(repository_type):
            for base in vars(klass).get("__orig_bases__", ()):
                origin = typing.get_origin(base)
                if not (isinstance(origin, type) and issubclass(origin, self._repository_base)):
                    continue
                args = typing.get_args(base)
                if args and isinstance(args[0], type):
                    return args[0]
        raise UnresolvableEntityTypeError(repository_type)

    def path_type_for(self, entity_type: type) -> type:
        """The path holder class generated for ``entity_type``."""
        module_name = self._settings.path_module_for(entity_type.__module__)
        type_name = self._settings.path_type_prefix + entity_type.__name__
        qualified_name = f"{module_name}.{type_name}"
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise MissingGeneratedPathTypeError(qualified_name, str(e)) from e

        path_type = getattr(module, type_name, None)
        if not isinstance(path_type, type):
            raise MissingGeneratedPathTypeError(qualified_name)
        return path_type

    def path_for_entity(self, entity_type: type) -> RelationalPath:
        """The singleton RelationalPath published by the entity's path holder."""
        path_type = self.path_type_for(entity_type)
        field_name = decapitalize(path_type.__name__[len(self._settings.path_type_prefix) :])
        path: Any = getattr(path_type, field_name, None)
        if not isinstance(path, RelationalPath):
            raise MissingPathSingletonFieldError(path_type, field_name)

        logger.debug("Resolved path '%s' for %s", path.table, entity_type)
        return path

    def path_for_repository(self, repository_type: type) -> RelationalPath:
        return self.path_for_entity(self.resolve_entity_type(repository_type))
