"""RowProjection exception hierarchy.

Configuration errors are permanent: they describe a mismatch between a
domain type and the relational schema and are raised where they are
detected, never retried or swallowed.
"""

from __future__ import annotations

from typing import Any


def _type_name(target: Any) -> str:
    return getattr(target, "__qualname__", None) or repr(target)


class RowProjectionError(Exception):
    """Base exception for all RowProjection errors."""


# --- Configuration ---


class ConfigurationError(RowProjectionError):
    """Base for domain type / schema mismatches."""


class NoUsableConstructorError(ConfigurationError):
    """Raised when a target type declares no usable constructor."""

    def __init__(self, target_type: Any) -> None:
        self.target_type = target_type
        super().__init__(f"Could not discover preferred constructor for {_type_name(target_type)}")


class UnresolvableParameterError(ConfigurationError):
    """Raised when a constructor parameter matches no column, embedded or collection field."""

    def __init__(self, target_type: Any, parameter_name: str | None, position: int) -> None:
        self.target_type = target_type
        self.parameter_name = parameter_name
        self.position = position
        label = (
            f"parameter '{parameter_name}'"
            if parameter_name is not None
            else f"parameter #{position} (name unavailable)"
        )
        super().__init__(f"Failed to match {label} to a path column for {_type_name(target_type)}")


class EmbeddingCycleError(ConfigurationError):
    """Raised when an embedded type embeds itself, directly or transitively."""

    def __init__(self, chain: tuple[Any, ...]) -> None:
        self.chain = chain
        rendered = " -> ".join(_type_name(t) for t in chain)
        super().__init__(f"Embedded types form a cycle: {rendered}")


class ColumnCollisionError(ConfigurationError):
    """Raised in strict mode when one column feeds several constructor parameters."""

    def __init__(self, column_name: str, parameters: list[str]) -> None:
        self.column_name = column_name
        self.parameters = parameters
        super().__init__(f"Column '{column_name}' is bound by several parameters: {parameters}")


class DuplicateColumnError(ConfigurationError):
    """Raised when a relational path declares the same column name twice."""

    def __init__(self, table: str, column_name: str) -> None:
        self.table = table
        self.column_name = column_name
        super().__init__(f"Duplicate column '{column_name}' in path '{table}'")


# --- Path resolution ---


class PathResolutionError(ConfigurationError):
    """Base for relational path lookup errors."""


class UnresolvableEntityTypeError(PathResolutionError):
    """Raised when a repository's entity type argument cannot be determined."""

    def __init__(self, repository_type: Any) -> None:
        self.repository_type = repository_type
        super().__init__(f"Could not resolve entity type for {_type_name(repository_type)}")


class MissingGeneratedPathTypeError(PathResolutionError):
    """Raised when the path holder type for an entity cannot be located."""

    def __init__(self, qualified_name: str, detail: str | None = None) -> None:
        self.qualified_name = qualified_name
        message = f"Unable to load path type {qualified_name}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class MissingPathSingletonFieldError(PathResolutionError):
    """Raised when a path holder type lacks its singleton path attribute."""

    def __init__(self, path_type: Any, field_name: str) -> None:
        self.path_type = path_type
        self.field_name = field_name
        super().__init__(
            f"Did not find a relational path attribute '{field_name}' in {_type_name(path_type)}"
        )


# --- Mapping ---


class MappingError(RowProjectionError):
    """Base for row mapping errors."""


class ColumnMismatchError(MappingError):
    """Raised when a row lacks columns a projection reads."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: missing fields {missing_fields}")
