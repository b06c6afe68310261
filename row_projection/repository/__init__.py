"""Repository layer - entity type and relational path resolution."""

from __future__ import annotations

from row_projection.repository.base import Repository
from row_projection.repository.paths import QueryPathResolver, decapitalize

__all__ = [
    "Repository",
    "QueryPathResolver",
    "decapitalize",
]
