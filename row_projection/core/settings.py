"""Projection settings.

ProjectionSettings is a Pydantic model for type-safe configuration of path
lookup conventions and strictness.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProjectionSettings(BaseModel):
    """Configuration for path resolution and projection building."""

    # Path holder class is named <path_type_prefix><EntityName>
    path_type_prefix: str = Field(default="Q", min_length=1)
    # Module holding the path types, formatted with the entity's module name
    path_module: str = "{module}"
    strict: bool = False

    def path_module_for(self, entity_module: str) -> str:
        """Module name where path holder types for ``entity_module`` live."""
        return self.path_module.format(module=entity_module)
