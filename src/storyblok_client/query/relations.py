"""Relation resolution directives for the ``resolve_relations`` parameter."""

from __future__ import annotations

from dataclasses import dataclass

from storyblok_client.exceptions import InvalidQueryTermError


@dataclass(frozen=True)
class ResolveRelation:
    """Resolve the stories referenced by *field_name* in *component_name*.

    The API inlines the referenced stories instead of returning their
    uuids. At most 100 related stories are resolved per request.
    """

    component_name: str
    field_name: str

    def __post_init__(self) -> None:
        for label, value in (("component_name", self.component_name), ("field_name", self.field_name)):
            if not isinstance(value, str) or not value.strip():
                raise InvalidQueryTermError(f"ResolveRelation {label} must be a non-empty string")

    def __str__(self) -> str:
        return f"{self.component_name}.{self.field_name}"
