"""Sort specification for the ``sort_by`` parameter.

Stories can be sorted by one of their own attributes (``name``,
``created_at``, ``position``, ...) or by a field of their content type,
which the API addresses with a ``content.`` prefix. Custom fields sort as
strings unless a :class:`SortType` is given.

Serialised form::

    <field-ref>[:<order>][:<type>]

    SortBy.by_content("rating", SortOrder.DESC, SortType.INT)
    # sort_by=content.rating:desc:int
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from storyblok_client.exceptions import InvalidQueryTermError


class SortOrder(str, enum.Enum):
    """Direction of the sort."""

    ASC = "asc"
    DESC = "desc"


class SortType(str, enum.Enum):
    """How the sort field's values are compared."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"


@dataclass(frozen=True)
class SortBy:
    """Sort on exactly one story attribute or content field.

    Setting both ``attribute_field`` and ``content_field``, or neither,
    raises :class:`~storyblok_client.exceptions.InvalidQueryTermError`.
    """

    attribute_field: Optional[str] = None
    content_field: Optional[str] = None
    order: Optional[SortOrder] = None
    type: Optional[SortType] = None

    def __post_init__(self) -> None:
        if self.attribute_field is not None and self.content_field is not None:
            raise InvalidQueryTermError(
                "SortBy takes either attribute_field or content_field, not both"
            )
        name = self.attribute_field if self.attribute_field is not None else self.content_field
        if name is None:
            raise InvalidQueryTermError("SortBy requires attribute_field or content_field")
        if not isinstance(name, str) or not name.strip():
            raise InvalidQueryTermError("SortBy field name must be a non-empty string")
        if self.order is not None and not isinstance(self.order, SortOrder):
            raise InvalidQueryTermError(f"Unknown sort order: {self.order!r}")
        if self.type is not None and not isinstance(self.type, SortType):
            raise InvalidQueryTermError(f"Unknown sort type: {self.type!r}")

    @classmethod
    def by_attribute(
        cls,
        name: str,
        order: Optional[SortOrder] = None,
        type: Optional[SortType] = None,
    ) -> SortBy:
        """Sort by a generated story attribute such as ``created_at``."""
        return cls(attribute_field=name, order=order, type=type)

    @classmethod
    def by_content(
        cls,
        name: str,
        order: Optional[SortOrder] = None,
        type: Optional[SortType] = None,
    ) -> SortBy:
        """Sort by a field of the story's content type."""
        return cls(content_field=name, order=order, type=type)

    @classmethod
    def admin_interface(cls) -> SortBy:
        """Use the manual ordering editors set in the Storyblok admin UI."""
        return cls(attribute_field="position", order=SortOrder.DESC)

    @property
    def field_ref(self) -> str:
        """The field reference part of the ``sort_by`` value."""
        if self.attribute_field is not None:
            return self.attribute_field
        return f"content.{self.content_field}"
