"""Filter terms for the ``filter_query`` parameter family.

A :class:`FilterQuery` is one predicate on a custom field of a content
type. It does not work on the default story attributes (``name``,
``slug``, ...); use the dedicated options of
:meth:`~storyblok_client.client.SyncClient.fetch_multiple` for those.

Each term is serialised as one query parameter::

    filter_query[<attribute>][<operation>]=<value>

Terms are created through the named constructors, which format the value
into its wire string up front::

    FilterQuery.in_array("categories", ["news", "sports"])
    # filter_query[categories][in_array]=news,sports

    FilterQuery.greater_than_date("published", datetime(2024, 3, 5, 14, 7))
    # filter_query[published][gt_date]=2024-03-05 14:07

See https://www.storyblok.com/docs/api/content-delivery#filter-queries for
the semantics of each operation.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

from storyblok_client.exceptions import InvalidQueryTermError
from storyblok_client.query.formatting import (
    format_datetime,
    format_float,
    format_int,
    join_values,
)


class FilterOperation(str, enum.Enum):
    """Operations accepted inside ``filter_query[attribute][operation]``."""

    IS = "is"
    IN = "in"
    NOT_IN = "not_in"
    LIKE = "like"
    NOT_LIKE = "not_like"
    ALL_IN_ARRAY = "all_in_array"
    IN_ARRAY = "in_array"
    GT_DATE = "gt_date"
    LT_DATE = "lt_date"
    GT_INT = "gt_int"
    LT_INT = "lt_int"
    GT_FLOAT = "gt_float"
    LT_FLOAT = "lt_float"


class EnsureType(str, enum.Enum):
    """Values for :meth:`FilterQuery.ensure` (the ``is`` operation)."""

    EMPTY_STRING = "empty_string"
    NOT_EMPTY_STRING = "not_empty_string"
    EMPTY_ARRAY = "empty_array"
    NOT_EMPTY_ARRAY = "not_empty_array"
    TRUE_BOOLEAN = "true_boolean"
    FALSE_BOOLEAN = "false_boolean"


StringOrList = Union[str, Sequence[str]]


def _text_value(value: StringOrList) -> str:
    if isinstance(value, str):
        return value
    return join_values(value)


@dataclass(frozen=True)
class FilterQuery:
    """A single filter predicate with its value already in wire form.

    Attributes:
        attribute: The content-type field to filter on.
        operation: The filter operation.
        value: The pre-formatted value string. Empty only for list
            operations built from an empty list; such terms are skipped
            during serialisation.
    """

    attribute: str
    operation: FilterOperation
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.attribute, str) or not self.attribute.strip():
            raise InvalidQueryTermError("Filter attribute must be a non-empty string")
        if not isinstance(self.operation, FilterOperation):
            raise InvalidQueryTermError(f"Unknown filter operation: {self.operation!r}")
        if not isinstance(self.value, str):
            raise InvalidQueryTermError(
                f"Filter value must be a pre-formatted string, got {type(self.value).__name__}"
            )

    @property
    def key(self) -> str:
        """The query parameter name for this term."""
        return f"filter_query[{self.attribute}][{self.operation.value}]"

    # ------------------------------------------------------------------ #
    # Named constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def ensure(cls, attribute: str, value: EnsureType) -> FilterQuery:
        """Check a field for emptiness or a boolean value (operation ``is``).

        Use ``EMPTY_STRING``/``NOT_EMPTY_STRING`` for text fields,
        ``EMPTY_ARRAY``/``NOT_EMPTY_ARRAY`` for multi-value fields and
        ``TRUE_BOOLEAN``/``FALSE_BOOLEAN`` for boolean fields.
        """
        try:
            ensure_type = EnsureType(value)
        except ValueError:
            raise InvalidQueryTermError(f"Unknown ensure type: {value!r}") from None
        return cls(attribute, FilterOperation.IS, ensure_type.value)

    @classmethod
    def contains(cls, attribute: str, value: StringOrList) -> FilterQuery:
        """Match entries whose field equals one of the given values (operation ``in``)."""
        return cls(attribute, FilterOperation.IN, _text_value(value))

    @classmethod
    def not_in(cls, attribute: str, value: StringOrList) -> FilterQuery:
        """Match entries whose field equals none of the given values."""
        return cls(attribute, FilterOperation.NOT_IN, _text_value(value))

    @classmethod
    def like(cls, attribute: str, value: str) -> FilterQuery:
        """Match entries whose field is like *value* (``*`` is a wildcard)."""
        return cls(attribute, FilterOperation.LIKE, value)

    @classmethod
    def not_like(cls, attribute: str, value: str) -> FilterQuery:
        """Match entries whose field is not like *value*."""
        return cls(attribute, FilterOperation.NOT_LIKE, value)

    @classmethod
    def all_in_array(cls, attribute: str, values: Sequence[str]) -> FilterQuery:
        """Match entries whose array field contains every one of *values*."""
        return cls(attribute, FilterOperation.ALL_IN_ARRAY, join_values(values))

    @classmethod
    def in_array(cls, attribute: str, values: Sequence[str]) -> FilterQuery:
        """Match entries whose array field contains at least one of *values*."""
        return cls(attribute, FilterOperation.IN_ARRAY, join_values(values))

    @classmethod
    def greater_than_date(cls, attribute: str, value: date | datetime) -> FilterQuery:
        """Match entries whose date field is after *value*."""
        return cls(attribute, FilterOperation.GT_DATE, format_datetime(value))

    @classmethod
    def less_than_date(cls, attribute: str, value: date | datetime) -> FilterQuery:
        """Match entries whose date field is before *value*."""
        return cls(attribute, FilterOperation.LT_DATE, format_datetime(value))

    @classmethod
    def greater_than_int(cls, attribute: str, value: int) -> FilterQuery:
        return cls(attribute, FilterOperation.GT_INT, format_int(value))

    @classmethod
    def less_than_int(cls, attribute: str, value: int) -> FilterQuery:
        return cls(attribute, FilterOperation.LT_INT, format_int(value))

    @classmethod
    def greater_than_float(cls, attribute: str, value: float) -> FilterQuery:
        return cls(attribute, FilterOperation.GT_FLOAT, format_float(value))

    @classmethod
    def less_than_float(cls, attribute: str, value: float) -> FilterQuery:
        return cls(attribute, FilterOperation.LT_FLOAT, format_float(value))
