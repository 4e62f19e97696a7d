"""Structured query terms for the content-delivery API.

The types here are immutable value objects. Their named constructors
validate input and format values into wire strings at construction time,
so :mod:`storyblok_client.params` only has to lay them out as query
parameters.

Classes:
    :class:`FilterQuery` -- one ``filter_query[...][...]`` predicate.
    :class:`SortBy` -- the ``sort_by`` specification.
    :class:`ResolveRelation` -- one ``resolve_relations`` entry.
"""

from storyblok_client.query.filters import EnsureType, FilterOperation, FilterQuery
from storyblok_client.query.relations import ResolveRelation
from storyblok_client.query.sort import SortBy, SortOrder, SortType

__all__ = [
    "EnsureType",
    "FilterOperation",
    "FilterQuery",
    "ResolveRelation",
    "SortBy",
    "SortOrder",
    "SortType",
]
