"""Query parameter serialisation for the content-delivery API.

This module turns request options into the flat ``{key: value}`` string
map sent as the query string. All functions are pure: no I/O, no client
state. The parameter names are a wire contract with the API and must not
change.

**Layout rules:**

* Options left as ``None`` are omitted.
* List-valued options are comma-joined. An empty list is treated exactly
  like ``None``: the key is omitted rather than sent with an empty value.
* Boolean flags (``resolve_links``, ``is_startpage``) become ``"1"``/``"0"``.
* Each filter term becomes ``filter_query[<attribute>][<operation>]``.
  Terms whose value is empty (an array operation built from an empty list)
  are omitted.
* Relations are rendered ``component.field`` and comma-joined, without a
  trailing comma.
* Later writes to the same key win; overlapping filter terms never raise.

The ``token`` and ``cv`` parameters are added by the clients, not here.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from storyblok_client.exceptions import InvalidArgumentError
from storyblok_client.models import BaseFetchOptions, FetchMultipleOptions, FetchOneOptions
from storyblok_client.query import FilterQuery, ResolveRelation, SortBy
from storyblok_client.query.formatting import format_flag, format_int, join_values

OptionsT = TypeVar("OptionsT", bound=BaseModel)

STORIES_PATH = "stories"
SPACE_PATH = "spaces/me"


def make_options(model: type[OptionsT], **values: Any) -> OptionsT:
    """Validate keyword options into *model*.

    Raises:
        InvalidArgumentError: If the options violate the model's
            constraints (e.g. two story selectors, ``page=0``).
    """
    try:
        return model(**values)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or model.__name__}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidArgumentError(f"Invalid {model.__name__}: {details}") from exc


def as_list(values: Optional[Sequence[Any]]) -> Optional[list[Any]]:
    """Copy a sequence option into a list; a bare string is one element."""
    if values is None:
        return None
    if isinstance(values, str):
        return [values]
    return list(values)


# ------------------------------------------------------------------ #
# Term serialisers
# ------------------------------------------------------------------ #


def serialize_list(values: Optional[Sequence[str]]) -> Optional[str]:
    """Comma-join *values*, returning ``None`` for ``None`` or an empty list."""
    if not values:
        return None
    joined = join_values(values)
    return joined or None


def serialize_relations(relations: Optional[Iterable[ResolveRelation]]) -> Optional[str]:
    """Render relation directives as ``a.b,c.d`` or ``None`` when there are none."""
    if not relations:
        return None
    return join_values(str(relation) for relation in relations) or None


def serialize_sort(sort: SortBy) -> str:
    """Render a sort spec as ``<field-ref>[:<order>][:<type>]``."""
    parts = [sort.field_ref]
    if sort.order is not None:
        parts.append(sort.order.value)
    if sort.type is not None:
        parts.append(sort.type.value)
    return ":".join(parts)


def serialize_filters(filters: Optional[Iterable[FilterQuery]]) -> dict[str, str]:
    """Render filter terms as ``filter_query[...][...]`` entries."""
    params: dict[str, str] = {}
    for term in filters or ():
        if term.value == "":
            continue
        params[term.key] = term.value
    return params


def _put(params: dict[str, str], key: str, value: Optional[str]) -> None:
    if value is not None:
        params[key] = value


def _common_params(options: BaseFetchOptions) -> dict[str, str]:
    params: dict[str, str] = {}
    if options.version is not None:
        params["version"] = options.version.value
    if options.resolve_links is not None:
        params["resolve_links"] = format_flag(options.resolve_links)
    _put(params, "resolve_relations", serialize_relations(options.resolve_relations))
    _put(params, "from_release", options.from_release)
    _put(params, "language", options.language)
    return params


# ------------------------------------------------------------------ #
# Request-level builders
# ------------------------------------------------------------------ #


def story_path(options: FetchOneOptions) -> str:
    """Return the resource path for a single-story request.

    Leading and trailing slashes of a full slug are stripped so that
    ``"/blog/post-1"`` and ``"blog/post-1"`` address the same story.
    """
    if options.full_slug:
        selector = options.full_slug.strip("/")
    elif options.id not in (None, ""):
        selector = str(options.id)
    else:
        selector = str(options.uuid)
    return f"{STORIES_PATH}/{selector}"


def build_fetch_one_params(options: FetchOneOptions) -> dict[str, str]:
    """Build the query parameters for a single-story request."""
    params: dict[str, str] = {}
    if options.uuid:
        params["find_by"] = "uuid"
    params.update(_common_params(options))
    _put(params, "fallback_language", options.fallback_language)
    return params


def build_fetch_multiple_params(options: FetchMultipleOptions) -> dict[str, str]:
    """Build the query parameters for a story listing request."""
    params: dict[str, str] = {}
    _put(params, "starts_with", options.starts_with)
    _put(params, "by_uuids", serialize_list(options.by_uuids))
    _put(params, "fallback_lang", options.fallback_lang)
    _put(params, "by_uuids_ordered", serialize_list(options.by_uuids_ordered))
    _put(params, "excluding_ids", serialize_list(options.excluding_ids))
    _put(params, "excluding_fields", serialize_list(options.excluding_fields))
    params.update(_common_params(options))
    if options.sort_by is not None:
        params["sort_by"] = serialize_sort(options.sort_by)
    _put(params, "search_term", options.search_term)
    params.update(serialize_filters(options.filter_queries))
    if options.is_startpage is not None:
        params["is_startpage"] = format_flag(options.is_startpage)
    _put(params, "with_tag", serialize_list(options.with_tag))
    if options.page is not None:
        params["page"] = format_int(options.page)
    if options.per_page is not None:
        params["per_page"] = format_int(options.per_page)
    return params
