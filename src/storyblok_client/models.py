"""Canonical Pydantic models shared across storyblok_client.

The models fall into three groups:

**Configuration** -- :class:`ClientConfig`, the settings a client is built
from. Resolved from keyword arguments, environment variables, and a
project file by :func:`~storyblok_client.config.resolve_config`.

**Request options** -- :class:`FetchOneOptions` and
:class:`FetchMultipleOptions` collect every optional query dimension of a
fetch. The query terms they carry (:class:`~storyblok_client.query.FilterQuery`,
:class:`~storyblok_client.query.SortBy`,
:class:`~storyblok_client.query.ResolveRelation`) are frozen dataclasses
validated at their own construction.

**Entities** -- :class:`Story`, the deserialised content entry. Unknown
keys returned by the API are preserved in ``model_extra``.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from storyblok_client.query import FilterQuery, ResolveRelation, SortBy

DEFAULT_BASE_URL = "https://api.storyblok.com"


# --- Configuration ---


class ClientConfig(BaseModel):
    """Settings for a :class:`~storyblok_client.client.SyncClient` or
    :class:`~storyblok_client.client.AsyncClient`.

    Example::

        ClientConfig(token="rZ6fmrWh1u7Sb0Qdz5BDPwtt", auto_cache_invalidation=True)
    """

    token: str = Field(description="Public or preview API token of the space")
    auto_cache_invalidation: bool = Field(
        default=False,
        description="Refresh the cache version before every content request",
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API origin")
    timeout: float = Field(default=30, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    strict_cache_refresh: bool = Field(
        default=True,
        description="Fail a fetch when its automatic cache refresh fails; "
        "otherwise log a warning and continue with the last known version",
    )

    @field_validator("token")
    @classmethod
    def _token_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("token must not be empty")
        return value

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


# --- Request options ---


class StoryVersion(str, enum.Enum):
    """Which version of a story to fetch."""

    PUBLISHED = "published"
    DRAFT = "draft"


class BaseFetchOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    version: Optional[StoryVersion] = None
    resolve_links: Optional[bool] = None
    resolve_relations: Optional[list[ResolveRelation]] = None
    from_release: Optional[str] = None
    language: Optional[str] = None


class FetchOneOptions(BaseFetchOptions):
    """Options for fetching a single story.

    Exactly one of ``full_slug``, ``id`` or ``uuid`` selects the story.
    """

    full_slug: Optional[str] = None
    id: Optional[Union[int, str]] = None
    uuid: Optional[str] = None
    fallback_language: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_selector(self) -> FetchOneOptions:
        selectors = [
            name
            for name in ("full_slug", "id", "uuid")
            if getattr(self, name) not in (None, "")
        ]
        if len(selectors) > 1:
            raise ValueError(
                f"Only one of full_slug, id, uuid may be given, got {', '.join(selectors)}"
            )
        if not selectors:
            raise ValueError("One of full_slug, id, uuid is required")
        return self


class FetchMultipleOptions(BaseFetchOptions):
    """Options for listing stories. Every field is optional."""

    starts_with: Optional[str] = None
    by_uuids: Optional[list[str]] = None
    fallback_lang: Optional[str] = None
    by_uuids_ordered: Optional[list[str]] = None
    excluding_ids: Optional[list[str]] = None
    excluding_fields: Optional[list[str]] = None
    sort_by: Optional[SortBy] = None
    search_term: Optional[str] = None
    filter_queries: Optional[list[FilterQuery]] = None
    is_startpage: Optional[bool] = None
    with_tag: Optional[list[str]] = None
    page: Optional[int] = Field(default=None, ge=1)
    per_page: Optional[int] = Field(default=None, ge=1, le=100)

    @field_validator("excluding_ids", mode="before")
    @classmethod
    def _ids_as_strings(cls, value: Any) -> Any:
        # story ids are numeric; accept them as ints
        if isinstance(value, (list, tuple)):
            return [
                str(item) if isinstance(item, int) and not isinstance(item, bool) else item
                for item in value
            ]
        return value


# --- Entities ---


class Story(BaseModel):
    """A story as returned by the content-delivery API.

    Only the identifying fields, ``content`` and ``created_at`` are
    required. Container fields that the API omits in some setups
    (``alternates``, ``tag_list``, ``translated_slugs``) default to empty
    lists.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int
    uuid: str
    name: str
    slug: str
    full_slug: str
    content: dict[str, Any]
    created_at: datetime
    published_at: Optional[datetime] = None
    first_published_at: Optional[datetime] = None
    alternates: list[Any] = Field(default_factory=list)
    sort_by_date: Any = None
    position: int = 0
    tag_list: list[str] = Field(default_factory=list)
    is_startpage: bool = False
    parent_id: Optional[int] = None
    meta_data: Any = None
    group_id: Optional[str] = None
    release_id: Optional[Union[int, str]] = Field(
        default=None,
        validation_alias=AliasChoices("release_id", "realease_id"),
    )
    lang: str = "default"
    path: Optional[str] = None
    translated_slugs: list[Any] = Field(default_factory=list)

    @field_validator("alternates", "tag_list", "translated_slugs", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value
