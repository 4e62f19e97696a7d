"""storyblok_client -- Typed client for the Storyblok content-delivery API.

This package fetches stories from a Storyblok space. It turns typed
request options into the API's query-string conventions, keeps the CDN
cache version (``cv``) current, and decodes responses into
:class:`~storyblok_client.models.Story` objects.

Typical usage::

    from storyblok_client import SyncClient, SortBy, SortOrder

    with SyncClient(token="...", auto_cache_invalidation=True) as client:
        resp = client.fetch_multiple(
            starts_with="article/",
            sort_by=SortBy.by_attribute("created_at", SortOrder.DESC),
        )

Modules:
    client: Synchronous and asynchronous request orchestrators.
    query: Filter, sort, and relation query terms.
    params: Query parameter serialisation.
    cache_version: Cache version state machine.
    models: Pydantic models for settings, options, and stories.
    config: Settings resolution from env vars and ``./storyblok.json``.
    exceptions: Exception hierarchy with exit-code mapping.
    app: The ``storyblok`` command.
"""

__version__ = "0.1.0"

from storyblok_client.client import AsyncClient, StoryblokResponse, SyncClient  # noqa: E402
from storyblok_client.exceptions import (  # noqa: E402
    AuthError,
    CacheRefreshError,
    ConfigError,
    DecodeError,
    InvalidArgumentError,
    InvalidQueryTermError,
    NotFoundError,
    StoryblokError,
    TransportError,
)
from storyblok_client.models import ClientConfig, Story, StoryVersion  # noqa: E402
from storyblok_client.query import (  # noqa: E402
    EnsureType,
    FilterOperation,
    FilterQuery,
    ResolveRelation,
    SortBy,
    SortOrder,
    SortType,
)

__all__ = [
    "__version__",
    "AsyncClient",
    "AuthError",
    "CacheRefreshError",
    "ClientConfig",
    "ConfigError",
    "DecodeError",
    "EnsureType",
    "FilterOperation",
    "FilterQuery",
    "InvalidArgumentError",
    "InvalidQueryTermError",
    "NotFoundError",
    "ResolveRelation",
    "SortBy",
    "SortOrder",
    "SortType",
    "Story",
    "StoryVersion",
    "StoryblokError",
    "StoryblokResponse",
    "SyncClient",
    "TransportError",
]
