"""HTTP clients for the Storyblok content-delivery API.

Provides synchronous and asynchronous clients that wrap :mod:`httpx`
with option validation, token injection, cache-version handling, and
typed error mapping.

Classes:
    :class:`SyncClient` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncClient` -- non-blocking client backed by :class:`httpx.AsyncClient`.
    :class:`StoryblokResponse` -- fetched stories plus pagination metadata.

Both clients are designed to be used as context managers and accept the
same arguments: the API token, the auto cache invalidation flag, and
optional :class:`~storyblok_client.models.ClientConfig` settings.

Example::

    from storyblok_client.client import SyncClient

    with SyncClient(token="...") as client:
        client.invalidate_cache_version()
        resp = client.fetch_one(full_slug="article/article-1")
"""

from storyblok_client.client.async_client import AsyncClient
from storyblok_client.client.response import StoryblokResponse
from storyblok_client.client.sync_client import SyncClient

__all__ = ["SyncClient", "AsyncClient", "StoryblokResponse"]
