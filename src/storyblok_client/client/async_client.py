"""Asynchronous content-delivery client -- mirrors :class:`~storyblok_client.client.sync_client.SyncClient` API.

This module provides :class:`AsyncClient`, the non-blocking counterpart to
:class:`~storyblok_client.client.sync_client.SyncClient`. It wraps
:class:`httpx.AsyncClient` and offers the same feature set: option
validation, token injection, cache-version handling through an
:class:`~storyblok_client.cache_version.AsyncCacheVersionManager`, and
typed error mapping.

Each fetch suspends at most twice, in order: once for the cache-version
refresh (only with auto invalidation) and once for the content request.

See Also:
    :class:`~storyblok_client.client.sync_client.SyncClient` for the
    blocking equivalent.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Optional, Union

import httpx

from storyblok_client.cache_version import AsyncCacheVersionManager
from storyblok_client.client.response import (
    StoryblokResponse,
    build_multiple_response,
    build_single_response,
    decode_json,
    raise_for_status,
)
from storyblok_client.client.sync_client import API_PREFIX, redact_params
from storyblok_client.exceptions import ConnectionError_
from storyblok_client.models import (
    ClientConfig,
    FetchMultipleOptions,
    FetchOneOptions,
    StoryVersion,
)
from storyblok_client.params import (
    SPACE_PATH,
    STORIES_PATH,
    as_list,
    build_fetch_multiple_params,
    build_fetch_one_params,
    make_options,
    story_path,
)
from storyblok_client.query import FilterQuery, ResolveRelation, SortBy

logger = logging.getLogger(__name__)


class AsyncClient:
    """Asynchronous client for the Storyblok content-delivery API.

    Takes the same arguments as
    :class:`~storyblok_client.client.sync_client.SyncClient` and must be
    used as an async context manager.

    Example::

        async with AsyncClient(token="...") as client:
            await client.invalidate_cache_version()
            resp = await client.fetch_one(full_slug="article/article-1")
            print(resp.story.content["title"])
    """

    def __init__(
        self,
        token: str,
        auto_cache_invalidation: bool = False,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **settings: Any,
    ) -> None:
        self._config = make_options(
            ClientConfig,
            token=token,
            auto_cache_invalidation=auto_cache_invalidation,
            **settings,
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._cache_version = AsyncCacheVersionManager(
            self._fetch_space,
            auto_invalidate=self._config.auto_cache_invalidation,
            strict=self._config.strict_cache_refresh,
        )

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> AsyncClient:
        """Build a client from a resolved :class:`ClientConfig`."""
        return cls(transport=transport, **config.model_dump())

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def cache_version(self) -> Optional[str]:
        return self._cache_version.token

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def invalidate_cache_version(self) -> str:
        """Fetch the latest cache version; later requests send it as ``cv``."""
        return await self._cache_version.invalidate()

    async def fetch_one(
        self,
        *,
        full_slug: Optional[str] = None,
        id: Optional[Union[int, str]] = None,
        uuid: Optional[str] = None,
        version: Optional[StoryVersion] = None,
        resolve_links: Optional[bool] = None,
        resolve_relations: Optional[Sequence[ResolveRelation]] = None,
        from_release: Optional[str] = None,
        language: Optional[str] = None,
        fallback_language: Optional[str] = None,
    ) -> StoryblokResponse:
        """Fetch a single story. See :meth:`SyncClient.fetch_one`."""
        options = make_options(
            FetchOneOptions,
            full_slug=full_slug,
            id=id,
            uuid=uuid,
            version=version,
            resolve_links=resolve_links,
            resolve_relations=as_list(resolve_relations),
            from_release=from_release,
            language=language,
            fallback_language=fallback_language,
        )
        response = await self._get(story_path(options), build_fetch_one_params(options))
        return build_single_response(response)

    async def fetch_multiple(
        self,
        *,
        starts_with: Optional[str] = None,
        by_uuids: Optional[Sequence[str]] = None,
        fallback_lang: Optional[str] = None,
        by_uuids_ordered: Optional[Sequence[str]] = None,
        excluding_ids: Optional[Sequence[Union[int, str]]] = None,
        excluding_fields: Optional[Sequence[str]] = None,
        version: Optional[StoryVersion] = None,
        resolve_links: Optional[bool] = None,
        resolve_relations: Optional[Sequence[ResolveRelation]] = None,
        from_release: Optional[str] = None,
        language: Optional[str] = None,
        sort_by: Optional[SortBy] = None,
        search_term: Optional[str] = None,
        filter_queries: Optional[Sequence[FilterQuery]] = None,
        is_startpage: Optional[bool] = None,
        with_tag: Optional[Sequence[str]] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> StoryblokResponse:
        """Fetch a list of stories. See :meth:`SyncClient.fetch_multiple`."""
        options = make_options(
            FetchMultipleOptions,
            starts_with=starts_with,
            by_uuids=as_list(by_uuids),
            fallback_lang=fallback_lang,
            by_uuids_ordered=as_list(by_uuids_ordered),
            excluding_ids=as_list(excluding_ids),
            excluding_fields=as_list(excluding_fields),
            version=version,
            resolve_links=resolve_links,
            resolve_relations=as_list(resolve_relations),
            from_release=from_release,
            language=language,
            sort_by=sort_by,
            search_term=search_term,
            filter_queries=as_list(filter_queries),
            is_startpage=is_startpage,
            with_tag=as_list(with_tag),
            page=page,
            per_page=per_page,
        )
        response = await self._get(STORIES_PATH, build_fetch_multiple_params(options))
        return build_multiple_response(response)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _fetch_space(self) -> Any:
        response = await self._get(SPACE_PATH, {}, ignore_cache_version=True)
        return decode_json(response)

    async def _get(
        self,
        path: str,
        params: dict[str, str],
        ignore_cache_version: bool = False,
    ) -> httpx.Response:
        assert self._client is not None, "Client not initialised -- use as async context manager"

        merged: dict[str, str] = dict(params)
        merged["token"] = self._config.token
        if not ignore_cache_version:
            cv = await self._cache_version.resolve()
            if cv is not None:
                merged["cv"] = cv

        url = f"{API_PREFIX}/{path}"
        logger.debug("GET %s %s", url, redact_params(merged))
        try:
            response = await self._client.get(url, params=merged)
        except httpx.TimeoutException as exc:
            raise ConnectionError_(f"Request to {url} timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Request to {url} failed: {exc}") from exc
        except httpx.RequestError as exc:
            raise ConnectionError_(f"Request to {url} could not be completed: {exc}") from exc

        raise_for_status(response)
        return response
