"""Synchronous content-delivery client with cache-version handling.

This module provides :class:`SyncClient`, the blocking request
orchestrator. It wraps :class:`httpx.Client` and layers on:

- **Parameter building** -- keyword options are validated into
  :class:`~storyblok_client.models.FetchOneOptions` /
  :class:`~storyblok_client.models.FetchMultipleOptions` and serialised by
  :mod:`storyblok_client.params` before any network I/O.
- **Auth injection** -- the API token is added as the ``token`` query
  parameter of every request.
- **Cache busting** -- the ``cv`` parameter comes from a
  :class:`~storyblok_client.cache_version.CacheVersionManager`, which may
  refresh it first when auto invalidation is on.
- **Error mapping** -- every non-2xx status and every network failure is
  raised as a :class:`~storyblok_client.exceptions.TransportError`
  subclass. Nothing is retried.

See Also:
    :class:`~storyblok_client.client.async_client.AsyncClient` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Optional, Union

import httpx

from storyblok_client.cache_version import CacheVersionManager
from storyblok_client.client.response import (
    StoryblokResponse,
    build_multiple_response,
    build_single_response,
    decode_json,
    raise_for_status,
)
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

API_PREFIX = "/v1/cdn"


def redact_params(params: dict[str, str]) -> dict[str, str]:
    """Return *params* with the API token masked, for logging."""
    if "token" not in params:
        return params
    return {**params, "token": "***"}


class SyncClient:
    """Synchronous client for the Storyblok content-delivery API.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        token: API token of the space.
        auto_cache_invalidation: Refresh the cache version before every
            content request. When ``False``, call
            :meth:`invalidate_cache_version` at appropriate points instead.
        base_url: API origin, for proxies and tests.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`.

    Example::

        with SyncClient(token="...", auto_cache_invalidation=True) as client:
            resp = client.fetch_multiple(starts_with="article/")
            for story in resp.stories:
                print(story.name)
    """

    def __init__(
        self,
        token: str,
        auto_cache_invalidation: bool = False,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        **settings: Any,
    ) -> None:
        self._config = make_options(
            ClientConfig,
            token=token,
            auto_cache_invalidation=auto_cache_invalidation,
            **settings,
        )
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self._cache_version = CacheVersionManager(
            self._fetch_space,
            auto_invalidate=self._config.auto_cache_invalidation,
            strict=self._config.strict_cache_refresh,
        )

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> SyncClient:
        """Build a client from a resolved :class:`ClientConfig`."""
        return cls(transport=transport, **config.model_dump())

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def cache_version(self) -> Optional[str]:
        """The cache version sent as ``cv``, or ``None`` if none was fetched."""
        return self._cache_version.token

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        self._client = httpx.Client(
            base_url=self._config.base_url,
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def invalidate_cache_version(self) -> str:
        """Fetch the latest cache version; later requests send it as ``cv``.

        Raises:
            CacheRefreshError: If the space endpoint fails or has no version.
        """
        return self._cache_version.invalidate()

    def fetch_one(
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
        """Fetch a single story by full slug, id, or uuid.

        Exactly one selector must be given.

        Returns:
            A :class:`StoryblokResponse` holding exactly one story.

        Raises:
            InvalidArgumentError: If zero or several selectors are given;
                raised before any request is sent.
            NotFoundError: If the story does not exist.
            TransportError: On any other failed request.
            DecodeError: If the body has no valid ``story`` object.
        """
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
        response = self._get(story_path(options), build_fetch_one_params(options))
        return build_single_response(response)

    def fetch_multiple(
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
        """Fetch a list of stories.

        An empty result is a success. Pagination metadata is available as
        :attr:`StoryblokResponse.total` and :attr:`StoryblokResponse.per_page`.

        Raises:
            InvalidArgumentError: If an option is invalid (e.g. ``page=0``).
            TransportError: On any failed request, including 404.
            DecodeError: If any story in the body is malformed.
        """
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
        response = self._get(STORIES_PATH, build_fetch_multiple_params(options))
        return build_multiple_response(response)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _fetch_space(self) -> Any:
        response = self._get(SPACE_PATH, {}, ignore_cache_version=True)
        return decode_json(response)

    def _get(
        self,
        path: str,
        params: dict[str, str],
        ignore_cache_version: bool = False,
    ) -> httpx.Response:
        """Send one GET to ``/v1/cdn/<path>`` with token and cache version."""
        assert self._client is not None, "Client not initialised -- use as context manager"

        merged: dict[str, str] = dict(params)
        merged["token"] = self._config.token
        if not ignore_cache_version:
            cv = self._cache_version.resolve()
            if cv is not None:
                merged["cv"] = cv

        url = f"{API_PREFIX}/{path}"
        logger.debug("GET %s %s", url, redact_params(merged))
        try:
            response = self._client.get(url, params=merged)
        except httpx.TimeoutException as exc:
            raise ConnectionError_(f"Request to {url} timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Request to {url} failed: {exc}") from exc
        except httpx.RequestError as exc:
            raise ConnectionError_(f"Request to {url} could not be completed: {exc}") from exc

        raise_for_status(response)
        return response
