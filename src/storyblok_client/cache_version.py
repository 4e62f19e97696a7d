"""Cache version (``cv``) tracking for CDN cache busting.

The content-delivery API sits behind a CDN. Sending the space's current
cache version as the ``cv`` query parameter makes the CDN bypass stale
cached responses. The version is read from the ``space.version`` field of
the ``spaces/me`` endpoint.

A manager is a two-state machine owned by one client instance:

* **no version** -- the initial state. Requests go out without ``cv``
  and a warning is logged, since the CDN may then serve stale data.
* **has version** -- entered by :meth:`CacheVersionManager.invalidate`.
  The token is reused for every request until the next ``invalidate()``
  or :meth:`~CacheVersionManager.reset`.

With ``auto_invalidate`` set, :meth:`~CacheVersionManager.resolve`
refreshes the version before every content request. A failed automatic
refresh raises :class:`~storyblok_client.exceptions.CacheRefreshError`
when ``strict`` is set; otherwise it is logged and the last known version
(if any) is used.

The token read-modify-write is guarded by a :class:`threading.Lock` in
:class:`CacheVersionManager` and an :class:`asyncio.Lock` in
:class:`AsyncCacheVersionManager`, so concurrent fetches sharing a client
never interleave a refresh with a read.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from storyblok_client.exceptions import CacheRefreshError, StoryblokError

logger = logging.getLogger(__name__)

MISSING_VERSION_WARNING = (
    "No cache version fetched; sending request without 'cv'. "
    "Consider enabling auto cache invalidation or calling invalidate_cache_version()."
)


def extract_cache_version(body: Any) -> str:
    """Read ``space.version`` from a ``spaces/me`` response body.

    Returns:
        The version rendered as a string (the API sends an integer).

    Raises:
        CacheRefreshError: If the field is missing or not a number/string.
    """
    space = body.get("space") if isinstance(body, dict) else None
    if not isinstance(space, dict) or "version" not in space:
        raise CacheRefreshError("Space response has no 'space.version' field")
    version = space["version"]
    if isinstance(version, bool) or not isinstance(version, (int, str)):
        raise CacheRefreshError(
            f"Unexpected cache version type: {type(version).__name__}"
        )
    token = str(version).strip()
    if not token:
        raise CacheRefreshError("Space response has an empty 'space.version'")
    return token


class CacheVersionManager:
    """Blocking cache-version state for :class:`~storyblok_client.client.SyncClient`.

    Args:
        fetch_space: Callable returning the decoded ``spaces/me`` body.
            It must not itself add a ``cv`` parameter.
        auto_invalidate: Refresh the version on every :meth:`resolve`.
        strict: Propagate automatic refresh failures instead of logging.
    """

    def __init__(
        self,
        fetch_space: Callable[[], Any],
        auto_invalidate: bool = False,
        strict: bool = True,
    ) -> None:
        self._fetch_space = fetch_space
        self._auto_invalidate = auto_invalidate
        self._strict = strict
        self._token: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[str]:
        """The current cache version, or ``None`` before the first refresh."""
        return self._token

    def invalidate(self) -> str:
        """Fetch the latest cache version and store it.

        Raises:
            CacheRefreshError: If the space endpoint fails or its body has
                no usable version.
        """
        with self._lock:
            return self._refresh()

    def resolve(self) -> Optional[str]:
        """Return the version to send with the next content request."""
        with self._lock:
            if self._auto_invalidate:
                try:
                    self._refresh()
                except CacheRefreshError as exc:
                    if self._strict:
                        raise
                    logger.warning("Automatic cache refresh failed: %s", exc)
            token = self._token
        if token is None:
            logger.warning(MISSING_VERSION_WARNING)
        return token

    def reset(self) -> None:
        """Forget the current version."""
        with self._lock:
            self._token = None

    def _refresh(self) -> str:
        try:
            body = self._fetch_space()
        except CacheRefreshError:
            raise
        except StoryblokError as exc:
            raise CacheRefreshError(f"Could not fetch cache version: {exc}") from exc
        token = extract_cache_version(body)
        if token != self._token:
            logger.debug("Cache version changed: %s -> %s", self._token, token)
        self._token = token
        return token


class AsyncCacheVersionManager:
    """Non-blocking counterpart of :class:`CacheVersionManager`.

    Identical state machine and policy; *fetch_space* is a coroutine
    function and the token is guarded by an :class:`asyncio.Lock`.
    """

    def __init__(
        self,
        fetch_space: Callable[[], Awaitable[Any]],
        auto_invalidate: bool = False,
        strict: bool = True,
    ) -> None:
        self._fetch_space = fetch_space
        self._auto_invalidate = auto_invalidate
        self._strict = strict
        self._token: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> Optional[str]:
        return self._token

    async def invalidate(self) -> str:
        async with self._lock:
            return await self._refresh()

    async def resolve(self) -> Optional[str]:
        async with self._lock:
            if self._auto_invalidate:
                try:
                    await self._refresh()
                except CacheRefreshError as exc:
                    if self._strict:
                        raise
                    logger.warning("Automatic cache refresh failed: %s", exc)
            token = self._token
        if token is None:
            logger.warning(MISSING_VERSION_WARNING)
        return token

    async def reset(self) -> None:
        async with self._lock:
            self._token = None

    async def _refresh(self) -> str:
        try:
            body = await self._fetch_space()
        except CacheRefreshError:
            raise
        except StoryblokError as exc:
            raise CacheRefreshError(f"Could not fetch cache version: {exc}") from exc
        token = extract_cache_version(body)
        if token != self._token:
            logger.debug("Cache version changed: %s -> %s", self._token, token)
        self._token = token
        return token
