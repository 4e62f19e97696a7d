"""Tests for storyblok_client.cache_version -- the cv state machine."""

from __future__ import annotations

import itertools
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest

from storyblok_client.cache_version import (
    MISSING_VERSION_WARNING,
    AsyncCacheVersionManager,
    CacheVersionManager,
    extract_cache_version,
)
from storyblok_client.exceptions import CacheRefreshError, ServerError


class _Space:
    """Callable returning successive space bodies, counting calls."""

    def __init__(self, *versions: Any) -> None:
        self._versions = list(versions)
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        version = self._versions.pop(0)
        if isinstance(version, Exception):
            raise version
        return {"space": {"version": version}}


class TestExtractCacheVersion:
    def test_int_version(self) -> None:
        assert extract_cache_version({"space": {"version": 42}}) == "42"

    def test_string_version(self) -> None:
        assert extract_cache_version({"space": {"version": "1700000000"}}) == "1700000000"

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"space": {}},
            {"space": None},
            {"space": {"version": None}},
            {"space": {"version": True}},
            {"space": {"version": ""}},
            [],
        ],
    )
    def test_unusable_body(self, body: Any) -> None:
        with pytest.raises(CacheRefreshError):
            extract_cache_version(body)


class TestCacheVersionManager:
    def test_starts_without_version(self) -> None:
        manager = CacheVersionManager(_Space())
        assert manager.token is None

    def test_no_version_warns_and_returns_none(self, caplog: pytest.LogCaptureFixture) -> None:
        manager = CacheVersionManager(_Space())
        with caplog.at_level(logging.WARNING, logger="storyblok_client.cache_version"):
            assert manager.resolve() is None
        assert MISSING_VERSION_WARNING in caplog.messages

    def test_warns_on_every_request(self, caplog: pytest.LogCaptureFixture) -> None:
        manager = CacheVersionManager(_Space())
        with caplog.at_level(logging.WARNING, logger="storyblok_client.cache_version"):
            manager.resolve()
            manager.resolve()
        assert caplog.messages.count(MISSING_VERSION_WARNING) == 2

    def test_invalidate_stores_version(self) -> None:
        space = _Space(42)
        manager = CacheVersionManager(space)
        assert manager.invalidate() == "42"
        assert manager.token == "42"
        assert manager.resolve() == "42"
        assert manager.resolve() == "42"
        assert space.calls == 1

    def test_invalidate_replaces_version(self) -> None:
        manager = CacheVersionManager(_Space(1, 2))
        manager.invalidate()
        manager.invalidate()
        assert manager.token == "2"

    def test_no_warning_once_version_known(self, caplog: pytest.LogCaptureFixture) -> None:
        manager = CacheVersionManager(_Space(42))
        manager.invalidate()
        with caplog.at_level(logging.WARNING, logger="storyblok_client.cache_version"):
            manager.resolve()
        assert caplog.records == []

    def test_reset(self) -> None:
        manager = CacheVersionManager(_Space(42))
        manager.invalidate()
        manager.reset()
        assert manager.token is None

    def test_auto_invalidate_refreshes_each_time(self) -> None:
        space = _Space(1, 2)
        manager = CacheVersionManager(space, auto_invalidate=True)
        assert manager.resolve() == "1"
        assert manager.resolve() == "2"
        assert space.calls == 2

    def test_failed_invalidate_keeps_previous_version(self) -> None:
        manager = CacheVersionManager(_Space(42, ServerError("HTTP 503", status_code=503)))
        manager.invalidate()
        with pytest.raises(CacheRefreshError) as exc_info:
            manager.invalidate()
        assert isinstance(exc_info.value.__cause__, ServerError)
        assert manager.token == "42"

    def test_strict_auto_refresh_failure_raises(self) -> None:
        manager = CacheVersionManager(
            _Space(ServerError("HTTP 500", status_code=500)), auto_invalidate=True
        )
        with pytest.raises(CacheRefreshError):
            manager.resolve()

    def test_lenient_auto_refresh_failure_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        space = _Space(42, None)
        manager = CacheVersionManager(space, auto_invalidate=True, strict=False)
        assert manager.resolve() == "42"
        with caplog.at_level(logging.WARNING, logger="storyblok_client.cache_version"):
            assert manager.resolve() == "42"
        assert any("Automatic cache refresh failed" in m for m in caplog.messages)

    def test_version_change_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        manager = CacheVersionManager(_Space(1, 2))
        with caplog.at_level(logging.DEBUG, logger="storyblok_client.cache_version"):
            manager.invalidate()
            manager.invalidate()
        assert "Cache version changed: 1 -> 2" in caplog.messages

    def test_concurrent_resolve_is_serialised(self) -> None:
        in_flight = 0
        overlaps = 0
        counter = itertools.count(1)
        guard = threading.Lock()

        def fetch_space() -> Any:
            nonlocal in_flight, overlaps
            with guard:
                in_flight += 1
                overlaps = max(overlaps, in_flight)
            time.sleep(0.001)
            version = next(counter)
            with guard:
                in_flight -= 1
            return {"space": {"version": version}}

        manager = CacheVersionManager(fetch_space, auto_invalidate=True)
        with ThreadPoolExecutor(max_workers=8) as pool:
            tokens = list(pool.map(lambda _: manager.resolve(), range(40)))

        assert overlaps == 1
        assert sorted(tokens, key=int) == [str(n) for n in range(1, 41)]
        assert manager.token == "40"


class TestAsyncCacheVersionManager:
    @staticmethod
    def _async_space(*versions: Any) -> Any:
        space = _Space(*versions)

        async def fetch() -> Any:
            return space()

        fetch.space = space  # type: ignore[attr-defined]
        return fetch

    @pytest.mark.asyncio
    async def test_invalidate_and_resolve(self) -> None:
        manager = AsyncCacheVersionManager(self._async_space(7))
        assert await manager.resolve() is None
        assert await manager.invalidate() == "7"
        assert await manager.resolve() == "7"

    @pytest.mark.asyncio
    async def test_auto_invalidate(self) -> None:
        fetch = self._async_space(1, 2)
        manager = AsyncCacheVersionManager(fetch, auto_invalidate=True)
        assert await manager.resolve() == "1"
        assert await manager.resolve() == "2"
        assert fetch.space.calls == 2

    @pytest.mark.asyncio
    async def test_strict_failure(self) -> None:
        manager = AsyncCacheVersionManager(
            self._async_space(ServerError("HTTP 502", status_code=502)), auto_invalidate=True
        )
        with pytest.raises(CacheRefreshError):
            await manager.resolve()

    @pytest.mark.asyncio
    async def test_reset(self) -> None:
        manager = AsyncCacheVersionManager(self._async_space(7))
        await manager.invalidate()
        await manager.reset()
        assert manager.token is None
