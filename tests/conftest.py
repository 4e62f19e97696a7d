"""Shared test fixtures for storyblok_client.

Provides canned API bodies, a recording :class:`httpx.MockTransport`
factory, and cleanup of the global output and logging state. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from storyblok_client.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the package log handlers.

    The CLI attaches a RichHandler bound to the CliRunner's stderr. Once
    the runner's stream is closed that handler must not receive records
    from later tests.
    """
    yield
    reset_output()
    pkg_logger = logging.getLogger("storyblok_client")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep real STORYBLOK_* variables and ./storyblok.json out of tests."""
    for name in (
        "STORYBLOK_TOKEN",
        "STORYBLOK_AUTO_CACHE_INVALIDATION",
        "STORYBLOK_BASE_URL",
        "STORYBLOK_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Canned bodies
# ---------------------------------------------------------------------------


def _story(**overrides: Any) -> dict[str, Any]:
    """Return a minimal valid story object, with *overrides* applied."""
    story: dict[str, Any] = {
        "id": 107350,
        "uuid": "ac0d2ed0-e323-43ca-ae59-5cd7d38683cb",
        "name": "Article 1",
        "slug": "article-1",
        "full_slug": "article/article-1",
        "content": {"component": "article", "title": "Hello", "rating": 4},
        "created_at": "2024-03-05T14:07:00.000Z",
        "published_at": "2024-03-06T09:00:00.000Z",
        "first_published_at": "2024-03-06T09:00:00.000Z",
        "alternates": [],
        "sort_by_date": None,
        "position": -10,
        "tag_list": ["news"],
        "is_startpage": False,
        "parent_id": 107349,
        "meta_data": None,
        "group_id": "fb0d9e1c-1b9c-4d8b-a2c9-0d2b3c4e5f60",
        "release_id": None,
        "lang": "default",
        "path": None,
        "translated_slugs": [],
    }
    story.update(overrides)
    return story


@pytest.fixture
def make_story() -> Callable[..., dict[str, Any]]:
    return _story


@pytest.fixture
def story_body() -> dict[str, Any]:
    return {"story": _story()}


@pytest.fixture
def stories_body() -> dict[str, Any]:
    return {
        "stories": [
            _story(),
            _story(
                id=107351,
                uuid="b1",
                name="Article 2",
                slug="article-2",
                full_slug="article/article-2",
            ),
        ]
    }


@pytest.fixture
def space_body() -> dict[str, Any]:
    return {"space": {"id": 1, "name": "Demo", "version": 1700000000}}


# ---------------------------------------------------------------------------
# Recording transport
# ---------------------------------------------------------------------------


class Recorder:
    """Routes requests by path to canned responses and records every request.

    Args:
        routes: Maps a path suffix (e.g. ``"spaces/me"``) to either a JSON
            body, an :class:`httpx.Response`, or a callable taking the
            request and returning one of those.
    """

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, target in self.routes.items():
            if request.url.path.endswith(suffix):
                if callable(target):
                    target = target(request)
                if isinstance(target, httpx.Response):
                    return target
                return httpx.Response(200, json=target)
        return httpx.Response(404, json={"error": "Not found"})

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def params(self, index: int = -1) -> dict[str, str]:
        return dict(self.requests[index].url.params)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def recorder_factory() -> Callable[[dict[str, Any]], Recorder]:
    return Recorder
