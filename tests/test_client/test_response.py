"""Tests for storyblok_client.client.response -- status mapping and story decoding."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest

from storyblok_client.client.response import (
    StoryblokResponse,
    build_multiple_response,
    build_single_response,
    decode_stories,
    decode_story,
    parse_int_header,
    raise_for_status,
)
from storyblok_client.exceptions import (
    AuthError,
    DecodeError,
    NotFoundError,
    ServerError,
    TransportError,
)


def _response(status_code: int = 200, **kwargs: Any) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("GET", "https://x/v1/cdn/stories"), **kwargs)


# ---------------------------------------------------------------------------
# Status classification
# ---------------------------------------------------------------------------


class TestRaiseForStatus:
    @pytest.mark.parametrize("status", [200, 201, 204])
    def test_success_passes(self, status: int) -> None:
        raise_for_status(_response(status))

    @pytest.mark.parametrize(
        "status, exc_type",
        [
            (401, AuthError),
            (403, AuthError),
            (404, NotFoundError),
            (500, ServerError),
            (503, ServerError),
            (400, TransportError),
            (429, TransportError),
            (301, TransportError),
        ],
    )
    def test_failure_mapping(self, status: int, exc_type: type[TransportError]) -> None:
        with pytest.raises(exc_type) as exc_info:
            raise_for_status(_response(status))
        assert exc_info.value.status_code == status

    def test_error_detail_in_message(self) -> None:
        with pytest.raises(NotFoundError, match="HTTP 404: This record could not be found"):
            raise_for_status(_response(404, json={"error": "This record could not be found"}))

    def test_list_detail(self) -> None:
        with pytest.raises(TransportError, match="per_page is too big"):
            raise_for_status(_response(422, json=["per_page is too big"]))

    def test_text_detail(self) -> None:
        with pytest.raises(ServerError, match="HTTP 502: Bad Gateway"):
            raise_for_status(_response(502, text="Bad Gateway"))

    def test_all_transport_errors_share_base(self) -> None:
        for status in (401, 404, 500, 418):
            with pytest.raises(TransportError):
                raise_for_status(_response(status))


# ---------------------------------------------------------------------------
# Story decoding
# ---------------------------------------------------------------------------


class TestDecodeStory:
    def test_full_story(self, make_story: Callable[..., dict[str, Any]]) -> None:
        story = decode_story(make_story())
        assert story.id == 107350
        assert story.full_slug == "article/article-1"
        assert story.content["title"] == "Hello"
        assert story.created_at == datetime(2024, 3, 5, 14, 7, tzinfo=timezone.utc)
        assert story.tag_list == ["news"]
        assert story.position == -10

    def test_missing_optional_fields_default(self, make_story: Callable[..., dict[str, Any]]) -> None:
        data = make_story()
        for key in ("alternates", "tag_list", "translated_slugs", "position", "lang",
                    "published_at", "is_startpage"):
            del data[key]
        story = decode_story(data)
        assert story.alternates == []
        assert story.tag_list == []
        assert story.translated_slugs == []
        assert story.position == 0
        assert story.lang == "default"
        assert story.published_at is None
        assert story.is_startpage is False

    def test_null_lists_become_empty(self, make_story: Callable[..., dict[str, Any]]) -> None:
        story = decode_story(make_story(tag_list=None, alternates=None))
        assert story.tag_list == []
        assert story.alternates == []

    def test_missing_created_at(self, make_story: Callable[..., dict[str, Any]]) -> None:
        data = make_story()
        del data["created_at"]
        with pytest.raises(DecodeError) as exc_info:
            decode_story(data)
        assert exc_info.value.field == "story.created_at"

    def test_mistyped_id(self, make_story: Callable[..., dict[str, Any]]) -> None:
        with pytest.raises(DecodeError) as exc_info:
            decode_story(make_story(id="not-a-number"))
        assert exc_info.value.field == "story.id"

    def test_not_an_object(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            decode_story(["x"])
        assert exc_info.value.field == "story"

    def test_legacy_release_key(self, make_story: Callable[..., dict[str, Any]]) -> None:
        data = make_story()
        del data["release_id"]
        data["realease_id"] = 12
        assert decode_story(data).release_id == 12

    def test_unknown_keys_kept(self, make_story: Callable[..., dict[str, Any]]) -> None:
        story = decode_story(make_story(default_full_slug="de/article"))
        assert story.model_extra == {"default_full_slug": "de/article"}


class TestDecodeStories:
    def test_empty_list(self) -> None:
        assert decode_stories({"stories": []}) == []

    def test_missing_key(self) -> None:
        with pytest.raises(DecodeError):
            decode_stories({"story": {}})

    def test_bad_item_has_index_in_field(self, make_story: Callable[..., dict[str, Any]]) -> None:
        bad = make_story()
        del bad["uuid"]
        with pytest.raises(DecodeError) as exc_info:
            decode_stories({"stories": [make_story(), bad]})
        assert exc_info.value.field == "stories.1.uuid"


# ---------------------------------------------------------------------------
# Response wrappers
# ---------------------------------------------------------------------------


class TestStoryblokResponse:
    def test_pagination_headers(self, stories_body: dict[str, Any]) -> None:
        resp = build_multiple_response(
            _response(200, json=stories_body, headers={"Total": "37", "Per-Page": "25"})
        )
        assert resp.total == 37
        assert resp.per_page == 25
        assert len(resp) == 2
        assert resp.status_code == 200

    def test_missing_headers_default_to_zero(self, stories_body: dict[str, Any]) -> None:
        resp = build_multiple_response(_response(200, json=stories_body))
        assert resp.total == 0
        assert resp.per_page == 0

    def test_single(self, story_body: dict[str, Any]) -> None:
        resp = build_single_response(_response(200, json=story_body))
        assert resp.story is not None
        assert resp.story.slug == "article-1"
        assert resp.raw == story_body

    def test_invalid_json(self) -> None:
        with pytest.raises(DecodeError):
            build_single_response(_response(200, content=b"<html>"))

    def test_empty_story_property(self) -> None:
        resp = StoryblokResponse(200, httpx.Headers(), [])
        assert resp.story is None
        assert "stories=0" in repr(resp)


class TestParseIntHeader:
    def test_malformed(self) -> None:
        assert parse_int_header(httpx.Headers({"Total": "lots"}), "Total") == 0

    def test_case_insensitive(self) -> None:
        assert parse_int_header(httpx.Headers({"total": " 5 "}), "Total") == 5
