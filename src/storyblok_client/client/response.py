"""Response classification and deserialisation.

This module is the boundary between raw :class:`httpx.Response` objects
and the typed results returned by the clients:

* :func:`raise_for_status` maps every non-2xx status to a typed
  :class:`~storyblok_client.exceptions.TransportError` subclass. A failed
  response is never handed back to the caller as if it succeeded.
* :func:`decode_story` / :func:`decode_stories` turn the ``story`` or
  ``stories`` key of a body into :class:`~storyblok_client.models.Story`
  objects, raising :class:`~storyblok_client.exceptions.DecodeError`
  with the offending field path.
* :class:`StoryblokResponse` bundles the stories with the status code and
  the pagination headers.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from storyblok_client.exceptions import (
    AuthError,
    DecodeError,
    NotFoundError,
    ServerError,
    TransportError,
)
from storyblok_client.models import Story


class StoryblokResponse:
    """Fetched stories plus metadata about the HTTP response.

    Args:
        status_code: HTTP status of the response.
        headers: Response headers (case-insensitive mapping).
        stories: The decoded stories, in API order.
        raw: The decoded JSON body.
    """

    def __init__(
        self,
        status_code: int,
        headers: httpx.Headers,
        stories: list[Story],
        raw: Any = None,
    ) -> None:
        self.status_code = status_code
        self.headers = headers
        self.stories = stories
        self.raw = raw

    @property
    def total(self) -> int:
        """Total number of matching stories, from the ``Total`` header (0 if absent)."""
        return parse_int_header(self.headers, "Total")

    @property
    def per_page(self) -> int:
        """Page size used by the API, from the ``Per-Page`` header (0 if absent)."""
        return parse_int_header(self.headers, "Per-Page")

    @property
    def story(self) -> Optional[Story]:
        """The first story, convenient after :meth:`fetch_one`."""
        return self.stories[0] if self.stories else None

    def __len__(self) -> int:
        return len(self.stories)

    def __repr__(self) -> str:
        return (
            f"StoryblokResponse(status_code={self.status_code}, "
            f"stories={len(self.stories)}, total={self.total})"
        )


def parse_int_header(headers: httpx.Headers, name: str) -> int:
    """Parse an integer header, returning 0 when it is absent or malformed."""
    value = headers.get(name)
    if value is None:
        return 0
    try:
        return int(value.strip())
    except ValueError:
        return 0


# ------------------------------------------------------------------ #
# Status classification
# ------------------------------------------------------------------ #


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json()
    except ValueError:
        return response.text[:200] if response.text else ""
    if isinstance(detail, dict):
        return str(detail.get("error") or detail.get("message") or detail.get("detail") or "")
    if isinstance(detail, list):
        return ", ".join(str(item) for item in detail)
    return str(detail)


def raise_for_status(response: httpx.Response) -> None:
    """Raise a typed exception for any non-2xx *response*.

    Raises:
        AuthError: On 401 / 403.
        NotFoundError: On 404.
        ServerError: On 5xx.
        TransportError: On any other non-2xx status.
    """
    status = response.status_code
    if 200 <= status < 300:
        return

    detail = _error_detail(response)
    prefix = f"HTTP {status}"
    message = f"{prefix}: {detail}" if detail else prefix

    if status in (401, 403):
        raise AuthError(message, status_code=status)
    if status == 404:
        raise NotFoundError(message, status_code=status)
    if status >= 500:
        raise ServerError(message, status_code=status)
    raise TransportError(message, status_code=status)


# ------------------------------------------------------------------ #
# Body decoding
# ------------------------------------------------------------------ #


def decode_json(response: httpx.Response) -> Any:
    """Decode the JSON body of *response*.

    Raises:
        DecodeError: If the body is not valid JSON.
    """
    try:
        return response.json()
    except ValueError as exc:
        raise DecodeError(f"Response body is not valid JSON: {exc}") from exc


def _field_path(prefix: str, exc: ValidationError) -> str:
    err = exc.errors()[0]
    parts = [prefix, *(str(part) for part in err["loc"])]
    return ".".join(part for part in parts if part)


def decode_story(data: Any, path: str = "story") -> Story:
    """Validate one story object.

    Args:
        data: The JSON object for the story.
        path: Field path of *data* inside the body, used in error messages.

    Raises:
        DecodeError: Naming the missing or mistyped field.
    """
    if not isinstance(data, dict):
        raise DecodeError(
            f"Expected an object at '{path}', got {type(data).__name__}", field=path
        )
    try:
        return Story.model_validate(data)
    except ValidationError as exc:
        field = _field_path(path, exc)
        msg = exc.errors()[0]["msg"]
        raise DecodeError(f"Invalid story field '{field}': {msg}", field=field) from exc


def decode_stories(body: Any) -> list[Story]:
    """Decode the ``stories`` array of a listing body.

    Either every story decodes or :class:`DecodeError` is raised; there
    are no partial results.
    """
    if not isinstance(body, dict) or "stories" not in body:
        raise DecodeError("Response body has no 'stories' field", field="stories")
    items = body["stories"]
    if not isinstance(items, list):
        raise DecodeError(
            f"Expected a list at 'stories', got {type(items).__name__}", field="stories"
        )
    return [decode_story(item, path=f"stories.{index}") for index, item in enumerate(items)]


def decode_single(body: Any) -> Story:
    """Decode the ``story`` object of a single-story body."""
    if not isinstance(body, dict) or "story" not in body:
        raise DecodeError("Response body has no 'story' field", field="story")
    return decode_story(body["story"])


def build_single_response(response: httpx.Response) -> StoryblokResponse:
    """Turn a successful single-story response into a :class:`StoryblokResponse`."""
    body = decode_json(response)
    return StoryblokResponse(response.status_code, response.headers, [decode_single(body)], body)


def build_multiple_response(response: httpx.Response) -> StoryblokResponse:
    """Turn a successful listing response into a :class:`StoryblokResponse`."""
    body = decode_json(response)
    return StoryblokResponse(response.status_code, response.headers, decode_stories(body), body)
