"""Exception hierarchy for storyblok_client.

All exceptions inherit from :class:`StoryblokError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`storyblok_client.exit_codes`. Library callers catch the typed
subclasses; the ``storyblok`` command catches ``StoryblokError`` and exits
with the appropriate code.

Subclass hierarchy::

    StoryblokError (exit 1)
    +-- InvalidArgumentError     (exit 2)
    |   +-- InvalidQueryTermError (exit 2)
    +-- ConfigError              (exit 2)
    +-- TransportError           (exit 9)
    |   +-- AuthError            (exit 3)
    |   +-- NotFoundError        (exit 4)
    |   +-- ServerError          (exit 5)
    |   +-- ConnectionError_     (exit 6)
    +-- CacheRefreshError        (exit 7)
    +-- DecodeError              (exit 8)

Nothing in this package retries: a raised exception always reaches the
caller, who owns the retry policy.
"""

from __future__ import annotations

from typing import Optional

from storyblok_client.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CACHE_REFRESH_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_REQUEST_FAILED,
    EXIT_SERVER_ERROR,
)


class StoryblokError(Exception):
    """Base exception for all storyblok_client errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidArgumentError(StoryblokError):
    """Raised for contract violations on inputs, before any network call.

    Examples are passing both ``id`` and ``uuid`` to
    :meth:`~storyblok_client.client.SyncClient.fetch_one` or a
    non-positive ``page``.
    """

    exit_code = EXIT_INVALID_USAGE


class InvalidQueryTermError(InvalidArgumentError):
    """Raised when a filter, sort, or relation term cannot be constructed."""


class ConfigError(StoryblokError):
    """Raised for configuration problems (missing token, invalid JSON, bad env values)."""

    exit_code = EXIT_INVALID_USAGE


class TransportError(StoryblokError):
    """Raised when a request fails at the HTTP level.

    ``status_code`` holds the HTTP status of the failed response, or
    ``None`` when no response was received at all.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code of the failed response.
    """

    exit_code = EXIT_REQUEST_FAILED

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(TransportError):
    """Raised when the API rejects the token (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(TransportError):
    """Raised when the API returns HTTP 404 (story or space not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(TransportError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(TransportError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class CacheRefreshError(StoryblokError):
    """Raised when the cache version cannot be fetched or read.

    Covers both an unreachable ``spaces/me`` endpoint and a body without
    the ``space.version`` field. The underlying error, if any, is chained
    as ``__cause__``.
    """

    exit_code = EXIT_CACHE_REFRESH_ERROR


class DecodeError(StoryblokError):
    """Raised when a response body does not match the expected shape.

    Args:
        message: Human-readable error description.
        field: Dotted path of the missing or mistyped field
            (e.g. ``"story.created_at"``), or ``None`` when the body is
            not JSON at all.
    """

    exit_code = EXIT_DECODE_ERROR

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
