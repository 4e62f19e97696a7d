"""Numeric process exit codes used by the ``storyblok`` command.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~storyblok_client.exceptions.StoryblokError` subclass.
Shell scripts can inspect the exit code to determine the failure class
without parsing stderr.

Example::

    $ storyblok story blog/missing-post
    $ echo $?
    4   # EXIT_NOT_FOUND -- the story does not exist
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, query terms, or configuration."""

EXIT_AUTH_FAILURE = 3
"""The API token was rejected (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested story was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The content-delivery API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_CACHE_REFRESH_ERROR = 7
"""The cache version could not be fetched from the space endpoint."""

EXIT_DECODE_ERROR = 8
"""The response body did not match the expected shape."""

EXIT_REQUEST_FAILED = 9
"""The API answered with a non-success status not covered above."""
