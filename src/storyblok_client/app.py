"""Typer application and CLI entry point for storyblok_client.

The ``storyblok`` command is a thin consumer of
:class:`~storyblok_client.client.SyncClient`. It offers the two calls a
site typically makes (one story by slug, a filtered listing) plus a way to
read the space's current cache version:

    storyblok story article/article-1
    storyblok stories --starts-with article/ --sort-by content.rating:desc:int
    storyblok cache-version

Settings come from :func:`~storyblok_client.config.resolve_config`, so
``--token`` may be replaced by ``STORYBLOK_TOKEN`` or ``./storyblok.json``.

See Also:
    :mod:`storyblok_client.output`: Output formatting initialised in
    :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional

import typer

from storyblok_client import __version__
from storyblok_client.client import SyncClient
from storyblok_client.config import resolve_config
from storyblok_client.exceptions import InvalidArgumentError, StoryblokError
from storyblok_client.exit_codes import EXIT_GENERIC_FAILURE
from storyblok_client.models import StoryVersion
from storyblok_client.output import OutputFormat, OutputManager, get_output, set_output
from storyblok_client.query import ResolveRelation, SortBy, SortOrder, SortType

app = typer.Typer(
    name="storyblok",
    help="Query the Storyblok content-delivery API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"storyblok-client {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    token: Optional[str] = typer.Option(
        None, "--token", "-t", help="API token (overrides STORYBLOK_TOKEN)."
    ),
    auto_cache: Optional[bool] = typer.Option(
        None,
        "--auto-cache/--no-auto-cache",
        help="Refresh the cache version before every request.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log requests (token redacted) to stderr."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~storyblok_client.output.OutputManager`,
    attaches the log handler, and stores the connection overrides in
    ``ctx.obj``. A caller may pre-populate ``ctx.obj["transport"]`` with an
    httpx transport; it is handed to every client this command creates.
    """
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, verbose=verbose)
    output.configure_logging()
    set_output(output)

    ctx.ensure_object(dict)
    ctx.obj["token"] = token
    ctx.obj["auto_cache"] = auto_cache


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


@contextmanager
def _errors_to_exit() -> Iterator[None]:
    """Report a :class:`StoryblokError` on stderr and exit with its code."""
    try:
        yield
    except StoryblokError as exc:
        get_output().error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


def _open_client(ctx: typer.Context) -> SyncClient:
    config = resolve_config(
        token=ctx.obj.get("token"),
        auto_cache_invalidation=ctx.obj.get("auto_cache"),
    )
    return SyncClient.from_config(config, transport=ctx.obj.get("transport"))


def _refresh_cache_version(client: SyncClient) -> None:
    # With auto invalidation every request refreshes on its own.
    if not client.config.auto_cache_invalidation:
        client.invalidate_cache_version()


def parse_relation(text: str) -> ResolveRelation:
    """Parse ``component.field`` into a :class:`ResolveRelation`."""
    component, sep, field = text.partition(".")
    if not sep:
        raise InvalidArgumentError(
            f"Relation must look like 'component.field', got {text!r}"
        )
    return ResolveRelation(component, field)


def parse_sort(text: str) -> SortBy:
    """Parse ``field[:order[:type]]`` into a :class:`SortBy`.

    A field prefixed with ``content.`` sorts by a content field, anything
    else by a story attribute::

        created_at:desc         -> SortBy.by_attribute("created_at", SortOrder.DESC)
        content.rating:asc:int  -> SortBy.by_content("rating", SortOrder.ASC, SortType.INT)
    """
    parts = text.split(":")
    if len(parts) > 3:
        raise InvalidArgumentError(f"Sort must look like 'field[:order[:type]]', got {text!r}")
    try:
        order = SortOrder(parts[1]) if len(parts) > 1 else None
        sort_type = SortType(parts[2]) if len(parts) > 2 else None
    except ValueError as exc:
        raise InvalidArgumentError(f"Invalid sort {text!r}: {exc}") from exc

    field = parts[0]
    if field.startswith("content."):
        return SortBy.by_content(field[len("content."):], order, sort_type)
    return SortBy.by_attribute(field, order, sort_type)


def _version(draft: bool) -> Optional[StoryVersion]:
    return StoryVersion.DRAFT if draft else None


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("story")
def story_command(
    ctx: typer.Context,
    slug: Optional[str] = typer.Argument(None, help="Full slug, e.g. article/article-1."),
    story_id: Optional[int] = typer.Option(None, "--id", help="Numeric story id."),
    uuid: Optional[str] = typer.Option(None, "--uuid", help="Story uuid."),
    draft: bool = typer.Option(False, "--draft", help="Fetch the draft version."),
    language: Optional[str] = typer.Option(None, "--language", help="Language code."),
    resolve_links: bool = typer.Option(False, "--resolve-links", help="Resolve story links."),
    resolve_relations: Optional[list[str]] = typer.Option(
        None, "--resolve-relation", help="component.field to resolve (repeatable)."
    ),
) -> None:
    """Fetch one story by slug, --id or --uuid."""
    with _errors_to_exit():
        relations = [parse_relation(item) for item in resolve_relations or []]
        with _open_client(ctx) as client:
            _refresh_cache_version(client)
            response = client.fetch_one(
                full_slug=slug,
                id=story_id,
                uuid=uuid,
                version=_version(draft),
                language=language,
                resolve_links=resolve_links or None,
                resolve_relations=relations or None,
            )
        get_output().print_story(response.stories[0])


@app.command("stories")
def stories_command(
    ctx: typer.Context,
    starts_with: Optional[str] = typer.Option(
        None, "--starts-with", help="Only stories under this slug prefix."
    ),
    page: Optional[int] = typer.Option(None, "--page", help="Page number, from 1."),
    per_page: Optional[int] = typer.Option(None, "--per-page", help="Page size, 1-100."),
    sort_by: Optional[str] = typer.Option(
        None, "--sort-by", help="field[:asc|desc[:string|int|float]]; prefix content fields with 'content.'."
    ),
    search: Optional[str] = typer.Option(None, "--search", help="Full-text search term."),
    tags: Optional[list[str]] = typer.Option(None, "--tag", help="Tag to match (repeatable)."),
    draft: bool = typer.Option(False, "--draft", help="Fetch draft versions."),
    language: Optional[str] = typer.Option(None, "--language", help="Language code."),
) -> None:
    """List stories."""
    with _errors_to_exit():
        sort = parse_sort(sort_by) if sort_by else None
        with _open_client(ctx) as client:
            _refresh_cache_version(client)
            response = client.fetch_multiple(
                starts_with=starts_with,
                page=page,
                per_page=per_page,
                sort_by=sort,
                search_term=search,
                with_tag=tags or None,
                version=_version(draft),
                language=language,
            )
        get_output().print_stories(response)


@app.command("cache-version")
def cache_version_command(ctx: typer.Context) -> None:
    """Print the space's current cache version."""
    with _errors_to_exit():
        with _open_client(ctx) as client:
            version = client.invalidate_cache_version()
        get_output().print_data(version)


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``storyblok`` console script.

    :class:`~storyblok_client.exceptions.StoryblokError` instances that
    escape a command cause a clean exit with the error's ``exit_code``;
    anything else is reported and exits with a generic failure.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except StoryblokError as exc:
        get_output().error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        get_output().error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
