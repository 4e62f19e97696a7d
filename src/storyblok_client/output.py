"""Output formatting for the ``storyblok`` command.

Keeps data and diagnostics on separate streams:

* **stdout** -- stories only (a JSON document, a table, or tab-separated
  lines). This is what downstream tools pipe and parse.
* **stderr** -- errors, warnings, and log records.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` flag.

:class:`OutputManager` is created once in :func:`~storyblok_client.app.main_callback`
and installed with :func:`set_output`; commands fetch it with
:func:`get_output`.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from storyblok_client.client.response import StoryblokResponse
from storyblok_client.models import Story

_STORY_COLUMNS = ("id", "full_slug", "name", "published_at")


class OutputFormat(str, Enum):
    """Supported output formats.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes command output to stdout/stderr in the resolved format.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        verbose: Show debug log records on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        return self._format

    def configure_logging(self) -> None:
        """Attach a :class:`~rich.logging.RichHandler` on stderr to the package logger.

        With ``verbose`` the package logs at DEBUG (request URLs with the
        token redacted, cache-version changes); otherwise only warnings
        are shown.
        """
        pkg_logger = logging.getLogger("storyblok_client")
        for handler in list(pkg_logger.handlers):
            if isinstance(handler, RichHandler):
                pkg_logger.removeHandler(handler)
        handler = RichHandler(
            console=self._stderr,
            show_time=False,
            show_path=self._verbose,
            markup=False,
        )
        pkg_logger.addHandler(handler)
        pkg_logger.setLevel(logging.DEBUG if self._verbose else logging.WARNING)

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_story(self, story: Story) -> None:
        """Print one story in full."""
        data = story.model_dump(mode="json", by_alias=False)
        if self._format == OutputFormat.JSON:
            self.print_data(dump_json(data))
        elif self._format == OutputFormat.PLAIN:
            for key, value in data.items():
                if isinstance(value, (dict, list)):
                    value = json.dumps(value, ensure_ascii=False)
                self.print_data(f"{key}\t{value}")
        else:
            json_str = dump_json(data)
            self._stdout.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))

    def print_stories(self, response: StoryblokResponse) -> None:
        """Print a listing: one row per story, plus pagination info.

        * **Rich mode** -- a :class:`~rich.table.Table` titled with the
          ``Total`` header.
        * **JSON mode** -- ``{"total", "per_page", "stories"}`` with full
          story objects.
        * **Plain mode** -- tab-separated summary columns, no header.
        """
        if self._format == OutputFormat.JSON:
            document = {
                "total": response.total,
                "per_page": response.per_page,
                "stories": [story.model_dump(mode="json") for story in response.stories],
            }
            self.print_data(dump_json(document))
            return

        rows = [_summary_row(story) for story in response.stories]
        if self._format == OutputFormat.PLAIN:
            for row in rows:
                self.print_data("\t".join(row))
            return

        table = Table(
            title=f"{len(rows)} of {response.total} stories",
            show_header=True,
            header_style="bold cyan",
        )
        for column in _STORY_COLUMNS:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {message}")


def _summary_row(story: Story) -> list[str]:
    published = story.published_at.isoformat() if story.published_at else ""
    return [str(story.id), story.full_slug, story.name, published]


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


def dump_json(data: Any) -> str:
    """Serialise *data* the way JSON output mode does."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)
