"""Wire formatting for query values.

Every query value sent to the content-delivery API is a string. These
helpers render Python values into the exact string forms the API expects:

* dates -- ``YYYY-MM-DD HH:mm`` (24-hour clock, zero padded)
* integers -- plain decimal
* floats -- fixed-point decimal, never scientific notation
* lists -- comma-joined, no escaping, ``""`` for an empty list
* boolean flags -- ``"1"`` / ``"0"``

Invalid inputs raise :class:`~storyblok_client.exceptions.InvalidQueryTermError`.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal

from storyblok_client.exceptions import InvalidQueryTermError

DATE_FORMAT = "%Y-%m-%d %H:%M"
"""strftime pattern for date filter values."""

LIST_SEPARATOR = ","


def format_datetime(value: date | datetime) -> str:
    """Render a date or datetime as ``YYYY-MM-DD HH:mm``.

    Plain :class:`~datetime.date` values render with ``00:00``. Time zone
    information is ignored; the wall-clock time is sent as-is.

    Example::

        >>> format_datetime(datetime(2024, 3, 5, 14, 7))
        '2024-03-05 14:07'
    """
    if not isinstance(value, date):
        raise InvalidQueryTermError(
            f"Expected a date or datetime, got {type(value).__name__}"
        )
    return value.strftime(DATE_FORMAT)


def format_int(value: int) -> str:
    """Render an integer as a plain decimal string."""
    # bool is an int subclass; True would render as "True"
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidQueryTermError(f"Expected an int, got {type(value).__name__}")
    return str(value)


def format_float(value: float) -> str:
    """Render a number as a fixed-point decimal string.

    Uses the shortest round-tripping representation of the float and
    expands any exponent, so ``1e-07`` becomes ``"0.0000001"`` and
    ``1e20`` becomes ``"100000000000000000000"``.

    Raises:
        InvalidQueryTermError: For booleans, non-numbers, NaN, or infinity.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidQueryTermError(f"Expected a float, got {type(value).__name__}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidQueryTermError(f"Float filter values must be finite, got {number}")
    return format(Decimal(repr(number)), "f")


def join_values(values: Iterable[str]) -> str:
    """Join string values with a single comma.

    An empty iterable yields ``""``. Separators inside elements are not
    escaped.

    Raises:
        InvalidQueryTermError: If *values* is a bare string or contains
            a non-string element.
    """
    if isinstance(values, str):
        raise InvalidQueryTermError("Expected a list of strings, got a single string")
    items = list(values)
    for item in items:
        if not isinstance(item, str):
            raise InvalidQueryTermError(
                f"List values must be strings, got {type(item).__name__}"
            )
    return LIST_SEPARATOR.join(items)


def format_flag(value: bool) -> str:
    """Render a boolean flag as ``"1"`` or ``"0"``."""
    return "1" if value else "0"
