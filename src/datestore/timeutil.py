"""Rendering, parsing and natural-language resolution of instants.

Stored values use the JavaScript ``Date.prototype.toString`` rendering, e.g.
``"Mon Apr 11 2016 08:39:10 GMT-0400 (EDT)"``, so files written by other
date-store implementations stay readable. ISO-8601 values are accepted on
read as well.

Relative expressions such as ``"10 minutes ago"`` or ``"1 day from now"`` are
resolved with parsedatetime.
"""

import math
import re
from datetime import datetime
from typing import Optional

import parsedatetime  # type: ignore[import-untyped]

from datestore.logging import get_logger

logger = get_logger(__name__)

DISPLAY_FORMAT = "%a %b %d %Y %H:%M:%S GMT%z (%Z)"
_PARSE_FORMAT = "%a %b %d %Y %H:%M:%S GMT%z"
_ZONE_SUFFIX = re.compile(r"\s*\([^()]*\)\s*$")

_calendar = parsedatetime.Calendar(version=parsedatetime.VERSION_CONTEXT_STYLE)


def local_now() -> datetime:
    """Current time as a timezone-aware datetime in the local zone."""
    return datetime.now().astimezone()


def format_display(moment: datetime) -> str:
    """Render *moment* in the stored display format.

    Args:
        moment: Instant to render; naive values are taken as local time

    Returns:
        Display string such as ``"Mon Apr 11 2016 08:39:10 GMT-0400 (EDT)"``
    """
    return moment.astimezone().strftime(DISPLAY_FORMAT)


def parse_stored(raw: object) -> Optional[datetime]:
    """Parse a stored value back into an aware datetime.

    Args:
        raw: Value read from the store file

    Returns:
        The instant, or None if *raw* is not a recognisable date string
    """
    if not isinstance(raw, str) or not raw.strip():
        return None

    text = raw.strip()
    try:
        return datetime.strptime(_ZONE_SUFFIX.sub("", text), _PARSE_FORMAT)
    except ValueError:
        pass

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def resolve_expression(text: str, reference: Optional[datetime] = None) -> Optional[datetime]:
    """Resolve a natural-language time expression to an instant.

    Args:
        text: Expression such as ``"10 minutes ago"`` or ``"1 day from now"``
        reference: Instant the expression is relative to (default: now)

    Returns:
        Aware datetime in the local zone, or None if nothing in *text* could
        be parsed as a date or time
    """
    if not isinstance(text, str) or not text.strip():
        return None

    source = (reference or local_now()).astimezone().replace(tzinfo=None)
    result, context = _calendar.parseDT(text, sourceTime=source)
    if not context.hasDateOrTime:
        logger.debug("expression_unparsed", expression=text)
        return None
    # Naive local result; astimezone() attaches the local offset valid at that instant
    return result.astimezone()


def to_epoch(moment: Optional[datetime]) -> float:
    """Epoch seconds for *moment*, or NaN when it is None."""
    if moment is None:
        return math.nan
    return moment.timestamp()
