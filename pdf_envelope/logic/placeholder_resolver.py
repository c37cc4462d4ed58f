"""
placeholder_resolver.py

Resolves the placeholders of a single text field:

    {date}            current date/time, "%d.%m.%Y %H:%M:%S"
    {date:<format>}   current date/time, strftime pattern, e.g. {date:%Y-%m-%d}
    {pageNum}         current page + offset (page 1: see resolve())
    {numOfPages}      total pages + offset

Anything else in curly braces stays as it is.

Date patterns are limited to the directives that behave the same on every
platform (see _PORTABLE_DIRECTIVES). Platform extensions such as ``%-d`` or
``%e`` work with strftime on Linux and macOS but are rejected here, so the
field falls back to "%d.%m.%Y".
"""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%d.%m.%Y %H:%M:%S"
FALLBACK_DATE_FORMAT = "%d.%m.%Y"

_PLACEHOLDER_RE = re.compile(
    r"\{(?:(?P<date>date)(?::(?P<fmt>[^{}]*))?|(?P<page>pageNum)|(?P<total>numOfPages))\}"
)

# strftime directives that behave the same on every platform
_PORTABLE_DIRECTIVES = set("aAwdbBmyYHIpMSfzZjUWcxXGuV%")


class _InvalidDateFormat(ValueError):
    pass


def _check_date_format(fmt: str) -> None:
    i = 0
    while i < len(fmt):
        if fmt[i] == "%":
            if i + 1 >= len(fmt) or fmt[i + 1] not in _PORTABLE_DIRECTIVES:
                raise _InvalidDateFormat(fmt)
            i += 2
            continue
        i += 1


def format_date(now: datetime, fmt: Optional[str]) -> str:
    """Formats *now*; raises ValueError for an invalid pattern."""
    pattern = fmt if fmt else DEFAULT_DATE_FORMAT
    _check_date_format(pattern)
    try:
        return now.strftime(pattern)
    except ValueError as ex:
        raise _InvalidDateFormat(pattern) from ex


def resolve(
    text: str,
    total_page_count: int,
    current_page_index: int,
    page_number_offset: int = 0,
    *,
    now: Optional[datetime] = None,
) -> str:
    """
    Replaces all placeholders in *text*.

    Every match is substituted on its own span, so several placeholders in one
    field do not influence each other.

    Known oddity: on page 1 a field containing ``{pageNum}`` is replaced as a
    whole by ``"<total + offset> pages"``, surrounding text and other
    placeholders included. Existing settings files rely on this output for
    the cover page, so it is kept.
    """
    if not text or not text.strip():
        return ""

    moment = now or datetime.now()

    if current_page_index == 1 and any(m.group("page") for m in _PLACEHOLDER_RE.finditer(text)):
        return f"{total_page_count + page_number_offset} pages"

    def _substitute(match: re.Match) -> str:
        if match.group("date"):
            return format_date(moment, match.group("fmt"))
        if match.group("page"):
            return str(current_page_index + page_number_offset)
        return str(total_page_count + page_number_offset)

    try:
        return _PLACEHOLDER_RE.sub(_substitute, text)
    except _InvalidDateFormat:
        logger.warning("Invalid date format specified: %s", text)
        logger.warning("Using default: %s", FALLBACK_DATE_FORMAT)
        return moment.strftime(FALLBACK_DATE_FORMAT)
