"""
Console output for the command line tool.

Messages go to stdout as plain text; warnings are yellow and errors red when
the stream is a terminal.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

_RESET = "\033[0m"
_COLORS = {
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}


class ConsoleFormatter(logging.Formatter):
    def __init__(self, *, use_color: bool) -> None:
        super().__init__("%(message)s")
        self._use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = _COLORS.get(record.levelno) if self._use_color else None
        return f"{color}{text}{_RESET}" if color else text


def configure_logging(level: int | str = logging.INFO, stream: Optional[TextIO] = None) -> logging.Handler:
    """Installs one console handler on the root logger (replacing earlier ones)."""
    stream = stream if stream is not None else sys.stdout
    use_color = bool(getattr(stream, "isatty", lambda: False)())
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ConsoleFormatter(use_color=use_color))
    handler.set_name("pdf_envelope_console")

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == "pdf_envelope_console":
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    return handler
