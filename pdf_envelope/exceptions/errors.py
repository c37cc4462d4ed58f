"""PDF envelope exceptions."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class EnvelopeError(Exception):
    """Base exception for the envelope feature."""


class PreconditionError(EnvelopeError):
    """Raised before any file is touched (missing input, output exists, ...)."""


class SettingsError(EnvelopeError):
    """Raised when the settings document cannot be read or parsed."""


class OutputLockedError(EnvelopeError):
    """Raised when a file could not be opened for writing after all retries."""

    def __init__(self, path: Path, attempts: int, cause: Optional[BaseException] = None) -> None:
        super().__init__(
            f"{path} could not be opened for writing after {attempts} attempt(s). "
            "Ensure it is not opened in another application."
        )
        self.path = path
        self.attempts = attempts
        self.cause = cause


class StageError(EnvelopeError):
    """Fatal failure of one pipeline stage; kept_path is a file left for inspection."""

    def __init__(self, stage: str, message: str, kept_path: Optional[Path] = None) -> None:
        super().__init__(f"[{stage}] {message}")
        self.stage = stage
        self.kept_path = kept_path


class CommitError(EnvelopeError):
    """The final output could not replace the input file; the temp output is kept."""

    def __init__(self, temp_path: Path, message: str) -> None:
        super().__init__(message)
        self.temp_path = temp_path
