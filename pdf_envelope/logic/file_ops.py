"""
File helpers for the pipeline:

- open_for_write(): open with retries (file locked by a PDF viewer, ...)
- temp_path_for(): collision-free temp name next to a target
- replace_file(): atomic replace via os.replace
- delete_quietly(): best-effort delete, failures are logged only
"""
from __future__ import annotations

import hashlib
import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Iterator

from ..exceptions.errors import OutputLockedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = 3
    delay_seconds: float = 5.0
    sleep: Callable[[float], None] = time.sleep


@contextmanager
def open_for_write(path: Path, policy: RetryPolicy = RetryPolicy()) -> Iterator[BinaryIO]:
    """Opens *path* for binary writing, retrying on OSError."""
    path = Path(path)
    attempts = max(1, policy.attempts)
    last_error: OSError | None = None
    fh = None
    for attempt in range(1, attempts + 1):
        try:
            fh = path.open("wb")
            break
        except OSError as ex:
            last_error = ex
            if attempt < attempts:
                logger.error(
                    "%s could not be opened for writing. Retrying in %s seconds (%d of %d)...",
                    path, policy.delay_seconds, attempt, attempts,
                )
                policy.sleep(policy.delay_seconds)
    if fh is None:
        raise OutputLockedError(path, attempts, last_error)
    with fh:
        yield fh


def temp_path_for(target: Path, label: str = "") -> Path:
    """
    <dir>/<name>-<hash><suffix>, hash over absolute path, label and a ns
    timestamp so parallel runs on the same target do not collide.
    """
    target = Path(target).absolute()
    seed = f"{target}|{label}|{time.time_ns()}".encode("utf-8")
    digest = hashlib.sha1(seed).hexdigest()[:10]
    tag = f"-{label}" if label else ""
    return target.with_name(f"{target.name}{tag}-{digest}{target.suffix}")


def replace_file(source: Path, target: Path) -> None:
    """Moves *source* over *target*; the target is never left half-written."""
    os.replace(source, target)


def delete_quietly(path: Path, what: str = "Temporary file") -> bool:
    try:
        Path(path).unlink(missing_ok=True)
        return True
    except OSError as ex:
        logger.warning("%s could not be deleted (%s): %s", what, path, ex)
        return False
