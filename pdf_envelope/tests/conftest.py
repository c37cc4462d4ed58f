from __future__ import annotations

from pathlib import Path

import pytest

from pdf_envelope.logic.file_ops import RetryPolicy
from pdf_envelope.tests.pdf_factory import make_pdf


@pytest.fixture
def source_pdf(tmp_path: Path) -> Path:
    return make_pdf(tmp_path / "source.pdf", pages=1)


@pytest.fixture
def no_wait() -> RetryPolicy:
    return RetryPolicy(attempts=3, delay_seconds=0, sleep=lambda _s: None)
