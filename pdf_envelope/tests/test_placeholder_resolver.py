"""Tests for the placeholder grammar."""
from __future__ import annotations

import logging

import pytest

from pdf_envelope.logic.placeholder_resolver import resolve
from pdf_envelope.tests.pdf_factory import FIXED_NOW


@pytest.mark.parametrize("total,offset", [(1, 0), (5, -1), (12, 3), (3, -5)])
def test_num_of_pages_adds_offset(total: int, offset: int) -> None:
    assert resolve("{numOfPages}", total, 2, offset) == str(total + offset)


@pytest.mark.parametrize("index,offset", [(2, -1), (7, 0), (3, 10)])
def test_page_num_adds_offset(index: int, offset: int) -> None:
    assert resolve("{pageNum}", 9, index, offset) == str(index + offset)


def test_page_num_on_first_page_yields_legacy_phrase() -> None:
    assert resolve("{pageNum}", 10, 1, -1) == "9 pages"
    assert resolve("Page {pageNum}", 4, 1, 0) == "4 pages"


def test_page_num_on_first_page_replaces_whole_field() -> None:
    assert resolve("Page {pageNum} of {numOfPages}", 5, 1, -1) == "4 pages"
    assert resolve("{date:%Y} - {pageNum}", 5, 1, 0, now=FIXED_NOW) == "5 pages"
    # without {pageNum} page 1 resolves normally
    assert resolve("Total {numOfPages}", 5, 1, -1) == "Total 4"


def test_platform_specific_date_directive_falls_back() -> None:
    assert resolve("{date:%-d.%m.}", 1, 2, 0, now=FIXED_NOW) == "19.10.2026"
    assert resolve("{date:%e}", 1, 2, 0, now=FIXED_NOW) == "19.10.2026"


@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
def test_blank_input_returns_empty(text: str) -> None:
    assert resolve(text, 3, 2, -1) == ""


def test_plain_text_is_returned_verbatim() -> None:
    assert resolve("  ACME Corp.  ", 3, 2, -1) == "  ACME Corp.  "


def test_unknown_placeholders_stay_verbatim() -> None:
    assert resolve("{author} {pagenum} {0}", 3, 2, -1) == "{author} {pagenum} {0}"


def test_date_with_format() -> None:
    assert resolve("{date:%d.%m.%Y}", 1, 1, 0, now=FIXED_NOW) == "19.10.2026"
    assert resolve("Stand: {date:%Y-%m-%d %H:%M}", 1, 1, 0, now=FIXED_NOW) == "Stand: 2026-10-19 14:30"


def test_date_without_format_uses_default_pattern() -> None:
    assert resolve("{date}", 1, 1, 0, now=FIXED_NOW) == "19.10.2026 14:30:05"


def test_invalid_date_format_falls_back_for_whole_field(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        result = resolve("Page {pageNum} - {date:%Q/%Y}", 5, 3, 0, now=FIXED_NOW)
    assert result == "19.10.2026"
    assert "Invalid date format" in caplog.text


def test_trailing_percent_is_invalid() -> None:
    assert resolve("{date:%Y%}", 1, 2, 0, now=FIXED_NOW) == "19.10.2026"


def test_multiple_tokens_resolve_independently() -> None:
    text = "{pageNum}/{numOfPages} ({date:%Y}) {pageNum}"
    assert resolve(text, 12, 4, -1, now=FIXED_NOW) == "3/11 (2026) 3"


def test_substitution_longer_than_token_does_not_shift_later_tokens() -> None:
    text = "{date:%A, %d. %B %Y} | {numOfPages}"
    result = resolve(text, 100, 2, 0, now=FIXED_NOW)
    assert result.endswith("| 100")
    assert "2026" in result
