from __future__ import annotations

from pathlib import Path

from pypdf import PdfReader, PdfWriter

from pdf_envelope.logic.header_footer_overlay import HeaderFooterOverlay
from pdf_envelope.models.envelope_settings import TextBand
from pdf_envelope.tests.pdf_factory import FIXED_NOW, add_link_and_comment, annotation_subtypes, make_pdf


def _writer(path: Path) -> PdfWriter:
    return PdfWriter(clone_from=PdfReader(str(path)))


def test_footer_numbers_pages_with_offset(tmp_path: Path) -> None:
    writer = _writer(make_pdf(tmp_path / "doc.pdf", pages=3))
    overlay = HeaderFooterOverlay(
        TextBand(),
        TextBand(right1="Page {pageNum} of {numOfPages}", exclude_cover_page=True),
        page_number_offset=-1,
        now=FIXED_NOW,
    )
    assert overlay.apply(writer) == 3

    texts = [page.extract_text() for page in writer.pages]
    assert "Page" not in texts[0]
    assert "Page 1 of 2" in texts[1]
    assert "Page 2 of 2" in texts[2]


def test_existing_content_is_kept(tmp_path: Path) -> None:
    writer = _writer(make_pdf(tmp_path / "doc.pdf", pages=2))
    HeaderFooterOverlay(TextBand(center1="Confidential"), TextBand(), now=FIXED_NOW).apply(writer)
    text = writer.pages[1].extract_text()
    assert "Body page 2" in text
    assert "Confidential" in text


def test_header_on_cover_when_not_excluded(tmp_path: Path) -> None:
    writer = _writer(make_pdf(tmp_path / "doc.pdf", pages=2))
    HeaderFooterOverlay(TextBand(left1="Doc {numOfPages}"), TextBand(),
                        page_number_offset=0, now=FIXED_NOW).apply(writer)
    assert "Doc 2" in writer.pages[0].extract_text()


def test_blank_bands_leave_pages_alone(tmp_path: Path) -> None:
    writer = _writer(make_pdf(tmp_path / "doc.pdf", pages=2))
    before = [page.get_contents().get_data() for page in writer.pages]
    HeaderFooterOverlay(TextBand(), TextBand()).apply(writer)
    after = [page.get_contents().get_data() for page in writer.pages]
    assert before == after


def test_rule_only_band_is_stamped(tmp_path: Path) -> None:
    writer = _writer(make_pdf(tmp_path / "doc.pdf", pages=1))
    before = writer.pages[0].get_contents().get_data()
    HeaderFooterOverlay(TextBand(draw_line=True), TextBand()).apply(writer)
    assert writer.pages[0].get_contents().get_data() != before


def test_annotation_filter_is_optional(tmp_path: Path) -> None:
    path = add_link_and_comment(make_pdf(tmp_path / "doc.pdf", pages=1))

    kept = _writer(path)
    HeaderFooterOverlay(TextBand(), TextBand()).apply(kept)
    assert sorted(annotation_subtypes(kept.pages[0])) == ["/Link", "/Text"]

    filtered = _writer(path)
    HeaderFooterOverlay(TextBand(), TextBand(),
                        remove_annotations_other_than_links=True).apply(filtered)
    assert annotation_subtypes(filtered.pages[0]) == ["/Link"]


def test_page_number_field_on_first_page(tmp_path: Path) -> None:
    writer = _writer(make_pdf(tmp_path / "doc.pdf", pages=3))
    HeaderFooterOverlay(TextBand(), TextBand(right1="Page {pageNum} of {numOfPages}"),
                        page_number_offset=-1, now=FIXED_NOW).apply(writer)
    first = writer.pages[0].extract_text()
    assert "2 pages" in first
    assert "of 2" not in first
    assert "Page 1 of 2" in writer.pages[1].extract_text()
