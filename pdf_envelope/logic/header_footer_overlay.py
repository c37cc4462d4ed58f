"""
Header/footer overlay: six text slots plus an optional rule for the header and
the footer, drawn on every page of a document.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from pypdf import PdfWriter

from ..models.envelope_settings import TextBand
from ..models.page_geometry import TextStyle
from . import layout_geometry as lg
from .annotation_filter import remove_non_link_annotations
from .pdf_primitives import ContentSurface, page_geometry, render_overlay, stamp_beneath
from .placeholder_resolver import resolve

logger = logging.getLogger(__name__)

BAND_FONT = "Times-Roman"
BAND_FONT_SIZE = 9.0
RULE_WIDTH = 0.5


class HeaderFooterOverlay:
    """Stamps header and footer onto the pages of a PdfWriter, in place."""

    def __init__(self, header: TextBand, footer: TextBand, *, page_number_offset: int = -1,
                 remove_annotations_other_than_links: bool = False,
                 now: Optional[datetime] = None) -> None:
        self._header = header
        self._footer = footer
        self._offset = page_number_offset
        self._strip_annotations = remove_annotations_other_than_links
        self._now = now

    def apply(self, writer: PdfWriter) -> int:
        """Returns the number of processed pages."""
        total = len(writer.pages)
        if self._header.is_blank() and self._footer.is_blank() and not self._strip_annotations:
            logger.debug("Header and footer are empty, nothing to stamp")
            return total
        for index, page in enumerate(writer.pages, start=1):
            logger.debug("Processing page %d/%d", index, total)
            geo = page_geometry(page)
            style = TextStyle(font_name=BAND_FONT, font_size=BAND_FONT_SIZE)

            def _draw(surface: ContentSurface, i: int = index) -> None:
                self._draw_band(surface, self._header, i, total, style, header=True)
                self._draw_band(surface, self._footer, i, total, style, header=False)

            overlay = render_overlay(geo, _draw)
            if overlay is not None:
                stamp_beneath(page, overlay)

            if self._strip_annotations:
                remove_non_link_annotations(page)
        return total

    def _draw_band(self, surface: ContentSurface, band: TextBand, index: int, total: int,
                   style: TextStyle, *, header: bool) -> None:
        if not band.applies_to(index):
            return
        geo = surface.geometry
        slot_fn = lg.header_slot if header else lg.footer_slot
        for _name, line, align, raw in band.slots():
            text = resolve(raw, total, index, self._offset, now=self._now)
            surface.draw_text(slot_fn(geo, line, align), text, style)

        if band.draw_line:
            p1, p2 = lg.header_rule(geo) if header else lg.footer_rule(geo, style.font_size)
            surface.draw_line(p1, p2, RULE_WIDTH)
