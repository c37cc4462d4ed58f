from __future__ import annotations

import logging
from datetime import datetime
from typing import BinaryIO, Optional

from ..models.envelope_enums import TextAlign
from ..models.envelope_settings import CoverPage
from ..models.page_geometry import PageGeometry, TextStyle
from . import layout_geometry as lg
from .pdf_primitives import ContentSurface
from .placeholder_resolver import resolve

logger = logging.getLogger(__name__)

FONT_REGULAR = "Times-Roman"
FONT_BOLD = "Times-Bold"

# field -> (size, bold, alignment), in drawing order before the disclaimer
_HEAD_FIELDS = (
    ("topic", 22, True, TextAlign.LEFT),
    ("subtopic", 22, True, TextAlign.LEFT),
)
_BODY_FIELDS = (
    ("title", 24, True, TextAlign.CENTER),
    ("subtitle", 18, True, TextAlign.CENTER),
    ("version", 16, False, TextAlign.CENTER),
    ("author", 16, False, TextAlign.CENTER),
    ("date", 16, False, TextAlign.CENTER),
)
DISCLAIMER_SIZE = 10
ORGANIZATION_SIZE = 14
SIGNATURE_LABEL_SIZE = 12
SIGNATURE_LABELS = ("Author", "Approver")


def _style(size: float, bold: bool = False) -> TextStyle:
    return TextStyle(font_name=FONT_BOLD if bold else FONT_REGULAR, font_size=size)


class CoverPageBuilder:
    """
    Renders the cover page as a standalone one-page PDF.

    The page has the size of the source document's first page. Texts are
    resolved as page 1 of a one-page document.
    """

    def __init__(self, cover: CoverPage, *, page_number_offset: int = -1,
                 now: Optional[datetime] = None) -> None:
        self._cover = cover
        self._offset = page_number_offset
        self._now = now

    def _resolve(self, text: str) -> str:
        return resolve(text, 1, 1, self._offset, now=self._now)

    def build(self, geometry: PageGeometry, target: BinaryIO) -> None:
        """Draws the cover into *target*; exceptions propagate to the caller."""
        surface = ContentSurface(target, geometry)
        self.draw(surface)
        surface.finish()

    def draw(self, surface: ContentSurface) -> None:
        cover = self._cover
        geo = surface.geometry

        for name, size, bold, align in _HEAD_FIELDS:
            surface.draw_text(lg.cover_text_slot(geo, name, align),
                              self._resolve(getattr(cover, name)), _style(size, bold))

        disclaimer = self._resolve(cover.disclaimer)
        if disclaimer:
            surface.draw_rect(lg.disclaimer_box(geo), stroke=True, fill=False)
            surface.draw_text_block(lg.disclaimer_text_area(geo), disclaimer, _style(DISCLAIMER_SIZE))

        for name, size, bold, align in _BODY_FIELDS:
            surface.draw_text(lg.cover_text_slot(geo, name, align),
                              self._resolve(getattr(cover, name)), _style(size, bold))

        # Frames
        organization = self._resolve(cover.organization)
        org_width = lg.organization_width(
            organization, surface.measure_text_width, FONT_BOLD, ORGANIZATION_SIZE
        )
        surface.draw_rect(lg.emphasis_bar(geo, org_width), stroke=True, fill=True)
        surface.draw_rect(lg.main_frame(geo), stroke=True, fill=False)
        if organization:
            surface.draw_text(lg.organization_slot(geo, org_width), organization,
                              _style(ORGANIZATION_SIZE, bold=True))

        if cover.show_signature_area:
            for box, label in zip(lg.signature_boxes(geo), SIGNATURE_LABELS):
                surface.draw_rect(box, stroke=True, fill=False)
                surface.draw_text_at(lg.signature_label_point(box), label,
                                     _style(SIGNATURE_LABEL_SIZE))
        logger.debug("Cover page drawn (%sx%s)", geo.width, geo.height)
