"""
===============================================================================
pdf_primitives – thin adapter around reportlab (drawing) and pypdf (documents)
-------------------------------------------------------------------------------
Implementation
    - reportlab renders new page content (cover page, overlay pages) and
      measures text widths of the standard Type1 fonts.
    - pypdf opens documents, merges pages, stamps overlay pages onto existing
      pages, edits annotations and writes the result.
Everything above this module only talks to ContentSurface and the helper
functions below.
===============================================================================
"""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence, Union

from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.generic import ArrayObject, NameObject
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from ..models.envelope_enums import TextAlign
from ..models.page_geometry import PageGeometry, Point, Rect, TextSlot, TextStyle

LEADING_FACTOR = 1.2


# --------------------------------------------------------------------------- #
#  Drawing                                                                    #
# --------------------------------------------------------------------------- #
def measure_text_width(text: str, font_name: str, font_size: float) -> float:
    return float(pdfmetrics.stringWidth(text, font_name, font_size))


class ContentSurface:
    """
    Drawable area of one page. Wraps a reportlab canvas sized like the
    target page (media box origin included).
    """

    def __init__(self, target: Union[str, BinaryIO], geometry: PageGeometry) -> None:
        self.geometry = geometry
        self._canvas = canvas.Canvas(
            target,
            pagesize=(geometry.x0 + geometry.width, geometry.y0 + geometry.height),
            pageCompression=1,
            invariant=1,
        )
        self.operations = 0

    # ---- text ---- #
    measure_text_width = staticmethod(measure_text_width)

    def draw_text(self, slot: TextSlot, text: str, style: TextStyle) -> None:
        """Single line of text, aligned inside the slot (y = baseline)."""
        if not text:
            return
        self.draw_text_at(Point(slot.anchor_x(), slot.y), text, style, slot.align)

    def draw_text_at(self, point: Point, text: str, style: TextStyle,
                     align: TextAlign = TextAlign.LEFT) -> None:
        if not text:
            return
        c = self._canvas
        c.setFillColorRGB(*style.color_rgb)
        c.setFont(style.font_name, style.font_size)
        if align == TextAlign.CENTER:
            c.drawCentredString(point.x, point.y, text)
        elif align == TextAlign.RIGHT:
            c.drawRightString(point.x, point.y, text)
        else:
            c.drawString(point.x, point.y, text)
        self.operations += 1

    def draw_text_block(self, area: Rect, text: str, style: TextStyle) -> None:
        """
        Wraps *text* to the area width and aligns the block to the area
        bottom. Lines above the area are clipped.
        """
        if not text:
            return
        lines = simpleSplit(text, style.font_name, style.font_size, area.width)
        leading = style.font_size * LEADING_FACTOR
        # getDescent() is negative
        baseline = area.y - pdfmetrics.getDescent(style.font_name, style.font_size)

        c = self._canvas
        c.saveState()
        path = c.beginPath()
        path.rect(area.x, area.y, area.width, area.height)
        c.clipPath(path, stroke=0, fill=0)
        c.setFillColorRGB(*style.color_rgb)
        c.setFont(style.font_name, style.font_size)
        for line in reversed(lines):
            c.drawString(area.x, baseline, line)
            baseline += leading
        c.restoreState()
        self.operations += 1

    # ---- shapes ---- #
    def draw_rect(self, rect: Rect, *, stroke: bool = True, fill: bool = False,
                  line_width: float = 1.0,
                  color_rgb: tuple[float, float, float] = (0.0, 0.0, 0.0)) -> None:
        c = self._canvas
        c.setLineWidth(line_width)
        c.setStrokeColorRGB(*color_rgb)
        c.setFillColorRGB(*color_rgb)
        c.rect(rect.x, rect.y, rect.width, rect.height, stroke=int(stroke), fill=int(fill))
        self.operations += 1

    def draw_line(self, p1: Point, p2: Point, width: float = 0.5,
                  color_rgb: tuple[float, float, float] = (0.0, 0.0, 0.0)) -> None:
        c = self._canvas
        c.setLineWidth(width)
        c.setStrokeColorRGB(*color_rgb)
        c.line(p1.x, p1.y, p2.x, p2.y)
        self.operations += 1

    def finish(self) -> None:
        self._canvas.showPage()
        self._canvas.save()


def render_overlay(geometry: PageGeometry, draw) -> Optional[bytes]:
    """
    Runs draw(surface) on a fresh one-page canvas and returns the PDF bytes,
    or None when nothing was drawn.
    """
    buf = BytesIO()
    surface = ContentSurface(buf, geometry)
    draw(surface)
    if surface.operations == 0:
        return None
    surface.finish()
    return buf.getvalue()


# --------------------------------------------------------------------------- #
#  Documents                                                                  #
# --------------------------------------------------------------------------- #
def open_reader(path: Union[str, Path, BinaryIO]) -> PdfReader:
    if isinstance(path, Path):
        path = str(path)
    return PdfReader(path)


def page_count(doc: Union[PdfReader, PdfWriter]) -> int:
    return len(doc.pages)


def page_geometry(page: PageObject) -> PageGeometry:
    box = page.mediabox
    return PageGeometry(
        width=float(box.width),
        height=float(box.height),
        x0=float(box.left),
        y0=float(box.bottom),
    )


def merge_pages(writer: PdfWriter, reader: PdfReader, pages: Optional[Sequence[int]] = None) -> None:
    """Appends the given 0-based pages (all pages if None) of *reader*."""
    if pages is None:
        writer.append(reader)
    else:
        writer.append(reader, pages=list(pages))


def stamp_beneath(page: PageObject, overlay_pdf: bytes) -> None:
    """Merges the first page of *overlay_pdf* below the existing page content."""
    overlay = PdfReader(BytesIO(overlay_pdf)).pages[0]
    page.merge_page(overlay, over=False)


# ---- annotations ---- #
def list_annotations(page: PageObject) -> List[object]:
    """Raw entries of the page's /Annots array (usually indirect references)."""
    annots = page.get("/Annots")
    if annots is None:
        return []
    return list(annots.get_object())


def annotation_subtype(annotation: object) -> str:
    obj = annotation.get_object()  # type: ignore[attr-defined]
    return str(obj.get("/Subtype", ""))


def remove_annotation(page: PageObject, annotation: object) -> None:
    kept = ArrayObject(a for a in list_annotations(page) if a is not annotation)
    if kept:
        page[NameObject("/Annots")] = kept
    elif "/Annots" in page:
        del page["/Annots"]


# ---- output ---- #
def compress_and_write(writer: PdfWriter, stream: BinaryIO, *, compress: bool = True) -> None:
    if compress:
        for page in writer.pages:
            page.compress_content_streams()
        writer.compress_identical_objects(remove_identicals=True, remove_orphans=True)
    writer.write(stream)
