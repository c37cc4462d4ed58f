"""
Layout geometry of the cover page and the header/footer bands.

All functions are pure: they take a PageGeometry (and, where a box depends on
text metrics, a width oracle) and return Rect/Point/TextSlot values.
Drawing happens elsewhere.
"""
from __future__ import annotations

from typing import Callable, Dict, Tuple

from ..models.envelope_enums import TextAlign
from ..models.page_geometry import PageGeometry, Point, Rect, TextSlot

# text_width(text, font_name, font_size) -> points
TextWidthFn = Callable[[str, str, float], float]

TEXT_SIDE_MARGIN = 20.0
TEXT_LINE_HEIGHT = 15.0

# Cover: baseline offsets below the top margin
COVER_OFFSETS: Dict[str, float] = {
    "topic": 120.0,
    "subtopic": 150.0,
    "title": 250.0,
    "subtitle": 280.0,
    "version": 370.0,
    "author": 400.0,
    "date": 430.0,
}
DISCLAIMER_OFFSET = 50.0
DISCLAIMER_WIDTH = 180.0
DISCLAIMER_HEIGHT = 40.0
DISCLAIMER_INSET = 5.0

FRAME_OFFSET = 170.0
FRAME_GAP = 20.0
FRAME_BOTTOM_RESERVE = 100.0
EMPHASIS_BAR_HEIGHT = 15.0
ORGANIZATION_PAD = 8.0
ORGANIZATION_BASELINE_DROP = 18.0

SIGNATURE_HEIGHT = 80.0
SIGNATURE_LABEL_INSET = 10.0
SIGNATURE_LABEL_DROP = 20.0

RULE_GAP_HEADER = 3.0
RULE_GAP_FOOTER = 5.0


# --------------------------------------------------------------------------- #
#  Cover page                                                                 #
# --------------------------------------------------------------------------- #
def cover_content_left(geo: PageGeometry) -> float:
    return geo.left_x + TEXT_SIDE_MARGIN


def cover_content_width(geo: PageGeometry) -> float:
    return geo.width - 2 * geo.side - 2 * TEXT_SIDE_MARGIN


def cover_text_slot(geo: PageGeometry, field_name: str, align: TextAlign) -> TextSlot:
    """Slot of a cover text field (topic, title, ...)."""
    return TextSlot(
        x=cover_content_left(geo),
        y=geo.top_y - COVER_OFFSETS[field_name],
        width=cover_content_width(geo),
        align=align,
    )


def disclaimer_box(geo: PageGeometry) -> Rect:
    """Stroked box, right aligned with the side margin."""
    top = geo.top_y - DISCLAIMER_OFFSET
    return Rect(
        x=geo.right_x - DISCLAIMER_WIDTH,
        y=top - DISCLAIMER_HEIGHT,
        width=DISCLAIMER_WIDTH,
        height=DISCLAIMER_HEIGHT,
    )


def disclaimer_text_area(geo: PageGeometry) -> Rect:
    box = disclaimer_box(geo)
    return Rect(
        x=box.x + DISCLAIMER_INSET,
        y=box.y + DISCLAIMER_INSET,
        width=box.width - 2 * DISCLAIMER_INSET,
        height=box.height - 2 * DISCLAIMER_INSET,
    )


def frame_top(geo: PageGeometry) -> float:
    return geo.top_y - FRAME_OFFSET


def organization_width(text: str, text_width: TextWidthFn, font_name: str, font_size: float) -> float:
    """Measured width plus pad; 0 when there is no organization."""
    if not text:
        return 0.0
    return text_width(text, font_name, font_size) + ORGANIZATION_PAD


def emphasis_bar(geo: PageGeometry, org_width: float) -> Rect:
    """Filled bar below the frame top, leaving room for the organization label."""
    top = frame_top(geo)
    return Rect(
        x=cover_content_left(geo),
        y=top - EMPHASIS_BAR_HEIGHT,
        width=cover_content_width(geo) - org_width,
        height=EMPHASIS_BAR_HEIGHT,
    )


def organization_slot(geo: PageGeometry, org_width: float) -> TextSlot:
    return TextSlot(
        x=geo.right_x - TEXT_SIDE_MARGIN - org_width,
        y=frame_top(geo) - ORGANIZATION_BASELINE_DROP,
        width=org_width,
        align=TextAlign.RIGHT,
    )


def main_frame_height(geo: PageGeometry) -> float:
    return frame_top(geo) - FRAME_GAP - geo.bottom - FRAME_BOTTOM_RESERVE


def main_frame(geo: PageGeometry) -> Rect:
    height = main_frame_height(geo)
    top = frame_top(geo) - FRAME_GAP
    return Rect(x=cover_content_left(geo), y=top - height, width=cover_content_width(geo), height=height)


def signature_boxes(geo: PageGeometry) -> Tuple[Rect, Rect]:
    """(author box, approver box) at the bottom of the main frame."""
    frame = main_frame(geo)
    half = frame.width / 2.0
    left = Rect(x=frame.x, y=frame.y, width=half, height=SIGNATURE_HEIGHT)
    right = Rect(x=frame.x + half, y=frame.y, width=half, height=SIGNATURE_HEIGHT)
    return left, right


def signature_label_point(box: Rect) -> Point:
    return Point(box.x + SIGNATURE_LABEL_INSET, box.top - SIGNATURE_LABEL_DROP)


# --------------------------------------------------------------------------- #
#  Header / footer                                                            #
# --------------------------------------------------------------------------- #
def header_slot(geo: PageGeometry, line: int, align: TextAlign) -> TextSlot:
    y = geo.top_y if line == 1 else geo.top_y - TEXT_LINE_HEIGHT
    return TextSlot(x=geo.left_x, y=y, width=geo.band_width, align=align)


def footer_slot(geo: PageGeometry, line: int, align: TextAlign) -> TextSlot:
    y = geo.bottom_y + TEXT_LINE_HEIGHT if line == 1 else geo.bottom_y
    return TextSlot(x=geo.left_x, y=y, width=geo.band_width, align=align)


def header_rule(geo: PageGeometry) -> Tuple[Point, Point]:
    y = geo.top_y - TEXT_LINE_HEIGHT - RULE_GAP_HEADER
    return Point(geo.left_x, y), Point(geo.right_x, y)


def footer_rule(geo: PageGeometry, font_size: float) -> Tuple[Point, Point]:
    y = geo.bottom_y + TEXT_LINE_HEIGHT + font_size + RULE_GAP_FOOTER
    return Point(geo.left_x, y), Point(geo.right_x, y)
