"""
envelope_settings.py

Immutable configuration values for one envelope run.

• EnvelopeSettings – root object (cover page, header, footer, offsets)
• CoverPage        – texts of the generated cover page
• TextBand         – six text slots shared by page header and footer
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Tuple

from .envelope_enums import TextAlign


@dataclass(frozen=True)
class CoverPage:
    """
    Texts of the cover page. Every text may contain placeholders;
    an empty string suppresses the field.
    """
    topic: str = ""
    subtopic: str = ""
    title: str = ""
    subtitle: str = ""
    organization: str = ""
    version: str = ""
    author: str = ""
    date: str = ""
    disclaimer: str = ""
    show_signature_area: bool = False


@dataclass(frozen=True)
class TextBand:
    """
    Header or footer: left/center/right on two lines.
    Line 1 is the upper line for both header and footer.
    """
    left1: str = ""
    left2: str = ""
    center1: str = ""
    center2: str = ""
    right1: str = ""
    right2: str = ""
    draw_line: bool = False
    exclude_cover_page: bool = False

    def slots(self) -> Iterator[Tuple[str, int, TextAlign, str]]:
        """Yields (slot name, line number, alignment, raw text) in drawing order."""
        yield "left1", 1, TextAlign.LEFT, self.left1
        yield "left2", 2, TextAlign.LEFT, self.left2
        yield "center1", 1, TextAlign.CENTER, self.center1
        yield "center2", 2, TextAlign.CENTER, self.center2
        yield "right1", 1, TextAlign.RIGHT, self.right1
        yield "right2", 2, TextAlign.RIGHT, self.right2

    def is_blank(self) -> bool:
        return not self.draw_line and not any(text.strip() for _, _, _, text in self.slots())

    def applies_to(self, page_index: int) -> bool:
        """True if the band is drawn on the 1-based page *page_index*."""
        return page_index > 1 or not self.exclude_cover_page


@dataclass(frozen=True)
class EnvelopeSettings:
    cover_page: CoverPage = field(default_factory=CoverPage)
    page_header: TextBand = field(default_factory=TextBand)
    page_footer: TextBand = field(default_factory=TextBand)
    # -1 hides the cover page from page numbering
    page_number_offset: int = -1
    remove_annotations_other_than_links: bool = False
