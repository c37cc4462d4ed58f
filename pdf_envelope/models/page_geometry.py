from __future__ import annotations
from dataclasses import dataclass

from .envelope_enums import TextAlign

# Fixed page margins in PDF points (1pt = 1/72 inch)
SIDE_MARGIN: float = 50.0
TOP_MARGIN: float = 35.0
BOTTOM_MARGIN: float = 25.0


@dataclass(frozen=True)
class PageGeometry:
    """
    Size of one page (points; origin bottom-left) plus the fixed margins.
    x0/y0 is the lower-left corner of the media box, usually (0, 0).
    """
    width: float
    height: float
    x0: float = 0.0
    y0: float = 0.0
    side: float = SIDE_MARGIN
    top: float = TOP_MARGIN
    bottom: float = BOTTOM_MARGIN

    def __post_init__(self) -> None:
        for name in ("side", "top", "bottom"):
            if getattr(self, name) < 0:
                raise ValueError(f"margin '{name}' must not be negative")

    @property
    def top_y(self) -> float:
        """Baseline reference below the top margin."""
        return self.y0 + self.height - self.top

    @property
    def bottom_y(self) -> float:
        return self.y0 + self.bottom

    @property
    def left_x(self) -> float:
        return self.x0 + self.side

    @property
    def right_x(self) -> float:
        return self.x0 + self.width - self.side

    @property
    def band_width(self) -> float:
        """Width between the side margins (header/footer slots)."""
        return self.width - 2 * self.side


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """Normalised rectangle: (x, y) is the lower-left corner."""
    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass(frozen=True)
class TextStyle:
    """Pure style descriptor consumed by the drawing call."""
    font_name: str = "Times-Roman"
    font_size: float = 9.0
    color_rgb: tuple[float, float, float] = (0.0, 0.0, 0.0)  # 0..1


@dataclass(frozen=True)
class TextSlot:
    """
    Horizontal span for one line of text. y is the text baseline,
    the text is aligned inside [x, x + width].
    """
    x: float
    y: float
    width: float
    align: TextAlign = TextAlign.LEFT

    def anchor_x(self) -> float:
        if self.align == TextAlign.CENTER:
            return self.x + self.width / 2.0
        if self.align == TextAlign.RIGHT:
            return self.x + self.width
        return self.x
