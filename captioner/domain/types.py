# captioner/domain/types.py
from __future__ import annotations
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple

from captioner.domain.errors import InvalidConfiguration


@dataclass(frozen=True)
class MeasuredWord:
    """A single caption token and its rendered width."""
    text: str
    width: float


@dataclass(frozen=True)
class Line:
    """An assembled caption line, measured as a whole (kerning included)."""
    text: str
    width: float
    height: float


@dataclass(frozen=True)
class LayoutConfig:
    margin_sides: float
    margin_top: float
    outer_padding: int
    line_spacing: float
    target_image_width: int
    square_adjustment: bool = False
    min_line_height: Optional[float] = None

    @property
    def max_text_width(self) -> float:
        return self.target_image_width - 2 * self.margin_sides

    def validate(self) -> None:
        if not math.isfinite(self.target_image_width) or self.target_image_width <= 0:
            raise InvalidConfiguration(f"target_image_width must be positive, got {self.target_image_width}")
        if self.max_text_width <= 0:
            raise InvalidConfiguration(
                f"margin_sides={self.margin_sides} leaves no room for text "
                f"in a {self.target_image_width}px column")
        for name in ("margin_sides", "margin_top", "outer_padding", "line_spacing"):
            if getattr(self, name) < 0:
                raise InvalidConfiguration(f"{name} must not be negative")
        if self.min_line_height is not None and self.min_line_height < 0:
            raise InvalidConfiguration("min_line_height must not be negative")


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class LinePosition:
    x: int
    y: int
    text: str


@dataclass(frozen=True)
class LayoutPlan:
    """Where everything goes on the final canvas. Computed once per caption."""
    canvas_width: int
    canvas_height: int
    image_rect: Rect
    line_positions: Tuple[LinePosition, ...]

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["line_positions"] = list(d["line_positions"])
        return d
