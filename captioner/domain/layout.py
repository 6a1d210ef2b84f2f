# captioner/domain/layout.py
from __future__ import annotations
import math
from typing import List, Sequence

from captioner.domain.errors import InvalidConfiguration, InvalidInput
from captioner.domain.types import LayoutConfig, LayoutPlan, Line, LinePosition, Rect

# Past this height/width ratio a squared canvas looks worse than a tall one.
SQUARE_MAX_RATIO = 1.75


def line_height(line: Line, config: LayoutConfig) -> float:
    return max(line.height, config.min_line_height or 0)


def text_block_height(lines: Sequence[Line], config: LayoutConfig) -> int:
    """Height of the caption area below the image, margin_top included."""
    total = sum(line_height(ln, config) for ln in lines)
    return math.ceil(total + (len(lines) - 1) * config.line_spacing + config.margin_top)


def layout(lines: Sequence[Line],
           config: LayoutConfig,
           base_image_width: float,
           base_image_height: float) -> LayoutPlan:
    """
    Place the scaled image and the caption lines on one canvas.

    The image is scaled to ``config.target_image_width`` and sits at the top
    inside ``outer_padding``; the lines follow ``margin_top`` below it, each
    one centered on its own measured width.
    """
    if not lines:
        raise InvalidInput("Nothing to lay out: no caption lines.")
    config.validate()
    if not (math.isfinite(base_image_width) and math.isfinite(base_image_height)) \
            or base_image_width <= 0 or base_image_height <= 0:
        raise InvalidConfiguration(
            f"Base image must have a positive size, got {base_image_width}x{base_image_height}")

    target = config.target_image_width
    pad = config.outer_padding
    scale = target / base_image_width
    scaled_height = int(scale * base_image_height)

    width = target + 2 * pad
    height = scaled_height + 2 * pad
    height += text_block_height(lines, config)

    if config.square_adjustment and width < height and height / width <= SQUARE_MAX_RATIO:
        width = height

    image_rect = Rect(x=int((width - target) / 2), y=pad, w=target, h=scaled_height)

    positions: List[LinePosition] = []
    y = pad + scaled_height + config.margin_top
    for ln in lines:
        positions.append(LinePosition(x=int((width - ln.width) / 2), y=int(y), text=ln.text))
        y += line_height(ln, config) + config.line_spacing

    return LayoutPlan(canvas_width=width,
                      canvas_height=height,
                      image_rect=image_rect,
                      line_positions=tuple(positions))
