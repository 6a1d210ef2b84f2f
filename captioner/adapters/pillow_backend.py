# captioner/adapters/pillow_backend.py
from __future__ import annotations
import io
from functools import lru_cache
from typing import Tuple

from PIL import Image, ImageDraw, ImageFont

from captioner.config import RenderStyle
from captioner.domain.types import LayoutPlan
from captioner.ports.text_backend import Compositor, TextMetrics, WordMeasurer


def pillow_measurer(font: ImageFont.FreeTypeFont, cache_size: int = 2048) -> WordMeasurer:
    """Width from the font's advance, height from its ascent + descent."""
    ascent, descent = font.getmetrics()

    @lru_cache(maxsize=cache_size)
    def measure(text: str) -> TextMetrics:
        return TextMetrics(width=font.getlength(text), ascent=ascent, descent=descent)

    return WordMeasurer(measure=measure)


def decode_image(data: bytes) -> Image.Image:
    im = Image.open(io.BytesIO(data))
    im.load()
    return im


def image_size(image: Image.Image) -> Tuple[int, int]:
    return image.size


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def pillow_compositor(font: ImageFont.FreeTypeFont, style: RenderStyle) -> Compositor:
    def compose(image: Image.Image, plan: LayoutPlan) -> Image.Image:
        canvas = Image.new("RGB", (plan.canvas_width, plan.canvas_height), style.background)
        src = image.convert("RGBA")
        r = plan.image_rect
        if src.size != (r.w, r.h):
            src = src.resize((r.w, r.h), Image.Resampling.LANCZOS)
        # alpha is the mask; transparent areas keep the background
        canvas.paste(src, (r.x, r.y), src)

        draw = ImageDraw.Draw(canvas)
        for pos in plan.line_positions:
            # default anchor is left/ascender, i.e. the top of the line box
            draw.text((pos.x, pos.y), pos.text, fill=style.font_color, font=font)
        return canvas

    return Compositor(decode=decode_image, size=image_size, compose=compose, encode=encode_png)
