# captioner/adapters/pillow_fonts.py
from __future__ import annotations
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import ImageFont

from captioner.ports.logger import Logger


class FontRegistry:
    """
    Loaded fonts, keyed by (path, size). Created once by whoever wires the
    app and handed to the Pillow adapters; layout code never sees it.
    """

    def __init__(self, logger: Logger):
        self._log = logger.log
        self._fonts: Dict[Tuple[Optional[str], int], ImageFont.FreeTypeFont] = {}

    def register(self, path: Optional[Path], size: int) -> ImageFont.FreeTypeFont:
        key = (str(path) if path else None, int(size))
        if key in self._fonts:
            return self._fonts[key]
        font = None
        if path:
            try:
                font = ImageFont.truetype(str(path), size)
                self._log(f"Registered font {Path(path).name} at {size}px")
            except OSError as e:
                self._log(f"(!) Could not load font {path}: {e}; using default font")
        if font is None:
            font = ImageFont.load_default(size=size)
        self._fonts[key] = font
        return font

