from __future__ import annotations
from typing import Optional

from captioner.adapters.newyorker_source import NewYorkerSource
from captioner.adapters.pillow_backend import pillow_compositor, pillow_measurer
from captioner.adapters.pillow_fonts import FontRegistry
from captioner.application.pipeline import CaptionPipeline
from captioner.config import Config, resolve_preset
from captioner.ports.logger import Logger


def build_pipeline(cfg: Config,
                   logger: Logger,
                   fonts: FontRegistry,
                   preset: Optional[str] = None) -> CaptionPipeline:
    """Compose adapters for one preset. Fonts are registered here, once."""
    chosen = resolve_preset(cfg, preset)
    font = fonts.register(chosen.style.font_path, chosen.style.font_size)
    source = NewYorkerSource(cfg.comic_endpoint, timeout=cfg.fetch_timeout, progress=logger.log)
    return CaptionPipeline(
        layout_cfg=chosen.layout,
        logger=logger,
        measurer=pillow_measurer(font),
        compositor=pillow_compositor(font, chosen.style),
        source=source,
        max_fetch_attempts=cfg.max_fetch_attempts,
    )
