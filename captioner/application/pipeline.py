from __future__ import annotations

from typing import Any, List, Optional, Tuple

from captioner.domain.balance import balance
from captioner.domain.errors import InvalidInput
from captioner.domain.layout import layout
from captioner.domain.measure import measure_lines, measure_words
from captioner.domain.types import LayoutConfig, LayoutPlan, Line
from captioner.ports.comic_source import Comic, ComicSource, TryAgain
from captioner.ports.logger import Logger
from captioner.ports.text_backend import Compositor, WordMeasurer

LEFT_QUOTE = "“"
RIGHT_QUOTE = "”"


class SourceExhausted(RuntimeError):
    """Every fetch attempt came back with TryAgain."""


def quote(text: str) -> str:
    return f"{LEFT_QUOTE}{text.strip()}{RIGHT_QUOTE}"


class CaptionPipeline:
    """
    High-level orchestration. Knows nothing about Pillow or HTTP.
    It only talks to the measurer/compositor records and the source port.
    """

    def __init__(
        self,
        layout_cfg: LayoutConfig,
        logger: Logger,
        measurer: WordMeasurer,
        compositor: Compositor,
        source: Optional[ComicSource] = None,
        max_fetch_attempts: int = 5,
    ) -> None:
        layout_cfg.validate()
        self.layout_cfg = layout_cfg
        self.log = logger.log
        self.measurer = measurer
        self.compositor = compositor
        self.source = source
        self.max_fetch_attempts = max_fetch_attempts

    def lines_for(self, caption: str) -> List[Line]:
        words, space_width = measure_words(caption, self.measurer)
        if not words:
            raise InvalidInput("Caption is empty.")
        texts = balance(words, space_width, self.layout_cfg.max_text_width)
        return measure_lines(texts, self.measurer)

    def plan(self, caption: str, image_width: float, image_height: float) -> Tuple[LayoutPlan, List[Line]]:
        lines = self.lines_for(caption)
        plan = layout(lines, self.layout_cfg, image_width, image_height)
        self.log(f"  > {len(lines)} line(s); canvas {plan.canvas_width}x{plan.canvas_height}")
        return plan, lines

    def caption_image(self, image: Any, caption: str) -> Any:
        width, height = self.compositor.size(image)
        plan, _ = self.plan(caption, width, height)
        return self.compositor.compose(image, plan)

    def caption_bytes(self, data: bytes, caption: str) -> bytes:
        image = self.compositor.decode(data)
        return self.compositor.encode(self.caption_image(image, caption))

    def fetch_comic(self) -> Comic:
        if self.source is None:
            raise RuntimeError("No comic source configured.")
        last: Optional[TryAgain] = None
        for attempt in range(1, self.max_fetch_attempts + 1):
            try:
                comic = self.source.fetch()
                self.log(f"✓ Got comic {comic.src} ({comic.content_type})")
                return comic
            except TryAgain as e:
                last = e
                self.log(f"  > Will retry ({attempt}/{self.max_fetch_attempts}): {e}")
        raise SourceExhausted(f"No usable comic after {self.max_fetch_attempts} attempt(s): {last}")

    def caption_random_comic(self, text: str) -> bytes:
        """Fetch a quotable cartoon and caption it with ``text`` in curly quotes."""
        if not text or not text.strip():
            raise InvalidInput("Caption is empty.")
        comic = self.fetch_comic()
        return self.caption_bytes(comic.data, quote(text))
