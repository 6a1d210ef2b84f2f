from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Tuple

from captioner.domain.types import LayoutPlan


@dataclass(frozen=True)
class TextMetrics:
    width: float
    ascent: float
    descent: float

    @property
    def height(self) -> float:
        return self.ascent + self.descent


@dataclass(frozen=True)
class WordMeasurer:
    """Measures rendered text for one font/size/style. Must be deterministic."""
    measure: Callable[[str], TextMetrics]


@dataclass(frozen=True)
class Compositor:
    """Backend drawing calls. ``image`` is whatever the backend decodes to."""
    decode: Callable[[bytes], Any]
    size: Callable[[Any], Tuple[int, int]]
    compose: Callable[[Any, LayoutPlan], Any]
    encode: Callable[[Any], bytes]
