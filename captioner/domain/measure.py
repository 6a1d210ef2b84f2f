# captioner/domain/measure.py
from __future__ import annotations
from typing import List, Sequence, Tuple

from captioner.domain.balance import tokenize
from captioner.domain.types import Line, MeasuredWord
from captioner.ports.text_backend import WordMeasurer


def measure_words(caption: str, measurer: WordMeasurer) -> Tuple[List[MeasuredWord], float]:
    """Tokenize the caption and measure every word plus a single space."""
    space_width = measurer.measure(" ").width
    words = [MeasuredWord(text=w, width=measurer.measure(w).width) for w in tokenize(caption)]
    return words, space_width


def measure_lines(texts: Sequence[str], measurer: WordMeasurer) -> List[Line]:
    lines: List[Line] = []
    for text in texts:
        m = measurer.measure(text)
        lines.append(Line(text=text, width=m.width, height=m.height))
    return lines
