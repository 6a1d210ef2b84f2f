# captioner/domain/balance.py
"""
Center-balanced line breaking.

Instead of packing each line as full as it will go, the caption is first
packed greedily only to learn how many lines it needs and what the average
line width would be. The words are then redistributed so each line breaks
near the *cumulative* average (average width times the line number). A line
that comes out short pushes more text onto the next one, which keeps the
lines roughly equal and the block looks centered.

The column width is never exceeded by a line of two or more words. A single
word wider than the column still gets its own line and overflows.
"""
from __future__ import annotations
import re
from typing import List, Sequence, Tuple

from captioner.domain.errors import InvalidConfiguration, InvalidInput
from captioner.domain.types import MeasuredWord

_WS = re.compile(r"\s+")


def tokenize(caption: str) -> List[str]:
    """Split on runs of whitespace after trimming; empty text gives no words."""
    caption = (caption or "").strip()
    if not caption:
        return []
    return _WS.split(caption)


def estimate_line_count(words: Sequence[MeasuredWord],
                        space_width: float,
                        max_text_width: float) -> Tuple[int, float]:
    """Greedy pass. Returns (lines_needed, average line width)."""
    line_width = 0.0
    total_width = 0.0
    lines_needed = 1

    for word in words:
        if line_width != 0:
            if line_width + space_width + word.width <= max_text_width:
                add = word.width + space_width
            else:
                lines_needed += 1
                line_width = 0.0
                add = word.width
        else:
            add = word.width
        line_width += add
        total_width += add

    return lines_needed, total_width / lines_needed


def assign_lines(words: Sequence[MeasuredWord],
                 space_width: float,
                 lines_needed: int,
                 average_width: float,
                 max_text_width: float) -> List[str]:
    """Balancing pass: break at the cumulative average, never past the column."""
    lines: List[str] = []
    total_width = 0.0

    line_words: List[str] = []
    line_width = 0.0
    cumulative_target = average_width
    last_line = lines_needed == 1

    for word in words:
        if line_width != 0:
            with_space = word.width + space_width
            if (line_width + with_space > max_text_width
                    or (not last_line and total_width + with_space > cumulative_target)):
                lines.append(" ".join(line_words))
                line_words = []
                line_width = 0.0
                # against pass 1's estimate, not the number of lines this pass produces
                last_line = len(lines) == lines_needed
                cumulative_target += average_width
                add = word.width
            else:
                add = with_space
        else:
            add = word.width
        line_width += add
        total_width += add
        line_words.append(word.text)

    if line_words:
        lines.append(" ".join(line_words))
    return lines


def balance(words: Sequence[MeasuredWord], space_width: float, max_text_width: float) -> List[str]:
    """Break measured words into balanced line texts, in caption order."""
    if not words:
        raise InvalidInput("Cannot balance an empty caption.")
    if max_text_width <= 0:
        raise InvalidConfiguration(f"max_text_width must be positive, got {max_text_width}")
    lines_needed, average_width = estimate_line_count(words, space_width, max_text_width)
    return assign_lines(words, space_width, lines_needed, average_width, max_text_width)
