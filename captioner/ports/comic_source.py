from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol


class TryAgain(Exception):
    """The source returned something unusable; another fetch may succeed."""


@dataclass(frozen=True)
class Comic:
    src: str
    caption: str
    data: bytes
    content_type: str


class ComicSource(Protocol):
    def fetch(self) -> Comic: ...
