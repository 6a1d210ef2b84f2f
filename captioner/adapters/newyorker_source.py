from __future__ import annotations
import re
from typing import Callable, Optional

import requests

from captioner.ports.comic_source import Comic, ComicSource, TryAgain

# Only cartoons whose own caption is a single quotation get re-captioned.
QUOTABLE = re.compile(r"^\s*&ldquo;.*&rdquo;\s*$")

IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif")


class NewYorkerSource(ComicSource):
    def __init__(self, endpoint: str, timeout: float = 30.0,
                 session: Optional[requests.Session] = None,
                 progress: Optional[Callable[[str], None]] = None):
        self.endpoint = endpoint
        self.timeout = timeout
        self.http = session or requests.Session()
        self._progress = progress or (lambda _msg: None)

    def fetch(self) -> Comic:
        self._progress("Fetching New Yorker comic")
        try:
            res = self.http.get(self.endpoint, timeout=self.timeout)
            res.raise_for_status()
            comics = res.json()
        except (requests.RequestException, ValueError) as e:
            raise TryAgain(f"Unable to fetch comic metadata: {e}") from e

        picked = None
        if isinstance(comics, list) and comics:
            self._progress(f"Fetched {len(comics)} comic(s)")
            for comic in comics:
                if not isinstance(comic, dict):
                    continue
                caption = comic.get("caption") or ""
                if comic.get("src") and QUOTABLE.match(caption):
                    picked = comic
                    break
                self._progress("Skipping comic with non-matching caption")
        if picked is None:
            raise TryAgain("No valid comics in this request")

        src = picked["src"]
        self._progress(f"Fetching {src}")
        try:
            img = self.http.get(src, timeout=self.timeout)
            img.raise_for_status()
        except requests.RequestException as e:
            raise TryAgain(f"Unable to fetch image: {e}") from e

        content_type = (img.headers.get("content-type") or "").split(";")[0].strip().lower()
        if content_type not in IMAGE_TYPES:
            raise TryAgain(f"Bad image type: {content_type or 'unknown'}")
        return Comic(src=src, caption=picked["caption"], data=img.content, content_type=content_type)
