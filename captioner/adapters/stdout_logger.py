from __future__ import annotations
from datetime import datetime, timezone
from captioner.ports.logger import Logger

class StdoutLogger(Logger):
    def __init__(self, sink=None):
        self._sink = sink  # optional callback, e.g. the web app's log buffer
    def log(self, message: str) -> None:
        line = f"[{datetime.now(timezone.utc).isoformat()}] {message}"
        if self._sink:
            self._sink(line)
        print(line)
