"""Fan-out writer: one write, replicated to every sink."""

from __future__ import annotations

import threading

from typing import List, Optional

from .base import TextWriter


class FanOutWriter:
    """Writes each chunk to all sinks in order, under a single lock."""

    def __init__(self, *sinks: Optional[TextWriter]) -> None:
        self._sinks: List[TextWriter] = [s for s in sinks if s is not None]
        self._lock = threading.Lock()

    @property
    def sinks(self) -> List[TextWriter]:
        return list(self._sinks)

    def write(self, text: str) -> int:
        if not text:
            return 0
        with self._lock:
            for sink in self._sinks:
                sink.write(text)
        return len(text)

    def flush(self) -> None:
        with self._lock:
            for sink in self._sinks:
                flush = getattr(sink, "flush", None)
                if callable(flush):
                    flush()
