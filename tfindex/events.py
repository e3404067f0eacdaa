"""Progress callbacks for scan and emission.

Decouples the pipelines from presentation. Any callable accepting a
ProgressInfo works; the classes here are ASCII-safe defaults for plain
terminals and piped output.
"""

import sys
import time
from typing import Protocol, TextIO

from tfindex.pipeline.structures import ProgressInfo
from tfindex.progress import COMPLETED, calculate_eta, format_duration, processing_rate, truncate


class ProgressCallback(Protocol):
    """Observer interface for progress events."""

    def __call__(self, info: ProgressInfo) -> None:
        """Called once per tracker event (start, each item, completion)."""
        ...


def simple_progress_callback(info: ProgressInfo) -> None:
    """Print one line per event to stderr."""
    if info.current == COMPLETED:
        print(f"[OK] {info.phase} completed: {info.completed}/{info.total} items", file=sys.stderr, flush=True)
        return
    print(
        f"[{info.phase}] {info.percentage:.1f}% ({info.completed}/{info.total}) - {info.current}",
        file=sys.stderr,
        flush=True,
    )


class ConsoleProgress:
    """Single-line progress printer for non-interactive runs.

    Prints at most once per ``interval`` seconds, plus the completion line.
    """

    def __init__(self, stream: TextIO | None = None, interval: float = 1.0, width: int = 40):
        self.stream = stream or sys.stderr
        self.interval = interval
        self.width = width
        self._last_print: float | None = None

    def __call__(self, info: ProgressInfo) -> None:
        if info.current == COMPLETED:
            self.stream.write(
                f"[OK] {info.phase} completed: {info.total} items in {format_duration(info.elapsed)}\n"
            )
            self.stream.flush()
            return

        now = time.monotonic()
        if self._last_print is not None and now - self._last_print < self.interval:
            return
        self._last_print = now

        eta = format_duration(calculate_eta(info))
        rate = processing_rate(info)
        self.stream.write(
            f"[{info.phase}] {info.percentage:5.1f}% ({info.completed}/{info.total}) "
            f"{rate:.1f}/s eta {eta} | {truncate(info.current, self.width)}\n"
        )
        self.stream.flush()
