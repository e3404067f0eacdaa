"""Thread-safe progress tracking shared by the scan and emission pipelines."""

import threading
import time
from collections.abc import Callable

from tfindex.pipeline.structures import ProgressInfo

ProgressCallbackFn = Callable[[ProgressInfo], None]

INITIALIZING = "Initializing..."
COMPLETED = "Completed"


class ProgressTracker:
    """Counts finished work items and reports each step to an optional callback.

    Workers call update() concurrently; the counter is guarded by a lock and the
    callback runs outside it. Without a callback every report is a no-op.
    """

    def __init__(self, phase: str, total: int, callback: ProgressCallbackFn | None = None):
        self.phase = phase
        self.total = total
        self.callback = callback
        self.start_time = time.time()
        self._completed = 0
        self._lock = threading.Lock()
        self._report(INITIALIZING, 0)

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def update(self, current: str) -> None:
        """Mark one item as finished."""
        with self._lock:
            self._completed += 1
            completed = self._completed
        self._report(current, completed)

    def complete(self) -> None:
        """Report the phase as finished at 100%."""
        with self._lock:
            self._completed = self.total
        self._report(COMPLETED, self.total, percentage=100.0)

    def _report(self, current: str, completed: int, percentage: float | None = None) -> None:
        if self.callback is None:
            return
        if percentage is None:
            percentage = (completed / self.total * 100.0) if self.total > 0 else 0.0
        self.callback(
            ProgressInfo(
                phase=self.phase,
                current=current,
                completed=completed,
                total=self.total,
                percentage=percentage,
                start_time=self.start_time,
                timestamp=time.time(),
            )
        )


def create_progress_bar(percentage: float, width: int = 50) -> str:
    """Render a fixed-width text bar."""
    if width <= 0:
        width = 50
    percentage = min(max(percentage, 0.0), 100.0)
    filled = int(width * percentage / 100)
    return "█" * filled + "░" * (width - filled)


def calculate_eta(info: ProgressInfo) -> float | None:
    """Seconds remaining at the current rate, or None before any progress."""
    if info.completed <= 0 or info.total <= 0 or info.elapsed <= 0:
        return None
    remaining = info.total - info.completed
    if remaining <= 0:
        return 0.0
    return info.elapsed / info.completed * remaining


def processing_rate(info: ProgressInfo) -> float:
    """Items per second since the tracker started."""
    if info.elapsed <= 0:
        return 0.0
    return info.completed / info.elapsed


def format_duration(seconds: float | None) -> str:
    if seconds is None:
        return "--"
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    minutes, seconds = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m{seconds:02d}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes:02d}m"


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len characters, ending with '...' when cut."""
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return text[:max_len]
    return text[: max_len - 3] + "..."
