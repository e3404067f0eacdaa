"""Rich-based live progress display for scan and emission."""
import sys
import threading
import time

from rich.console import Console, ConsoleOptions, RenderResult
from rich.live import Live
from rich.table import Table

from tfindex.pipeline.structures import ProgressInfo
from tfindex.progress import COMPLETED, calculate_eta, create_progress_bar, format_duration, truncate
from tfindex.utils.logging import restore_stderr_sink, swap_to_rich_sink

from .ui import TFINDEX_THEME


class DynamicTable:
    """Wrapper that builds a fresh table on each Rich render cycle.

    Rich calls __rich_console__ on each refresh, so elapsed times tick even
    between progress events.
    """

    def __init__(self, renderer: "RichProgressRenderer"):
        self.renderer = renderer

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        yield self.renderer._build_live_table()


class RichProgressRenderer:
    """Progress callback that draws one row per phase.

    Usable as a context manager. In non-TTY or quiet mode nothing is drawn
    live; phase completion lines are still printed unless quiet.
    """

    BAR_WIDTH = 30
    CURRENT_WIDTH = 40

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.is_tty = sys.stdout.isatty()
        self.console = Console(theme=TFINDEX_THEME, force_terminal=self.is_tty)

        self._phases: dict[str, ProgressInfo] = {}
        self._lock = threading.Lock()
        self._live: Live | None = None
        self._loguru_handler_id: int | None = None

    def _build_live_table(self) -> Table:
        table = Table(title="tfindex", expand=True)
        table.add_column("Phase", style="cyan", no_wrap=True)
        table.add_column("Progress", no_wrap=True)
        table.add_column("Done", justify="right", width=13)
        table.add_column("Time", justify="right", width=8)
        table.add_column("ETA", justify="right", width=8)
        table.add_column("Current", style="dim", no_wrap=True)

        now = time.time()
        with self._lock:
            phases = list(self._phases.values())

        for info in phases:
            finished = info.current == COMPLETED
            elapsed = info.elapsed if finished else max(0.0, now - info.start_time)
            table.add_row(
                info.phase,
                f"{create_progress_bar(info.percentage, self.BAR_WIDTH)} {info.percentage:5.1f}%",
                f"{info.completed}/{info.total}",
                f"{elapsed:.1f}s",
                "-" if finished else format_duration(calculate_eta(info)),
                truncate(info.current, self.CURRENT_WIDTH),
            )
        return table

    def log_message(self, message) -> None:
        """Loguru sink that prints above the live table."""
        if self._live:
            self._live.console.print(str(message).rstrip("\n"), markup=False, highlight=False)
        else:
            sys.stderr.write(str(message))

    def start(self) -> None:
        """Start the live display (call before scanning)."""
        if self.is_tty and not self.quiet:
            self._live = Live(DynamicTable(self), refresh_per_second=4, console=self.console)
            self._live.__enter__()
            self._loguru_handler_id = swap_to_rich_sink(self.log_message)

    def stop(self) -> None:
        """Stop the live display (call after emission)."""
        if self._live:
            self._live.__exit__(None, None, None)
            self._live = None
            restore_stderr_sink(self._loguru_handler_id)
            self._loguru_handler_id = None

    def __enter__(self) -> "RichProgressRenderer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def __call__(self, info: ProgressInfo) -> None:
        with self._lock:
            self._phases[info.phase] = info

        if info.current == COMPLETED and not self._live and not self.quiet:
            self.console.print(
                f"[success]\\[OK][/success] {info.phase}: {info.total} items in {format_duration(info.elapsed)}",
                highlight=False,
            )
