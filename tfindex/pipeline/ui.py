"""Central UI handler for tfindex.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from tfindex.pipeline.ui import console, print_header, print_error

    console.print("[success]Index written[/success]")
    print_header("SCAN RESULTS")
    print_error("Services directory not found")
"""

import sys

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from tfindex.pipeline.structures import Statistics

TFINDEX_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "legacy": "yellow",
    "modern": "green",
    "ephemeral": "magenta",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=TFINDEX_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[error]ERROR:[/error] {msg}", highlight=False)


def print_warning(msg: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[warning]WARNING:[/warning] {msg}", highlight=False)


def print_success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[success]OK:[/success] {msg}", highlight=False)


def statistics_table(stats: Statistics, version: str) -> Table:
    """Scan statistics as a two-column table."""
    table = Table(title=f"Provider index {version}", show_header=False, box=None, padding=(0, 2, 0, 0))
    table.add_column("Metric", style="info")
    table.add_column("Count", justify="right")

    table.add_row("Services", str(stats.service_count))
    table.add_row("Total resources", str(stats.total_resources))
    table.add_row("Total data sources", str(stats.total_data_sources))
    table.add_row("[legacy]Legacy resources[/legacy]", str(stats.legacy_resources))
    table.add_row("[modern]Modern resources[/modern]", str(stats.modern_resources))
    table.add_row("[ephemeral]Ephemeral resources[/ephemeral]", str(stats.ephemeral_resources))
    return table
