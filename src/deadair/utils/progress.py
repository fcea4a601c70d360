"""Console logging for pipeline progress, using Rich."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console(stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    """Toggle debug output."""
    global _verbose
    _verbose = enabled


def _stamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


def log(message: str, *, style: str = "bold") -> None:
    """Log a timestamped message."""
    console.print(f"[dim]\\[{_stamp()}][/dim] {message}", style=style, highlight=False)


def log_debug(message: str) -> None:
    """Log a message only when verbose output is on."""
    if _verbose:
        log(f"[dim]{message}[/dim]", style="")


def log_step(step: str, message: str) -> None:
    """Log a processing step."""
    console.print(
        f"[dim]\\[{_stamp()}][/dim] [bold cyan]{step}[/bold cyan] {message}",
        highlight=False,
    )


def log_success(message: str) -> None:
    log(f"[green]✓[/green] {message}", style="")


def log_warning(message: str) -> None:
    log(f"[yellow]⚠[/yellow] {message}", style="")


def log_error(message: str) -> None:
    log(f"[red]✗[/red] {message}", style="")


def format_seconds(seconds: float) -> str:
    """Format seconds as ``M:SS.s`` for summaries."""
    mins = int(seconds) // 60
    return f"{mins}:{seconds - mins * 60:04.1f}"


def show_summary(title: str, rows: dict[str, object], *, elapsed: float | None = None) -> None:
    """Show a two-column summary panel."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()

    for key, value in rows.items():
        table.add_row(key, str(value))
    if elapsed is not None:
        table.add_row("Elapsed", f"{elapsed:.1f}s")

    console.print(Panel(table, title=f"[bold]{title}[/bold]", border_style="green"))
