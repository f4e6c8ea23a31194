"""Rich terminal formatting helpers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn
from rich.text import Text

from focus_timer.models import AppConfig, PhaseKind

console = Console()

TickCallback = Callable[[int, int], None]

_PHASE_STYLE: dict[PhaseKind, str] = {
    PhaseKind.FOCUS: "bold cyan",
    PhaseKind.BREAK: "bold green",
}


def configure_logging(verbose: bool = False) -> None:
    """Send log records through the shared console so they render above the bar."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose)],
        force=True,
    )


def print_phase_header(kind: PhaseKind, cycle: int, total: int) -> None:
    """Print the banner shown before each phase."""
    style = _PHASE_STYLE[kind]
    if kind == PhaseKind.FOCUS:
        console.rule(f"[{style}]Cycle {cycle}/{total}: {kind.label} time[/{style}]")
    else:
        console.rule(f"[{style}]{kind.label} time[/{style}]")


def print_pause_state(paused: bool, command: str = "p") -> None:
    """Acknowledge a pause toggle from the operator."""
    if paused:
        console.print(f"[yellow]Paused. Enter '{command}' to resume.[/yellow]")
    else:
        console.print("[green]Resumed.[/green]")


def print_alert(message: str) -> None:
    """Print the end-of-cycle alert in a styled panel."""
    text = Text(message, justify="center")
    console.print(Panel(text, border_style="magenta", padding=(1, 4)))


def ring_bell() -> None:
    console.print("\a", end="")


def print_config(config: AppConfig, path: str) -> None:
    """Print the stored defaults."""
    lines: list[str] = [
        f"Focus: {config.focus_seconds}s",
        f"Break: {config.break_seconds}s",
        f"Cycles: {config.cycles}",
        f"Pause command: {config.pause_command}",
        f"Backend: {config.backend.value}",
        f"Interface: {config.interface}",
    ]
    console.print(Panel("\n".join(lines), title=path, border_style="blue"))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]{message}[/blue]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]{message}[/yellow]")


def create_timer_progress() -> Progress:
    """Create a Rich progress bar for the timer."""
    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40),
        TextColumn("{task.completed:.0f}s / {task.total:.0f}s"),
        TimeRemainingColumn(),
        console=console,
    )


@contextmanager
def phase_progress(label: str, total: int) -> Iterator[TickCallback]:
    """Show a progress bar for one phase and yield the tick callback feeding it."""
    progress = create_timer_progress()
    with progress:
        task = progress.add_task(label, total=total)

        def on_tick(elapsed: int, phase_total: int) -> None:
            progress.update(task, completed=elapsed, total=phase_total)

        yield on_tick
