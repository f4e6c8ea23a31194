"""focus-timer CLI -- focus and break cycles with the network switched off while you work."""

from __future__ import annotations

import sys
from functools import partial
from typing import Optional

import typer

from focus_timer import config as cfg
from focus_timer import display, timer
from focus_timer.effects import EffectGate, build_effects
from focus_timer.interrupt import InterruptGuard
from focus_timer.models import ToggleBackend
from focus_timer.pause import InputListener, PauseSignal

app = typer.Typer(
    name="focus-timer",
    help="Alternate focus and break time, with the network off while you focus.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Focus timer."""
    display.configure_logging(verbose)


# ---------------------------------------------------------------------------
# Timer
# ---------------------------------------------------------------------------


@app.command()
def run(
    focus: Optional[int] = typer.Option(None, "--focus", "-f", min=0, help="Focus time in seconds"),
    break_time: Optional[int] = typer.Option(None, "--break", "-b", min=0, help="Break time in seconds"),
    cycles: Optional[int] = typer.Option(None, "--cycles", "-c", min=0, help="Number of focus/break cycles"),
    pause_key: Optional[str] = typer.Option(None, "--pause-key", help="Line that pauses or resumes the timer"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Leave the network alone and skip notifications"),
) -> None:
    """Start the focus/break cycles."""
    settings = cfg.load_config()
    cycle_config = settings.cycle_config(focus, break_time, cycles)

    command = (pause_key if pause_key is not None else settings.pause_command).strip()
    if not command:
        display.print_warning("The pause key cannot be blank.")
        raise typer.Exit(2)

    backend = ToggleBackend.DRY_RUN if dry_run else settings.backend
    gate = EffectGate(build_effects(backend, settings.interface))
    InterruptGuard(gate).install()

    pause = PauseSignal()
    listener = InputListener(
        pause,
        sys.stdin,
        command=command,
        on_toggle=partial(display.print_pause_state, command=command),
    )
    listener.start()

    display.print_info(f"Enter '{command}' at any time to pause or resume.")
    timer.run_cycles(cycle_config, gate, pause)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@app.command()
def config(
    focus: Optional[int] = typer.Option(None, "--focus", min=0, help="Default focus time in seconds"),
    break_time: Optional[int] = typer.Option(None, "--break", min=0, help="Default break time in seconds"),
    cycles: Optional[int] = typer.Option(None, "--cycles", min=0, help="Default number of cycles"),
    pause_key: Optional[str] = typer.Option(None, "--pause-key", help="Default pause command"),
    interface: Optional[str] = typer.Option(None, "--interface", help="Wi-Fi interface (macOS)"),
    backend: Optional[ToggleBackend] = typer.Option(None, "--backend", help="How to toggle the network"),
    reset: bool = typer.Option(False, "--reset", help="Restore the built-in defaults"),
    show: bool = typer.Option(False, "--show", help="Show current config"),
) -> None:
    """View or change the stored defaults."""
    changes = {
        "focus_seconds": focus,
        "break_seconds": break_time,
        "cycles": cycles,
        "pause_command": pause_key.strip() if pause_key is not None else None,
        "interface": interface,
        "backend": backend,
    }

    if reset:
        cfg.reset_config()
        display.print_success("Reset to default settings.")
    elif any(v is not None for v in changes.values()):
        try:
            cfg.update_config(**changes)
        except ValueError as exc:
            display.print_warning(f"Invalid setting: {exc}")
            raise typer.Exit(1)
        display.print_success(f"Saved to {cfg.config_path()}")
    elif show:
        display.print_config(cfg.load_config(), str(cfg.config_path()))
    else:
        display.print_info("Use --show, --reset, or an option to change.")
