"""Restore the network and exit when the process is interrupted."""

from __future__ import annotations

import logging
import signal
import sys
from functools import partial
from types import FrameType
from typing import Callable, Optional, Protocol, Sequence

from focus_timer import display

log = logging.getLogger(__name__)

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class Restorable(Protocol):
    def restore(self) -> bool: ...

    def when_idle(self, callback: Callable[[], None]) -> bool: ...


class InterruptGuard:
    """Process-wide handler that asserts the rest state and exits.

    Python runs signal handlers on the main thread, so the handler preempts the
    timer at whatever tick or pause poll it is in and never returns to it. The
    one exception is a side-effect call already running on that thread: it is
    allowed to finish first, so the rest state is the last thing written.
    """

    def __init__(
        self,
        effects: Restorable,
        signals: Sequence[signal.Signals] = DEFAULT_SIGNALS,
    ) -> None:
        self._effects = effects
        self._signals = tuple(signals)
        self.installed = False

    def install(self) -> None:
        """Register the handler. Must be called from the main thread."""
        for sig in self._signals:
            signal.signal(sig, self._handle)
        self.installed = True
        log.debug("Interrupt guard installed for %s", ", ".join(s.name for s in self._signals))

    def _handle(self, signum: int, _frame: Optional[FrameType]) -> None:
        name = signal.Signals(signum).name
        log.warning("%s received; restoring network before exit.", name)
        display.print_warning(f"{name} received. Turning network on and exiting.")
        self._effects.when_idle(partial(self._restore_and_exit, signum))

    def _restore_and_exit(self, signum: int) -> None:
        self._effects.restore()
        sys.exit(128 + signum)
