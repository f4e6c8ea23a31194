"""Pause flag shared between the timer and the keyboard listener thread."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, TextIO

log = logging.getLogger(__name__)

DEFAULT_PAUSE_COMMAND = "p"

# Back-off after a failed read so a broken stream does not spin the CPU.
_READ_RETRY_DELAY = 0.5


class PauseSignal:
    """A boolean "paused" flag that is safe to read and flip from any thread."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._paused = False

    def read(self) -> bool:
        with self._lock:
            return self._paused

    def toggle(self) -> bool:
        """Flip the flag and return the new value."""
        with self._lock:
            self._paused = not self._paused
            return self._paused


class InputListener:
    """Reads lines from a stream and flips a PauseSignal on the pause command.

    Runs on its own daemon thread so a blocking read never holds up the timer.
    """

    def __init__(
        self,
        pause: PauseSignal,
        stream: TextIO,
        command: str = DEFAULT_PAUSE_COMMAND,
        on_toggle: Optional[Callable[[bool], None]] = None,
    ) -> None:
        self._pause = pause
        self._stream = stream
        self._command = command.strip()
        self._on_toggle = on_toggle
        self._thread: Optional[threading.Thread] = None

    @property
    def command(self) -> str:
        return self._command

    def start(self) -> threading.Thread:
        """Start listening in the background. The thread is abandoned at exit."""
        if self._thread is None:
            self._thread = threading.Thread(
                target=self.run, name="pause-listener", daemon=True
            )
            self._thread.start()
        return self._thread

    def run(self) -> None:
        """Blocking read loop. Returns only when the stream is exhausted or closed."""
        while True:
            try:
                line = self._stream.readline()
            except ValueError as exc:
                # raised for every read once the file object is closed
                log.debug("Input stream closed (%s); pause listener stopping.", exc)
                return
            except OSError as exc:
                log.warning("Could not read from input: %s", exc)
                time.sleep(_READ_RETRY_DELAY)
                continue
            if line == "":
                log.debug("Input stream closed; pause listener stopping.")
                return
            self.handle_line(line)

    def handle_line(self, line: str) -> bool:
        """Toggle the pause flag if ``line`` is the pause command."""
        if line.strip() != self._command:
            return False
        paused = self._pause.toggle()
        log.info("Pause %s by operator.", "engaged" if paused else "released")
        if self._on_toggle is not None:
            self._on_toggle(paused)
        return True
