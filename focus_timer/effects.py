"""Side effects driven by the timer: the network toggle and the cycle alert.

The timer only talks to an :class:`EffectGate`. The gate serialises every call
to the underlying port, turns failures into log lines, and makes sure the rest
state (network back on) holds at the end of a run, normal or interrupted.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Protocol

from focus_timer.models import ToggleBackend

log = logging.getLogger(__name__)

# Toggle value that must hold after a run, normal or interrupted.
REST_STATE = False

ALERT_TITLE = "Focus Timer"


class EffectError(Exception):
    """A toggle or alert could not be carried out."""


class SideEffectPort(Protocol):
    def assert_toggle(self, engaged: bool) -> None:
        """Engage (network off) or relax (network on) the restriction."""

    def notify(self, cycle: int, total: int) -> None:
        """Raise the end-of-cycle alert."""


def alert_message(cycle: int, total: int) -> str:
    return f"Cycle {cycle}/{total} finished!"


def _toggle_command(backend: ToggleBackend, interface: str, engaged: bool) -> list[str]:
    power = "off" if engaged else "on"
    if backend == ToggleBackend.MACOS:
        return ["networksetup", "-setairportpower", interface, power]
    if backend == ToggleBackend.LINUX:
        return ["nmcli", "radio", "wifi", power]
    raise ValueError(f"No toggle command for backend {backend.value!r}")


def _applescript_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _notify_command(backend: ToggleBackend, title: str, message: str) -> list[str]:
    if backend == ToggleBackend.MACOS:
        script = (
            f"display notification {_applescript_string(message)} "
            f"with title {_applescript_string(title)}"
        )
        return ["osascript", "-e", script]
    if backend == ToggleBackend.LINUX:
        return ["notify-send", title, message]
    raise ValueError(f"No notify command for backend {backend.value!r}")


def _run(cmd: list[str]) -> None:
    try:
        subprocess.run(cmd, check=True, capture_output=True)
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or b"").decode(errors="replace").strip()
        raise EffectError(f"{cmd[0]} exited with {exc.returncode}: {stderr}") from exc
    except FileNotFoundError as exc:
        raise EffectError(f"{cmd[0]} not found") from exc


class ShellEffects:
    """Flips wireless networking and posts desktop notifications via system tools."""

    def __init__(self, backend: ToggleBackend, interface: str = "en0") -> None:
        if backend not in (ToggleBackend.MACOS, ToggleBackend.LINUX):
            raise ValueError(f"ShellEffects cannot drive backend {backend.value!r}")
        self.backend = backend
        self.interface = interface

    def assert_toggle(self, engaged: bool) -> None:
        log.info("Setting network %s", "off" if engaged else "on")
        _run(_toggle_command(self.backend, self.interface, engaged))

    def notify(self, cycle: int, total: int) -> None:
        _run(_notify_command(self.backend, ALERT_TITLE, alert_message(cycle, total)))


class DryRunEffects:
    """Logs what would happen without touching the system."""

    def assert_toggle(self, engaged: bool) -> None:
        log.info("[dry-run] would set network %s", "off" if engaged else "on")

    def notify(self, cycle: int, total: int) -> None:
        log.info("[dry-run] would notify: %s", alert_message(cycle, total))


def resolve_backend(backend: ToggleBackend) -> ToggleBackend:
    """Pick a concrete backend for ``auto`` from the running platform."""
    if backend != ToggleBackend.AUTO:
        return backend
    if sys.platform == "darwin":
        return ToggleBackend.MACOS
    if sys.platform.startswith("linux") and shutil.which("nmcli"):
        return ToggleBackend.LINUX
    log.warning("No network toggle available on %s; running dry.", sys.platform)
    return ToggleBackend.DRY_RUN


def build_effects(backend: ToggleBackend, interface: str = "en0") -> SideEffectPort:
    resolved = resolve_backend(backend)
    if resolved == ToggleBackend.DRY_RUN:
        return DryRunEffects()
    return ShellEffects(resolved, interface)


class EffectGate:
    """Serialises calls to a SideEffectPort and absorbs its failures.

    The lock is re-entrant: an interrupt handler runs on the main thread and
    may fire while that same thread is inside a port call. Such a handler
    hands its work to :meth:`when_idle`, which holds it until the port call
    in progress has returned, so the last write to the toggle is the handler's.
    """

    def __init__(self, port: SideEffectPort) -> None:
        self._port = port
        self._lock = threading.RLock()
        self._depth = 0
        self._deferred: Optional[Callable[[], None]] = None
        self._settled = False
        self._rest_applied = False
        self.last_asserted: Optional[bool] = None

    @property
    def settled(self) -> bool:
        return self._settled

    @property
    def rest_applied(self) -> bool:
        """True once a settle or restore call to the port has returned successfully."""
        return self._rest_applied

    @contextmanager
    def _port_call(self) -> Iterator[None]:
        with self._lock:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0 and self._deferred is not None:
                    deferred, self._deferred = self._deferred, None
                    deferred()

    def _assert(self, engaged: bool, rest: bool = False) -> bool:
        with self._port_call():
            self.last_asserted = engaged
            try:
                self._port.assert_toggle(engaged)
            except EffectError as exc:
                log.warning("Could not set network %s: %s", "off" if engaged else "on", exc)
                return False
            if rest:
                self._rest_applied = True
            return True

    def assert_toggle(self, engaged: bool) -> bool:
        """Assert the toggle state. Returns False if the port failed."""
        return self._assert(engaged)

    def notify(self, cycle: int, total: int) -> bool:
        """Raise the cycle alert. Returns False if the port failed."""
        with self._port_call():
            try:
                self._port.notify(cycle, total)
            except EffectError as exc:
                log.warning("Could not send alert for cycle %d: %s", cycle, exc)
                return False
            return True

    def settle(self) -> bool:
        """Assert the rest state once. Returns False if it was already claimed."""
        with self._lock:
            if self._settled:
                log.debug("Rest state already claimed; skipping.")
                return False
            self._settled = True
            self._assert(REST_STATE, rest=True)
            return True

    def restore(self) -> bool:
        """Assert the rest state unless a completed settle already did.

        Returns False when nothing had to be done.
        """
        with self._lock:
            self._settled = True
            if self._rest_applied:
                log.debug("Rest state already applied; skipping.")
                return False
            self._assert(REST_STATE, rest=True)
            return True

    def when_idle(self, callback: Callable[[], None]) -> bool:
        """Run ``callback`` now, or once the port call running on this thread returns.

        Returns True if it ran immediately.
        """
        with self._lock:
            if self._depth:
                log.debug("Port call in progress; deferring %r.", callback)
                self._deferred = callback
                return False
            callback()
            return True
