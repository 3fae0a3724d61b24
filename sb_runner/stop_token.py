"""Stop token for interrupting a benchmark session between harness runs."""

from __future__ import annotations

import logging
import signal
from pathlib import Path
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class StopToken:
    """
    Cooperative stop controller.

    It can be tripped by SIGINT/SIGTERM or by the presence of a stop file.
    The session consults ``should_stop()`` before starting each client; a
    harness that is already running is left to finish or time out.
    """

    def __init__(
        self,
        stop_file: Optional[Path] = None,
        enable_signals: bool = True,
        on_stop: Optional[Callable[[], None]] = None,
    ) -> None:
        self.stop_file = stop_file
        self.reason: str | None = None
        self._on_stop = on_stop
        self._stop_requested = False
        self._prev_handlers: Dict[int, object] = {}
        if enable_signals:
            self._install_signal_handlers()

    def _install_signal_handlers(self) -> None:
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                self._prev_handlers[sig] = signal.getsignal(sig)
                signal.signal(sig, self._handle_signal)
            except ValueError:
                # Not the main thread; rely on the stop file only.
                logger.debug("Cannot install handler for %s", sig)

    def _handle_signal(self, signum: int, frame) -> None:
        self.request_stop(f"signal {signal.Signals(signum).name}")

    def request_stop(self, reason: str = "requested") -> None:
        """Mark the token as stopped and trigger the callback once."""
        if self._stop_requested:
            return
        self._stop_requested = True
        self.reason = reason
        logger.warning("Stop requested: %s", reason)
        if self._on_stop:
            self._on_stop()

    def should_stop(self) -> bool:
        """Return True when stop was requested or the stop file exists."""
        if self._stop_requested:
            return True
        if self.stop_file and self.stop_file.exists():
            self.request_stop(f"stop file {self.stop_file}")
            return True
        return False

    def restore(self) -> None:
        """Restore original signal handlers."""
        for sig, handler in self._prev_handlers.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
        self._prev_handlers.clear()

    def __enter__(self) -> "StopToken":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()
