"""Cancellable waits for the single-threaded crawl.

Every blocking delay in the scraper (retry backoff, pacing between product
pages) goes through a :class:`StopSignal`.  The CLI wires ``SIGINT`` to
:meth:`StopSignal.stop`, so a Ctrl-C during a wait ends the run at once
instead of after the sleep.

Tests substitute a subclass whose :meth:`sleep` records the requested
delay and returns immediately.
"""

from __future__ import annotations

import threading
from typing import Optional

from phonespecs.errors import Interrupted


class StopSignal:
    """A one-shot stop flag with an interruptible ``sleep``."""

    def __init__(self, event: Optional[threading.Event] = None) -> None:
        self._event = event or threading.Event()

    @property
    def stopped(self) -> bool:
        return self._event.is_set()

    def stop(self) -> None:
        """Request the run to stop.  Safe to call from a signal handler."""
        self._event.set()

    def check(self) -> None:
        """Raise :class:`Interrupted` if a stop has been requested."""
        if self._event.is_set():
            raise Interrupted("stop requested")

    def sleep(self, seconds: float) -> None:
        """Wait up to *seconds*; raise :class:`Interrupted` if stopped meanwhile."""
        self.check()
        if seconds > 0 and self._event.wait(seconds):
            raise Interrupted(f"stop requested during {seconds:.1f}s wait")
