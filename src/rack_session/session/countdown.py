"""
Interruptible countdowns.

A countdown ticks once per ``tick_seconds`` until it reaches zero or until
its cancel token fires, whichever comes first.  Cancellation is a single
latch shared by the ticker and the input reader: whoever settles it first
wins, and the countdown reports exactly one outcome.
"""

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from ..core.config import COUNTDOWN_CUES, TICK_SECONDS


class CancelToken:
    """One-shot cancellation latch."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()

    def cancel(self) -> bool:
        """
        Fire the token.

        Returns:
            True for the call that fired it, False for every later call
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            return True

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block up to timeout seconds; True if the token has fired."""
        return self._event.wait(timeout)


class CountdownOutcome(Enum):
    EXPIRED = "expired"
    INTERRUPTED = "interrupted"


class Interruptible(Protocol):
    """Something that can cancel a token while a countdown is running (e.g. an Enter key)."""

    def arm(self, token: CancelToken) -> None: ...

    def disarm(self) -> None: ...


@dataclass
class Countdown:
    """
    A labelled countdown with audible cues.

    Args:
        seconds: Duration; <= 0 expires immediately without ticking
        label: Shown by the tick callback ("Rest", "Get ready", ...)
        tick_seconds: Wall-clock length of one tick (0 in tests)
        cues: remaining seconds -> number of beeps
    """

    seconds: int
    label: str = ""
    tick_seconds: float = TICK_SECONDS
    cues: Mapping[int, int] = field(default_factory=lambda: dict(COUNTDOWN_CUES))

    def run(
        self,
        source: Interruptible | None = None,
        on_tick: Callable[[str, int], None] | None = None,
        on_cue: Callable[[int], None] | None = None,
        token: CancelToken | None = None,
    ) -> CountdownOutcome:
        """
        Run the countdown to completion or interruption.

        Args:
            source: Input that may interrupt the countdown; armed for its duration
            on_tick: Called with (label, remaining) before each tick and at zero
            on_cue: Called with the beep count when a cue threshold is reached
            token: Pre-made cancel token (default: a fresh one)

        Returns:
            EXPIRED if it reached zero, INTERRUPTED if the token fired first
        """
        if self.seconds <= 0:
            return CountdownOutcome.EXPIRED

        token = token or CancelToken()
        remaining = int(self.seconds)
        if source is not None:
            source.arm(token)
        try:
            while remaining > 0:
                if on_tick is not None:
                    on_tick(self.label, remaining)
                if token.wait(self.tick_seconds):
                    return CountdownOutcome.INTERRUPTED
                remaining -= 1
                # Cues fire on reaching a threshold, never at the starting value.
                if remaining > 0:
                    self._cue(remaining, on_cue)

            # The reader may have fired during the last tick; the first settle wins.
            if not token.cancel():
                return CountdownOutcome.INTERRUPTED
            if on_tick is not None:
                on_tick(self.label, 0)
            self._cue(0, on_cue)
            return CountdownOutcome.EXPIRED
        finally:
            if source is not None:
                source.disarm()

    def _cue(self, remaining: int, on_cue: Callable[[int], None] | None) -> None:
        beeps = self.cues.get(remaining)
        if beeps and on_cue is not None:
            on_cue(beeps)
