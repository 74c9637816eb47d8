"""Interactive session execution."""

from .countdown import CancelToken, Countdown, CountdownOutcome
from .runner import Phase, SessionRunner, SessionState, build_session_record
from .terminal import ConsoleIO, SessionIO

__all__ = [
    "CancelToken",
    "ConsoleIO",
    "Countdown",
    "CountdownOutcome",
    "Phase",
    "SessionIO",
    "SessionRunner",
    "SessionState",
    "build_session_record",
]
