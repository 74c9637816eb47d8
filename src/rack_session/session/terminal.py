"""
Console input/output for the session runner.

The runner talks to the user only through the SessionIO protocol, so tests
can drive a full session from a scripted list of answers.  ConsoleIO is the
terminal implementation: one daemon thread reads stdin line by line into a
queue.  While a countdown is armed, the next line fires the countdown's
cancel token instead of being queued as an answer.
"""

import queue
import sys
import threading
from typing import Protocol, TextIO

from rich.console import Console
from rich.markup import escape

from .countdown import CancelToken


class SessionIO(Protocol):
    """Everything the session runner needs from a user interface."""

    def ask(self, prompt: str) -> str:
        """Show prompt and return one line of input (without newline)."""
        ...

    def say(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def tick(self, label: str, remaining: int) -> None: ...

    def beep(self, count: int) -> None: ...

    def arm(self, token: CancelToken) -> None: ...

    def disarm(self) -> None: ...


class ConsoleIO:
    """
    Rich console + stdin reader thread.

    Args:
        console: Rich console used for all output
        stream: Line source (default: sys.stdin)
    """

    def __init__(self, console: Console | None = None, stream: TextIO | None = None):
        self.console = console or Console()
        self._stream = stream or sys.stdin
        self._lines: queue.Queue[str | None] = queue.Queue()
        self._lock = threading.Lock()
        self._armed: CancelToken | None = None
        self._reader: threading.Thread | None = None
        self._eof = False
        self._ticking = False

    def _ensure_reader(self) -> None:
        if self._reader is None:
            self._reader = threading.Thread(
                target=self._read_lines, name="rack-session-input", daemon=True
            )
            self._reader.start()

    def _read_lines(self) -> None:
        while True:
            line = self._stream.readline()
            if not line:
                break
            with self._lock:
                token, self._armed = self._armed, None
            # A countdown that already expired leaves the line as a normal answer.
            if token is not None and token.cancel():
                continue
            self._lines.put(line.rstrip("\r\n"))
        self._lines.put(None)

    def ask(self, prompt: str) -> str:
        """
        Print prompt and block for the next input line.

        Raises:
            EOFError: If input is closed
        """
        if self._eof:
            raise EOFError("input closed")
        self._ensure_reader()
        self._end_tick_line()
        self.console.print(escape(prompt), end="")
        line = self._lines.get()
        if line is None:
            self._eof = True
            raise EOFError("input closed")
        return line

    def _end_tick_line(self) -> None:
        if self._ticking:
            self.console.file.write("\n")
            self._ticking = False

    def say(self, message: str) -> None:
        self._end_tick_line()
        self.console.print(escape(message))

    def warn(self, message: str) -> None:
        self._end_tick_line()
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    def tick(self, label: str, remaining: int) -> None:
        minutes, seconds = divmod(max(0, remaining), 60)
        end = "\n" if remaining <= 0 else ""
        self.console.file.write(f"\r  {label}: {minutes}:{seconds:02d}  (Enter = skip) {end}")
        self.console.file.flush()
        self._ticking = remaining > 0

    def beep(self, count: int) -> None:
        for _ in range(count):
            self.console.bell()

    def arm(self, token: CancelToken) -> None:
        self._ensure_reader()
        with self._lock:
            self._armed = token

    def disarm(self) -> None:
        with self._lock:
            self._armed = None
