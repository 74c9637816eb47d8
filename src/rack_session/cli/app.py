"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..io.history_store import HistoryStore, get_default_log_path

# Shared --day option type used by plan and run
DayOption = Annotated[
    Optional[str],
    typer.Option("--day", "-d", help="Day key: day1, day2, day3 (prompted if omitted)"),
]

MinutesOption = Annotated[
    Optional[float],
    typer.Option("--minutes", "-m", help="Time budget in minutes; 0 = no limit (prompted if omitted)"),
]

LogPathOption = Annotated[
    Optional[Path],
    typer.Option("--log-path", help="Session log (JSONL); default ~/.rack-session/training_log.jsonl"),
]

app = typer.Typer(
    name="rack-session",
    help="Time-boxed strength sessions: fit a day's template to your minutes, then run it.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(log_path: Path | None) -> HistoryStore:
    """Get history store from path or default location."""
    if log_path is None:
        log_path = get_default_log_path()
    return HistoryStore(log_path)
