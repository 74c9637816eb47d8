"""
JSONL-based history storage for completed sessions.

Handles reading, appending, and looking up the session log.
"""

import json
from pathlib import Path

from ..core.models import LoggedExercise, SessionRecord
from .serializers import ValidationError, dict_to_session_record, session_to_json_line


class HistoryStore:
    """
    Manages the session log stored in JSONL format.

    One JSON object per line, oldest first.  Appends never rewrite earlier
    lines, so a completed session is written exactly once.
    """

    def __init__(self, log_path: str | Path):
        """
        Initialize the history store.

        Args:
            log_path: Path to the JSONL session log
        """
        self.log_path = Path(log_path)

    def load_sessions(self) -> list[SessionRecord]:
        """
        Load all sessions from the log file.

        Returns:
            List of SessionRecord in file order (oldest first)

        Raises:
            FileNotFoundError: If the log file doesn't exist
            ValidationError: If a line is not a valid session record
        """
        if not self.log_path.exists():
            raise FileNotFoundError(f"Session log not found: {self.log_path}")

        sessions: list[SessionRecord] = []

        with open(self.log_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    sessions.append(dict_to_session_record(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.log_path}: {e}"
                    ) from e

        return sessions

    def last_entry_for(self, exercise_key: str) -> LoggedExercise | None:
        """
        Most recent logged entry for an exercise key.

        Read problems (missing or unreadable file, malformed data) are
        treated as "no history".

        Args:
            exercise_key: Catalog key, e.g. "bench_press"

        Returns:
            LoggedExercise from the newest session containing the key, or None
        """
        try:
            sessions = self.load_sessions()
        except (OSError, ValidationError):
            return None

        for session in reversed(sessions):
            entry = session.entry_for(exercise_key)
            if entry is not None:
                return entry
        return None

    def append_session(self, record: SessionRecord) -> None:
        """
        Append a session to the log, creating the file if absent.

        Write errors propagate: losing a completed session must not be silent.

        Args:
            record: Session to append
        """
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(session_to_json_line(record) + "\n")


def get_default_log_path() -> Path:
    """
    Get the default session log path.

    Returns:
        ~/.rack-session/training_log.jsonl
    """
    return Path.home() / ".rack-session" / "training_log.jsonl"
