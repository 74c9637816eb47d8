"""
Minimal smoke tests for rack-session CLI.

Tests basic functionality:
- App runs without errors
- Plan is generated for each day
- Catalog and day templates are listed
- History and last read a session log
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from rack_session.cli.main import app
from rack_session.core.models import LoggedExercise, SessionRecord
from rack_session.io.history_store import HistoryStore


runner = CliRunner()


@pytest.fixture
def temp_log_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def log_with_sessions(temp_log_dir):
    """A session log holding two push days."""
    log_path = temp_log_dir / "training_log.jsonl"
    store = HistoryStore(log_path)
    store.append_session(SessionRecord(
        created_at="2026-10-01T18:00:00",
        day_key="day1",
        title="Day 1: Chest, Shoulders & Triceps (today)",
        exercises=[LoggedExercise("bench_press", 4, [80, 80, 80, 80])],
    ))
    store.append_session(SessionRecord(
        created_at="2026-10-04T18:00:00",
        day_key="day1",
        title="Day 1: Chest, Shoulders & Triceps (today)",
        exercises=[
            LoggedExercise("bench_press", 3, [82.5, 82.5, 85]),
            LoggedExercise("dips", 3, [0, 0, 0]),
        ],
    ))
    return log_path


@pytest.fixture
def instant_timers(tmp_path, monkeypatch):
    """A home directory whose settings switch off change-overs and wall-clock ticks."""
    user_dir = tmp_path / "home" / ".rack-session"
    user_dir.mkdir(parents=True)
    (user_dir / "settings.yaml").write_text(
        "runner:\n  transition_seconds: 0\n  ready_countdown_seconds: 0\n  tick_seconds: 0\n"
    )
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return tmp_path


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "rack-session" in result.output or "minutes" in result.output.lower()

    def test_plan_with_budget(self):
        """Test plan trims day1 to a 30 minute budget."""
        result = runner.invoke(app, ["plan", "--day", "day1", "--minutes", "30"])
        assert result.exit_code == 0
        assert "Day 1" in result.output
        assert "Trim" in result.output
        assert "TOTAL (display)" in result.output

    def test_plan_without_limit(self):
        """Test --minutes 0 shows the baseline without estimates."""
        result = runner.invoke(app, ["plan", "--day", "day3", "--minutes", "0"])
        assert result.exit_code == 0
        assert "No time limit" in result.output
        assert "TOTAL (display)" not in result.output

    def test_plan_json(self):
        """Test plan --json is machine-readable."""
        result = runner.invoke(app, ["plan", "-d", "day2", "-m", "45", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["day_key"] == "day2"
        assert data["target_reached"] is True
        assert data["plan_minutes"] <= 45 + 1.5
        assert all(ex["exercise_key"] for ex in data["exercises"])

    def test_plan_prompts_for_missing_values(self):
        """Test plan asks for day and minutes when not given."""
        result = runner.invoke(app, ["plan"], input="2\n40\n")
        assert result.exit_code == 0
        assert "Day 2" in result.output

    def test_plan_unknown_day(self):
        """Test an unknown day is an error."""
        result = runner.invoke(app, ["plan", "--day", "day9", "--minutes", "30"])
        assert result.exit_code == 1
        assert "Unknown day" in result.output

    def test_exercises_lists_catalog(self):
        """Test exercises shows catalog keys and each day."""
        result = runner.invoke(app, ["exercises"])
        assert result.exit_code == 0
        assert "bench_press" in result.output
        assert "day3" in result.output

    def test_exercises_single_day(self):
        result = runner.invoke(app, ["exercises", "--day", "day2"])
        assert result.exit_code == 0
        assert "Back & Biceps" in result.output

    def test_history_empty(self, temp_log_dir):
        """Test history on a missing log."""
        result = runner.invoke(app, ["history", "--log-path", str(temp_log_dir / "none.jsonl")])
        assert result.exit_code == 0
        assert "No sessions" in result.output

    def test_history_json(self, log_with_sessions):
        """Test history --json returns the logged records."""
        result = runner.invoke(app, ["history", "--log-path", str(log_with_sessions), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data) == 2
        assert data[1]["exercises"][0] == {
            "exerciseKey": "bench_press",
            "sets": 3,
            "weights": [82.5, 82.5, 85],
        }

    def test_history_limit(self, log_with_sessions):
        result = runner.invoke(
            app, ["history", "--log-path", str(log_with_sessions), "--json", "--limit", "1"]
        )
        assert result.exit_code == 0
        assert [s["createdAt"] for s in json.loads(result.output)] == ["2026-10-04T18:00:00"]

    def test_last_uses_newest_entry(self, log_with_sessions):
        """Test last resolves an alias and shows the newest weights."""
        result = runner.invoke(app, ["last", "Barbell bench press", "--log-path", str(log_with_sessions)])
        assert result.exit_code == 0
        assert "Bench press" in result.output
        assert "82.5, 82.5, 85" in result.output

    def test_last_without_history(self, temp_log_dir):
        result = runner.invoke(app, ["last", "squat", "--log-path", str(temp_log_dir / "log.jsonl")])
        assert result.exit_code == 0
        assert "No logged sets" in result.output

    def test_menu_quit(self):
        """Test the interactive menu exits cleanly on 0."""
        result = runner.invoke(app, [], input="0\n")
        assert result.exit_code == 0
        assert "rack-session" in result.output

    def test_run_logs_one_session(self, instant_timers):
        """Test run executes today's plan from stdin and appends one JSONL line."""
        log_path = instant_timers / "training_log.jsonl"
        result = runner.invoke(
            app,
            ["run", "--day", "day1", "--minutes", "20", "--log-path", str(log_path)],
            input="\n" * 200,
        )
        assert result.exit_code == 0, result.output
        assert "Logged to" in result.output

        lines = log_path.read_text().splitlines()
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record["dayKey"] == "day1"
        assert record["exercises"]
        assert all(ex["sets"] == len(ex["weights"]) for ex in record["exercises"])

    def test_run_aborted_on_closed_input(self, instant_timers):
        """Test run stops without logging when input ends mid-session."""
        log_path = instant_timers / "training_log.jsonl"
        result = runner.invoke(
            app,
            ["run", "--day", "day1", "--minutes", "20", "--log-path", str(log_path)],
            input="\n",
        )
        assert result.exit_code == 1
        assert "nothing was logged" in result.output
        assert not log_path.exists()
