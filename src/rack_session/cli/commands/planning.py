"""Planning commands: plan, run, and the day/minutes prompts they share."""

import json
from typing import Annotated

import typer

from ...core.catalog import get_catalog
from ...core.config import Settings
from ...core.days import day_keys, get_day
from ...core.engine.config_loader import load_settings
from ...core.models import SessionRecord
from ...core.planner import TodayPlan, build_today_plan
from ...io.history_store import HistoryStore
from ...io.serializers import session_record_to_dict
from ...session import ConsoleIO, SessionRunner
from .. import views
from ..app import DayOption, LogPathOption, MinutesOption, app, get_store


def _prompt_day() -> str:
    """Ask which day to train; re-prompts until a configured day is chosen."""
    keys = day_keys()
    if not keys:
        views.print_error("No training days configured.")
        raise typer.Exit(1)

    views.console.print("\n[bold]Choose a day:[/bold]")
    for i, key in enumerate(keys, 1):
        views.console.print(f"  \\[{i}] {get_day(key).label}")

    while True:
        raw = views.console.input("Day \\[1]: ").strip() or "1"
        if raw in keys:
            return raw
        try:
            choice = int(raw)
        except ValueError:
            views.print_error(f"Enter 1-{len(keys)} or a day key")
            continue
        if 1 <= choice <= len(keys):
            return keys[choice - 1]
        views.print_error(f"Enter a number between 1 and {len(keys)}")


def _prompt_minutes() -> float:
    """Ask for today's time budget; empty input means no limit."""
    while True:
        raw = views.console.input("How many minutes do you have today? \\[0 = no limit]: ").strip()
        if not raw:
            return 0.0
        try:
            minutes = float(raw.replace(",", "."))
        except ValueError:
            views.print_error("Enter a number of minutes")
            continue
        if minutes < 0:
            views.print_error("Minutes cannot be negative")
            continue
        return minutes


def _build_plan(day: str | None, minutes: float | None) -> tuple[TodayPlan, Settings]:
    settings = load_settings()
    day_key = day or _prompt_day()
    target = minutes if minutes is not None else _prompt_minutes()
    if target < 0:
        views.print_error("--minutes cannot be negative")
        raise typer.Exit(1)

    try:
        today = build_today_plan(day_key, target, settings=settings)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    return today, settings


def _append_with_retry(store: HistoryStore, record: SessionRecord) -> bool:
    """
    Append the finished session, offering a retry on write failure.

    The record is printed on failure so nothing is lost if the user gives up.
    """
    while True:
        try:
            store.append_session(record)
            return True
        except OSError as e:
            views.print_error(f"Could not write {store.log_path}: {e}")
            views.console.print_json(json.dumps(session_record_to_dict(record)))
            if not views.confirm_action("Retry?"):
                return False


@app.command()
def plan(
    day: DayOption = None,
    minutes: MinutesOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", help="Output today's plan as JSON"),
    ] = False,
) -> None:
    """
    Show today's plan: validated baseline, trim/fill to the time budget, estimates.
    """
    today, settings = _build_plan(day, minutes)

    if json_out:
        print(json.dumps({
            "day_key": today.day_key,
            "target_minutes": today.target_minutes,
            "title": today.plan.title,
            "exercises": [
                {
                    "name": ex.name,
                    "exercise_key": ex.exercise_key,
                    "sets": [{"reps": s.reps, "kg": s.kg} for s in ex.sets],
                }
                for ex in today.plan.exercises
            ],
            "plan_minutes": round(today.plan_minutes, 1),
            "buffer_minutes": today.buffer_minutes,
            "target_reached": today.target_reached,
            "warnings": today.warnings,
            "trim_notes": today.trim_notes,
            "fill_notes": today.fill_notes,
        }, indent=2))
        return

    views.print_today_plan(today, settings.timing)


@app.command()
def run(
    day: DayOption = None,
    minutes: MinutesOption = None,
    log_path: LogPathOption = None,
) -> None:
    """
    Plan today's session, run it interactively, and log it.
    """
    today, settings = _build_plan(day, minutes)
    views.print_today_plan(today, settings.timing)

    if not today.plan.exercises:
        views.print_error("Nothing to run: today's plan has no exercises.")
        raise typer.Exit(1)

    store = get_store(log_path)
    runner = SessionRunner(ConsoleIO(views.console), history=store, settings=settings, catalog=get_catalog())
    views.console.print()
    try:
        record = runner.run(today.day_key, today.plan)
    except (EOFError, KeyboardInterrupt):
        views.console.print()
        views.print_warning("Session aborted; nothing was logged.")
        raise typer.Exit(1)

    if not _append_with_retry(store, record):
        views.print_warning("Session was not logged.")
        raise typer.Exit(1)

    views.print_success(f"Logged to {store.log_path}")
