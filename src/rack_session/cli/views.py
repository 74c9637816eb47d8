"""
CLI view formatters using Rich for pretty console output.

Handles workout, estimate, catalog and history display.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.catalog import ExerciseCatalog, get_catalog
from ..core.classification import classify, rest_seconds
from ..core.config import TimingConfig
from ..core.days import DayDefinition
from ..core.models import LoggedExercise, SessionRecord, Workout
from ..core.planner import TodayPlan
from ..core.time_model import estimate_exercise_minutes
from ..core.weights import is_timed

console = Console()


def format_set(timed: bool, index: int, reps: int, kg: float) -> str:
    """One work-set line: '8 reps @ 60 kg' or '60 sec' for holds."""
    if timed:
        return f"Set {index}: {kg:g} sec"
    return f"Set {index}: {reps} reps @ {kg:g} kg"


def print_workout(workout: Workout, catalog: ExerciseCatalog | None = None) -> None:
    """
    Print a workout's exercises and work sets.

    Warmup sets are not listed; they are derived when the session runs.

    Args:
        workout: Workout to display
        catalog: Catalog used for display labels
    """
    catalog = catalog or get_catalog()
    console.print(f"\n[bold]=== {escape(workout.title)} ===[/bold]")
    if not workout.exercises:
        console.print("[yellow]No exercises.[/yellow]")
        return

    for i, ex in enumerate(workout.exercises, 1):
        console.print(f"\n[cyan]{i}) {escape(catalog.display_name(ex.name))}[/cyan]")
        timed = is_timed(ex)
        for j, s in enumerate(ex.sets, 1):
            console.print(f"   {format_set(timed, j, s.reps, s.kg)}")


def print_time_estimate(
    label: str,
    base_minutes: float,
    buffer_minutes: int,
    target_minutes: float,
    buffer_fraction: float,
) -> None:
    """
    Print the base estimate, the display buffer, and their total vs. target.

    Args:
        label: Block heading
        base_minutes: Base estimate (warmup, rests and transitions included)
        buffer_minutes: Whole-minute display buffer
        target_minutes: The user's time budget
        buffer_fraction: Buffer as a fraction of the target (for the label)
    """
    console.print(f"\n[bold]--- {escape(label)} ---[/bold]")
    console.print(f"Base (warmup + rests + change-overs): ~{base_minutes:.1f} min")
    console.print(f"Display buffer ({round(buffer_fraction * 100)}%): ~{buffer_minutes} min")
    console.print(
        f"[bold]TOTAL (display): ~{base_minutes + buffer_minutes:.1f} min[/bold] "
        f"(target: {target_minutes:g} min)"
    )


def print_notes(heading: str, notes: list[str], style: str = "") -> None:
    """Print a bulleted note block; nothing when empty."""
    if not notes:
        return
    console.print(f"\n[bold]--- {escape(heading)} ---[/bold]")
    for note in notes:
        line = f"- {escape(note)}"
        console.print(f"[{style}]{line}[/{style}]" if style else line)


def print_today_plan(today: TodayPlan, timing: TimingConfig) -> None:
    """
    Print the validated baseline, today's plan, estimates and notes.

    Args:
        today: Result of build_today_plan()
        timing: Time model (for the buffer percentage label)
    """
    print_notes("Validation (exercises on the wrong day are dropped)", today.warnings, "yellow")

    console.print(
        f"\nYou have {today.target_minutes:g} minutes."
        if today.has_target
        else "\nNo time limit given."
    )
    print_workout(today.baseline)
    if today.has_target:
        print_time_estimate(
            "Time estimate (baseline)",
            today.baseline_minutes,
            today.buffer_minutes,
            today.target_minutes,
            timing.display_buffer_fraction,
        )

    print_workout(today.plan)
    if today.has_target:
        print_time_estimate(
            "Time estimate (today)",
            today.plan_minutes,
            today.buffer_minutes,
            today.target_minutes,
            timing.display_buffer_fraction,
        )

    print_notes("Trim (auto)", today.trim_notes, "" if today.target_reached else "yellow")
    print_notes("Fill (auto)", today.fill_notes)


def format_catalog_table(
    catalog: ExerciseCatalog,
    timing: TimingConfig,
) -> Table:
    """
    Format the exercise catalog as a Rich table.

    Args:
        catalog: Exercise catalog
        timing: Time model, for rest intervals

    Returns:
        Rich Table object
    """
    table = Table(title="Exercise Catalog")
    table.add_column("Key", style="cyan")
    table.add_column("Label")
    table.add_column("Tags", style="magenta")
    table.add_column("Class")
    table.add_column("Rest", justify="right")

    for entry in catalog.entries():
        table.add_row(
            entry.key,
            entry.label,
            ", ".join(entry.tags),
            classify(entry.key, catalog),
            f"{rest_seconds(entry.key, timing, catalog)}s",
        )

    return table


def print_day_summary(day: DayDefinition, timing: TimingConfig, catalog: ExerciseCatalog) -> None:
    """Print a day's rule, baseline, and fill candidates."""
    rule = day.rule
    console.print(f"\n[bold]{escape(day.day_key)}[/bold] - {escape(rule.label)}")
    console.print(
        f"  allow: {', '.join(sorted(rule.allow_any_of)) or '-'}   "
        f"disallow: {', '.join(sorted(rule.disallow_any_of)) or '-'}"
    )
    if day.baseline is not None:
        table = Table(show_header=True, header_style="dim", title=day.baseline.title)
        table.add_column("Exercise", style="cyan")
        table.add_column("Sets", justify="right")
        table.add_column("Prescription")
        table.add_column("Priority", justify="right")
        table.add_column("Est. min", justify="right")
        for ex in day.baseline.exercises:
            sets_text = ", ".join(
                f"{s.kg:g}s" if is_timed(ex) else f"{s.reps}@{s.kg:g}" for s in ex.sets
            )
            table.add_row(
                catalog.display_name(ex.name),
                str(len(ex.sets)),
                sets_text,
                str(day.priority_of(catalog.resolve(ex.name))),
                f"{estimate_exercise_minutes(ex, timing, catalog):.1f}",
            )
        console.print(table)
    if day.fill_candidates:
        names = ", ".join(catalog.display_name(c.name) for c in day.fill_candidates)
        console.print(f"  [dim]fill candidates: {escape(names)}[/dim]")


def format_history_table(sessions: list[SessionRecord], catalog: ExerciseCatalog) -> Table:
    """
    Format session history as a Rich table.

    Args:
        sessions: Sessions to display (oldest first)
        catalog: Catalog used for exercise labels

    Returns:
        Rich Table object
    """
    table = Table(title="Session History")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Day", style="magenta")
    table.add_column("Title")
    table.add_column("Exercises")
    table.add_column("Sets", justify="right")

    for i, session in enumerate(sessions, 1):
        table.add_row(
            str(i),
            session.created_at[:16].replace("T", " "),
            session.day_key,
            session.title,
            ", ".join(catalog.display_name(ex.exercise_key) for ex in session.exercises),
            str(sum(ex.sets_count for ex in session.exercises)),
        )

    return table


def print_history(sessions: list[SessionRecord], catalog: ExerciseCatalog | None = None) -> None:
    """
    Print session history to console.

    Args:
        sessions: Sessions to display
    """
    if not sessions:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    console.print(format_history_table(sessions, catalog or get_catalog()))


def print_last_entry(label: str, entry: LoggedExercise, session: SessionRecord | None) -> None:
    """Print the most recent logged entry for one exercise."""
    weights = ", ".join(f"{w:g}" for w in entry.weights) or "-"
    when = f" on {session.created_at[:10]} ({session.day_key})" if session is not None else ""
    console.print(
        f"[bold]{escape(label)}[/bold]{escape(when)}: {entry.sets_count} sets @ {weights} kg"
    )


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} \\[y/N]: ")
    return response.lower() in ("y", "yes")
