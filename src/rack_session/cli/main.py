"""
CLI entry point using Typer.

Provides commands for time-boxed sessions:
- plan: Show today's plan fitted to a time budget
- run: Plan, run interactively with rest timers, and log the session
- exercises: Show the exercise catalog and day templates
- history: Show logged sessions
- last: Show the most recent logged entry for an exercise
"""

import typer

from . import views
from .app import app
from .commands.catalog import exercises
from .commands.planning import plan, run
from .commands.sessions import history


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    """
    Time-boxed strength sessions. Run without a command for interactive mode.
    """
    if ctx.invoked_subcommand is not None:
        return

    views.console.print()
    views.console.print("[bold cyan]rack-session[/bold cyan] - fit today's workout to your minutes")
    views.console.print()

    menu = {
        "1": ("run",       "Plan and run today's session"),
        "2": ("plan",      "Show today's plan only"),
        "3": ("history",   "Show logged sessions"),
        "4": ("exercises", "Exercise catalog and day templates"),
        "0": ("quit",      "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose \\[1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = menu.get(choice, (None, ""))[0]
    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "run":
        ctx.invoke(run)
    elif chosen == "plan":
        ctx.invoke(plan)
    elif chosen == "history":
        ctx.invoke(history)
    elif chosen == "exercises":
        ctx.invoke(exercises)


if __name__ == "__main__":
    app()
