"""Session history commands: history, last."""

import json
from typing import Annotated, Optional

import typer

from ...core.catalog import get_catalog
from ...io.serializers import ValidationError, session_record_to_dict
from .. import views
from ..app import LogPathOption, app, get_store


@app.command()
def history(
    log_path: LogPathOption = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Show only the N most recent sessions"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", help="Output sessions as JSON"),
    ] = False,
) -> None:
    """
    Show logged sessions (oldest first).
    """
    store = get_store(log_path)

    try:
        sessions = store.load_sessions()
    except FileNotFoundError:
        sessions = []
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if limit is not None:
        if limit < 1:
            views.print_error("--limit must be at least 1")
            raise typer.Exit(1)
        sessions = sessions[-limit:]

    if json_out:
        print(json.dumps([session_record_to_dict(s) for s in sessions], indent=2))
        return

    views.print_history(sessions)


@app.command()
def last(
    exercise: Annotated[
        str,
        typer.Argument(help="Exercise name, alias or key, e.g. 'Bench press' or bench_press"),
    ],
    log_path: LogPathOption = None,
) -> None:
    """
    Show the most recent logged entry for one exercise (what auto-fill would offer).
    """
    catalog = get_catalog()
    key = catalog.resolve(exercise)
    if key is None:
        views.print_warning(f"'{exercise}' is not in the exercise catalog; looking it up as given.")
        key = exercise.strip().lower().replace(" ", "_")

    store = get_store(log_path)
    try:
        sessions = store.load_sessions()
    except FileNotFoundError:
        sessions = []
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    session = next((s for s in reversed(sessions) if s.entry_for(key) is not None), None)
    if session is None:
        views.print_info(f"No logged sets for {catalog.display_name(key)} yet.")
        return

    views.print_last_entry(catalog.display_name(key), session.entry_for(key), session)
