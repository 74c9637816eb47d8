"""Catalog commands: exercises."""

from typing import Annotated, Optional

import typer

from ...core.catalog import get_catalog
from ...core.days import day_keys, find_day
from ...core.engine.config_loader import load_settings
from .. import views
from ..app import app


@app.command()
def exercises(
    day: Annotated[
        Optional[str],
        typer.Option("--day", "-d", help="Show only this day's rule and baseline"),
    ] = None,
) -> None:
    """
    List the exercise catalog and each day's rule, baseline and fill candidates.
    """
    catalog = get_catalog()
    timing = load_settings().timing

    if day is not None:
        found = find_day(day)
        if found is None:
            views.print_error(f"Unknown day '{day}'. Valid days: {', '.join(day_keys())}")
            raise typer.Exit(1)
        views.print_day_summary(found, timing, catalog)
        return

    views.console.print(views.format_catalog_table(catalog, timing))
    for key in day_keys():
        day_def = find_day(key)
        if day_def is not None:
            views.print_day_summary(day_def, timing, catalog)
