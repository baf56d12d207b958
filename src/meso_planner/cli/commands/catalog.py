"""Catalog command: exercises."""

import json
from typing import Annotated, Optional

import typer

from ...io.catalog_loader import exercise_to_dict
from .. import views
from ..app import JsonOption, app, get_repository


@app.command()
def exercises(
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Only list exercises whose primary muscle is this"),
    ] = None,
    equipment: Annotated[
        Optional[str],
        typer.Option("--equipment", help="Only list exercises using this equipment"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    List the exercise catalog (bundled plus ~/.meso-planner/exercises overrides).
    """
    entries = list(get_repository().fetch_all())
    if muscle:
        entries = [e for e in entries if e.primary_muscle == muscle.lower()]
    if equipment:
        entries = [e for e in entries if e.equipment == equipment.lower()]

    if json_out:
        print(json.dumps([exercise_to_dict(e) for e in entries], indent=2))
        return

    if not entries:
        views.print_warning("No exercises match the filters.")
        return
    views.console.print(views.format_catalog_table(entries))
