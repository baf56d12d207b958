"""Program commands: generate and split."""

import json
from typing import Annotated, Optional

import typer

from ...core.mesocycle import generate_full_mesocycle
from ...core.models import EXPERIENCE_LEVELS, GOALS, SPLIT_TYPES, SplitType
from ...core.splits import build_session_templates, get_weekly_schedule, recommend_split
from ...io.config_loader import load_cli_config
from ...io.serializers import ValidationError, program_to_dict, split_recommendation_to_dict
from .. import views
from ..app import AgeOption, ExperienceOption, GoalOption, JsonOption, ProfileOption, app, get_repository, resolve_profile


def parse_split(value: str) -> SplitType:
    """Match a split name case-insensitively ("ppl", "upper/lower", "full body")."""
    for split in SPLIT_TYPES:
        if split.lower() == value.strip().lower():
            return split  # type: ignore[return-value]
    raise ValueError(f"Unknown split: {value!r}. Must be one of {list(SPLIT_TYPES)}")


@app.command()
def generate(
    profile_path: ProfileOption = None,
    goal: GoalOption = None,
    experience: ExperienceOption = None,
    age: AgeOption = None,
    days: Annotated[
        Optional[int],
        typer.Option("--days", "-d", help="Training days per week, 2-6 (default from config: 4)"),
    ] = None,
    minutes: Annotated[
        Optional[int],
        typer.Option("--minutes", "-m", help="Session length in minutes (default from config: 60)"),
    ] = None,
    split: Annotated[
        Optional[str],
        typer.Option("--split", "-s", help="Force a split: 'Full Body', 'Upper/Lower', PPL, Arnold, 'Bro Split'"),
    ] = None,
    lagging: Annotated[
        Optional[list[str]],
        typer.Option("--lagging", "-l", help="Lagging area, repeatable (arms, calves, left leg, ...)"),
    ] = None,
    week: Annotated[
        int,
        typer.Option("--week", "-w", help="Week whose sessions are shown"),
    ] = 1,
    json_out: JsonOption = False,
) -> None:
    """
    Generate a full mesocycle and show its sessions.
    """
    config = load_cli_config()
    days_per_week = days if days is not None else int(config["days_per_week"])
    session_minutes = minutes if minutes is not None else int(config["session_minutes"])
    lagging_areas = lagging if lagging else list(config["lagging_areas"] or [])

    try:
        profile = resolve_profile(profile_path, goal, experience, age)
        forced = parse_split(split) if split else None
        program = generate_full_mesocycle(
            profile,
            get_repository(),
            days_per_week=days_per_week,
            session_minutes=session_minutes,
            lagging_areas=lagging_areas,
            split=forced,
        )
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(program_to_dict(program), indent=2))
        return

    try:
        views.print_program(program, week)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command()
def split(
    days: Annotated[
        int,
        typer.Option("--days", "-d", help="Training days per week, 2-6"),
    ] = 4,
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="cut, bulk or maintain"),
    ] = "maintain",
    experience: Annotated[
        str,
        typer.Option("--experience", "-e", help="novice, intermediate or advanced"),
    ] = "intermediate",
    minutes: Annotated[
        int,
        typer.Option("--minutes", "-m", help="Typical session length in minutes"),
    ] = 60,
    json_out: JsonOption = False,
) -> None:
    """
    Recommend a training split and show its weekly layout.
    """
    if goal not in GOALS:
        views.print_error(f"Invalid goal: {goal!r}. Must be one of {list(GOALS)}")
        raise typer.Exit(1)
    if experience not in EXPERIENCE_LEVELS:
        views.print_error(f"Invalid experience: {experience!r}. Must be one of {list(EXPERIENCE_LEVELS)}")
        raise typer.Exit(1)

    try:
        recommendation = recommend_split(days, goal, experience, minutes)  # type: ignore[arg-type]
        schedule = get_weekly_schedule(days)
        templates = build_session_templates(recommendation.split, days)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        d = split_recommendation_to_dict(recommendation)
        d["schedule"] = [
            {"day": day, "session": t.day, "focus": t.focus, "muscles": list(t.muscles)}
            for day, t in zip(schedule, templates)
        ]
        print(json.dumps(d, indent=2))
        return

    views.print_split(recommendation, schedule, templates)
