"""Profile commands: init-profile and recovery."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.fatigue import create_fatigue_budget
from ...core.metrics import analyze_body_composition
from ...core.models import EQUIPMENT_KINDS
from ...core.recovery import calculate_recovery_factors
from ...io.config_loader import get_default_profile_path
from ...io.serializers import (
    ValidationError,
    body_composition_analysis_to_dict,
    dict_to_user_profile,
    fatigue_budget_to_dict,
    recovery_factors_to_dict,
    save_profile,
)
from .. import views
from ..app import AgeOption, ExperienceOption, GoalOption, JsonOption, ProfileOption, app, resolve_profile


@app.command("init-profile")
def init_profile(
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="cut, bulk or maintain"),
    ],
    experience: Annotated[
        str,
        typer.Option("--experience", "-e", help="novice, intermediate or advanced"),
    ],
    age: Annotated[
        int,
        typer.Option("--age", "-a", help="Age in years"),
    ],
    sleep: Annotated[
        int,
        typer.Option("--sleep", help="Sleep quality, 1 (poor) to 5 (excellent)"),
    ] = 3,
    stress: Annotated[
        int,
        typer.Option("--stress", help="Stress level, 1 (low) to 5 (high)"),
    ] = 3,
    training_age: Annotated[
        float,
        typer.Option("--training-age", "-t", help="Years of consistent training"),
    ] = 0.0,
    equipment: Annotated[
        Optional[list[str]],
        typer.Option("--equipment", help=f"Available equipment, repeatable (default: all of {', '.join(EQUIPMENT_KINDS)})"),
    ] = None,
    injury: Annotated[
        Optional[list[str]],
        typer.Option("--injury", help="Muscle to avoid, repeatable"),
    ] = None,
    height_cm: Annotated[
        Optional[float],
        typer.Option("--height-cm", help="Height in cm (enables FFMI analysis with a body-composition scan)"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Where to write the profile (default: ~/.meso-planner/profile.json)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing profile"),
    ] = False,
) -> None:
    """
    Create a trainee profile file.
    """
    path = output if output is not None else get_default_profile_path()
    if path.exists() and not force:
        views.print_error(f"Profile already exists: {path}")
        views.print_info("Use --force to overwrite it.")
        raise typer.Exit(1)

    data: dict = {
        "goal": goal,
        "experience": experience,
        "age": age,
        "sleep_quality": sleep,
        "stress_level": stress,
        "training_age": training_age,
        "injury_history": injury or [],
    }
    if equipment:
        data["available_equipment"] = equipment
    if height_cm is not None:
        data["height_cm"] = height_cm

    try:
        profile = dict_to_user_profile(data)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    save_profile(profile, path)
    views.print_success(f"Profile written to {path}")


@app.command()
def recovery(
    profile_path: ProfileOption = None,
    goal: GoalOption = None,
    experience: ExperienceOption = None,
    age: AgeOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show recovery factors and the per-session fatigue budget for a profile.
    """
    try:
        profile = resolve_profile(profile_path, goal, experience, age)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    factors = calculate_recovery_factors(profile)
    budget = create_fatigue_budget(profile)
    body_composition = analyze_body_composition(profile)

    if json_out:
        d = {
            "recovery_factors": recovery_factors_to_dict(factors),
            "fatigue_budget": fatigue_budget_to_dict(budget),
        }
        if body_composition is not None:
            d["body_composition"] = body_composition_analysis_to_dict(body_composition)
        print(json.dumps(d, indent=2))
        return

    views.print_recovery(factors, budget)
    if body_composition is not None:
        views.print_info(
            f"FFMI {body_composition.normalized_ffmi:.1f} ({body_composition.classification}), "
            f"{body_composition.percent_of_natural_limit:.0f}% of natural limit"
        )
        views.print_messages(body_composition.warnings, body_composition.notes)
