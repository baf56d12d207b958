"""Shared Typer app object, shared option types, and profile/catalog utilities."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import UserProfile
from ..io.catalog_loader import YamlExerciseRepository
from ..io.config_loader import get_default_profile_path, load_cli_config
from ..io.serializers import dict_to_user_profile, load_profile, user_profile_to_dict

# Shared option types used across commands
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]
ProfileOption = Annotated[
    Optional[Path],
    typer.Option("--profile", "-p", help="Profile JSON/YAML (default: ~/.meso-planner/profile.json)"),
]
GoalOption = Annotated[
    Optional[str],
    typer.Option("--goal", "-g", help="cut, bulk or maintain (overrides the profile file)"),
]
ExperienceOption = Annotated[
    Optional[str],
    typer.Option("--experience", "-e", help="novice, intermediate or advanced"),
]
AgeOption = Annotated[
    Optional[int],
    typer.Option("--age", "-a", help="Age in years"),
]

app = typer.Typer(
    name="meso-planner",
    help="Fatigue-aware hypertrophy mesocycle planner.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log engine decisions to stderr"),
    ] = False,
) -> None:
    """
    Generate periodized training programs from a trainee profile.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def resolve_profile(
    profile_path: Path | None,
    goal: str | None = None,
    experience: str | None = None,
    age: int | None = None,
) -> UserProfile:
    """
    Build the profile for a command.

    With --goal, --experience and --age all given the profile is built from
    the options alone; otherwise the profile file is loaded and any given
    option overrides the corresponding field.

    Raises:
        FileNotFoundError: If no profile file exists and the options are incomplete
        ValidationError: If the resulting profile is invalid
    """
    overrides = {
        k: v for k, v in (("goal", goal), ("experience", experience), ("age", age)) if v is not None
    }
    if len(overrides) == 3:
        return dict_to_user_profile(overrides)

    if profile_path is None:
        configured = load_cli_config()["profile_path"]
        profile_path = Path(configured).expanduser() if configured else get_default_profile_path()
    if not profile_path.exists():
        raise FileNotFoundError(
            f"Profile not found: {profile_path}. Run 'init-profile' or pass --goal, --experience and --age."
        )
    profile = load_profile(profile_path)
    if not overrides:
        return profile

    return dict_to_user_profile({**user_profile_to_dict(profile), **overrides})


def get_repository() -> YamlExerciseRepository:
    """Catalog repository over the bundled YAML files plus user overrides."""
    return YamlExerciseRepository()
