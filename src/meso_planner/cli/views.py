"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of generated programs.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from ..core.models import (
    DetailedSession,
    ExerciseEntry,
    FatigueBudgetConfig,
    FullProgramRecommendation,
    MuscleVolume,
    RecoveryFactors,
    SessionTemplate,
    SplitRecommendation,
)
from ..core.rep_ranges import format_rep_range

console = Console()

_EFFICIENCY_STYLE = {
    "optimal": "green",
    "acceptable": "cyan",
    "suboptimal": "yellow",
    "junk": "red",
}


def format_mesocycle_table(program: FullProgramRecommendation) -> Table:
    """
    Create a Rich table with one row per mesocycle week.

    Args:
        program: Generated program

    Returns:
        Rich Table object
    """
    table = Table(title=f"{program.split} mesocycle ({program.periodization.mesocycle_weeks} weeks)")

    table.add_column("Week", justify="right", style="dim", width=4)
    table.add_column("Focus", style="cyan")
    table.add_column("Intensity", justify="right")
    table.add_column("Volume", justify="right")
    table.add_column("RPE", justify="right")
    table.add_column("Sets", justify="right", style="bold")

    for week in program.weeks:
        focus = f"[magenta]{week.focus}[/magenta]" if week.is_deload else week.focus
        table.add_row(
            str(week.week_number),
            focus,
            f"{week.intensity_modifier:.0%}",
            f"{week.volume_modifier:.0%}",
            f"{week.rpe.low}-{week.rpe.high}",
            str(sum(s.total_sets for s in week.sessions)),
        )

    return table


def format_session_table(session: DetailedSession) -> Table:
    """
    Create a Rich table with the exercises of one session.

    Args:
        session: Session to display

    Returns:
        Rich Table object
    """
    table = Table(
        title=f"{session.day} - {session.name}: {session.focus} (~{session.estimated_minutes} min)",
        title_justify="left",
    )

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="cyan")
    table.add_column("Muscle")
    table.add_column("Sets", justify="right", style="bold")
    table.add_column("Reps @ RIR")
    table.add_column("Tempo")
    table.add_column("Rest", justify="right")
    table.add_column("SFR", justify="right")
    table.add_column("Efficiency")

    for i, item in enumerate(session.exercises, 1):
        style = _EFFICIENCY_STYLE.get(item.efficiency, "")
        table.add_row(
            str(i),
            item.exercise.name,
            item.target_muscle,
            str(item.sets),
            format_rep_range(item.min_reps, item.max_reps, item.rir),
            item.tempo,
            f"{item.rest_seconds}s",
            f"{item.fatigue.stimulus_per_fatigue:.2f}",
            f"[{style}]{item.efficiency}[/{style}]" if style else item.efficiency,
        )

    return table


def print_session(session: DetailedSession) -> None:
    """Print one session: warm-up, exercise table, skipped muscles, fatigue use."""
    console.print()
    console.print(f"[dim]Warm-up: {'; '.join(session.warmup)}[/dim]")
    if session.exercises:
        console.print(format_session_table(session))
    else:
        console.print(f"[yellow]{session.day} - {session.name}: no exercises scheduled[/yellow]")

    for line in session.skipped:
        console.print(f"  [yellow]Skipped {line}[/yellow]")

    summary = session.fatigue_summary
    if summary is not None and summary.exercise_count:
        console.print(
            f"  [dim]Fatigue: {summary.total_systemic:.0f}/{summary.systemic_limit:.0f} "
            f"({summary.capacity_used_percent}%), avg SFR {summary.average_sfr:.2f} - "
            f"{summary.recommendation}[/dim]"
        )


def print_week(program: FullProgramRecommendation, week_number: int) -> None:
    """
    Print every session of one week.

    Args:
        program: Generated program
        week_number: 1-based week number

    Raises:
        ValueError: If the week does not exist
    """
    if not 1 <= week_number <= len(program.weeks):
        raise ValueError(f"Week must be between 1 and {len(program.weeks)}, got {week_number}")
    week = program.weeks[week_number - 1]
    console.print()
    label = "Deload week" if week.is_deload else f"Week {week.week_number}"
    console.print(f"[bold]{label}: {week.focus}[/bold]")
    for session in week.sessions:
        print_session(session)


def format_volume_table(volume: dict[str, MuscleVolume]) -> Table:
    table = Table(title="Weekly volume")

    table.add_column("Muscle", style="cyan")
    table.add_column("Sets/week", justify="right", style="bold")
    table.add_column("Frequency", justify="right")
    table.add_column("Lagging")

    for muscle, v in volume.items():
        table.add_row(muscle, str(v.sets), f"{v.frequency}x", "yes" if v.lagging else "")

    return table


def print_recovery(recovery: RecoveryFactors, budget: FatigueBudgetConfig) -> None:
    """Print recovery multipliers and the per-session fatigue budget."""
    console.print()
    console.print("[bold]Recovery[/bold]")
    console.print(f"- Volume multiplier:    {recovery.volume_multiplier:.2f}")
    console.print(f"- Frequency multiplier: {recovery.frequency_multiplier:.2f}")
    console.print(f"- Deload every:         {recovery.deload_frequency_weeks} weeks")
    console.print()
    console.print("[bold]Fatigue budget (per session)[/bold]")
    console.print(f"- Systemic limit: {budget.systemic_limit:g}")
    console.print(f"- Local limit:    {budget.local_limit:g} per muscle")
    console.print(f"- Minimum SFR:    {budget.min_sfr_threshold:.2f}")
    console.print(f"- Warn above:     {budget.warning_threshold:.0%} of the systemic limit")
    for warning in recovery.warnings:
        print_warning(warning)


def print_split(recommendation: SplitRecommendation, schedule: Sequence[str], templates: Sequence[SessionTemplate]) -> None:
    console.print()
    console.print(f"[bold cyan]{recommendation.split}[/bold cyan] - {recommendation.reason}")
    if recommendation.alternatives:
        console.print(f"[dim]Alternatives: {', '.join(recommendation.alternatives)}[/dim]")

    table = Table(show_header=True, header_style="dim")
    table.add_column("Day", style="cyan")
    table.add_column("Session")
    table.add_column("Muscles")
    for day, template in zip(schedule, templates):
        table.add_row(day, template.day, ", ".join(template.muscles))
    console.print(table)


def format_catalog_table(exercises: Sequence[ExerciseEntry]) -> Table:
    table = Table(title=f"Exercise catalog ({len(exercises)})")

    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Muscle")
    table.add_column("Pattern")
    table.add_column("Equipment")
    table.add_column("Level")
    table.add_column("Tier", justify="center", style="bold")

    for e in exercises:
        table.add_row(e.id, e.name, e.primary_muscle, e.pattern, e.equipment, e.difficulty, e.tier)

    return table


def print_program(program: FullProgramRecommendation, week_number: int = 1) -> None:
    """
    Print a generated program: overview, volume, one week of sessions,
    then warnings and notes.
    """
    console.print()
    console.print(f"[bold cyan]{program.split}[/bold cyan] on {', '.join(program.weekly_schedule)}")
    console.print(format_mesocycle_table(program))
    console.print(format_volume_table(program.volume))
    print_week(program, week_number)
    print_messages(program.warnings, program.notes)


def print_messages(warnings: Sequence[str], notes: Sequence[str]) -> None:
    if warnings:
        console.print()
        for warning in warnings:
            print_warning(warning)
    if notes:
        console.print()
        console.print("[bold]Notes[/bold]")
        for note in notes:
            console.print(f"- {note}")


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
