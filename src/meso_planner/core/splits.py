"""
Training splits: recommendation, session templates and weekly schedules.

This module sits below the mesocycle generator and the volume distributor;
it depends only on config and models.
"""

from typing import Final

from .models import Experience, Goal, SessionTemplate, SplitRecommendation, SplitType

MIN_DAYS_PER_WEEK: Final[int] = 2
MAX_DAYS_PER_WEEK: Final[int] = 6

# Weekday labels and day offsets (Mon = 0) per training-days count
WEEKLY_SCHEDULES: Final[dict[int, tuple[str, ...]]] = {
    2: ("Mon", "Thu"),
    3: ("Mon", "Wed", "Fri"),
    4: ("Mon", "Tue", "Thu", "Fri"),
    5: ("Mon", "Tue", "Wed", "Fri", "Sat"),
    6: ("Mon", "Tue", "Wed", "Fri", "Sat", "Sun"),
}
_WEEKDAY_INDEX: Final[dict[str, int]] = {
    "Mon": 0, "Tue": 1, "Wed": 2, "Thu": 3, "Fri": 4, "Sat": 5, "Sun": 6,
}

SESSION_TEMPLATES: Final[dict[str, tuple[SessionTemplate, ...]]] = {
    "Full Body": (
        SessionTemplate("Full Body A", "Quad/Push emphasis", ("quads", "chest", "shoulders", "triceps", "abs")),
        SessionTemplate("Full Body B", "Hinge/Pull emphasis", ("hamstrings", "back", "biceps", "glutes", "calves")),
        SessionTemplate("Full Body C", "Balanced", ("quads", "back", "shoulders", "biceps", "triceps")),
    ),
    "Upper/Lower": (
        SessionTemplate("Upper A", "Horizontal emphasis", ("chest", "back", "shoulders", "biceps", "triceps")),
        SessionTemplate("Lower A", "Quad emphasis", ("quads", "hamstrings", "glutes", "calves", "abs")),
        SessionTemplate("Upper B", "Vertical emphasis", ("back", "chest", "shoulders", "triceps", "biceps")),
        SessionTemplate("Lower B", "Hinge emphasis", ("hamstrings", "quads", "glutes", "calves", "abs")),
    ),
    "PPL": (
        SessionTemplate("Push", "Chest, shoulders, triceps", ("chest", "shoulders", "triceps")),
        SessionTemplate("Pull", "Back, biceps, rear delts", ("back", "biceps", "shoulders")),
        SessionTemplate("Legs", "Quads, hamstrings, glutes", ("quads", "hamstrings", "glutes", "calves", "abs")),
    ),
    "Arnold": (
        SessionTemplate("Chest & Back", "Antagonist supersets", ("chest", "back")),
        SessionTemplate("Shoulders & Arms", "Upper body detail", ("shoulders", "biceps", "triceps")),
        SessionTemplate("Legs", "Complete lower body", ("quads", "hamstrings", "glutes", "calves", "abs")),
    ),
    "Bro Split": (
        SessionTemplate("Chest", "Chest focus", ("chest",)),
        SessionTemplate("Back", "Back focus", ("back",)),
        SessionTemplate("Shoulders", "All three heads", ("shoulders",)),
        SessionTemplate("Arms", "Biceps and triceps", ("biceps", "triceps")),
        SessionTemplate("Legs", "Complete lower body", ("quads", "hamstrings", "glutes", "calves", "abs")),
    ),
}


def _check_days(days_per_week: int) -> None:
    if not MIN_DAYS_PER_WEEK <= days_per_week <= MAX_DAYS_PER_WEEK:
        raise ValueError(
            f"days_per_week must be between {MIN_DAYS_PER_WEEK} and {MAX_DAYS_PER_WEEK}, "
            f"got {days_per_week}"
        )


def recommend_split(
    days_per_week: int,
    goal: Goal,
    experience: Experience,
    session_minutes: int = 60,
) -> SplitRecommendation:
    """
    Recommend a split for the available training days.

    Args:
        days_per_week: Training days per week (2-6)
        goal: Training goal
        experience: Experience level
        session_minutes: Typical session length; under 45 minutes a 4-day
            Upper/Lower plan also offers Full Body as an alternative

    Returns:
        SplitRecommendation with the split, a reason and ordered alternatives

    Raises:
        ValueError: If days_per_week is outside 2-6
    """
    _check_days(days_per_week)

    if experience == "novice":
        if days_per_week <= 3:
            return SplitRecommendation(
                "Full Body",
                "Full body training maximizes practice frequency for learning movement patterns",
            )
        if days_per_week == 4:
            return SplitRecommendation(
                "Upper/Lower",
                "Upper/lower lets a novice train each muscle twice a week with manageable sessions",
                ("Full Body",),
            )
        return SplitRecommendation(
            "Upper/Lower",
            "Upper/lower with extra rest days; more days add little for a novice",
            ("PPL",),
        )

    if days_per_week == 2:
        return SplitRecommendation(
            "Full Body",
            "With two days, full body sessions are the only way to hit each muscle twice",
        )
    if days_per_week == 3:
        alternatives: tuple[SplitType, ...] = ("PPL",) if goal == "cut" else ("PPL", "Upper/Lower")
        return SplitRecommendation(
            "Full Body",
            "Three full body sessions give every muscle a frequency of three",
            alternatives,
        )
    if days_per_week == 4:
        return SplitRecommendation(
            "Upper/Lower",
            "Upper/lower is the most time-efficient way to train everything twice in four days",
            ("Full Body",) if session_minutes < 45 else (),
        )
    if days_per_week == 5:
        if goal == "bulk":
            return SplitRecommendation(
                "Arnold",
                "The Arnold split supports the higher volume of a bulk with antagonist pairing",
                ("Upper/Lower", "PPL"),
            )
        return SplitRecommendation(
            "Upper/Lower",
            "Upper/lower with a fifth day keeps recovery manageable",
            ("Arnold", "PPL"),
        )
    return SplitRecommendation(
        "PPL",
        "Six days of push/pull/legs trains each muscle twice with focused sessions",
        ("Arnold", "Upper/Lower"),
    )


def build_session_templates(split: SplitType, days_per_week: int) -> list[SessionTemplate]:
    """
    Session templates for one week, cycled to fill ``days_per_week``.

    Six-day PPL runs the three days twice, suffixed " 1" and " 2".
    """
    _check_days(days_per_week)
    if split not in SESSION_TEMPLATES:
        raise ValueError(f"Unknown split: {split!r}")

    templates = list(SESSION_TEMPLATES[split])
    if split == "PPL" and days_per_week >= 6:
        templates = [
            SessionTemplate(f"{t.day} {n}", t.focus, t.muscles)
            for n in (1, 2)
            for t in SESSION_TEMPLATES["PPL"]
        ]
    return [templates[i % len(templates)] for i in range(days_per_week)]


def get_weekly_schedule(days_per_week: int) -> tuple[str, ...]:
    _check_days(days_per_week)
    return WEEKLY_SCHEDULES[days_per_week]


def get_session_day_offsets(days_per_week: int) -> list[int]:
    """Day offsets from Monday (0-6) for each session of the week."""
    return [_WEEKDAY_INDEX[d] for d in get_weekly_schedule(days_per_week)]
