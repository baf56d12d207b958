"""
CLI entry point using Typer.

Provides commands for mesocycle planning:
- generate: Build a full mesocycle for a profile
- split: Recommend a split for the available days
- recovery: Show recovery factors and the fatigue budget
- exercises: List the exercise catalog
- init-profile: Write a trainee profile
"""

from .app import app
from .commands import catalog, profile, program  # noqa: F401  (registers commands)

if __name__ == "__main__":
    app()
