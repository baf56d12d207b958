"""
Minimal smoke tests for the meso-planner CLI.

Tests basic functionality:
- App runs and shows help
- Profiles are written and read back
- Programs, splits, recovery and the catalog render as text and JSON
"""

import json

import pytest
from typer.testing import CliRunner

from meso_planner.cli.main import app


runner = CliRunner()

INLINE_PROFILE = ["--goal", "maintain", "--experience", "intermediate", "--age", "30"]


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at an empty directory so no user config or profile leaks in."""
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output
        assert "init-profile" in result.output

    def test_generate_json_inline_profile(self):
        result = runner.invoke(app, ["generate", *INLINE_PROFILE, "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["split"] == "Upper/Lower"
        assert len(data["weeks"]) == 6
        assert data["weeks"][-1]["is_deload"] is True

    def test_generate_text(self):
        result = runner.invoke(app, ["generate", *INLINE_PROFILE, "--days", "3", "--week", "2"])
        assert result.exit_code == 0, result.output
        assert "Full Body" in result.output
        assert "Week 2" in result.output

    def test_generate_with_split_and_lagging(self):
        result = runner.invoke(
            app,
            ["generate", *INLINE_PROFILE, "--split", "ppl", "-l", "arms", "-l", "calves", "--json"],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["split"] == "PPL"
        assert data["volume"]["calves"]["lagging"] is True

    def test_generate_bad_split(self):
        result = runner.invoke(app, ["generate", *INLINE_PROFILE, "--split", "bro"])
        assert result.exit_code == 1
        assert "Unknown split" in result.output

    def test_generate_week_out_of_range(self):
        result = runner.invoke(app, ["generate", *INLINE_PROFILE, "--week", "12"])
        assert result.exit_code == 1
        assert "Week must be between 1 and 6" in result.output

    def test_generate_without_profile_fails(self):
        result = runner.invoke(app, ["generate"])
        assert result.exit_code == 1
        assert "init-profile" in result.output

    def test_generate_reads_config_defaults(self, isolated_home):
        config_dir = isolated_home / ".meso-planner"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("days_per_week: 6\n", encoding="utf-8")
        result = runner.invoke(app, ["generate", *INLINE_PROFILE, "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["split"] == "PPL"

    def test_init_profile_then_generate(self, isolated_home):
        result = runner.invoke(
            app,
            ["init-profile", "-g", "bulk", "-e", "novice", "-a", "25", "--sleep", "4", "--injury", "Triceps"],
        )
        assert result.exit_code == 0, result.output
        path = isolated_home / ".meso-planner" / "profile.json"
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["goal"] == "bulk"
        assert saved["injury_history"] == ["triceps"]

        result = runner.invoke(app, ["generate", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["periodization"]["model"] == "linear"

        # a single option overrides the stored profile
        result = runner.invoke(app, ["recovery", "--age", "60", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["recovery_factors"]["deload_frequency_weeks"] == 8

    def test_init_profile_refuses_overwrite(self, tmp_path):
        target = tmp_path / "p.json"
        args = ["init-profile", *INLINE_PROFILE, "--output", str(target)]
        assert runner.invoke(app, args).exit_code == 0
        assert runner.invoke(app, args).exit_code == 1
        assert runner.invoke(app, [*args, "--force"]).exit_code == 0

    def test_init_profile_invalid(self, tmp_path):
        result = runner.invoke(
            app,
            ["init-profile", *INLINE_PROFILE, "--sleep", "9", "--output", str(tmp_path / "p.json")],
        )
        assert result.exit_code == 1
        assert not (tmp_path / "p.json").exists()

    def test_recovery_json(self):
        result = runner.invoke(app, ["recovery", *INLINE_PROFILE, "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["recovery_factors"]["volume_multiplier"] == 1.0
        assert data["fatigue_budget"]["systemic_limit"] == 97

    def test_recovery_text(self):
        result = runner.invoke(app, ["recovery", *INLINE_PROFILE])
        assert result.exit_code == 0, result.output
        assert "Systemic limit" in result.output

    def test_split_json(self):
        result = runner.invoke(app, ["split", "--days", "4", "--goal", "bulk", "--minutes", "30", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["split"] == "Upper/Lower"
        assert data["alternatives"] == ["Full Body"]
        assert [d["day"] for d in data["schedule"]] == ["Mon", "Tue", "Thu", "Fri"]

    def test_split_invalid_goal(self):
        result = runner.invoke(app, ["split", "--goal", "recomp"])
        assert result.exit_code == 1

    def test_split_days_out_of_range(self):
        result = runner.invoke(app, ["split", "--days", "7"])
        assert result.exit_code == 1

    def test_exercises_json(self):
        result = runner.invoke(app, ["exercises", "--muscle", "calves", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert {e["primary_muscle"] for e in data} == {"calves"}
        assert len(data) == 3

    def test_exercises_text_no_match(self):
        result = runner.invoke(app, ["exercises", "--equipment", "sled"])
        assert result.exit_code == 0
        assert "No exercises match" in result.output
