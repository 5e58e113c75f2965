"""
Minimal smoke tests for the lift-progress CLI.

Tests basic functionality:
- App runs without errors
- Profile and log files are created
- Workouts can be logged, listed and deleted
- Suggestions, plateau checks, streaks and progress are shown
- Water, meals and achievements are tracked
- Daily goals can be edited and body weight logged with a trend
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lift_progress.cli.main import app


runner = CliRunner()


@pytest.fixture
def temp_history_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def history_path(temp_history_dir):
    """History file with a profile already initialized."""
    path = temp_history_dir / "workouts.jsonl"
    result = runner.invoke(app, [
        "init",
        "--history-path", str(path),
        "--name", "Ana",
        "--weight-kg", "70",
        "--height-cm", "170",
        "--age", "25",
    ])
    assert result.exit_code == 0, result.output
    return path


def _log(history_path: Path, *entries: str) -> None:
    args = ["log-workout", "--history-path", str(history_path), "--day", "Push A"]
    for e in entries:
        args += ["--entry", e]
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "suggest" in result.output

    def test_init_creates_files(self, temp_history_dir):
        path = temp_history_dir / "workouts.jsonl"
        result = runner.invoke(app, ["init", "--history-path", str(path), "--goal", "muscle-gain"])

        assert result.exit_code == 0
        assert path.exists()
        assert (temp_history_dir / "profile.json").exists()
        assert (temp_history_dir / "intake.jsonl").exists()

    def test_init_rejects_bad_sex(self, temp_history_dir):
        path = temp_history_dir / "workouts.jsonl"
        result = runner.invoke(app, ["init", "--history-path", str(path), "--sex", "other"])
        assert result.exit_code == 1

    def test_log_workout_adds_to_history(self, history_path):
        _log(history_path, "Bench Press=40x12,40x10,40x8?", "Squat=60x5,60x5")

        result = runner.invoke(app, ["show-history", "--history-path", str(history_path), "--json"])
        assert result.exit_code == 0
        workouts = json.loads(result.stdout)
        assert len(workouts) == 1
        assert [e["exercise_name"] for e in workouts[0]["exercises"]] == ["Bench Press", "Squat"]
        assert workouts[0]["exercises"][0]["sets"][2]["completed"] is False

    def test_log_workout_rejects_bad_sets(self, history_path):
        result = runner.invoke(app, [
            "log-workout", "--history-path", str(history_path), "--entry", "Bench Press=forty",
        ])
        assert result.exit_code == 1

    def test_log_workout_without_init_fails(self, temp_history_dir):
        result = runner.invoke(app, [
            "log-workout", "--history-path", str(temp_history_dir / "missing.jsonl"),
            "--entry", "Bench Press=40x10",
        ])
        assert result.exit_code == 1

    def test_show_history_table(self, history_path):
        _log(history_path, "Bench Press=40x12")
        result = runner.invoke(app, ["show-history", "--history-path", str(history_path)])

        assert result.exit_code == 0
        assert "Bench" in result.output

    def test_delete_record(self, history_path):
        _log(history_path, "Bench Press=40x12")
        result = runner.invoke(app, ["delete-record", "1", "--history-path", str(history_path), "--force"])
        assert result.exit_code == 0

        result = runner.invoke(app, ["show-history", "--history-path", str(history_path), "--json"])
        assert json.loads(result.stdout) == []

    def test_suggest_weight_bump(self, history_path):
        for _ in range(3):
            _log(history_path, "Bench Press=40x12,40x12,40x12")

        result = runner.invoke(app, [
            "suggest", "--history-path", str(history_path),
            "--exercise", "Bench Press", "--reps", "8-12", "--weight", "40kg", "--json",
        ])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["suggestion"]["suggested_value"] == "42.5kg"
        assert data["suggestion"]["confidence"] == "high"
        assert data["performance"]["completed_sessions"] == 3

    def test_suggest_without_data(self, history_path):
        result = runner.invoke(app, [
            "suggest", "--history-path", str(history_path), "-e", "Deadlift", "--weight", "100kg",
        ])
        assert result.exit_code == 0
        assert "100kg" in result.output

    def test_plateau_insufficient_data(self, history_path):
        _log(history_path, "Bench Press=50x10")
        result = runner.invoke(app, [
            "plateau", "--history-path", str(history_path), "-e", "Bench Press", "--json",
        ])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"exercise": "Bench Press", "is_plateau": False, "strategies": []}

    def test_streak(self, history_path):
        _log(history_path, "Bench Press=40x10")
        result = runner.invoke(app, ["streak", "--history-path", str(history_path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["current_streak"] == 1
        assert data["max_streak"] == 1
        assert data["cycle"]["index"] == 0

    def test_progress(self, history_path):
        _log(history_path, "Bench Press=40x10")
        _log(history_path, "Bench Press=42.5x10")
        result = runner.invoke(app, ["progress", "--history-path", str(history_path), "-e", "Bench Press"])

        assert result.exit_code == 0
        assert "Weight change" in result.output

    def test_water_meal_and_achievements(self, history_path):
        assert runner.invoke(app, ["log-water", "500", "--history-path", str(history_path)]).exit_code == 0
        assert runner.invoke(app, [
            "log-meal", "650", "--history-path", str(history_path), "-m", "rice and beans",
        ]).exit_code == 0
        _log(history_path, "Squat=60x5")

        result = runner.invoke(app, ["achievements", "--history-path", str(history_path), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["new"] == ["first_workout", "first_meal"]

        # Second run unlocks nothing new
        result = runner.invoke(app, ["achievements", "--history-path", str(history_path), "--json"])
        assert json.loads(result.stdout)["new"] == []

    def test_goals(self, history_path):
        result = runner.invoke(app, ["goals", "--history-path", str(history_path), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["calories"] == 2258

    def test_goals_without_profile(self, temp_history_dir):
        result = runner.invoke(app, ["goals", "--history-path", str(temp_history_dir / "w.jsonl")])
        assert result.exit_code == 1

    def test_goals_show_stored_values_and_recommendation(self, history_path):
        result = runner.invoke(app, [
            "set-goals", "--history-path", str(history_path), "--calories", "1800", "--water-ml", "3000",
        ])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["goals", "--history-path", str(history_path), "--json"])
        data = json.loads(result.stdout)
        assert data["calories"] == 1800
        assert data["water_ml"] == 3000
        # maintenance split: 30% protein at 4 kcal/g
        assert data["protein"] == 135
        assert data["recommended"]["calories"] == 2258

        result = runner.invoke(app, ["goals", "--history-path", str(history_path)])
        assert result.exit_code == 0
        assert "1800 kcal" in result.output
        assert "2258 kcal" in result.output

    def test_set_goals_keeps_omitted_value(self, history_path):
        result = runner.invoke(app, ["set-goals", "--history-path", str(history_path), "--water-ml", "2500"])
        assert result.exit_code == 0, result.output

        data = json.loads(runner.invoke(app, ["goals", "--history-path", str(history_path), "--json"]).stdout)
        assert (data["calories"], data["water_ml"]) == (2258, 2500)

    @pytest.mark.parametrize("args", [["--calories", "999"], ["--calories", "5001"], ["--water-ml", "10001"]])
    def test_set_goals_out_of_range(self, history_path, args):
        result = runner.invoke(app, ["set-goals", "--history-path", str(history_path), *args])
        assert result.exit_code == 1

        data = json.loads(runner.invoke(app, ["goals", "--history-path", str(history_path), "--json"]).stdout)
        assert data["calories"] == 2258

    def test_set_goals_without_profile(self, temp_history_dir):
        result = runner.invoke(app, [
            "set-goals", "--history-path", str(temp_history_dir / "w.jsonl"), "--calories", "2000",
        ])
        assert result.exit_code == 1

    def test_log_weight_and_trend(self, history_path):
        for day, kg in [("2026-01-05", "72.0"), ("2026-01-12", "71.2"), ("2026-01-12", "71.0")]:
            result = runner.invoke(app, ["log-weight", kg, "--history-path", str(history_path), "--date", day])
            assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["weight-history", "--history-path", str(history_path), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["entries"] == [
            {"date": "2026-01-05", "weight_kg": 72.0},
            {"date": "2026-01-12", "weight_kg": 71.0},
        ]
        assert data["trend"]["direction"] == "down"
        assert data["trend"]["diff"] == pytest.approx(-1.0)

        result = runner.invoke(app, ["weight-history", "--history-path", str(history_path)])
        assert result.exit_code == 0
        assert "1.0 kg since last reading" in result.output

    def test_log_weight_small_change_is_stable(self, history_path):
        runner.invoke(app, ["log-weight", "70", "--history-path", str(history_path), "--date", "2026-01-05"])
        runner.invoke(app, ["log-weight", "70.3", "--history-path", str(history_path), "--date", "2026-01-06"])

        data = json.loads(runner.invoke(app, ["weight-history", "--history-path", str(history_path), "--json"]).stdout)
        assert data["trend"]["direction"] == "stable"

    def test_log_weight_rejects_zero(self, history_path):
        result = runner.invoke(app, ["log-weight", "0", "--history-path", str(history_path)])
        assert result.exit_code == 1

    def test_weight_history_empty(self, history_path):
        result = runner.invoke(app, ["weight-history", "--history-path", str(history_path), "--json"])
        assert json.loads(result.stdout) == {"entries": [], "trend": None}

    @pytest.mark.parametrize("command", [
        ["log-workout", "--entry", "Bench Press=40x10"],
        ["log-water", "500"],
        ["log-meal", "600"],
        ["log-weight", "70"],
    ])
    def test_future_date_rejected(self, history_path, command):
        result = runner.invoke(app, [*command, "--history-path", str(history_path), "--date", "2999-01-01"])
        assert result.exit_code == 1

        history = json.loads(
            runner.invoke(app, ["show-history", "--history-path", str(history_path), "--json"]).stdout
        )
        assert history == []

    def test_show_history_limit_must_be_positive(self, history_path):
        _log(history_path, "Bench Press=40x12")
        result = runner.invoke(app, ["show-history", "--history-path", str(history_path), "--limit", "0"])
        assert result.exit_code != 0

    def test_bracketed_names_are_shown_verbatim(self, history_path):
        _log(history_path, "Leg Press [machine]=100x10", "Curl [/b]=10x10")

        result = runner.invoke(app, ["show-history", "--history-path", str(history_path)])
        assert result.exit_code == 0, result.output
        assert "[machine]" in result.output
        assert "[/b]" in result.output

        result = runner.invoke(app, ["plateau", "--history-path", str(history_path), "-e", "Curl [/b]"])
        assert result.exit_code == 0, result.output
        assert "Curl [/b]" in result.output

        result = runner.invoke(app, ["progress", "--history-path", str(history_path), "-e", "Leg Press [machine]"])
        assert result.exit_code == 0, result.output
        assert "[machine]" in result.output
