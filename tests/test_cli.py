"""Tests for the command-line interface."""

import json
from datetime import date, timedelta

import pytest

from training_intelligence.cli import main, read_daily_loads


PLAN_ARGS = [
    "plan",
    "--race-date", "2025-04-27",
    "--distance", "marathon",
    "--start-date", "2025-01-06",
    "--current", "30",
    "--peak", "50",
    "--vdot", "45",
]


@pytest.fixture
def score_file(tmp_path):
    def _write(data):
        path = tmp_path / "workout.json"
        path.write_text(json.dumps(data))
        return path
    return _write


class TestVdotCommands:
    """Tests for the vdot and predict commands."""

    def test_vdot(self, capsys):
        assert main(["vdot", "--distance", "5k", "--time", "20:00"]) == 0

        out = capsys.readouterr().out
        assert "VDOT" in out
        assert "Training Paces" in out
        assert "Marathon" in out

    def test_vdot_with_conditions(self, capsys):
        assert main(["vdot", "--distance", "half", "--time", "1:35:00", "--temp", "80", "--humidity", "70"]) == 0
        assert "Adjusted VDOT" in capsys.readouterr().out

    def test_unknown_distance(self, capsys):
        assert main(["vdot", "--distance", "banana", "--time", "20:00"]) == 1
        assert "Error" in capsys.readouterr().out

    def test_bad_time(self, capsys):
        assert main(["vdot", "--distance", "5k", "--time", "twenty"]) == 1

    def test_predict(self, capsys):
        assert main(["predict", "--vdot", "50", "--distance", "10k"]) == 0
        assert "Race Prediction" in capsys.readouterr().out


class TestPlanCommand:
    """Tests for the plan command."""

    def test_json_output(self, capsys):
        assert main(PLAN_ARGS + ["--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["total_weeks"] == 16
        assert data["race_date"] == "2025-04-27"
        assert data["weeks"][-1]["workouts"][-1]["category"] == "race"

    def test_table_output(self, capsys):
        assert main(PLAN_ARGS + ["--race-name", "Spring Marathon"]) == 0

        out = capsys.readouterr().out
        assert "Spring Marathon" in out
        assert "Week 1" in out

    def test_vdot_from_race_time(self, capsys):
        args = [a for a in PLAN_ARGS if a not in ("--vdot", "45")]
        assert main(args + ["--race-time", "20:00", "--race-time-distance", "5k", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["vdot"] == pytest.approx(49.8, abs=0.1)

    def test_insufficient_time(self, capsys):
        args = [
            "plan", "--race-date", "2025-01-26", "--distance", "10k",
            "--start-date", "2025-01-06", "--current", "20", "--peak", "30",
        ]
        assert main(args) == 1
        assert "Not enough time" in capsys.readouterr().out

    def test_invalid_request(self, capsys):
        args = [
            "plan", "--race-date", "2024-12-01", "--distance", "10k",
            "--start-date", "2025-01-06", "--current", "20", "--peak", "30",
        ]
        assert main(args) == 1
        assert "Invalid request" in capsys.readouterr().out


class TestScoreCommand:
    """Tests for the score command."""

    def test_json_score(self, capsys, score_file):
        path = score_file({
            "planned": {
                "date": "2025-02-11",
                "category": "easy",
                "template_id": "easy_run",
                "target_pace": 540,
                "target_distance_miles": 6.0,
            },
            "actual": {"distance_miles": 6.0, "avg_pace": 540},
        })

        assert main(["score", "--input", str(path), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["components"]["pace_accuracy"] == 100
        assert data["components"]["completion_rate"] == 100
        assert data["stimulus"] is None

    def test_structure_filled_from_template(self, capsys, score_file):
        path = score_file({
            "planned": {
                "date": "2025-02-11",
                "category": "quality",
                "template_id": "cruise_intervals",
                "target_pace": 420,
                "target_distance_miles": 9.0,
            },
            "actual": {"distance_miles": 9.0, "avg_pace": 450},
            "segments": [
                {"segment_type": "interval", "distance_miles": 2.0, "duration_seconds": 840, "pace": 420},
                {"segment_type": "interval", "distance_miles": 2.0, "duration_seconds": 840, "pace": 420},
                {"segment_type": "interval", "distance_miles": 2.0, "duration_seconds": 840, "pace": 420},
            ],
        })

        assert main(["score", "-i", str(path), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["stimulus"]["structure_equivalent"] is True

    def test_table_output(self, capsys, score_file):
        path = score_file({
            "planned": {"date": "2025-02-11", "template_id": "easy_run", "target_pace": 540},
            "actual": {"distance_miles": 5.0, "avg_pace": 545},
            "weather": {"temp_f": 85},
        })

        assert main(["score", "-i", str(path)]) == 0
        assert "Execution Score" in capsys.readouterr().out

    def test_missing_planned(self, capsys, score_file):
        path = score_file({"actual": {"distance_miles": 5.0}})
        assert main(["score", "-i", str(path)]) == 1
        assert "planned" in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        assert main(["score", "-i", str(tmp_path / "nope.json")]) == 1


class TestTrendCommand:
    """Tests for the trend command."""

    @pytest.fixture
    def load_csv(self, tmp_path):
        path = tmp_path / "loads.csv"
        start = date(2025, 1, 1)
        rows = ["date,load"]
        rows += [f"{(start + timedelta(days=i)).isoformat()},{50 + i}" for i in range(42)]
        path.write_text("\n".join(rows) + "\n")
        return path

    def test_trend(self, capsys, load_csv):
        assert main(["trend", "-i", str(load_csv), "--days", "7"]) == 0

        out = capsys.readouterr().out
        assert "Fitness Trend" in out
        assert "Current Status" in out

    def test_read_loads_from_workouts(self, tmp_path):
        path = tmp_path / "workouts.csv"
        path.write_text(
            "date,duration_min,category\n"
            "2025-01-01,60,easy\n"
            "2025-01-02,45,tempo\n"
        )

        loads = read_daily_loads(path)

        assert [d for d, _ in loads] == [date(2025, 1, 1), date(2025, 1, 2)]
        assert all(load > 0 for _, load in loads)

    def test_empty_file(self, capsys, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("date,load\n")
        assert main(["trend", "-i", str(path)]) == 0
        assert "No load data" in capsys.readouterr().out


class TestMain:
    """Tests for main entry point."""

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()
