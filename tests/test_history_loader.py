"""Tests for history file and weigh-in CSV loading."""

from __future__ import annotations

import json
from datetime import date

import pytest

from bodyintel.data.history_loader import (
    WeighInCsvLoader,
    load_history,
    merge_weigh_ins,
    parse_history,
)
from bodyintel.tracking.models import LogEntry, WeighIn

APP_EXPORT = {
    "meals": [
        {"id": "oats", "name": "Oats", "calories": 380, "protein": 13, "servingSize": 100},
        {"id": "old", "name": "Old food", "calories": 100, "deletedAt": "2025-01-01"},
    ],
    "dailyLogs": [
        {
            "date": "2025-06-01",
            "meals": ["oats", {"mealId": "oats", "quantity": 50, "unit": "g"}],
            "workoutCalories": 200,
            "healthMetrics": {"restingEnergy": 1650, "activeEnergy": 420, "steps": 9000},
        },
    ],
    "weighIns": [{"date": "2025-06-01", "weight": 80.2}],
    "inBodyScans": [
        {
            "date": "2025-06-01T08:30:00",
            "weight": 80.2,
            "bodyFatPercent": 24,
            "fatMass": 19.2,
            "skeletalMuscle": 35.1,
            "bmr": 1700,
        },
    ],
    "profile": {"heightCm": 178, "age": 35, "gender": "male"},
}


class TestParseHistory:
    """Tests for history parsing."""

    def test_app_export_keys(self) -> None:
        """camelCase app exports are accepted."""
        history = parse_history(APP_EXPORT)
        assert [f.item_id for f in history.foods] == ["oats", "old"]
        assert history.foods[0].serving_size == pytest.approx(100)
        assert history.foods[1].deleted
        assert history.height_cm == pytest.approx(178)
        assert history.age == 35
        assert history.sex == "male"

    def test_logs(self) -> None:
        """Legacy and structured entries are both normalized."""
        log = parse_history(APP_EXPORT).logs[0]
        assert log.date == date(2025, 6, 1)
        assert log.entries == (
            LogEntry(item_id="oats"),
            LogEntry(item_id="oats", quantity=50, unit="g"),
        )
        assert log.workout_calories == pytest.approx(200)
        assert log.health_metrics.resting_energy == pytest.approx(1650)
        assert log.health_metrics.steps == 9000
        assert log.active_energy == pytest.approx(420)

    def test_scans_and_weigh_ins(self) -> None:
        """Scan timestamps are truncated to dates; missing metrics stay None."""
        history = parse_history(APP_EXPORT)
        scan = history.scans[0]
        assert scan.date == date(2025, 6, 1)
        assert scan.fat_mass == pytest.approx(19.2)
        assert scan.skeletal_muscle == pytest.approx(35.1)
        assert scan.muscle_mass is None
        assert scan.has_bmr
        assert history.weigh_ins == [WeighIn(date=date(2025, 6, 1), weight=80.2)]

    def test_invalid_records(self) -> None:
        """Records missing required fields raise ValueError."""
        with pytest.raises(ValueError):
            parse_history({"weigh_ins": [{"date": "2025-06-01"}]})
        with pytest.raises(ValueError):
            parse_history({"logs": [{"meals": ["oats"]}]})
        with pytest.raises(ValueError):
            parse_history({"foods": [{"name": "No id"}]})

    def test_non_mapping_records(self) -> None:
        """Records that are not mappings raise ValueError, not TypeError."""
        with pytest.raises(ValueError, match="Weigh-in must be a mapping"):
            parse_history({"weigh_ins": [5]})
        with pytest.raises(ValueError, match="Food must be a mapping"):
            parse_history({"foods": ["oats"]})
        with pytest.raises(ValueError, match="Scan must be a mapping"):
            parse_history({"scans": [[80.0]]})
        with pytest.raises(ValueError, match="Log must be a mapping"):
            parse_history({"logs": [None]})
        with pytest.raises(ValueError, match="Health metrics must be a mapping"):
            parse_history({"logs": [{"date": "2025-06-01", "healthMetrics": [1650]}]})
        with pytest.raises(ValueError, match="Profile must be a mapping"):
            parse_history({"profile": "tall"})

    def test_section_not_a_list(self) -> None:
        """A section holding a scalar is rejected."""
        with pytest.raises(ValueError, match="must be a list"):
            parse_history({"weigh_ins": 80.2})


class TestLoadHistory:
    """Tests for load_history function."""

    def test_json(self, tmp_path) -> None:
        """JSON files are parsed."""
        path = tmp_path / "history.json"
        path.write_text(json.dumps(APP_EXPORT))
        history = load_history(path)
        assert len(history.logs) == 1

    def test_yaml(self, tmp_path) -> None:
        """YAML files are parsed, including bare dates."""
        path = tmp_path / "history.yaml"
        path.write_text(
            "foods:\n"
            "  - {id: oats, name: Oats, calories: 380}\n"
            "logs:\n"
            "  - date: 2025-06-01\n"
            "    entries: [oats]\n"
            "weigh_ins:\n"
            "  - {date: 2025-06-01, weight: 80.2}\n"
            "profile: {height_cm: 178, age: 35, sex: female}\n"
        )
        history = load_history(path)
        assert history.logs[0].date == date(2025, 6, 1)
        assert history.weigh_ins[0].weight == pytest.approx(80.2)
        assert history.sex == "female"

    def test_missing_file(self, tmp_path) -> None:
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_history(tmp_path / "nope.json")

    def test_not_a_mapping(self, tmp_path) -> None:
        """A top-level list is rejected."""
        path = tmp_path / "history.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_history(path)

    def test_malformed_yaml(self, tmp_path) -> None:
        """YAML syntax errors surface as ValueError naming the file."""
        path = tmp_path / "history.yaml"
        path.write_text("foods: [oats\n")
        with pytest.raises(ValueError, match="Invalid history file"):
            load_history(path)

    def test_malformed_json(self, tmp_path) -> None:
        """JSON syntax errors surface as ValueError naming the file."""
        path = tmp_path / "history.json"
        path.write_text("{\"foods\": [")
        with pytest.raises(ValueError, match="Invalid history file"):
            load_history(path)


class TestWeighInCsvLoader:
    """Tests for WeighInCsvLoader."""

    def test_load(self, tmp_path) -> None:
        """Rows are converted to kg using their unit column."""
        path = tmp_path / "weights.csv"
        path.write_text(
            "date,weight,unit\n"
            "2025-06-01,80.4,kg\n"
            "2025-06-02,176.37,lbs\n"
            "2025-06-03,79.9,\n"
        )
        weigh_ins, counts = WeighInCsvLoader().load_from_csv(path)
        assert counts["loaded"] == 3
        assert weigh_ins[0].weight == pytest.approx(80.4)
        assert weigh_ins[1].weight == pytest.approx(80.0, abs=0.01)
        assert weigh_ins[2].weight == pytest.approx(79.9)

    def test_default_unit(self, tmp_path) -> None:
        """Without a unit column the default unit applies."""
        path = tmp_path / "weights.csv"
        path.write_text("date,weight\n2025-06-01,176.37\n")
        weigh_ins, _ = WeighInCsvLoader(default_unit="lbs").load_from_csv(path)
        assert weigh_ins[0].weight == pytest.approx(80.0, abs=0.01)

    def test_skips_bad_rows(self, tmp_path) -> None:
        """Rows without a weight or with a bad date are counted and skipped."""
        path = tmp_path / "weights.csv"
        path.write_text(
            "date,weight\n"
            "2025-06-01,80.4\n"
            "2025-06-02,\n"
            "not-a-date,80.1\n"
        )
        weigh_ins, counts = WeighInCsvLoader().load_from_csv(path)
        assert len(weigh_ins) == 1
        assert counts == {
            "loaded": 1,
            "skipped_missing_weight": 1,
            "skipped_invalid_date": 1,
            "skipped_invalid_unit": 0,
        }

    def test_unknown_unit_skipped(self, tmp_path) -> None:
        """Rows with an unknown unit are skipped, not stored as kilograms."""
        path = tmp_path / "weights.csv"
        path.write_text(
            "date,weight,unit\n"
            "2025-06-01,80.4,kg\n"
            "2025-06-02,176.4,lb\n"
            "2025-06-03,12.6,stone\n"
        )
        weigh_ins, counts = WeighInCsvLoader().load_from_csv(path)
        assert weigh_ins == [WeighIn(date=date(2025, 6, 1), weight=80.4)]
        assert counts["loaded"] == 1
        assert counts["skipped_invalid_unit"] == 2

    def test_missing_columns(self, tmp_path) -> None:
        """A CSV without a weight column is rejected."""
        path = tmp_path / "weights.csv"
        path.write_text("date,kg\n2025-06-01,80.4\n")
        with pytest.raises(ValueError, match="Missing required columns"):
            WeighInCsvLoader().load_from_csv(path)

    def test_invalid_default_unit(self) -> None:
        """Only kg and lbs are accepted."""
        with pytest.raises(ValueError):
            WeighInCsvLoader(default_unit="stone")


def test_merge_weigh_ins() -> None:
    """Imported readings replace existing ones on the same date."""
    existing = [WeighIn(date(2025, 6, 2), 80.0), WeighIn(date(2025, 6, 1), 80.5)]
    imported = [WeighIn(date(2025, 6, 2), 79.8), WeighIn(date(2025, 6, 3), 79.6)]
    merged = merge_weigh_ins(existing, imported)
    assert [w.weight for w in merged] == [80.5, 79.8, 79.6]
