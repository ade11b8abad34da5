"""Tests for data models."""

from datetime import datetime, timezone

import pytest

from plainfit.models import (
    Activity,
    Category,
    ExerciseType,
    FitnessEntry,
    MeasurementKind,
    UnitSystem,
    WeekStart,
)
from plainfit.models.category import DEFAULT_COLOR, DEFAULT_ICON
from plainfit.models.exercise_type import format_kinds, parse_kinds


class TestMeasurementKinds:
    """Tests for composite type strings."""

    def test_parse_kinds(self):
        assert parse_kinds("distance,time") == {MeasurementKind.DISTANCE, MeasurementKind.TIME}

    def test_parse_kinds_ignores_whitespace(self):
        assert parse_kinds(" reps , weight ") == {MeasurementKind.REPS, MeasurementKind.WEIGHT}

    def test_parse_kinds_rejects_empty(self):
        with pytest.raises(ValueError):
            parse_kinds("")

    def test_parse_kinds_rejects_unknown(self):
        with pytest.raises(ValueError):
            parse_kinds("reps,calories")

    def test_format_kinds_is_sorted(self):
        """The same set always serializes to the same string."""
        assert format_kinds([MeasurementKind.WEIGHT, MeasurementKind.REPS]) == "reps,weight"
        assert format_kinds(["time", "distance"]) == "distance,time"


class TestExerciseType:
    """Tests for ExerciseType model."""

    def test_default_tracks_reps(self):
        exercise_type = ExerciseType(name="Pull Up")
        assert exercise_type.type == "reps"
        assert exercise_type.tracks(MeasurementKind.REPS)
        assert not exercise_type.tracks(MeasurementKind.WEIGHT)

    def test_kinds_coerced_from_strings(self):
        exercise_type = ExerciseType(name="Running", kinds={"distance", "time"})
        assert exercise_type.kinds == {MeasurementKind.DISTANCE, MeasurementKind.TIME}
        assert exercise_type.tracks("time")

    def test_empty_kinds_rejected(self):
        with pytest.raises(ValueError):
            ExerciseType(name="Nothing", kinds=frozenset())

    def test_icon_falls_back_to_category(self):
        category = Category(name="Cardio", icon="heart", color="#FF0000")
        plain = ExerciseType(name="Running", kinds={"distance"})
        styled = ExerciseType(name="Swimming", kinds={"distance"}, icon="pool", color="#00FFFF")

        assert plain.resolve_icon(category) == "heart"
        assert plain.resolve_color(category) == "#FF0000"
        assert styled.resolve_icon(category) == "pool"
        assert styled.resolve_color(category) == "#00FFFF"
        assert plain.resolve_icon(None) == DEFAULT_ICON
        assert plain.resolve_color(None) == DEFAULT_COLOR

    def test_dict_roundtrip(self):
        original = ExerciseType(name="Squat", kinds={"reps", "weight"}, icon="dumbbell")
        data = original.to_dict()
        assert data == {"name": "Squat", "type": "reps,weight", "icon": "dumbbell", "color": None}

        restored = ExerciseType.from_dict(data, id=7)
        assert restored.id == 7
        assert restored.kinds == original.kinds


class TestCategory:
    """Tests for Category model."""

    def test_defaults(self):
        category = Category(name="Core")
        assert category.icon == DEFAULT_ICON
        assert category.color == DEFAULT_COLOR

    def test_from_dict_fills_missing_style(self):
        category = Category.from_dict({"name": "Core", "icon": None})
        assert category.icon == DEFAULT_ICON
        assert category.color == DEFAULT_COLOR


class TestFitnessEntry:
    """Tests for FitnessEntry model."""

    def test_defaults(self):
        entry = FitnessEntry(exercise_type_id=1, date=datetime.now(timezone.utc), set_id=1)
        assert entry.duration == 0
        assert entry.reps == 0
        assert entry.distance is None
        assert entry.weight_unit is None
        assert entry.description is None

    def test_dict_roundtrip(self):
        when = datetime(2024, 1, 5, 10, 15, tzinfo=timezone.utc)
        entry = FitnessEntry(
            exercise_type_id=3, date=when, set_id=4, reps=5, weight=135.0, weight_unit="lbs"
        )
        restored = FitnessEntry.from_dict(entry.to_dict())
        assert restored.interchange_key() == entry.interchange_key()

    def test_naive_date_treated_as_local(self):
        naive = datetime(2024, 1, 5, 10, 15)
        entry = FitnessEntry(exercise_type_id=1, date=naive, set_id=1)
        assert entry.interchange_key()[1] == naive.astimezone()


class TestActivity:
    """Tests for calendar activity badges."""

    def test_equality_uses_exercise_type(self):
        squat = ExerciseType(name="Squat", kinds={"reps", "weight"}, id=1)
        strength = Category(name="Strength", id=1)
        legs = Category(name="Legs", id=2)

        assert Activity(squat, strength) == Activity(squat, legs)
        assert len({Activity(squat, strength), Activity(squat, legs), Activity(squat)}) == 1

    def test_different_types_are_distinct(self):
        squat = ExerciseType(name="Squat", kinds={"reps", "weight"}, id=1)
        running = ExerciseType(name="Running", kinds={"distance", "time"}, id=2)
        assert len({Activity(squat), Activity(running)}) == 2

    def test_style_and_names(self):
        running = ExerciseType(name="Running", kinds={"distance", "time"}, id=2)
        cardio = Category(name="Cardio", icon="heart", color="#FF3B30", id=1)
        activity = Activity(running, cardio)

        assert activity.icon == "heart"
        assert activity.color == "#FF3B30"
        assert activity.as_names() == ("Cardio", "Running")
        assert Activity(running).as_names() == (None, "Running")


class TestPreferences:
    """Tests for preference enums."""

    @pytest.mark.parametrize(
        "week_start,weekday",
        [(WeekStart.MONDAY, 0), (WeekStart.SATURDAY, 5), (WeekStart.SUNDAY, 6)],
    )
    def test_week_start_weekday(self, week_start, weekday):
        assert week_start.weekday == weekday

    def test_unit_system_defaults_first(self):
        assert UnitSystem.IMPERIAL.distance_units == ["mi"]
        assert UnitSystem.IMPERIAL.weight_units == ["lbs"]
        assert UnitSystem.METRIC.distance_units[0] == "km"
        assert "m" in UnitSystem.METRIC.distance_units
        assert UnitSystem.METRIC.weight_units == ["kg"]
