"""Pytest configuration and fixtures."""

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio

from plainfit.db import FitnessStore
from plainfit.models import Category, ExerciseType, MeasurementKind


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest_asyncio.fixture
async def store(temp_db_path):
    """An initialized, empty store."""
    store = FitnessStore(temp_db_path)
    await store.open(seed=False)
    return store


@pytest_asyncio.fixture
async def catalog(store):
    """A small catalog: two categories and three exercise types."""
    cardio = await store.categories.create(Category(name="Cardio", icon="figure.run", color="#FF3B30"))
    strength = await store.categories.create(Category(name="Strength", icon="dumbbell.fill"))
    running = await store.exercise_types.create(
        ExerciseType(name="Running", kinds={MeasurementKind.DISTANCE, MeasurementKind.TIME}),
        category_ids=[cardio.id],
    )
    squat = await store.exercise_types.create(
        ExerciseType(name="Squat", kinds={MeasurementKind.REPS, MeasurementKind.WEIGHT}),
        category_ids=[strength.id],
    )
    burpee = await store.exercise_types.create(
        ExerciseType(name="Burpee", kinds={MeasurementKind.REPS}),
        category_ids=[cardio.id, strength.id],
    )
    return {
        "cardio": cardio,
        "strength": strength,
        "running": running,
        "squat": squat,
        "burpee": burpee,
    }


@pytest.fixture
def utc_noon():
    return datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
