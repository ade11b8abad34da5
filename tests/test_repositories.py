"""Tests for the repository layer."""

from datetime import datetime, timedelta, timezone

import pytest

from plainfit.db import (
    DuplicateNameError,
    ForeignKeyViolationError,
    NotFoundError,
)
from plainfit.models import Category, ExerciseType, FitnessEntry


def entry(exercise_type, when, set_id=1, **kwargs) -> FitnessEntry:
    return FitnessEntry(exercise_type_id=exercise_type.id, date=when, set_id=set_id, **kwargs)


class TestCategoryRepository:
    """Tests for CategoryRepository."""

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, store):
        category = await store.categories.create(Category(name="Core"))
        assert category.id is not None
        fetched = await store.categories.get(category.id)
        assert fetched == category

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, store):
        await store.categories.create(Category(name="Core"))
        with pytest.raises(DuplicateNameError) as exc_info:
            await store.categories.create(Category(name="Core"))
        assert exc_info.value.name == "Core"
        assert await store.categories.count() == 1

    @pytest.mark.asyncio
    async def test_rename_onto_existing_name_rejected(self, store, catalog):
        cardio = catalog["cardio"]
        cardio.name = "Strength"
        with pytest.raises(DuplicateNameError):
            await store.categories.update(cardio)

    @pytest.mark.asyncio
    async def test_list_ordered_by_name(self, store):
        for name in ("Strength", "Cardio", "Flexibility"):
            await store.categories.create(Category(name=name))
        names = [c.name for c in await store.categories.list_all()]
        assert names == ["Cardio", "Flexibility", "Strength"]

    @pytest.mark.asyncio
    async def test_get_by_name(self, store, catalog):
        found = await store.categories.get_by_name("Cardio")
        assert found.id == catalog["cardio"].id
        assert await store.categories.get_by_name("Missing") is None

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, store):
        with pytest.raises(NotFoundError):
            await store.categories.update(Category(name="Ghost", id=999))

    @pytest.mark.asyncio
    async def test_delete_missing_raises(self, store):
        with pytest.raises(NotFoundError):
            await store.categories.delete(999)

    @pytest.mark.asyncio
    async def test_delete_removes_links_not_types(self, store, catalog):
        """Deleting a category unlinks its exercise types but keeps them."""
        await store.categories.delete(catalog["cardio"].id)

        assert await store.exercise_types.get(catalog["running"].id) is not None
        assert await store.exercise_types.categories_for(catalog["running"].id) == []
        burpee_categories = await store.exercise_types.categories_for(catalog["burpee"].id)
        assert [c.name for c in burpee_categories] == ["Strength"]


class TestExerciseTypeRepository:
    """Tests for ExerciseTypeRepository."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, store, catalog):
        fetched = await store.exercise_types.get(catalog["running"].id)
        assert fetched.name == "Running"
        assert fetched.type == "distance,time"

    @pytest.mark.asyncio
    async def test_names_need_not_be_unique(self, store, catalog):
        twin = await store.exercise_types.create(ExerciseType(name="Running", kinds={"time"}))
        assert twin.id != catalog["running"].id

    @pytest.mark.asyncio
    async def test_get_by_name_prefers_matching_type(self, store, catalog):
        timed = await store.exercise_types.create(ExerciseType(name="Running", kinds={"time"}))

        assert (await store.exercise_types.get_by_name("Running")).id == catalog["running"].id
        assert (await store.exercise_types.get_by_name("Running", "time")).id == timed.id
        assert (
            await store.exercise_types.get_by_name("Running", "distance,time")
        ).id == catalog["running"].id
        assert await store.exercise_types.get_by_name("Rowing") is None

    @pytest.mark.asyncio
    async def test_categories_for_and_for_category(self, store, catalog):
        names = [c.name for c in await store.exercise_types.categories_for(catalog["burpee"].id)]
        assert names == ["Cardio", "Strength"]

        cardio_types = await store.exercise_types.for_category(catalog["cardio"].id)
        assert [t.name for t in cardio_types] == ["Burpee", "Running"]

    @pytest.mark.asyncio
    async def test_link_is_idempotent(self, store, catalog):
        running, cardio = catalog["running"], catalog["cardio"]
        await store.exercise_types.link_category(running.id, cardio.id)
        await store.exercise_types.link_category(running.id, cardio.id)
        assert len(await store.exercise_types.categories_for(running.id)) == 1

    @pytest.mark.asyncio
    async def test_link_to_missing_category_rejected(self, store, catalog):
        with pytest.raises(ForeignKeyViolationError):
            await store.exercise_types.link_category(catalog["running"].id, 999)

    @pytest.mark.asyncio
    async def test_unlink(self, store, catalog):
        burpee, cardio = catalog["burpee"], catalog["cardio"]
        assert await store.exercise_types.unlink_category(burpee.id, cardio.id) is True
        assert await store.exercise_types.unlink_category(burpee.id, cardio.id) is False

    @pytest.mark.asyncio
    async def test_set_categories_replaces_links(self, store, catalog):
        running = catalog["running"]
        await store.exercise_types.set_categories(running.id, [catalog["strength"].id])
        names = [c.name for c in await store.exercise_types.categories_for(running.id)]
        assert names == ["Strength"]

    @pytest.mark.asyncio
    async def test_update(self, store, catalog):
        squat = catalog["squat"]
        squat.name = "Back Squat"
        squat.kinds = frozenset({"reps"})
        await store.exercise_types.update(squat)

        fetched = await store.exercise_types.get(squat.id)
        assert fetched.name == "Back Squat"
        assert fetched.type == "reps"

    @pytest.mark.asyncio
    async def test_update_with_categories(self, store, catalog):
        squat = catalog["squat"]
        squat.name = "Back Squat"
        await store.exercise_types.update(squat, [catalog["cardio"].id, catalog["strength"].id])

        names = [c.name for c in await store.exercise_types.categories_for(squat.id)]
        assert names == ["Cardio", "Strength"]
        assert (await store.exercise_types.get(squat.id)).name == "Back Squat"

    @pytest.mark.asyncio
    async def test_update_with_missing_category_changes_nothing(self, store, catalog):
        squat = catalog["squat"]
        squat.name = "Renamed"
        squat.kinds = frozenset({"reps"})

        with pytest.raises(ForeignKeyViolationError):
            await store.exercise_types.update(squat, [catalog["cardio"].id, 999])

        fetched = await store.exercise_types.get(squat.id)
        assert fetched.name == "Squat"
        assert fetched.type == "reps,weight"
        names = [c.name for c in await store.exercise_types.categories_for(squat.id)]
        assert names == ["Strength"]

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, store):
        with pytest.raises(NotFoundError):
            await store.exercise_types.update(ExerciseType(id=999, name="Ghost", kinds={"reps"}))

    @pytest.mark.asyncio
    async def test_delete_cascades_to_entries(self, store, catalog, utc_noon):
        running = catalog["running"]
        await store.entries.create(entry(running, utc_noon, distance=3.0, distance_unit="mi"))
        await store.entries.create(entry(catalog["squat"], utc_noon, set_id=2, reps=5))

        await store.exercise_types.delete(running.id)

        remaining = await store.entries.list_all()
        assert [e.exercise_type_id for e in remaining] == [catalog["squat"].id]
        assert await store.exercise_types.categories_for(running.id) == []

    @pytest.mark.asyncio
    async def test_delete_missing_raises(self, store):
        with pytest.raises(NotFoundError):
            await store.exercise_types.delete(999)


class TestFitnessEntryRepository:
    """Tests for FitnessEntryRepository."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, store, catalog, utc_noon):
        created = await store.entries.create(
            entry(catalog["squat"], utc_noon, reps=5, weight=135.0, weight_unit="lbs")
        )
        fetched = await store.entries.get(created.id)
        assert fetched.interchange_key() == created.interchange_key()
        assert fetched.date == utc_noon

    @pytest.mark.asyncio
    async def test_unknown_exercise_type_rejected(self, store, catalog, utc_noon):
        orphan = FitnessEntry(exercise_type_id=999, date=utc_noon, set_id=1)
        with pytest.raises(ForeignKeyViolationError):
            await store.entries.create(orphan)
        assert await store.entries.count() == 0

    @pytest.mark.asyncio
    async def test_create_many_is_all_or_nothing(self, store, catalog, utc_noon):
        entries = [
            entry(catalog["squat"], utc_noon, reps=5),
            FitnessEntry(exercise_type_id=999, date=utc_noon, set_id=1),
        ]
        with pytest.raises(ForeignKeyViolationError):
            await store.entries.create_many(entries)
        assert await store.entries.count() == 0
        assert entries[0].id is None

    @pytest.mark.asyncio
    async def test_generate_set_id(self, store, catalog, utc_noon):
        assert await store.entries.generate_set_id() == 1
        await store.entries.create(entry(catalog["squat"], utc_noon, set_id=4))
        await store.entries.create(entry(catalog["squat"], utc_noon, set_id=2))
        assert await store.entries.generate_set_id() == 5

    @pytest.mark.asyncio
    async def test_generate_set_id_after_gaps_and_repeats(self, store, catalog, utc_noon):
        for set_id in (3, 5, 5, 7):
            await store.entries.create(entry(catalog["squat"], utc_noon, set_id=set_id))
        assert await store.entries.generate_set_id() == 8

    @pytest.mark.asyncio
    async def test_generated_set_ids_are_unused(self, store, catalog, utc_noon):
        used = set()
        for _ in range(3):
            set_id = await store.entries.generate_set_id()
            assert set_id not in used
            used.add(set_id)
            await store.entries.create(entry(catalog["squat"], utc_noon, set_id=set_id))

    @pytest.mark.asyncio
    async def test_by_set_in_insertion_order(self, store, catalog, utc_noon):
        squat = catalog["squat"]
        await store.entries.create_many(
            [entry(squat, utc_noon, set_id=1, reps=reps) for reps in (5, 4, 3)]
        )
        await store.entries.create(entry(squat, utc_noon, set_id=2, reps=10))

        rounds = await store.entries.by_set(1)
        assert [e.reps for e in rounds] == [5, 4, 3]
        assert await store.entries.by_set(99) == []

    @pytest.mark.asyncio
    async def test_exercise_type_for_set(self, store, catalog, utc_noon):
        await store.entries.create(entry(catalog["running"], utc_noon, set_id=3))
        found = await store.entries.exercise_type_for_set(3)
        assert found.name == "Running"
        assert await store.entries.exercise_type_for_set(4) is None

    @pytest.mark.asyncio
    async def test_update(self, store, catalog, utc_noon):
        created = await store.entries.create(entry(catalog["squat"], utc_noon, reps=5))
        created.reps = 8
        created.description = "felt strong"
        await store.entries.update(created)

        fetched = await store.entries.get(created.id)
        assert fetched.reps == 8
        assert fetched.description == "felt strong"

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, store, catalog, utc_noon):
        ghost = entry(catalog["squat"], utc_noon)
        ghost.id = 999
        with pytest.raises(NotFoundError):
            await store.entries.update(ghost)

    @pytest.mark.asyncio
    async def test_delete_set(self, store, catalog, utc_noon):
        squat = catalog["squat"]
        await store.entries.create_many([entry(squat, utc_noon, set_id=1) for _ in range(3)])
        await store.entries.create(entry(squat, utc_noon, set_id=2))

        assert await store.entries.delete_set(1) == 3
        assert await store.entries.by_set(1) == []
        assert await store.entries.count() == 1

    @pytest.mark.asyncio
    async def test_replace_set_keeps_set_id(self, store, catalog, utc_noon):
        squat = catalog["squat"]
        original = await store.entries.create_many(
            [entry(squat, utc_noon, set_id=7, reps=5) for _ in range(3)]
        )

        replacement = [entry(squat, utc_noon, set_id=0, reps=reps) for reps in (6, 6)]
        await store.entries.replace_set(7, replacement)

        rounds = await store.entries.by_set(7)
        assert [e.reps for e in rounds] == [6, 6]
        assert all(e.set_id == 7 for e in rounds)
        assert {e.id for e in rounds}.isdisjoint({e.id for e in original})

    @pytest.mark.asyncio
    async def test_replace_set_failure_keeps_old_rows(self, store, catalog, utc_noon):
        squat = catalog["squat"]
        await store.entries.create_many([entry(squat, utc_noon, set_id=7, reps=5)])

        with pytest.raises(ForeignKeyViolationError):
            await store.entries.replace_set(
                7, [FitnessEntry(exercise_type_id=999, date=utc_noon, set_id=7)]
            )
        assert [e.reps for e in await store.entries.by_set(7)] == [5]

    @pytest.mark.asyncio
    async def test_list_all_order(self, store, catalog, utc_noon):
        squat = catalog["squat"]
        for offset in (2, 0, 1):
            await store.entries.create(
                entry(squat, utc_noon + timedelta(hours=offset), set_id=offset + 1)
            )
        ascending = [e.set_id for e in await store.entries.list_all()]
        descending = [e.set_id for e in await store.entries.list_all(descending=True)]
        assert ascending == [1, 2, 3]
        assert descending == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_replace_all_and_delete_all(self, store, catalog, utc_noon):
        squat = catalog["squat"]
        await store.entries.create(entry(squat, utc_noon))
        count = await store.entries.replace_all(
            [entry(squat, utc_noon, set_id=s) for s in (10, 11)]
        )
        assert count == 2
        assert sorted(e.set_id for e in await store.entries.list_all()) == [10, 11]

        assert await store.entries.delete_all() == 2
        assert await store.entries.count() == 0

    @pytest.mark.asyncio
    async def test_non_utc_dates_stored_as_same_instant(self, store, catalog):
        tokyo = timezone(timedelta(hours=9))
        when = datetime(2024, 3, 15, 8, 0, tzinfo=tokyo)
        created = await store.entries.create(entry(catalog["squat"], when))
        fetched = await store.entries.get(created.id)
        assert fetched.date == when
        assert fetched.date.tzinfo == timezone.utc
