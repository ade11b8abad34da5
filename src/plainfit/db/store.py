"""Storage service tying the repositories to one database file."""

import logging
from collections.abc import Iterable
from pathlib import Path

import aiosqlite

from ..models.category import Category
from ..models.exercise_type import ExerciseType
from .engine import connect, get_db_path, init_db
from .errors import StoreError
from .repositories import (
    CategoryRepository,
    ExerciseTypeRepository,
    FitnessEntryRepository,
)

logger = logging.getLogger(__name__)


class FitnessStore:
    """Entry point to the plainfit database.

    Build one per process and hand it to whatever needs storage. Repositories
    are exposed as attributes and share the store's ``db_path``.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = Path(db_path) if db_path else get_db_path()
        self.categories = CategoryRepository(self.db_path)
        self.exercise_types = ExerciseTypeRepository(self.db_path)
        self.entries = FitnessEntryRepository(self.db_path)

    async def open(self, seed: bool = True) -> int:
        """Create or migrate the schema and seed a fresh database.

        Returns:
            The schema version
        """
        version = await init_db(self.db_path)
        if seed:
            from ..data.seed_loader import seed_catalog, seed_tutorial

            seeded = await seed_catalog(self)
            if seeded:
                await seed_tutorial(self)
        return version

    async def create_catalog(
        self, groups: Iterable[tuple[Category, Iterable[ExerciseType]]]
    ) -> list[ExerciseType]:
        """Create categories with their exercise types in one transaction.

        An exercise type whose name was already created in an earlier group is
        linked to the later category instead of duplicated.

        Raises:
            StoreError: If any insert fails; nothing is written then
        """
        created: dict[str, ExerciseType] = {}
        async with connect(self.db_path) as db:
            try:
                for category, exercise_types in groups:
                    await self.categories._insert(db, category)
                    for exercise_type in exercise_types:
                        existing = created.get(exercise_type.name)
                        if existing is None:
                            created[exercise_type.name] = await self.exercise_types._insert(
                                db, exercise_type, [category.id]
                            )
                        else:
                            await self.exercise_types._link(db, existing.id, category.id)
                await db.commit()
            except aiosqlite.IntegrityError as e:
                await db.rollback()
                logger.error("Catalog creation rolled back: %s", e)
                raise StoreError(f"Cannot create catalog: {e}") from e
        return list(created.values())

    def __repr__(self) -> str:
        return f"FitnessStore({str(self.db_path)!r})"
