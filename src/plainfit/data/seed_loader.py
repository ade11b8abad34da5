"""Built-in exercise catalog loader from JSON."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from ..models.category import Category
from ..models.entry import FitnessEntry
from ..models.exercise_type import ExerciseType, parse_kinds

if TYPE_CHECKING:
    from ..db.store import FitnessStore

logger = logging.getLogger(__name__)


@dataclass
class CatalogCategory:
    """A category from the bundled catalog with its exercise types."""

    category: Category
    exercise_types: list[ExerciseType] = field(default_factory=list)


@dataclass
class Catalog:
    """Parsed contents of the bundled catalog."""

    categories: list[CatalogCategory] = field(default_factory=list)
    tutorial: list[dict] = field(default_factory=list)


def get_catalog_path() -> Path:
    """Get the path to the bundled exercises JSON file."""
    return Path(__file__).parent / "exercises.json"


def _parse_exercise_type(name: str, attributes) -> ExerciseType:
    if isinstance(attributes, str):
        return ExerciseType(name=name, kinds=parse_kinds(attributes))
    return ExerciseType(
        name=name,
        kinds=parse_kinds(attributes["type"]),
        icon=attributes.get("icon"),
        color=attributes.get("color"),
    )


def load_catalog(path: Path | None = None) -> Catalog:
    """Load categories, exercise types and tutorial sets from JSON.

    Each category maps either straight to ``{exercise name: kinds}`` or to an
    object with ``icon``, ``color`` and a ``types`` mapping. A type's value is
    a kinds string or an object with ``type`` and optional icon/color.

    Returns:
        The parsed catalog, empty if the file does not exist
    """
    json_path = path or get_catalog_path()
    if not json_path.exists():
        return Catalog()

    with open(json_path, encoding="utf-8") as f:
        data = json.load(f)

    catalog = Catalog(tutorial=data.get("tutorial", []))
    for group in data.get("exercises", []):
        for category_name, details in group.items():
            if "types" in details:
                category = Category.from_dict({"name": category_name, **details})
                types = details["types"]
            else:
                category = Category(name=category_name)
                types = details

            entry = CatalogCategory(category=category)
            for exercise_name, attributes in types.items():
                try:
                    entry.exercise_types.append(
                        _parse_exercise_type(exercise_name, attributes)
                    )
                except (ValueError, KeyError) as e:
                    logger.warning("Skipping invalid exercise %s: %s", exercise_name, e)
            catalog.categories.append(entry)

    return catalog


async def seed_catalog(store: "FitnessStore", path: Path | None = None) -> int:
    """Seed categories and exercise types on first launch.

    Does nothing unless the categories table is empty. An exercise listed
    under several categories is created once and linked to each. The whole
    catalog is written in one transaction.

    Returns:
        Number of exercise types created
    """
    if await store.categories.count() > 0:
        return 0

    catalog = load_catalog(path)
    created = await store.create_catalog(
        (group.category, group.exercise_types) for group in catalog.categories
    )

    logger.info(
        "Seeded %d categories and %d exercise types",
        len(catalog.categories),
        len(created),
    )
    return len(created)


async def seed_tutorial(
    store: "FitnessStore", path: Path | None = None, now: datetime | None = None
) -> int:
    """Log the tutorial sets into an empty entries table.

    Returns:
        Number of entries created
    """
    if await store.entries.count() > 0:
        return 0

    catalog = load_catalog(path)
    now = (now or datetime.now().astimezone()).replace(microsecond=0)
    count = 0

    for item in catalog.tutorial:
        exercise_type = await store.exercise_types.get_by_name(item["exercise"])
        if exercise_type is None:
            logger.warning("Tutorial references unknown exercise %s", item["exercise"])
            continue

        set_id = await store.entries.generate_set_id()
        started = now - timedelta(days=item.get("days_ago", 0))
        entries = [
            FitnessEntry(
                exercise_type_id=exercise_type.id,
                date=started + timedelta(minutes=index),
                set_id=set_id,
                duration=round_data.get("duration", 0),
                reps=round_data.get("reps", 0),
                distance=round_data.get("distance"),
                distance_unit=round_data.get("distance_unit"),
                weight=round_data.get("weight"),
                weight_unit=round_data.get("weight_unit"),
                description=item.get("description"),
            )
            for index, round_data in enumerate(item.get("rounds", []))
        ]
        await store.entries.create_many(entries)
        count += len(entries)

    return count
