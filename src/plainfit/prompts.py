"""Interactive set entry via questionnaire."""

from dataclasses import dataclass

import questionary
from questionary import Style

from .db.store import FitnessStore
from .models.entry import FitnessEntry
from .models.exercise_type import ExerciseType, MeasurementKind
from .models.preferences import UnitSystem
from .utils.formatters import format_duration, format_value, parse_duration

# Custom style for questionnaire
custom_style = Style(
    [
        ("qmark", "fg:#007aff bold"),
        ("question", "bold"),
        ("answer", "fg:#34c759 bold"),
        ("pointer", "fg:#007aff bold"),
        ("highlighted", "fg:#007aff bold"),
        ("selected", "fg:#34c759"),
        ("instruction", ""),
        ("text", ""),
    ]
)

ALL_EXERCISES = "__all__"


@dataclass
class RoundValues:
    """Measurements for one round of a set."""

    duration: int = 0
    reps: int = 0
    distance: float | None = None
    distance_unit: str | None = None
    weight: float | None = None
    weight_unit: str | None = None

    @classmethod
    def from_entry(cls, entry: FitnessEntry) -> "RoundValues":
        return cls(
            duration=entry.duration,
            reps=entry.reps,
            distance=entry.distance,
            distance_unit=entry.distance_unit,
            weight=entry.weight,
            weight_unit=entry.weight_unit,
        )


def _is_int(value: str) -> bool | str:
    return value.strip().isdigit() or value.strip() == "" or "Enter a whole number"


def _is_number(value: str) -> bool | str:
    if value.strip() == "":
        return True
    try:
        float(value)
        return True
    except ValueError:
        return "Enter a number"


def _is_duration(value: str) -> bool | str:
    if value.strip() == "":
        return True
    try:
        parse_duration(value)
        return True
    except ValueError:
        return "Use HH:MM:SS, MM:SS or SS"


class SetPrompter:
    """Asks for an exercise type and the rounds of a set."""

    def __init__(self, store: FitnessStore, unit_system: UnitSystem = UnitSystem.IMPERIAL):
        self.store = store
        self.unit_system = unit_system

    async def choose_exercise_type(self) -> ExerciseType | None:
        """Pick a category, then one of its exercise types."""
        categories = await self.store.categories.list_all()
        category_id = await questionary.select(
            "Category:",
            choices=[questionary.Choice(c.name, c.id) for c in categories]
            + [questionary.Choice("All exercises", ALL_EXERCISES)],
            style=custom_style,
        ).ask_async()
        if category_id is None:
            return None

        if category_id == ALL_EXERCISES:
            types = await self.store.exercise_types.list_all()
        else:
            types = await self.store.exercise_types.for_category(category_id)
        if not types:
            print("No exercise types in this category.")
            return None

        return await questionary.select(
            "Exercise:",
            choices=[questionary.Choice(f"{t.name} ({t.type})", t) for t in types],
            style=custom_style,
        ).ask_async()

    async def _ask_unit(self, question: str, units: list[str], current: str | None) -> str:
        if len(units) == 1:
            return units[0]
        return await questionary.select(
            question,
            choices=units,
            default=current if current in units else units[0],
            style=custom_style,
        ).ask_async()

    async def collect_round(
        self, exercise_type: ExerciseType, number: int, defaults: RoundValues | None = None
    ) -> RoundValues:
        """Ask for the measurements the exercise type tracks."""
        defaults = defaults or RoundValues()
        values = RoundValues()
        print(f"\n--- Round {number} ---")

        if exercise_type.tracks(MeasurementKind.TIME):
            answer = await questionary.text(
                "Duration (HH:MM:SS):",
                default=format_duration(defaults.duration) if defaults.duration else "",
                validate=_is_duration,
                style=custom_style,
            ).ask_async()
            values.duration = parse_duration(answer) if answer and answer.strip() else 0

        if exercise_type.tracks(MeasurementKind.REPS):
            answer = await questionary.text(
                "Reps:",
                default=str(defaults.reps) if defaults.reps else "",
                validate=_is_int,
                style=custom_style,
            ).ask_async()
            values.reps = int(answer) if answer and answer.strip() else 0

        if exercise_type.tracks(MeasurementKind.DISTANCE):
            answer = await questionary.text(
                "Distance:",
                default=format_value(defaults.distance),
                validate=_is_number,
                style=custom_style,
            ).ask_async()
            if answer and answer.strip():
                values.distance = float(answer)
                values.distance_unit = await self._ask_unit(
                    "Distance unit:", self.unit_system.distance_units, defaults.distance_unit
                )

        if exercise_type.tracks(MeasurementKind.WEIGHT):
            answer = await questionary.text(
                "Weight:",
                default=format_value(defaults.weight),
                validate=_is_number,
                style=custom_style,
            ).ask_async()
            if answer and answer.strip():
                values.weight = float(answer)
                values.weight_unit = await self._ask_unit(
                    "Weight unit:", self.unit_system.weight_units, defaults.weight_unit
                )

        return values

    async def collect_rounds(
        self, exercise_type: ExerciseType, existing: list[FitnessEntry] | None = None
    ) -> list[RoundValues]:
        """Ask how many rounds, then the values of each.

        When editing, the existing rounds are offered as defaults.
        """
        existing = existing or []
        count = await questionary.text(
            "Number of rounds:",
            default=str(len(existing) or 1),
            validate=lambda v: (v.strip().isdigit() and int(v) > 0) or "Enter a positive number",
            style=custom_style,
        ).ask_async()
        if count is None:
            return []

        rounds = []
        for index in range(int(count)):
            defaults = RoundValues.from_entry(existing[index]) if index < len(existing) else (
                rounds[-1] if rounds else None
            )
            rounds.append(await self.collect_round(exercise_type, index + 1, defaults))
        return rounds

    async def ask_description(self, current: str | None = None) -> str | None:
        answer = await questionary.text(
            "Notes (optional):", default=current or "", style=custom_style
        ).ask_async()
        return answer.strip() or None if answer else None
