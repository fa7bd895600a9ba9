"""Parser for FoodData Central JSON documents.

Dataset variants differ in two ways: nutrients are keyed either by the legacy
nutrient number ("205") or by the newer nutrient id (1005), and the standard
serving lives under ``servingSize``, ``servingSizeData`` or ``foodPortions``.
The parser checks each variant explicitly and records which one resolved
every field, so a surprising catalog value can be traced back to its source.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import ValidationError

from carbcheck.domain.errors import CatalogLoadError
from carbcheck.domain.foods import FoodRecord

_logger = logging.getLogger(__name__)

_ROOT_KEYS = ("FoundationFoods", "SRLegacyFoods", "SurveyFoods", "foods")

DEFAULT_SERVING_GRAMS = 100.0
DEFAULT_SERVING_UNIT = "g"


@dataclass(frozen=True)
class NutrientCode:
    """A nutrient as known to both numbering schemes."""

    number: str
    nutrient_id: int


_MACRO_CODES: dict[str, tuple[NutrientCode, ...]] = {
    "carbs": (NutrientCode("205", 1005),),
    "protein": (NutrientCode("203", 1003),),
    "fat": (NutrientCode("204", 1004),),
    "fiber": (NutrientCode("291", 1079),),
    # Foundation foods often report only the Atwater energy variants.
    "calories": (
        NutrientCode("208", 1008),
        NutrientCode("958", 2048),
        NutrientCode("957", 2047),
    ),
}


class NutrientScheme(StrEnum):
    """How a food's nutrients were matched."""

    NUMBER = "number"
    ID = "id"
    MIXED = "mixed"


class ServingSource(StrEnum):
    """Which payload field supplied the standard serving."""

    SERVING_SIZE = "servingSize"
    SERVING_SIZE_DATA = "servingSizeData"
    BRANDED = "branded"
    FOOD_PORTIONS = "foodPortions"
    DEFAULT = "default"


class FoodFormatError(ValueError):
    """Raised when a single food entry matches none of the known variants."""


@dataclass(frozen=True)
class ParsedFood:
    """A parsed record tagged with the variants that resolved it."""

    record: FoodRecord
    nutrient_scheme: NutrientScheme
    serving_source: ServingSource


@dataclass
class ParsedDataset:
    """Result of parsing a whole dataset document."""

    root_key: str
    foods: list[ParsedFood] = field(default_factory=list)
    skipped: int = 0

    @property
    def records(self) -> list[FoodRecord]:
        return [food.record for food in self.foods]


def parse_dataset(payload: object) -> ParsedDataset:
    """Parse a FoodData Central document into catalog records.

    Individual malformed entries are skipped with a warning. A document without
    a recognised food list, or one where no entry parses, is rejected.

    Raises:
        CatalogLoadError: if the document shape is not recognised.
    """
    if not isinstance(payload, dict):
        raise CatalogLoadError("Food dataset must be a JSON object")
    root_key, entries = _find_food_list(payload)
    dataset = ParsedDataset(root_key=root_key)
    for entry in entries:
        try:
            dataset.foods.append(parse_food(entry))
        except (FoodFormatError, ValidationError) as exc:
            dataset.skipped += 1
            _logger.warning("Skipping food entry: %s", exc)
    if entries and not dataset.foods:
        raise CatalogLoadError(
            f"No parsable foods under '{root_key}' ({len(entries)} entries)"
        )
    return dataset


def parse_food(entry: object) -> ParsedFood:
    """Parse one food entry.

    Raises:
        FoodFormatError: if the entry has no description or no known nutrients.
        pydantic.ValidationError: if resolved values break record invariants.
    """
    if not isinstance(entry, dict):
        raise FoodFormatError("Food entry must be an object")
    description = entry.get("description")
    if not isinstance(description, str) or not description.strip():
        raise FoodFormatError(f"Food {entry.get('fdcId')!r} has no description")

    macros, scheme = _extract_macros(entry.get("foodNutrients") or [])
    grams, unit, source = _extract_serving(entry)
    record = FoodRecord(
        id=str(entry.get("fdcId", "")),
        description=description.strip(),
        category=_extract_category(entry),
        standard_serving_grams=grams,
        standard_serving_unit=unit,
        carbs_per_100g=macros.get("carbs", 0.0),
        protein_per_100g=macros.get("protein", 0.0),
        fat_per_100g=macros.get("fat", 0.0),
        fiber_per_100g=macros.get("fiber", 0.0),
        calories_per_100g=macros.get("calories"),
    )
    return ParsedFood(record=record, nutrient_scheme=scheme, serving_source=source)


def _find_food_list(payload: dict[str, object]) -> tuple[str, list[object]]:
    for key in _ROOT_KEYS:
        value = payload.get(key)
        if isinstance(value, list):
            return key, value
    raise CatalogLoadError(
        f"Food dataset has none of the expected root keys: {', '.join(_ROOT_KEYS)}"
    )


def _extract_macros(
    food_nutrients: object,
) -> tuple[dict[str, float], NutrientScheme]:
    """Match nutrients by number first, then by id, for every macro."""
    if not isinstance(food_nutrients, list):
        raise FoodFormatError("foodNutrients must be a list")
    by_number: dict[str, float] = {}
    by_id: dict[int, float] = {}
    for nutrient in food_nutrients:
        if not isinstance(nutrient, dict):
            continue
        amount = _amount(nutrient)
        if amount is None:
            continue
        number, nutrient_id = _nutrient_keys(nutrient)
        if number is not None:
            by_number.setdefault(number, amount)
        if nutrient_id is not None:
            by_id.setdefault(nutrient_id, amount)

    values: dict[str, float] = {}
    schemes: set[NutrientScheme] = set()
    for name, codes in _MACRO_CODES.items():
        for code in codes:
            if code.number in by_number:
                values[name] = by_number[code.number]
                schemes.add(NutrientScheme.NUMBER)
                break
            if code.nutrient_id in by_id:
                values[name] = by_id[code.nutrient_id]
                schemes.add(NutrientScheme.ID)
                break

    if not values:
        raise FoodFormatError(
            "No carbohydrate, protein, fat or energy nutrient recognised"
        )
    scheme = schemes.pop() if len(schemes) == 1 else NutrientScheme.MIXED
    return values, scheme


def _nutrient_keys(nutrient: dict[str, object]) -> tuple[str | None, int | None]:
    info = nutrient.get("nutrient")
    info = info if isinstance(info, dict) else {}
    raw_number = (
        info.get("number")
        or info.get("nutrientNumber")
        or nutrient.get("nutrientNumber")
    )
    raw_id = info.get("id") or nutrient.get("nutrientId")
    number = str(raw_number).strip() if raw_number is not None else None
    nutrient_id = _to_int(raw_id)
    return number, nutrient_id


def _amount(nutrient: dict[str, object]) -> float | None:
    for key in ("amount", "value"):
        value = nutrient.get(key)
        if isinstance(value, int | float) and not isinstance(value, bool):
            return float(value)
    return None


def _extract_serving(entry: dict[str, object]) -> tuple[float, str, ServingSource]:
    for key, source in (
        ("servingSize", ServingSource.SERVING_SIZE),
        ("servingSizeData", ServingSource.SERVING_SIZE_DATA),
    ):
        data = entry.get(key)
        if isinstance(data, dict):
            grams = _positive_float(data.get("value"))
            if grams is not None:
                return grams, _unit_label(data), source
    branded_size = _positive_float(entry.get("servingSize"))
    if branded_size is not None:
        unit = str(entry.get("servingSizeUnit") or DEFAULT_SERVING_UNIT).lower()
        return branded_size, unit, ServingSource.BRANDED
    portions = entry.get("foodPortions")
    if isinstance(portions, list):
        for portion in portions:
            if not isinstance(portion, dict):
                continue
            grams = _positive_float(portion.get("gramWeight"))
            if grams is not None:
                return grams, _portion_unit(portion), ServingSource.FOOD_PORTIONS
    return DEFAULT_SERVING_GRAMS, DEFAULT_SERVING_UNIT, ServingSource.DEFAULT


def _unit_label(data: dict[str, object]) -> str:
    measure_unit = data.get("measureUnit")
    if isinstance(measure_unit, dict) and measure_unit.get("abbreviation"):
        return str(measure_unit["abbreviation"])
    if data.get("unit"):
        return str(data["unit"])
    return DEFAULT_SERVING_UNIT


def _portion_unit(portion: dict[str, object]) -> str:
    measure_unit = portion.get("measureUnit")
    if isinstance(measure_unit, dict):
        name = measure_unit.get("name") or measure_unit.get("abbreviation")
        if name and name != "undetermined":
            return str(name)
    modifier = portion.get("modifier") or portion.get("portionDescription")
    return str(modifier) if modifier else DEFAULT_SERVING_UNIT


def _extract_category(entry: dict[str, object]) -> str:
    category = entry.get("foodCategory")
    if isinstance(category, dict):
        return str(category.get("description") or "")
    if isinstance(category, str):
        return category
    return str(entry.get("brandedFoodCategory") or "")


def _positive_float(value: object) -> float | None:
    if isinstance(value, int | float) and not isinstance(value, bool) and value > 0:
        return float(value)
    return None


def _to_int(value: object) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None
