"""Food name normalization, aliases, and portion-label resolution."""

import re

from carbcheck.domain.errors import InvalidPortionLabel
from carbcheck.domain.portions import PORTION_MULTIPLIERS

_PARENTHETICAL = re.compile(r"\(.*?\)")
_NON_LETTERS = re.compile(r"[^a-z\s]")
_WHITESPACE = re.compile(r"\s+")

GRAMS_100 = "100 g"

# Free-text names from search results mapped to household unit keys.
FOOD_ALIASES: dict[str, str] = {
    "white rice": "rice (cooked)",
    "cooked white rice": "rice (cooked)",
    "boiled rice": "rice (cooked)",
    "rice white cooked": "rice (cooked)",
    "rice": "rice (cooked)",
    "apples": "apple",
    "apple raw": "apple",
    "bananas": "banana",
    "banana raw": "banana",
    "white bread": "bread",
    "bread white": "bread",
    "bread white commercially prepared": "bread",
}

# Approximate gram weights of household servings. Estimates, not measurements.
HOUSEHOLD_UNITS: dict[str, dict[str, float]] = {
    "apple": {
        "1 medium apple": 182.0,
        "1 small apple": 149.0,
        "1 large apple": 223.0,
        GRAMS_100: 100.0,
    },
    "banana": {
        "1 medium banana": 118.0,
        "1 small banana": 101.0,
        "1 large banana": 136.0,
        GRAMS_100: 100.0,
    },
    "rice (cooked)": {
        "1 cup cooked": 158.0,
        "1 bowl": 200.0,
        GRAMS_100: 100.0,
    },
    "bread": {
        "1 slice": 30.0,
        "2 slices": 60.0,
        GRAMS_100: 100.0,
    },
    "chicken curry": {
        "1 piece": 120.0,
        "1 bowl": 250.0,
        GRAMS_100: 100.0,
    },
}


def normalize_food_name(name: str) -> str:
    """Lowercase, drop parenthetical qualifiers and non-letters, trim."""
    lowered = name.lower()
    without_qualifiers = _PARENTHETICAL.sub("", lowered)
    letters_only = _NON_LETTERS.sub("", without_qualifiers)
    return _WHITESPACE.sub(" ", letters_only).strip()


def resolve_alias(name: str) -> str:
    """Return the canonical key for a free-text food name."""
    normalized = normalize_food_name(name)
    return FOOD_ALIASES.get(normalized, normalized)


def household_units(name: str) -> dict[str, float]:
    """Return named household servings in grams, or a plain 100 g unit."""
    key = resolve_alias(name)
    units = HOUSEHOLD_UNITS.get(key) or HOUSEHOLD_UNITS.get(name.strip().lower())
    return dict(units) if units else {GRAMS_100: 100.0}


def resolve_portion_multiplier(label: str) -> float:
    """Return the multiplier for a Small/Medium/Large label.

    Raises:
        InvalidPortionLabel: if the label is not in the multiplier table.
    """
    try:
        return PORTION_MULTIPLIERS[label]
    except KeyError:
        raise InvalidPortionLabel(label) from None


def is_valid_portion(label: str) -> bool:
    return label in PORTION_MULTIPLIERS


def valid_portions() -> list[str]:
    return list(PORTION_MULTIPLIERS)
