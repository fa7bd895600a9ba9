"""Portion selection models."""

from dataclasses import dataclass

SMALL = "Small"
MEDIUM = "Medium"
LARGE = "Large"
SERVING = "Serving"

DEFAULT_PORTION = MEDIUM

PORTION_MULTIPLIERS: dict[str, float] = {
    SMALL: 0.67,
    MEDIUM: 1.0,
    LARGE: 1.5,
}


@dataclass(frozen=True)
class PortionSelection:
    """A user's portion choice for one food on the plate."""

    food_description: str
    portion_label: str = DEFAULT_PORTION
    quantity: int = 1
