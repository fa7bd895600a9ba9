"""Error taxonomy for food resolution and estimation."""


class CarbCheckError(Exception):
    """Base exception for the estimation core."""


class CatalogLoadError(CarbCheckError):
    """Raised when the food dataset cannot be read or parsed.

    The catalog stays unusable (or keeps its previous snapshot) until a load
    is retried successfully.
    """


class CatalogNotLoaded(CarbCheckError):
    """Raised when a strict lookup is attempted before the catalog is loaded."""


class FoodNotFound(CarbCheckError):
    """Raised when a food is absent from the catalog."""

    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(f"Food not found: {description}")


class InvalidInput(CarbCheckError, ValueError):
    """Base class for input validation failures on pure calculations."""


class InvalidPortionLabel(InvalidInput):
    """Raised for a portion label outside the multiplier table."""

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"Invalid portion size: {label}")


class InvalidQuantity(InvalidInput):
    """Raised when a portion quantity is not positive."""


class InvalidServingSize(InvalidInput):
    """Raised when a standard serving is not positive."""


class InvalidGrams(InvalidInput):
    """Raised when a gram amount is negative."""


class InvalidSensitivity(InvalidInput):
    """Raised when a carbohydrate sensitivity is not positive."""


class InvalidCarbs(InvalidInput):
    """Raised when a carbohydrate amount is negative."""


class InvalidBaselineGlucose(InvalidInput):
    """Raised when a baseline glucose reading is negative."""
