"""Sources that supply the raw food dataset document."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from carbcheck.domain.errors import CatalogLoadError

_DATA_DIR = Path(__file__).resolve().parents[1] / "data"
BUNDLED_DATASET = _DATA_DIR / "foundation_foods.json"


class CatalogSource(Protocol):
    """Interface for reading a food dataset document."""

    def read(self) -> object:
        """Return the decoded JSON document."""


@dataclass
class JsonFileCatalogSource(CatalogSource):
    """Reads a FoodData Central JSON export from disk."""

    path: Path = BUNDLED_DATASET

    def read(self) -> object:
        """Read and decode the dataset file."""
        try:
            with self.path.open(encoding="utf-8") as handle:
                return json.load(handle)
        except OSError as exc:
            raise CatalogLoadError(
                f"Cannot read food dataset {self.path}: {exc}"
            ) from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CatalogLoadError(
                f"Malformed food dataset {self.path}: {exc}"
            ) from exc


@dataclass
class InMemoryCatalogSource(CatalogSource):
    """Serves an already decoded document, e.g. from tests or a remote fetch."""

    payload: object

    def read(self) -> object:
        return self.payload
