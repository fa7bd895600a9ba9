"""In-memory food catalog with exact lookup and ranked search."""

import logging
from dataclasses import dataclass, field

from carbcheck.adapters.catalog_source import CatalogSource
from carbcheck.adapters.fdc_dataset import ParsedDataset, parse_dataset
from carbcheck.domain.errors import CatalogNotLoaded, FoodNotFound
from carbcheck.domain.foods import FoodRecord
from carbcheck.services.aliases import resolve_alias

SEARCH_LIMIT = 10
STARTS_WITH_SCORE = 100
CONTAINS_SCORE = 50
FUZZY_SCORE = 20
FUZZY_THRESHOLD = 0.6

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    foods: tuple[FoodRecord, ...]
    by_description: dict[str, FoodRecord]

    @classmethod
    def build(cls, foods: list[FoodRecord]) -> "_Snapshot":
        index: dict[str, FoodRecord] = {}
        for food in foods:
            index.setdefault(food.description.lower(), food)
        return cls(foods=tuple(foods), by_description=index)


@dataclass
class FoodCatalog:
    """Read-only food collection loaded once from a dataset source.

    Readers always see a complete snapshot: a load replaces the active
    snapshot only after the whole document has parsed.
    """

    _snapshot: _Snapshot | None = field(default=None, init=False)

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def load(self, source: CatalogSource) -> None:
        """Load the catalog once; later calls are no-ops.

        Raises:
            CatalogLoadError: if the source is unreadable or malformed.
        """
        if self._snapshot is not None:
            _logger.info("Food catalog already loaded")
            return
        self._swap(source)

    def reload(self, source: CatalogSource) -> None:
        """Replace the whole catalog, keeping the old snapshot on failure."""
        self._swap(source)

    def load_records(self, foods: list[FoodRecord]) -> None:
        """Replace the catalog with already parsed records."""
        self._snapshot = _Snapshot.build(foods)

    def get_by_description(self, description: str) -> FoodRecord | None:
        """Return the first food whose description matches, ignoring case."""
        if self._snapshot is None:
            _logger.warning("Food catalog not loaded yet")
            return None
        return self._snapshot.by_description.get(description.lower())

    def require(self, description: str) -> FoodRecord:
        """Return a food by description or raise.

        Raises:
            CatalogNotLoaded: if no catalog has been loaded.
            FoodNotFound: if the description is absent.
        """
        if self._snapshot is None:
            raise CatalogNotLoaded("Food catalog is not loaded")
        food = self.get_by_description(description)
        if food is None:
            raise FoodNotFound(description)
        return food

    def resolve(self, name: str) -> FoodRecord | None:
        """Resolve a free-text name: exact match, then alias, then search."""
        exact = self.get_by_description(name)
        if exact is not None:
            return exact
        key = resolve_alias(name)
        if not key:
            return None
        aliased = self.get_by_description(key)
        if aliased is not None:
            return aliased
        for candidate in self.search(key):
            if resolve_alias(candidate.description) == key:
                return candidate
        return None

    def search(self, query: str, limit: int = SEARCH_LIMIT) -> list[FoodRecord]:
        """Return up to ``limit`` foods ranked by token match quality."""
        if self._snapshot is None:
            _logger.warning("Food catalog not loaded yet")
            return []
        tokens = [token for token in query.lower().split() if token]
        if not tokens:
            return []

        scored: list[tuple[int, FoodRecord]] = []
        for food in self._snapshot.foods:
            score = _score(food.description.lower(), tokens)
            if score > 0:
                scored.append((score, food))
        scored.sort(key=lambda entry: (-entry[0], entry[1].description))
        return [food for _, food in scored[: max(0, min(limit, SEARCH_LIMIT))]]

    def foods_in_category(self, keyword: str) -> list[FoodRecord]:
        """Return foods whose category or description mentions the keyword."""
        needle = keyword.lower()
        return [
            food
            for food in self.all_foods()
            if needle in food.category.lower() or needle in food.description.lower()
        ]

    def all_foods(self) -> list[FoodRecord]:
        if self._snapshot is None:
            return []
        return list(self._snapshot.foods)

    def count(self) -> int:
        return 0 if self._snapshot is None else len(self._snapshot.foods)

    def _swap(self, source: CatalogSource) -> None:
        dataset: ParsedDataset = parse_dataset(source.read())
        self._snapshot = _Snapshot.build(dataset.records)
        _logger.info(
            "Loaded %s foods from '%s' (%s skipped)",
            len(dataset.foods),
            dataset.root_key,
            dataset.skipped,
        )


def fuzzy_match(token: str, text: str) -> bool:
    """Return True if a greedy subsequence scan covers 60% of the token."""
    if not token:
        return True
    if not text:
        return False
    matched = 0
    for char in text:
        if matched == len(token):
            break
        if char == token[matched]:
            matched += 1
    return matched >= len(token) * FUZZY_THRESHOLD


def matches_token(token: str, text: str) -> bool:
    """Return True if the token would score against the text."""
    return text.startswith(token) or token in text or fuzzy_match(token, text)


def _score(description: str, tokens: list[str]) -> int:
    score = 0
    for token in tokens:
        if description.startswith(token):
            score += STARTS_WITH_SCORE
        elif token in description:
            score += CONTAINS_SCORE
        elif fuzzy_match(token, description):
            score += FUZZY_SCORE
    return score
