"""Read-only category lookup used by the classifier.

Categories are owned outside the pipeline; this module only defines
the lookup contract and a YAML-backed in-memory implementation.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import yaml

from smartdoc.utils.logger import get_logger

logger = get_logger(__name__)


class CategoryStoreError(RuntimeError):
    """Raised by a category store that cannot serve lookups."""


@dataclass(frozen=True)
class Category:
    """A stored document category."""

    id: int
    name: str


class CategoryStore(Protocol):
    """Lookup contract for category storage backends."""

    def find_by_name(self, name: str) -> Category | None: ...

    def list_all(self) -> list[Category]: ...


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(1, "Invoice"),
    Category(2, "Receipt"),
    Category(3, "ID"),
    Category(4, "Letter"),
    Category(5, "Form"),
)


class InMemoryCategoryStore:
    """Category store backed by a dictionary keyed on exact name.

    Args:
        categories: Categories to serve. Names must be unique.

    Raises:
        ValueError: If two categories share a name.
    """

    def __init__(self, categories: Iterable[Category] = DEFAULT_CATEGORIES) -> None:
        self._by_name: dict[str, Category] = {}
        for category in categories:
            if category.name in self._by_name:
                raise ValueError(f"Duplicate category name: {category.name!r}")
            self._by_name[category.name] = category

    def find_by_name(self, name: str) -> Category | None:
        return self._by_name.get(name)

    def list_all(self) -> list[Category]:
        return sorted(self._by_name.values(), key=lambda c: c.name)


def load_categories(path: Path) -> InMemoryCategoryStore:
    """Load categories from a YAML file with a ``categories`` list.

    Args:
        path: Path to the categories file.

    Returns:
        A store with the file's categories, or the default seeded
        categories if the file is missing or empty.
    """
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f)
        if data and data.get("categories"):
            categories = [
                Category(id=int(entry["id"]), name=str(entry["name"]))
                for entry in data["categories"]
            ]
            logger.info("Loaded %d categories from %s", len(categories), path)
            return InMemoryCategoryStore(categories)
    logger.debug("Using default categories")
    return InMemoryCategoryStore()
