"""Ordered keyword rules for document classification.

Rules are loaded from a YAML file and kept in file order; the first
rule whose keyword occurs in a document's text decides its category.
"""

from dataclasses import dataclass
from pathlib import Path

import yaml

from smartdoc.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ClassificationRule:
    """Maps a keyword found in document text to a category name."""

    keyword: str
    category: str

    @property
    def needle(self) -> str:
        """Lowercased keyword used for case-insensitive matching."""
        return self.keyword.lower()


DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("invoice", "Invoice"),
    ClassificationRule("amount due", "Invoice"),
    ClassificationRule("total", "Invoice"),
    ClassificationRule("receipt", "Receipt"),
    ClassificationRule("paid", "Receipt"),
    ClassificationRule("purchase", "Receipt"),
    ClassificationRule("passport", "ID"),
    ClassificationRule("driver", "ID"),
    ClassificationRule("license", "ID"),
    ClassificationRule("application", "Form"),
    ClassificationRule("form", "Form"),
    ClassificationRule("registration", "Form"),
    ClassificationRule("dear", "Letter"),
    ClassificationRule("sincerely", "Letter"),
    ClassificationRule("regards", "Letter"),
    ClassificationRule("transcript", "Results"),
)


def parse_rules(entries: list[dict]) -> tuple[ClassificationRule, ...]:
    """Build rules from ``{keyword, category}`` mappings, keeping order.

    Raises:
        ValueError: If an entry lacks a non-empty keyword or category.
    """
    rules: list[ClassificationRule] = []
    for index, entry in enumerate(entries):
        keyword = str(entry.get("keyword") or "").strip()
        category = str(entry.get("category") or "").strip()
        if not keyword or not category:
            raise ValueError(f"Rule {index} needs a keyword and a category: {entry}")
        rules.append(ClassificationRule(keyword=keyword, category=category))
    return tuple(rules)


def load_rules(path: Path) -> tuple[ClassificationRule, ...]:
    """Load classification rules from a YAML file.

    The file holds a ``rules`` list of ``{keyword, category}`` entries.

    Args:
        path: Path to the rules file.

    Returns:
        Rules in file order, or ``DEFAULT_RULES`` if the file is missing
        or empty.
    """
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f)
        if data and data.get("rules"):
            rules = parse_rules(data["rules"])
            logger.info("Loaded %d classification rules from %s", len(rules), path)
            return rules
    logger.debug("Using default classification rules")
    return DEFAULT_RULES
