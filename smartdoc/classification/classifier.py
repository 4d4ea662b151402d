"""Keyword classifier mapping extracted text to a stored category.

Matching is a linear first-match scan over the ordered rule table,
so cost grows with ``len(rules) * len(text)``. A matched label that
has no stored category yields no category, exactly like a miss;
``explain`` keeps the two apart for diagnostics.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from smartdoc.utils.logger import get_logger

from .categories import CategoryStore
from .rules import ClassificationRule

logger = get_logger(__name__)


@dataclass(frozen=True)
class ClassificationOutcome:
    """Which rule matched and what category it resolved to."""

    category_id: int | None = None
    rule: ClassificationRule | None = None

    @property
    def matched(self) -> bool:
        return self.rule is not None

    @property
    def unresolved(self) -> bool:
        """True if a rule matched but its category is not stored."""
        return self.rule is not None and self.category_id is None


class KeywordClassifier:
    """First-match-wins keyword classification.

    Args:
        rules: Ordered rule table; earlier rules take precedence.
        store: Category lookup used to resolve rule labels.
    """

    def __init__(
        self, rules: Sequence[ClassificationRule], store: CategoryStore
    ) -> None:
        self.rules = tuple(rules)
        self.store = store

    def match(self, text: str | None) -> ClassificationRule | None:
        """Return the first rule whose keyword occurs in ``text``."""
        if not text or not text.strip():
            return None

        lowered = text.lower()
        for rule in self.rules:
            if rule.needle in lowered:
                return rule
        return None

    def explain(self, text: str | None) -> ClassificationOutcome:
        """Classify ``text`` and report the matching rule as well.

        Raises:
            CategoryStoreError: If the category store is unavailable.
        """
        rule = self.match(text)
        if rule is None:
            logger.debug("No classification rule matched")
            return ClassificationOutcome()

        category = self.store.find_by_name(rule.category)
        if category is None:
            logger.warning(
                "Keyword %r matched but category %r does not exist",
                rule.keyword,
                rule.category,
            )
            return ClassificationOutcome(rule=rule)

        logger.info("Classified as %s via keyword %r", category.name, rule.keyword)
        return ClassificationOutcome(category_id=category.id, rule=rule)

    def classify(self, text: str | None) -> int | None:
        """Return the category id for ``text``, or ``None``.

        Raises:
            CategoryStoreError: If the category store is unavailable.
        """
        return self.explain(text).category_id
