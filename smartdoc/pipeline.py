"""End-to-end ingestion: extract text from a stored file, then classify it.

Produces the values a document store persists for each upload; the
store itself lives outside this package.
"""

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from smartdoc.classification.categories import CategoryStore, load_categories
from smartdoc.classification.classifier import KeywordClassifier
from smartdoc.classification.rules import load_rules
from smartdoc.ocr.document_processor import DocumentProcessor
from smartdoc.ocr.models import ExtractionStatus, TextSource
from smartdoc.utils.config import AppConfig
from smartdoc.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DocumentRecord:
    """Extraction and classification output for one uploaded file."""

    filename: str
    storage_path: str
    extracted_text: str
    status: ExtractionStatus
    category_id: int | None = None
    reason: str | None = None
    source: TextSource = TextSource.NONE
    owner_id: str | None = None
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class DocumentPipeline:
    """Runs extraction and classification for uploaded documents.

    Args:
        processor: Extraction strategy selector.
        classifier: Keyword classifier with its category store.
        max_workers: Thread pool size for ``process_many``.
    """

    def __init__(
        self,
        processor: DocumentProcessor,
        classifier: KeywordClassifier,
        max_workers: int = 4,
    ) -> None:
        self.processor = processor
        self.classifier = classifier
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config: AppConfig) -> "DocumentPipeline":
        """Build the pipeline, verifying the OCR model up front.

        Raises:
            RecognitionModelError: If the OCR language model is missing.
        """
        rules = load_rules(Path(config.classification.rules_path))
        store = load_categories(Path(config.classification.categories_path))
        return cls(
            processor=DocumentProcessor(config),
            classifier=KeywordClassifier(rules, store),
            max_workers=config.max_workers,
        )

    @property
    def categories(self) -> CategoryStore:
        return self.classifier.store

    def process(
        self,
        path: Path | str,
        filename: str | None = None,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> DocumentRecord:
        """Extract and classify one stored file.

        Classification only runs when extraction succeeded.

        Raises:
            CategoryStoreError: If the category store is unavailable.
        """
        path = Path(path)
        name = filename or path.name
        extraction = self.processor.extract(path, name, timeout=timeout)

        category_id = None
        if extraction.status is ExtractionStatus.SUCCESS:
            category_id = self.classifier.classify(extraction.text)

        return DocumentRecord(
            filename=name,
            storage_path=str(path),
            extracted_text=extraction.text,
            status=extraction.status,
            category_id=category_id,
            reason=extraction.reason,
            source=extraction.source,
            owner_id=owner_id,
        )

    def process_many(
        self, paths: Sequence[Path], owner_id: str | None = None
    ) -> list[DocumentRecord]:
        """Process several files concurrently, preserving input order."""
        if not paths:
            return []

        workers = min(self.max_workers, len(paths))
        logger.info("Processing %d documents with %d workers", len(paths), workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda p: self.process(p, owner_id=owner_id), paths))
