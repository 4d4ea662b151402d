"""Extraction strategy selection for uploaded documents.

PDFs are read through their embedded text layer first and rasterized
for OCR only when that layer is empty or unreadable. Every other file
goes straight to preprocessing and OCR. Per-document failures never
escape ``extract``; they come back as a failed ``ExtractionResult``.
"""

import tempfile
import time
from pathlib import Path

from smartdoc.preprocessing.pipeline import ImagePreprocessor
from smartdoc.utils.config import AppConfig
from smartdoc.utils.logger import get_logger

from .exceptions import PDFReadError
from .models import DocumentKind, ExtractionResult, RawDocument, TextSource
from .pdf_handler import PDFHandler
from .tesseract_engine import OCRResult, TesseractEngine

logger = get_logger(__name__)


def _remaining(deadline: float | None) -> float | None:
    """Seconds left until ``deadline``, or ``None`` without one."""
    if deadline is None:
        return None
    left = deadline - time.monotonic()
    if left <= 0:
        raise TimeoutError("extraction deadline expired")
    return left


class DocumentProcessor:
    """Turns a document on disk into an ``ExtractionResult``.

    Args:
        config: Application configuration object.
        ocr_engine: Shared recognizer. Built from ``config.ocr`` when
            omitted, which verifies the language model.
    """

    def __init__(
        self, config: AppConfig, ocr_engine: TesseractEngine | None = None
    ) -> None:
        self.config = config
        self.pdf_handler = PDFHandler(dpi=config.ocr.pdf_dpi)
        self.preprocessor = ImagePreprocessor(config.preprocessing)
        self.ocr_engine = ocr_engine or TesseractEngine.from_config(config.ocr)

    def extract(
        self,
        path: Path | str,
        filename: str | None = None,
        timeout: float | None = None,
    ) -> ExtractionResult:
        """Extract text from a PDF or image file.

        Args:
            path: Path to the stored file.
            filename: Original file name; its extension selects the
                strategy. Defaults to the name of ``path``.
            timeout: Seconds allowed for the whole extraction. Defaults
                to ``ocr.timeout_seconds``, which may itself be ``None``.

        Returns:
            The extraction result. Never raises for per-document errors.
        """
        document = RawDocument.from_path(path, filename)
        if timeout is None:
            timeout = self.config.ocr.timeout_seconds
        deadline = time.monotonic() + timeout if timeout is not None else None

        logger.info("Extracting %s (%s)", document.filename, document.kind)
        try:
            if document.kind is DocumentKind.PDF:
                result = self._extract_pdf(document.path, deadline)
            else:
                result = self._extract_image(document.path, deadline)
        except Exception as exc:
            logger.error("Extraction failed for %s: %s", document.filename, exc)
            result = ExtractionResult.failure(f"{type(exc).__name__}: {exc}")

        logger.info(
            "Extraction of %s finished: %s (%d characters, source=%s)",
            document.filename,
            result.status,
            len(result.text),
            result.source,
        )
        return result

    def _extract_image(self, path: Path, deadline: float | None) -> ExtractionResult:
        return ExtractionResult.from_ocr(self._recognize(path, deadline))

    def _extract_pdf(self, path: Path, deadline: float | None) -> ExtractionResult:
        try:
            text = self.pdf_handler.extract_text_layer(path)
        except PDFReadError as exc:
            logger.warning(
                "Unreadable text layer in %s, falling back to OCR: %s", path, exc
            )
            text = ""

        if text:
            return ExtractionResult.from_text(text, TextSource.TEXT_LAYER)

        logger.info("No embedded text in %s, rasterizing pages for OCR", path)
        return self._ocr_pdf_pages(path, deadline)

    def _ocr_pdf_pages(self, path: Path, deadline: float | None) -> ExtractionResult:
        with tempfile.TemporaryDirectory(
            prefix="smartdoc-pages-", dir=self.config.preprocessing.artifact_dir
        ) as tmp:
            try:
                pages = self.pdf_handler.render_pages(
                    path, Path(tmp), timeout=_remaining(deadline)
                )
            except PDFReadError as exc:
                logger.error("Cannot rasterize %s: %s", path, exc)
                return ExtractionResult.failure(str(exc))

            _remaining(deadline)
            results = [self._recognize(page, deadline) for page in pages]

        return ExtractionResult.from_pages(results)

    def _recognize(self, image_path: Path, deadline: float | None) -> OCRResult:
        """Preprocess and OCR one image, removing the artifact afterwards."""
        with self.preprocessor.preprocessed(image_path) as prepared:
            return self.ocr_engine.recognize(prepared, timeout=_remaining(deadline))
