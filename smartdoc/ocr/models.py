"""Document references and the extraction result/status mapping.

Every extraction call ends in exactly one of three states: text was
recovered, extraction ran cleanly but found nothing, or it failed.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from .tesseract_engine import OCRResult

PDF_EXTENSIONS = frozenset({".pdf"})
IMAGE_EXTENSIONS = frozenset(
    {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif", ".webp"}
)


class DocumentKind(StrEnum):
    """File kind derived from the extension."""

    PDF = "pdf"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_filename(cls, filename: str) -> "DocumentKind":
        suffix = Path(filename).suffix.lower()
        if suffix in PDF_EXTENSIONS:
            return cls.PDF
        if suffix in IMAGE_EXTENSIONS:
            return cls.IMAGE
        return cls.UNSUPPORTED


@dataclass(frozen=True)
class RawDocument:
    """Read-only reference to a source file on disk."""

    path: Path
    filename: str
    kind: DocumentKind

    @classmethod
    def from_path(cls, path: Path | str, filename: str | None = None) -> "RawDocument":
        """Build a document reference.

        Args:
            path: Location of the bytes on disk.
            filename: Original upload name. Its extension decides the
                kind; defaults to the name of ``path``.
        """
        path = Path(path)
        name = filename or path.name
        return cls(path=path, filename=name, kind=DocumentKind.from_filename(name))


class ExtractionStatus(StrEnum):
    """Observable outcome of an extraction call."""

    SUCCESS = "success"
    EMPTY = "empty_no_text"
    FAILED = "failed"


class TextSource(StrEnum):
    """Strategy that produced the extracted text."""

    TEXT_LAYER = "text_layer"
    OCR = "ocr"
    NONE = "none"


@dataclass(frozen=True)
class ExtractionResult:
    """Text recovered from one document, with its status.

    ``text`` is always a string; ``reason`` is only set for failures.
    """

    text: str
    status: ExtractionStatus
    reason: str | None = None
    source: TextSource = TextSource.NONE

    @property
    def ok(self) -> bool:
        return self.status is ExtractionStatus.SUCCESS

    @classmethod
    def from_text(cls, text: str, source: TextSource) -> "ExtractionResult":
        text = text.strip()
        if text:
            return cls(text=text, status=ExtractionStatus.SUCCESS, source=source)
        return cls(text="", status=ExtractionStatus.EMPTY, source=source)

    @classmethod
    def failure(cls, reason: str) -> "ExtractionResult":
        return cls(text="", status=ExtractionStatus.FAILED, reason=reason)

    @classmethod
    def from_ocr(cls, result: OCRResult) -> "ExtractionResult":
        if result.error is not None:
            return cls.failure(result.error)
        return cls.from_text(result.text, TextSource.OCR)

    @classmethod
    def from_pages(cls, results: Sequence[OCRResult]) -> "ExtractionResult":
        """Combine per-page OCR results of a rasterized PDF.

        Any recovered page text wins over page failures; failures only
        surface when no page produced text.
        """
        texts = [r.text for r in results if r.text]
        if texts:
            return cls.from_text("\n\n".join(texts), TextSource.OCR)

        errors = [r.error for r in results if r.error is not None]
        if errors:
            return cls.failure("; ".join(errors))
        return cls.from_text("", TextSource.OCR)
