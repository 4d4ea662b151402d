"""PDF text-layer reading and page rasterization.

Embedded text is read with pdfplumber. Pages without a usable text
layer are rendered to PNG files with pdf2image for OCR.
"""

from pathlib import Path

import pdfplumber
from pdf2image import convert_from_path

from smartdoc.utils.logger import get_logger

from .exceptions import PDFReadError

logger = get_logger(__name__)

PAGE_SEPARATOR = "\n\n"


class PDFHandler:
    """Reads embedded PDF text and renders pages for OCR.

    Args:
        dpi: Resolution for page rendering. Higher values produce
            better OCR results but use more memory.
    """

    def __init__(self, dpi: int = 300) -> None:
        self.dpi = dpi

    def extract_text_layer(self, pdf_path: Path) -> str:
        """Return the embedded text of every page, in page order.

        Pages are separated by a blank line and the result is stripped.

        Args:
            pdf_path: Path to the PDF file.

        Returns:
            The embedded text, empty if the PDF has none.

        Raises:
            PDFReadError: If the PDF cannot be opened or parsed.
        """
        try:
            with pdfplumber.open(pdf_path) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise PDFReadError(f"PDF text extraction failed: {exc}") from exc

        text = PAGE_SEPARATOR.join(pages).strip()
        logger.debug("Read %d characters of embedded text from %s", len(text), pdf_path)
        return text

    def render_pages(
        self, pdf_path: Path, output_dir: Path, timeout: float | None = None
    ) -> list[Path]:
        """Render every page of a PDF to a PNG file.

        Args:
            pdf_path: Path to the PDF file.
            output_dir: Directory that receives the page images. The
                caller owns it and is responsible for removing it.
            timeout: Seconds poppler may run before it is killed.

        Returns:
            Page image paths in page order.

        Raises:
            PDFReadError: If rendering fails or exceeds ``timeout``.
        """
        try:
            paths = convert_from_path(
                str(pdf_path),
                dpi=self.dpi,
                output_folder=str(output_dir),
                fmt="png",
                paths_only=True,
                timeout=timeout,
            )
        except Exception as exc:
            raise PDFReadError(f"PDF rasterization failed: {exc}") from exc

        pages = [Path(p) for p in paths]
        logger.info("Rendered %d pages of %s at %d DPI", len(pages), pdf_path, self.dpi)
        return pages
