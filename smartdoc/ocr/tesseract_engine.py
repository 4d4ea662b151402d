"""Tesseract OCR engine wrapper.

The engine is configured once at startup: language model, character
whitelist, and page segmentation mode. Each ``recognize`` call borrows
one of a bounded number of slots so concurrent tesseract processes
cannot exhaust the host.
"""

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import pytesseract
from PIL import Image

from smartdoc.utils.config import DEFAULT_CHAR_WHITELIST, OCRConfig
from smartdoc.utils.logger import get_logger

from .exceptions import RecognitionModelError

logger = get_logger(__name__)


@dataclass
class OCRResult:
    """Plain-text OCR output for one image.

    ``error`` is set when recognition could not run; ``text`` is then
    empty.
    """

    text: str
    language: str
    error: str | None = None


class TesseractEngine:
    """Wrapper around Tesseract OCR for document text extraction.

    Args:
        lang: Language model name, e.g. ``"eng"``.
        tessdata_dir: Directory holding ``<lang>.traineddata``. If
            ``None``, Tesseract's own data directory is used.
        psm: Tesseract page segmentation mode.
        char_whitelist: Characters the recognizer may output.
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        max_concurrent_jobs: Upper bound on simultaneous recognitions.

    Raises:
        RecognitionModelError: If the language model is unavailable.
    """

    def __init__(
        self,
        lang: str = "eng",
        tessdata_dir: str | Path | None = None,
        psm: int = 3,
        char_whitelist: str = DEFAULT_CHAR_WHITELIST,
        tesseract_cmd: str | None = None,
        max_concurrent_jobs: int = 2,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.lang = lang
        self.tessdata_dir = Path(tessdata_dir) if tessdata_dir else None
        self.psm = psm
        self.char_whitelist = char_whitelist
        self._slots = threading.BoundedSemaphore(max_concurrent_jobs)
        self.verify_model()

    @classmethod
    def from_config(cls, config: OCRConfig) -> "TesseractEngine":
        return cls(
            lang=config.lang,
            tessdata_dir=config.tessdata_dir,
            psm=config.psm,
            char_whitelist=config.char_whitelist,
            tesseract_cmd=config.tesseract_cmd,
            max_concurrent_jobs=config.max_concurrent_jobs,
        )

    @property
    def config(self) -> str:
        """Command-line options passed to tesseract on every call."""
        options = [f"--psm {self.psm}"]
        if self.tessdata_dir is not None:
            options.append(f'--tessdata-dir "{self.tessdata_dir}"')
        if self.char_whitelist:
            options.append(f"-c tessedit_char_whitelist={self.char_whitelist}")
        return " ".join(options)

    def verify_model(self) -> None:
        """Check that the configured language model can be loaded.

        Raises:
            RecognitionModelError: If the model file or the tesseract
                binary is missing.
        """
        if self.tessdata_dir is not None:
            model = self.tessdata_dir / f"{self.lang}.traineddata"
            if not model.is_file():
                raise RecognitionModelError(f"OCR language model not found: {model}")
            logger.info("Using OCR model %s", model)
            return

        try:
            languages = pytesseract.get_languages(config="")
        except Exception as exc:
            raise RecognitionModelError(f"Tesseract is not available: {exc}") from exc
        if self.lang not in languages:
            raise RecognitionModelError(
                f"OCR language '{self.lang}' not installed (found: {languages})"
            )
        logger.info("Using installed OCR language '%s'", self.lang)

    @contextmanager
    def _checkout(self, timeout: float | None) -> Iterator[float | None]:
        """Hold a recognition slot, yielding the time left of ``timeout``."""
        started = time.monotonic()
        if not self._slots.acquire(timeout=timeout):
            raise TimeoutError(f"no OCR slot free within {timeout:.1f}s")
        try:
            if timeout is None:
                yield None
            else:
                remaining = timeout - (time.monotonic() - started)
                if remaining <= 0:
                    raise TimeoutError("OCR deadline expired before recognition")
                yield remaining
        finally:
            self._slots.release()

    def recognize(self, image_path: Path, timeout: float | None = None) -> OCRResult:
        """Recognize the text in an image file.

        Never raises: load, recognition, and timeout failures are logged
        and returned as an empty result with ``error`` set.

        Args:
            image_path: Path to the (preprocessed) image.
            timeout: Seconds allowed for waiting and recognition together.
                The tesseract process is killed when it runs past this.

        Returns:
            OCRResult with whitespace-trimmed text.
        """
        try:
            with self._checkout(timeout) as remaining, Image.open(image_path) as image:
                image.load()
                text = pytesseract.image_to_string(
                    image,
                    lang=self.lang,
                    config=self.config,
                    timeout=remaining or 0,
                )
        except Exception as exc:
            logger.error("OCR failed for %s: %s", image_path, exc)
            return OCRResult(text="", language=self.lang, error=f"OCR failed: {exc}")

        text = text.strip()
        logger.info("OCR extracted %d characters from %s", len(text), image_path)
        return OCRResult(text=text, language=self.lang)
