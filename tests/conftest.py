"""Shared test fixtures for the SmartDoc OCR test suite."""

from pathlib import Path

import cv2
import numpy as np
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from smartdoc.utils.config import AppConfig, OCRConfig, PreprocessingConfig


@pytest.fixture
def sample_image() -> np.ndarray:
    """Create a simple synthetic grayscale test image."""
    image = np.zeros((200, 300), dtype=np.uint8)
    image[50:150, 50:250] = 255
    return image


@pytest.fixture
def sample_color_image() -> np.ndarray:
    """Create a synthetic BGR test image with a mid-grey gradient."""
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    image[:, :, 0] = np.tile(np.linspace(0, 255, 300, dtype=np.uint8), (200, 1))
    image[50:150, 50:250] = (200, 180, 160)
    return image


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"


@pytest.fixture
def tessdata_dir(tmp_path: Path) -> Path:
    """Directory holding a placeholder English language model."""
    directory = tmp_path / "tessdata"
    directory.mkdir()
    (directory / "eng.traineddata").write_bytes(b"model")
    return directory


@pytest.fixture
def artifact_dir(tmp_path: Path) -> Path:
    """Directory that receives preprocessing artifacts and page renders."""
    directory = tmp_path / "artifacts"
    directory.mkdir()
    return directory


@pytest.fixture
def app_config(tessdata_dir: Path, artifact_dir: Path) -> AppConfig:
    """Configuration pointing OCR and temp files at test directories."""
    return AppConfig(
        preprocessing=PreprocessingConfig(artifact_dir=str(artifact_dir)),
        ocr=OCRConfig(tessdata_dir=str(tessdata_dir)),
    )


@pytest.fixture
def image_file(tmp_path: Path, sample_color_image: np.ndarray) -> Path:
    """A PNG document on disk."""
    path = tmp_path / "scan.png"
    cv2.imwrite(str(path), sample_color_image)
    return path


def _write_pdf(path: Path, pages: list[str | None]) -> Path:
    pdf = canvas.Canvas(str(path), pagesize=letter)
    for text in pages:
        if text:
            pdf.drawString(72, 720, text)
        pdf.showPage()
    pdf.save()
    return path


@pytest.fixture
def text_pdf(tmp_path: Path) -> Path:
    """Single-page PDF with an embedded text layer."""
    return _write_pdf(tmp_path / "invoice.pdf", ["INVOICE #123 TOTAL $50"])


@pytest.fixture
def multi_page_pdf(tmp_path: Path) -> Path:
    """Two-page PDF with known text on each page."""
    return _write_pdf(tmp_path / "pages.pdf", ["Page one content", "Page two content"])


@pytest.fixture
def blank_pdf(tmp_path: Path) -> Path:
    """Valid PDF whose only page carries no text layer."""
    return _write_pdf(tmp_path / "scanned.pdf", [None])


@pytest.fixture
def corrupt_pdf(tmp_path: Path) -> Path:
    """File with a PDF extension that is not a PDF."""
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"not a pdf at all")
    return path
