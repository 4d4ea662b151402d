"""Tests for the Tesseract OCR engine wrapper."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from smartdoc.ocr.exceptions import RecognitionModelError
from smartdoc.ocr.tesseract_engine import OCRResult, TesseractEngine
from smartdoc.utils.config import OCRConfig


class TestModelVerification:
    """Startup checks for the language model."""

    def test_tessdata_dir_with_model(self, tessdata_dir: Path) -> None:
        engine = TesseractEngine(tessdata_dir=tessdata_dir)
        assert engine.tessdata_dir == tessdata_dir

    def test_tessdata_dir_missing_model(self, tmp_path: Path) -> None:
        with pytest.raises(RecognitionModelError, match="eng.traineddata"):
            TesseractEngine(tessdata_dir=tmp_path)

    def test_other_language_missing(self, tessdata_dir: Path) -> None:
        with pytest.raises(RecognitionModelError):
            TesseractEngine(lang="fra", tessdata_dir=tessdata_dir)

    @patch("smartdoc.ocr.tesseract_engine.pytesseract")
    def test_installed_language(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.get_languages.return_value = ["eng", "osd"]
        engine = TesseractEngine()
        assert engine.lang == "eng"

    @patch("smartdoc.ocr.tesseract_engine.pytesseract")
    def test_language_not_installed(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.get_languages.return_value = ["osd"]
        with pytest.raises(RecognitionModelError, match="not installed"):
            TesseractEngine()

    @patch("smartdoc.ocr.tesseract_engine.pytesseract")
    def test_tesseract_missing(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.get_languages.side_effect = OSError("tesseract not found")
        with pytest.raises(RecognitionModelError, match="not available"):
            TesseractEngine()


class TestEngineConfig:
    """Tests for the options passed to tesseract."""

    def test_config_string(self, tessdata_dir: Path) -> None:
        engine = TesseractEngine(tessdata_dir=tessdata_dir, psm=6)
        assert "--psm 6" in engine.config
        assert f'--tessdata-dir "{tessdata_dir}"' in engine.config
        assert "-c tessedit_char_whitelist=0123456789ABC" in engine.config

    def test_from_config(self, tessdata_dir: Path) -> None:
        cfg = OCRConfig(
            tessdata_dir=str(tessdata_dir), psm=4, tesseract_cmd="/opt/tesseract"
        )
        with patch("smartdoc.ocr.tesseract_engine.pytesseract") as mock_pt:
            engine = TesseractEngine.from_config(cfg)
            assert mock_pt.pytesseract.tesseract_cmd == "/opt/tesseract"
        assert engine.psm == 4
        assert engine.tessdata_dir == tessdata_dir


class TestRecognize:
    """Tests for recognize() with tesseract mocked out."""

    @pytest.fixture
    def engine(self, tessdata_dir: Path) -> TesseractEngine:
        return TesseractEngine(tessdata_dir=tessdata_dir, max_concurrent_jobs=1)

    @patch("smartdoc.ocr.tesseract_engine.pytesseract")
    def test_returns_trimmed_text(
        self, mock_pytesseract: MagicMock, engine: TesseractEngine, image_file: Path
    ) -> None:
        mock_pytesseract.image_to_string.return_value = "  INVOICE 42\n\n"

        result = engine.recognize(image_file)

        assert isinstance(result, OCRResult)
        assert result.text == "INVOICE 42"
        assert result.error is None
        assert result.language == "eng"
        kwargs = mock_pytesseract.image_to_string.call_args.kwargs
        assert kwargs["lang"] == "eng"
        assert kwargs["config"] == engine.config
        assert kwargs["timeout"] == 0

    @patch("smartdoc.ocr.tesseract_engine.pytesseract")
    def test_passes_remaining_timeout(
        self, mock_pytesseract: MagicMock, engine: TesseractEngine, image_file: Path
    ) -> None:
        mock_pytesseract.image_to_string.return_value = "text"
        engine.recognize(image_file, timeout=5.0)
        timeout = mock_pytesseract.image_to_string.call_args.kwargs["timeout"]
        assert 0 < timeout <= 5.0

    @patch("smartdoc.ocr.tesseract_engine.pytesseract")
    def test_engine_error_becomes_empty_result(
        self, mock_pytesseract: MagicMock, engine: TesseractEngine, image_file: Path
    ) -> None:
        mock_pytesseract.image_to_string.side_effect = RuntimeError(
            "Tesseract process timeout"
        )

        result = engine.recognize(image_file, timeout=1.0)

        assert result.text == ""
        assert "Tesseract process timeout" in result.error

    @patch("smartdoc.ocr.tesseract_engine.pytesseract")
    def test_unreadable_image(
        self, mock_pytesseract: MagicMock, engine: TesseractEngine, tmp_path: Path
    ) -> None:
        bogus = tmp_path / "bogus.png"
        bogus.write_text("not an image")

        result = engine.recognize(bogus)

        assert result.text == ""
        assert result.error is not None
        mock_pytesseract.image_to_string.assert_not_called()

    @patch("smartdoc.ocr.tesseract_engine.pytesseract")
    def test_slot_released_after_failures(
        self, mock_pytesseract: MagicMock, engine: TesseractEngine, image_file: Path
    ) -> None:
        mock_pytesseract.image_to_string.side_effect = [
            RuntimeError("boom"),
            RuntimeError("boom"),
            "recovered",
        ]
        engine.recognize(image_file)
        engine.recognize(image_file)
        result = engine.recognize(image_file, timeout=1.0)
        assert result.text == "recovered"

    @patch("smartdoc.ocr.tesseract_engine.pytesseract")
    def test_busy_slots_time_out(
        self, mock_pytesseract: MagicMock, engine: TesseractEngine, image_file: Path
    ) -> None:
        engine._slots.acquire()
        try:
            result = engine.recognize(image_file, timeout=0.05)
        finally:
            engine._slots.release()

        assert result.text == ""
        assert "slot" in result.error
        mock_pytesseract.image_to_string.assert_not_called()
