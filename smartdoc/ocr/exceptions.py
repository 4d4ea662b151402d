class RecognitionModelError(RuntimeError):
    """Raised at startup when the OCR language model cannot be found."""


class PDFReadError(RuntimeError):
    """Raised when a PDF cannot be opened, parsed, or rasterized."""
