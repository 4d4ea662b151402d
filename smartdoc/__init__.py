"""SmartDoc OCR.

Turns uploaded PDFs and images into plain text, using the embedded
PDF text layer where present and Tesseract OCR with OpenCV
preprocessing otherwise, then assigns a category with ordered
keyword rules.
"""

__version__ = "1.0.0"
