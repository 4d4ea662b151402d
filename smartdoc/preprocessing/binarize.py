"""Grayscale, contrast, and fixed-threshold transforms for document images.

Each function is a pure array transform so the preprocessing
pipeline stays deterministic for identical input pixels.
"""

import math

import cv2
import numpy as np

from smartdoc.utils.logger import get_logger

logger = get_logger(__name__)


def to_gray(image: np.ndarray) -> np.ndarray:
    """Convert an image to grayscale if it has color channels.

    Args:
        image: Input image (BGR, BGRA, or grayscale).

    Returns:
        Grayscale image.
    """
    if image.ndim == 2:
        return image
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def adjust_contrast(image: np.ndarray, factor: float = 1.2) -> np.ndarray:
    """Stretch contrast linearly around mid-grey.

    Args:
        image: Grayscale ``uint8`` image.
        factor: Contrast multiplier; values above 1 increase contrast.

    Returns:
        Contrast-adjusted ``uint8`` image.
    """
    stretched = (image.astype(np.float32) - 128.0) * factor + 128.0
    result = np.clip(np.rint(stretched), 0, 255).astype(np.uint8)
    logger.debug("Applied contrast adjustment (factor=%.2f)", factor)
    return result


def binarize_fixed(image: np.ndarray, threshold: float = 0.5) -> np.ndarray:
    """Binarize an image with a fixed cutoff.

    Args:
        image: Grayscale ``uint8`` image.
        threshold: Cutoff as a fraction of full scale. Pixels at or
            above it become white, all others black.

    Returns:
        Binary image with pixel values 0 or 255.
    """
    cutoff = math.ceil(threshold * 255)
    _, binary = cv2.threshold(image, cutoff - 1, 255, cv2.THRESH_BINARY)
    logger.debug("Applied fixed binarization (cutoff=%d)", cutoff)
    return binary
