"""Image preprocessing pipeline for document OCR.

Normalizes a raster image (grayscale, contrast, fixed threshold) and
writes the result to a temporary artifact for the recognizer. The
preprocessor never fails the pipeline: on any error the original path
is handed back so recognition can still run on the raw input.
"""

import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import cv2
import numpy as np

from smartdoc.utils.config import PreprocessingConfig
from smartdoc.utils.logger import get_logger

from .binarize import adjust_contrast, binarize_fixed, to_gray

logger = get_logger(__name__)

ARTIFACT_PREFIX = "smartdoc-prep-"


class ImagePreprocessor:
    """Fixed grayscale -> contrast -> threshold preprocessing.

    Args:
        config: Preprocessing configuration with the contrast factor,
            threshold, and the directory for temporary artifacts.
    """

    def __init__(self, config: PreprocessingConfig) -> None:
        self.config = config

    def process(self, image: np.ndarray) -> np.ndarray:
        """Run the array transform on an already loaded image.

        Args:
            image: Input document image (BGR, BGRA, or grayscale).

        Returns:
            Binary ``uint8`` image.
        """
        gray = to_gray(image)
        contrasted = adjust_contrast(gray, self.config.contrast_factor)
        return binarize_fixed(contrasted, self.config.threshold)

    def preprocess(self, path: Path) -> Path:
        """Preprocess an image file into a new temporary PNG.

        Args:
            path: Path to the source image.

        Returns:
            Path to the preprocessed artifact, or ``path`` itself if any
            step failed.
        """
        artifact: Path | None = None
        try:
            image = cv2.imread(str(path), cv2.IMREAD_COLOR)
            if image is None:
                raise ValueError(f"unreadable image: {path}")
            result = self.process(image)

            fd, name = tempfile.mkstemp(
                suffix=".png", prefix=ARTIFACT_PREFIX, dir=self.config.artifact_dir
            )
            os.close(fd)
            artifact = Path(name)
            if not cv2.imwrite(str(artifact), result):
                raise OSError(f"could not write artifact {artifact}")
        except Exception as exc:
            logger.warning("Preprocessing failed for %s, using original: %s", path, exc)
            if artifact is not None:
                artifact.unlink(missing_ok=True)
            return path

        logger.debug("Preprocessed %s -> %s", path, artifact)
        return artifact

    @contextmanager
    def preprocessed(self, path: Path) -> Iterator[Path]:
        """Yield a preprocessed copy of ``path`` and delete it on exit.

        The input file is never removed, even when preprocessing fell
        back to it.
        """
        artifact = self.preprocess(path)
        try:
            yield artifact
        finally:
            if artifact != path:
                artifact.unlink(missing_ok=True)
