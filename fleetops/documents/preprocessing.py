"""Scan cleanup applied before local OCR.

Phone photos of certificates are unevenly lit; boosting local contrast
and then thresholding gives Tesseract cleaner glyphs to work with.
"""

import cv2
import numpy as np

from fleetops.utils.logger import get_logger

logger = get_logger(__name__)


def to_gray(image: np.ndarray) -> np.ndarray:
    """Convert an RGB, RGBA or grayscale image to grayscale."""
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    if image.ndim == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
    return image


def preprocess_scan(
    image: np.ndarray,
    clip_limit: float = 2.0,
    tile_size: int = 8,
) -> np.ndarray:
    """Grayscale, equalise contrast with CLAHE, then Otsu-binarise.

    Args:
        image: Page image as a numpy array.
        clip_limit: CLAHE contrast limit.
        tile_size: CLAHE grid size.

    Returns:
        Binary image with pixel values 0 or 255.
    """
    gray = to_gray(image)
    if gray.dtype != np.uint8:
        gray = cv2.normalize(gray, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    clahe = cv2.createCLAHE(clipLimit=clip_limit, tileGridSize=(tile_size, tile_size))
    enhanced = clahe.apply(gray)
    _, binary = cv2.threshold(enhanced, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    logger.debug(
        "Preprocessed scan %dx%d (clip=%.1f, tile=%d)",
        binary.shape[1],
        binary.shape[0],
        clip_limit,
        tile_size,
    )
    return binary
