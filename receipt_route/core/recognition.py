"""
OCR recognition engine for receipt scanning.

Wraps Tesseract (through pytesseract) with settings tuned for thermal
printer receipts: Portuguese language data and a single uniform text block.
"""

import logging
import string
from typing import Optional

import numpy as np
import pytesseract
from PIL import Image

from .utils import DEFAULT_OCR_LANG

logger = logging.getLogger(__name__)

# PSM 6: assume a single uniform block of text
DEFAULT_PSM = 6
DEFAULT_WHITELIST = string.digits + string.ascii_uppercase + string.ascii_lowercase


class OCREngine:
    """Tesseract wrapper returning the raw multi-line text of an image."""

    def __init__(
        self,
        lang: str = DEFAULT_OCR_LANG,
        psm: int = DEFAULT_PSM,
        whitelist: Optional[str] = DEFAULT_WHITELIST,
        tesseract_cmd: Optional[str] = None
    ):
        self.lang = lang
        self.psm = psm
        self.whitelist = whitelist
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    @property
    def config(self) -> str:
        config = f"--psm {self.psm}"
        if self.whitelist:
            config += f" -c tessedit_char_whitelist={self.whitelist}"
        return config

    def recognize(self, image: np.ndarray) -> Optional[str]:
        """
        Run OCR over a preprocessed image.

        Returns:
            The recognized text, or None when Tesseract fails or finds nothing
        """
        pil_image = Image.fromarray(_to_rgb(image))
        logger.info("[OCR] Starting Tesseract (lang=%s, %s)", self.lang, self.config)
        try:
            text = pytesseract.image_to_string(pil_image, lang=self.lang, config=self.config)
        except pytesseract.TesseractNotFoundError:
            logger.error("[OCR] Tesseract binary not found; install tesseract-ocr or set TESSERACT_CMD")
            return None
        except (pytesseract.TesseractError, RuntimeError) as e:
            logger.error("[OCR] Tesseract error: %s", e)
            return None

        if not text or not text.strip():
            logger.warning("[OCR] No text recognized")
            return None

        logger.info("[OCR] Recognized %d characters", len(text))
        logger.debug("[OCR] Extracted text:\n%s", text)
        return text


def _to_rgb(image: np.ndarray) -> np.ndarray:
    """Reorder an OpenCV BGR(A) array to RGB for PIL."""
    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)
    if image.ndim == 2:
        return image
    if image.shape[2] == 1:
        return image[..., 0]
    return np.ascontiguousarray(image[..., 2::-1])
