"""
Image preprocessing for receipt OCR.

Converts the captured photo to grayscale and boosts its contrast so thermal
printer text stands out before it is handed to the OCR engine.
"""

from pathlib import Path
from typing import Union

import cv2
import numpy as np

from .utils import DEFAULT_CONTRAST, ImageDecodeError

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

ImageSource = Union[str, Path, bytes, np.ndarray]


def contrast_factor(contrast: float) -> float:
    """Linear contrast multiplier for a contrast constant C in (-255, 259)."""
    return (259.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


def load_image(source: ImageSource) -> np.ndarray:
    """
    Decode an image from a path, encoded bytes, or pass an array through.

    Raises:
        ImageDecodeError: if the source cannot be read or decoded
    """
    if isinstance(source, np.ndarray):
        if source.size == 0 or source.ndim not in (2, 3) or (source.ndim == 3 and source.shape[2] not in (1, 3, 4)):
            raise ImageDecodeError(f"Unsupported image array with shape {source.shape}")
        return source

    if isinstance(source, (bytes, bytearray)):
        buffer = np.frombuffer(bytes(source), dtype=np.uint8)
        image = cv2.imdecode(buffer, cv2.IMREAD_COLOR) if buffer.size else None
        if image is None:
            raise ImageDecodeError("Could not decode image bytes")
        return image

    path = Path(source)
    if not path.is_file():
        raise ImageDecodeError(f"Could not load image: {path}")
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise ImageDecodeError(f"Could not load image: {path}")
    return image


class ImagePreprocessor:
    """Grayscale + contrast boost optimized for printed receipts."""

    def __init__(self, contrast: float = DEFAULT_CONTRAST, clamp: bool = True):
        if not -255.0 < contrast < 259.0:
            raise ValueError(f"contrast must be in (-255, 259), got {contrast}")
        self.contrast = contrast
        self.factor = contrast_factor(contrast)
        self.clamp = clamp

    def preprocess(self, image: np.ndarray) -> np.ndarray:
        """
        Apply grayscale conversion and contrast boost.

        Args:
            image: BGR, BGRA or single-channel image

        Returns:
            Image with the same shape. With clamp=True it is uint8 with
            values rounded half-up and clamped to [0, 255]; otherwise the
            unclamped values are returned as float64.
        """
        single_channel = image.ndim == 2 or image.shape[2] == 1
        if single_channel:
            luminance = image.reshape(image.shape[:2]).astype(np.float64)
        else:
            # OpenCV stores channels as B, G, R
            blue = image[..., 0].astype(np.float64)
            green = image[..., 1].astype(np.float64)
            red = image[..., 2].astype(np.float64)
            r_w, g_w, b_w = LUMA_WEIGHTS
            luminance = r_w * red + g_w * green + b_w * blue

        boosted = np.floor(self.factor * (luminance - 128.0) + 128.0 + 0.5)

        if self.clamp:
            boosted = np.clip(boosted, 0, 255).astype(np.uint8)
            out = image.copy() if image.dtype == np.uint8 else image.astype(np.uint8)
        else:
            out = image.astype(np.float64)

        if single_channel:
            return boosted.reshape(image.shape)

        out[..., 0] = boosted
        out[..., 1] = boosted
        out[..., 2] = boosted
        return out

    def preprocess_source(self, source: ImageSource) -> np.ndarray:
        """Decode an image source and preprocess it."""
        return self.preprocess(load_image(source))
