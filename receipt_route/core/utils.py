"""
Utility functions and data classes for receipt scanning.

Contains shared data structures, errors, file I/O helpers, and configuration utilities.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Dict, Optional, Any


# =============================================================================
# Configuration
# =============================================================================

DEFAULT_OCR_LANG = "por"
DEFAULT_CONTRAST = 150.0
DEFAULT_MATCH_WORKERS = 4

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.tiff', '.webp'}


@dataclass
class Settings:
    """Runtime settings, resolved from the environment once per process."""
    ocr_lang: str = DEFAULT_OCR_LANG
    contrast: float = DEFAULT_CONTRAST
    tesseract_cmd: Optional[str] = None
    match_workers: int = DEFAULT_MATCH_WORKERS


def load_settings(environ: Optional[Dict[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Recognized variables:
        RECEIPT_OCR_LANG: Tesseract language code (default: por)
        RECEIPT_CONTRAST: contrast constant C for preprocessing (default: 150)
        TESSERACT_CMD: path to the tesseract binary
        RECEIPT_MATCH_WORKERS: thread pool size for catalog lookups (default: 4)
    """
    env = os.environ if environ is None else environ

    contrast = DEFAULT_CONTRAST
    if env.get("RECEIPT_CONTRAST"):
        try:
            contrast = float(env["RECEIPT_CONTRAST"])
        except ValueError:
            raise ReceiptScanError(f"RECEIPT_CONTRAST must be a number, got {env['RECEIPT_CONTRAST']!r}")

    workers = DEFAULT_MATCH_WORKERS
    if env.get("RECEIPT_MATCH_WORKERS"):
        try:
            workers = max(1, int(env["RECEIPT_MATCH_WORKERS"]))
        except ValueError:
            raise ReceiptScanError(
                f"RECEIPT_MATCH_WORKERS must be an integer, got {env['RECEIPT_MATCH_WORKERS']!r}"
            )

    return Settings(
        ocr_lang=env.get("RECEIPT_OCR_LANG") or DEFAULT_OCR_LANG,
        contrast=contrast,
        tesseract_cmd=env.get("TESSERACT_CMD") or None,
        match_workers=workers,
    )


# =============================================================================
# Errors
# =============================================================================

class ReceiptScanError(Exception):
    """Base class for errors raised by the receipt scanner."""


class ImageDecodeError(ReceiptScanError):
    """The input image could not be read or decoded."""


class CatalogError(ReceiptScanError):
    """The product catalog could not be loaded."""


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True, eq=False)
class Product:
    """A catalog entry: product name, aisle number and store."""
    name: str
    aisle: Optional[int]
    store: str = ""
    product_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "aisle": self.aisle, "store": self.store}
        if self.product_id is not None:
            data["product_id"] = self.product_id
        return data


@dataclass
class ExtractionResult:
    """Candidate product names pulled from one receipt text."""
    names: List[str] = field(default_factory=list)
    strategy: Optional[str] = None
    section_found: bool = False
    section_lines: List[str] = field(default_factory=list)
    raw_candidates: List[str] = field(default_factory=list)


@dataclass
class ScanResult:
    """Full result for one scanned receipt."""
    image_path: Optional[str]
    raw_text: str = ""
    ocr_failed: bool = False
    extraction: ExtractionResult = field(default_factory=ExtractionResult)
    matches: Dict[str, Product] = field(default_factory=dict)
    unmatched: List[str] = field(default_factory=list)
    route: List[Product] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return self.extraction.names

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image_path": self.image_path,
            "ocr_failed": self.ocr_failed,
            "raw_text": self.raw_text,
            "section_found": self.extraction.section_found,
            "strategy": self.extraction.strategy,
            "names": list(self.extraction.names),
            "matches": {name: product.to_dict() for name, product in self.matches.items()},
            "unmatched": list(self.unmatched),
            "route": [product.to_dict() for product in self.route],
        }


# =============================================================================
# File I/O Utilities
# =============================================================================

def list_images(folder_path: str) -> List[Path]:
    """Return the image files in a folder, sorted by name."""
    folder = Path(folder_path)
    return sorted([
        f for f in folder.iterdir()
        if f.suffix.lower() in IMAGE_EXTENSIONS
    ])


def save_scan_result(result: ScanResult, out_path: Path, image_name: str) -> Path:
    """Save a scan result to <out_path>/<image_name>_result.json."""
    out_path = Path(out_path)
    out_path.mkdir(parents=True, exist_ok=True)
    json_path = out_path / f"{image_name}_result.json"
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
    return json_path
