"""
Core module for receipt scanning.

This package contains modular components for receipt processing:
- utils: Data classes, errors, file I/O, and configuration
- preprocessing: Grayscale and contrast enhancement
- recognition: Tesseract OCR engine wrapper
- sections: Item-list section detection
- extraction: Candidate name strategies and the text pipeline
- catalog: Product catalog lookups
- route: Walking-path ordering of products
- pipeline: Main pipeline class for images, folders and text
"""

# Data classes and errors
from .utils import (
    Product,
    ExtractionResult,
    ScanResult,
    Settings,
    ReceiptScanError,
    ImageDecodeError,
    CatalogError,
)

# Configuration and file I/O utilities
from .utils import (
    load_settings,
    list_images,
    save_scan_result,
)

# Preprocessing
from .preprocessing import ImagePreprocessor, load_image

# Recognition
from .recognition import OCREngine

# Text extraction
from .sections import extract_section_lines, extract_relevant_section
from .extraction import (
    EXTRACTION_STRATEGIES,
    extract_candidates,
    process_receipt_text,
)

# Catalog
from .catalog import ProductCatalog, InMemoryCatalog, match_candidates

# Routing
from .route import (
    AisleSide,
    classify_aisle,
    opposite_aisle,
    compare_aisles,
    compare_products,
    optimize_shopping_route,
    group_by_aisle,
)

# Main pipeline
from .pipeline import ReceiptScanPipeline


__all__ = [
    # Data classes and errors
    "Product",
    "ExtractionResult",
    "ScanResult",
    "Settings",
    "ReceiptScanError",
    "ImageDecodeError",
    "CatalogError",
    # Configuration and file I/O
    "load_settings",
    "list_images",
    "save_scan_result",
    # Preprocessing
    "ImagePreprocessor",
    "load_image",
    # Recognition
    "OCREngine",
    # Text extraction
    "extract_section_lines",
    "extract_relevant_section",
    "EXTRACTION_STRATEGIES",
    "extract_candidates",
    "process_receipt_text",
    # Catalog
    "ProductCatalog",
    "InMemoryCatalog",
    "match_candidates",
    # Routing
    "AisleSide",
    "classify_aisle",
    "opposite_aisle",
    "compare_aisles",
    "compare_products",
    "optimize_shopping_route",
    "group_by_aisle",
    # Pipeline
    "ReceiptScanPipeline",
]
