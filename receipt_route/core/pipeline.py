"""
Receipt scan pipeline.

Image -> preprocessing -> OCR -> item section -> candidate names ->
catalog matches -> walking route.
"""

import logging
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .catalog import ProductCatalog, match_candidates
from .extraction import process_receipt_text
from .preprocessing import ImagePreprocessor, ImageSource
from .recognition import OCREngine
from .route import optimize_shopping_route
from .utils import DEFAULT_MATCH_WORKERS, ImageDecodeError, ScanResult, list_images, save_scan_result

logger = logging.getLogger(__name__)


class ReceiptScanPipeline:
    """Scan receipts into a shopping route for one store."""

    def __init__(
        self,
        ocr_engine: Optional[OCREngine] = None,
        preprocessor: Optional[ImagePreprocessor] = None,
        catalog: Optional[ProductCatalog] = None,
        store: str = "",
        max_workers: int = DEFAULT_MATCH_WORKERS
    ):
        self.ocr_engine = ocr_engine if ocr_engine is not None else OCREngine()
        self.preprocessor = preprocessor if preprocessor is not None else ImagePreprocessor()
        self.catalog = catalog
        self.store = store
        self.max_workers = max_workers

    def process_image(self, source: ImageSource, image_path: Optional[str] = None) -> ScanResult:
        """
        Scan one receipt image.

        Raises:
            ImageDecodeError: if the image cannot be decoded
        """
        if image_path is None and isinstance(source, (str, Path)):
            image_path = str(source)

        processed = self.preprocessor.preprocess_source(source)
        logger.info("[Pipeline] Preprocessed image %s", processed.shape)

        raw_text = self.ocr_engine.recognize(processed)
        if not raw_text:
            logger.warning("[Pipeline] OCR returned no text for %s", image_path or "image")
            return ScanResult(image_path=image_path, ocr_failed=True)

        return self.process_text(raw_text, image_path=image_path)

    def process_text(self, raw_text: str, image_path: Optional[str] = None) -> ScanResult:
        """Run extraction, catalog matching and routing on already-recognized text."""
        extraction = process_receipt_text(raw_text)
        result = ScanResult(image_path=image_path, raw_text=raw_text or "", extraction=extraction)

        if self.catalog is None or not extraction.names:
            result.unmatched = list(extraction.names)
            return result

        result.matches, result.unmatched = match_candidates(
            self.catalog, self.store, extraction.names, max_workers=self.max_workers
        )
        # Several names can resolve to the same catalog product; visit it once
        stops = list({id(p): p for p in result.matches.values()}.values())
        result.route = optimize_shopping_route(stops)
        return result

    def process_folder(self, folder_path: str, output_dir: Optional[str] = None) -> List[ScanResult]:
        """
        Scan every image in a folder.

        Images that cannot be decoded are logged and skipped.
        """
        results = []
        for img_path in tqdm(list_images(folder_path), desc="Scanning receipts"):
            try:
                result = self.process_image(str(img_path))
            except ImageDecodeError as e:
                logger.error("[Pipeline] %s", e)
                continue
            if output_dir:
                save_scan_result(result, Path(output_dir), img_path.stem)
            results.append(result)
        return results
