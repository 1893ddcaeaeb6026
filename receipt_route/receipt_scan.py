#!/usr/bin/env python3
"""
Receipt Scanner for Shopping Lists

Reads a supermarket receipt, extracts the purchased products and, given a
store catalog, orders them along the walking path through the store.

Usage:
    receipt-scan --input cupom.jpg --catalog catalog.json --store "Dal Pozzo Vila Bela"
    receipt-scan --input receipts/ --out_dir out
    receipt-scan --input cupom.txt --text
"""

import argparse
import logging
import sys
from pathlib import Path

from .core import (
    ImageDecodeError,
    ImagePreprocessor,
    InMemoryCatalog,
    OCREngine,
    ReceiptScanError,
    ReceiptScanPipeline,
    ScanResult,
    group_by_aisle,
    load_settings,
    save_scan_result,
)


def print_result(result: ScanResult, with_catalog: bool = False) -> None:
    """Print a scan report."""
    print("\n" + "=" * 60)
    print("RECEIPT SCAN RESULT")
    print("=" * 60)
    if result.image_path:
        print(f"Input: {result.image_path}")

    if result.ocr_failed:
        print("Error: no text could be recognized in the image")
        print("=" * 60)
        return

    extraction = result.extraction
    if not extraction.section_found:
        print("No item section found on the receipt")
    print(f"Strategy: {extraction.strategy or 'none'}")
    print(f"Products found: {len(extraction.names)}")
    print("-" * 60)
    for name in extraction.names:
        print(f"  {name}")

    if result.route:
        print("-" * 60)
        print("SHOPPING ROUTE")
        for aisle, products in group_by_aisle(result.route):
            print(f"  Aisle {aisle}: " + ", ".join(p.name for p in products))
    if with_catalog and result.unmatched:
        print(f"Not in catalog: {', '.join(result.unmatched)}")
    print("=" * 60)


def main(argv=None):
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Receipt Scanner for Shopping Lists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scan a receipt photo and order it for a store
  receipt-scan --input cupom.jpg --catalog catalog.json --store "Dal Pozzo Vila Bela"

  # Scan every image in a folder and save JSON results
  receipt-scan --input receipts/ --out_dir out

  # Parse text that was already recognized
  receipt-scan --input cupom.txt --text
        """
    )

    parser.add_argument(
        "--input", "-i", required=True,
        help="Path to a receipt image, a folder of images, or a text file (with --text)"
    )
    parser.add_argument(
        "--out_dir", "-o", default=None,
        help="Directory for JSON results (default: do not save)"
    )
    parser.add_argument(
        "--catalog", "-c", default=None,
        help="JSON catalog of {name, aisle, store} products"
    )
    parser.add_argument(
        "--store", "-s", default="",
        help="Store to match products against"
    )
    parser.add_argument(
        "--lang", "-l", default=settings.ocr_lang,
        help=f"Tesseract language code (default: {settings.ocr_lang})"
    )
    parser.add_argument(
        "--contrast", type=float, default=settings.contrast,
        help=f"Contrast constant for preprocessing (default: {settings.contrast:g})"
    )
    parser.add_argument(
        "--no_clamp", action="store_true",
        help="Do not clamp preprocessed pixel values to 0-255"
    )
    parser.add_argument(
        "--workers", type=int, default=settings.match_workers,
        help=f"Parallel catalog lookups (default: {settings.match_workers})"
    )
    parser.add_argument(
        "--text", action="store_true",
        help="Treat --input as a text file of OCR output"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input path does not exist: {args.input}")
        return 1

    try:
        catalog = InMemoryCatalog.from_json(args.catalog) if args.catalog else None
        preprocessor = ImagePreprocessor(contrast=args.contrast, clamp=not args.no_clamp)
    except (ReceiptScanError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    pipeline = ReceiptScanPipeline(
        ocr_engine=OCREngine(lang=args.lang, tesseract_cmd=settings.tesseract_cmd),
        preprocessor=preprocessor,
        catalog=catalog,
        store=args.store,
        max_workers=args.workers,
    )

    print(f"[Receipt Scan] Input: {args.input}")
    if catalog is not None:
        print(f"[Receipt Scan] Catalog: {args.catalog} ({len(catalog)} products, store '{args.store}')")

    if args.text:
        # Non-UTF-8 dumps (cp1252) are read with replacement characters
        try:
            raw_text = input_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            print(f"Error: Could not read text file: {e}")
            return 1
        results = [pipeline.process_text(raw_text, image_path=str(input_path))]
    elif input_path.is_dir():
        results = pipeline.process_folder(str(input_path), args.out_dir)
    else:
        try:
            results = [pipeline.process_image(str(input_path))]
        except ImageDecodeError as e:
            print(f"Error: {e}")
            return 1

    for result in results:
        print_result(result, with_catalog=catalog is not None)
        if args.out_dir and not input_path.is_dir():
            json_path = save_scan_result(result, Path(args.out_dir), input_path.stem)
            print(f"\n[Output] Saved results to {json_path}")

    if any(r.ocr_failed for r in results):
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
