"""
Candidate extraction for receipt text.

Pulls product names out of the item-list section with a chain of pattern
strategies, from most to least specific:
- ean: a 13-digit barcode followed by the upper-case product description
- two_column: the first column of lines laid out in 2+-space separated columns
- line_start: an upper-case run at the start of a line, before a quantity or "UN"

The first strategy that finds anything wins; later ones never run.
"""

import logging
import re
from typing import Callable, List, Optional, Tuple

from ..product_corrector import filter_relevant, normalize_product_name
from .sections import extract_section_lines, has_start_marker
from .utils import ExtractionResult

logger = logging.getLogger(__name__)

# \d, \s and \b are ASCII-only
# 13-digit EAN, then the description up to "  <digit>", "UN" or end of text
EAN_PRODUCT_PATTERN = re.compile(r"(?:\b\d{13}\b)(?:\s+)([A-Z][A-Z\s]+?)(?=\s{2,}\d|\s*UN|$)", re.ASCII)
COLUMN_SEPARATOR = re.compile(r"\s{2,}", re.ASCII)
PURE_NUMBER = re.compile(r"^\d+$", re.ASCII)
LINE_START_PATTERN = re.compile(r"^([A-Z][A-Z\s]{2,})(?:\s{2,}|\s+\d|\s+UN)", re.ASCII)

MIN_COLUMN_NAME_LENGTH = 4

Strategy = Callable[[str], List[str]]


def _unique(candidates: List[str]) -> List[str]:
    """Trim, drop empties and collapse duplicates keeping first-seen order."""
    trimmed = (c.strip() for c in candidates)
    return list(dict.fromkeys(c for c in trimmed if c))


def extract_ean_candidates(text: str) -> List[str]:
    """Descriptions that follow a 13-digit EAN barcode."""
    return _unique([m.group(1) for m in EAN_PRODUCT_PATTERN.finditer(text)])


def extract_column_candidates(text: str) -> List[str]:
    """First column of lines split on runs of 2+ spaces."""
    found = []
    for line in text.split("\n"):
        segments = COLUMN_SEPARATOR.split(line.strip())
        if len(segments) < 2:
            continue
        first = segments[0].strip()
        if len(first) >= MIN_COLUMN_NAME_LENGTH and not PURE_NUMBER.match(first):
            found.append(first)
    return _unique(found)


def extract_line_start_candidates(text: str) -> List[str]:
    """Upper-case run at the start of each line, ended by spacing, a digit or 'UN'."""
    found = []
    for line in text.split("\n"):
        match = LINE_START_PATTERN.match(line)
        if match:
            found.append(match.group(1))
    return _unique(found)


EXTRACTION_STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("ean", extract_ean_candidates),
    ("two_column", extract_column_candidates),
    ("line_start", extract_line_start_candidates),
)


def extract_candidates(text: str) -> Tuple[List[str], Optional[str]]:
    """
    Run the strategy chain over section text.

    Returns:
        Tuple of (raw candidates, name of the strategy that produced them).
        The name is None when every strategy came back empty.
    """
    if not text:
        return [], None

    for name, strategy in EXTRACTION_STRATEGIES:
        candidates = strategy(text)
        if candidates:
            logger.info("[Extract] %d candidates from '%s' strategy", len(candidates), name)
            return candidates, name
        logger.debug("[Extract] '%s' strategy found nothing, trying next", name)

    logger.info("[Extract] No candidates found")
    return [], None


def process_receipt_text(text: Optional[str]) -> ExtractionResult:
    """
    Turn raw OCR text into cleaned product names.

    Section extraction, candidate strategies, correction, then relevance
    filtering and deduplication. Never raises on malformed text; the worst
    case is an empty result.
    """
    if not text:
        return ExtractionResult()

    section_found = has_start_marker(text)
    if not section_found:
        logger.info("[Extract] No item section marker found")
        return ExtractionResult()

    section_lines = extract_section_lines(text)
    raw_candidates, strategy = extract_candidates("\n".join(section_lines))
    corrected = [normalize_product_name(candidate) for candidate in raw_candidates]
    names = filter_relevant(corrected)

    logger.info("[Extract] Final products: %s", names)
    return ExtractionResult(
        names=names,
        strategy=strategy,
        section_found=True,
        section_lines=section_lines,
        raw_candidates=raw_candidates,
    )
