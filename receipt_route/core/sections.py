"""
Section detection for receipt text.

Finds the itemized-products block of a receipt: the lines between a column
header ("CODIGO DESCRICAO QTD UN VL TOTAL") and the totals footer.
"""

import logging
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

START_MARKER = re.compile(r"(Descricao|QrUn|Vir Tot|ITEM|CODIGO|DESCRIÇÃO|VALOR)", re.IGNORECASE)
END_MARKER = re.compile(r"(total de itens|Valor total|TOTAL|Sub-?Total)", re.IGNORECASE)


def split_lines(text: Optional[str]) -> List[str]:
    """Split raw OCR text into lines, keeping their order."""
    if not text:
        return []
    return text.splitlines()


def extract_section_lines(text: Optional[str]) -> List[str]:
    """
    Return the receipt lines that belong to the item list.

    A start-marker line opens the section and an end-marker line closes it;
    neither is kept. The start marker is tested first, so a header such as
    "CODIGO DESCRICAO VL TOTAL" opens the section. Several sections on one
    receipt are concatenated.

    Returns:
        The section lines, or an empty list when no start marker is found
    """
    in_section = False
    relevant = []

    for line in split_lines(text):
        if START_MARKER.search(line):
            in_section = True
            continue

        if END_MARKER.search(line):
            in_section = False

        if in_section:
            relevant.append(line)

    logger.debug("[Extract] Section has %d lines", len(relevant))
    return relevant


def extract_relevant_section(text: Optional[str]) -> str:
    """Return the item-list section as a single newline-joined string."""
    return "\n".join(extract_section_lines(text))


def has_start_marker(text: Optional[str]) -> bool:
    return any(START_MARKER.search(line) for line in split_lines(text))
