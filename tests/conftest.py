"""
Pytest configuration and shared fixtures for receipt scanner tests.

This module provides:
- Sample receipt texts, one per extraction strategy
- A fake OCR engine (no Tesseract needed)
- A sample store catalog
- Helpers to write receipt images into tmp_path

Usage:
    pytest tests/ -v
    pytest tests/test_route.py -v
"""

import json
import sys
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np
import pytest

# Add project root for imports when the package is not installed
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from receipt_route.core.utils import Product  # noqa: E402


STORE = "Dal Pozzo Vila Bela"


# =============================================================================
# Receipt Text Fixtures
# =============================================================================

EAN_RECEIPT = """SUPERMERCADO DAL POZZO LTDA
CNPJ 12.345.678/0001-90
CUPOM FISCAL
ITEM CODIGO DESCRICAO QTD UN VL UNIT VL ITEM
001 7891000100103 CAFE MELTITA TRADICION  1 UN 15,90
002 7896005800027 ACUCAR UNIAO REFINADO  2 UN 4,99
003 7891234567895 ARROZ TIO JOAO  1 UN 25,90
004 7896036090244 BISCOITO MARILAN  3 UN 3,49
TOTAL R$ 55,27
DINHEIRO 60,00
TROCO 4,73
"""

COLUMN_RECEIPT = """CUPOM FISCAL ELETRONICO
DESCRICAO            QTD   VALOR
LEITE INTEGRAL       2     9,98
FEIJAO CARIOCA       1     8,49
PAO FRANCES          6     5,40
SUBTOTAL             23,87
OBRIGADO
"""

LINE_START_RECEIPT = """ITEM DESCRICAO QTD VL
MACARRAO ESPAGUETE 2 UN 7,98
OLEO DE SOJA 1 UN 8,99
TOTAL 16,97
"""

NO_SECTION_RECEIPT = """OBRIGADO PELA PREFERENCIA
VOLTE SEMPRE
"""


@pytest.fixture
def ean_receipt() -> str:
    return EAN_RECEIPT


@pytest.fixture
def column_receipt() -> str:
    return COLUMN_RECEIPT


@pytest.fixture
def line_start_receipt() -> str:
    return LINE_START_RECEIPT


@pytest.fixture
def no_section_receipt() -> str:
    return NO_SECTION_RECEIPT


# =============================================================================
# OCR Engine Fixture
# =============================================================================

class FakeOCREngine:
    """Stands in for Tesseract; returns canned text and records its inputs."""

    def __init__(self, text: Optional[str]):
        self.text = text
        self.images: List[np.ndarray] = []

    def recognize(self, image: np.ndarray) -> Optional[str]:
        self.images.append(image)
        return self.text


@pytest.fixture
def fake_ocr():
    """Factory for FakeOCREngine instances."""
    return FakeOCREngine


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def catalog_products() -> List[Product]:
    return [
        Product("Café Melitta Tradicional 500g", 60, STORE, 1),
        Product("Açúcar União Refinado 1kg", 30, STORE, 2),
        Product("Arroz Tio João Tipo 1 5kg", 5, STORE, 3),
        Product("Biscoito Marilan Maria", 81, STORE, 4),
        Product("Café Melitta Tradicional 500g", 12, "Outra Loja", 5),
    ]


@pytest.fixture
def catalog_file(tmp_path, catalog_products) -> Path:
    path = tmp_path / "catalog.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump([p.to_dict() for p in catalog_products], f, ensure_ascii=False)
    return path


@pytest.fixture
def store() -> str:
    return STORE


# =============================================================================
# Image Fixtures
# =============================================================================

def write_receipt_image(path: Path, width: int = 64, height: int = 48) -> Path:
    """Write a small synthetic 'receipt': light background with dark bars."""
    image = np.full((height, width, 3), 200, dtype=np.uint8)
    image[10:14, 5:width - 5] = (40, 40, 40)
    image[24:28, 5:width - 20] = (60, 50, 40)
    cv2.imwrite(str(path), image)
    return path


@pytest.fixture
def receipt_image(tmp_path) -> Path:
    return write_receipt_image(tmp_path / "cupom.png")
