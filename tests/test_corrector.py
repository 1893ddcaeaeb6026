"""
Unit tests for product_corrector.py.

This module tests name correction and relevance filtering:
- PRODUCT_CORRECTIONS dictionary lookups (single words and phrases)
- Comparison keys (case and accent folding)
- Idempotence of correction
- Boilerplate, numeric and date filtering
- Near-duplicate collapsing

Usage:
    pytest tests/test_corrector.py -v
"""

import random

import pytest

from receipt_route.product_corrector import (
    PRODUCT_CORRECTIONS,
    filter_relevant,
    is_relevant,
    normalize_product_name,
    normalize_text,
)


# =============================================================================
# Correction Dictionary Tests
# =============================================================================

class TestProductCorrections:
    """Test PRODUCT_CORRECTIONS lookups."""

    def test_known_words_get_canonical_spelling(self):
        test_cases = [
            ("CAFE", "Café"),
            ("ACUCAR", "Açúcar"),
            ("PAO", "Pão"),
            ("MACARRAO", "Macarrão"),
            ("FEIJAO", "Feijão"),
        ]

        for raw, expected in test_cases:
            assert normalize_product_name(raw) == expected, (
                f"'{raw}' should become '{expected}'"
            )

    def test_mixed_known_and_unknown_words(self):
        """Unknown words are lower-cased, known ones corrected."""
        assert normalize_product_name("CAFE MELTITA TRADICION 500G") == "Café Melitta Tradicional 500g"
        assert normalize_product_name("ARROZ TIPO 1") == "Arroz tipo 1"

    def test_lookup_ignores_case(self):
        assert normalize_product_name("cafe pilao") == "Café pilao"

    def test_phrase_entry(self):
        """Multi-word entries are matched as a word sequence."""
        assert normalize_product_name("BOM JESU") == "Bom Jesus"
        assert normalize_product_name("FEIJAO BOM JESU 1KG") == "Feijão Bom Jesus 1kg"

    def test_double_spaces_are_kept(self):
        """Names are split on single spaces, so empty words survive the join."""
        assert normalize_product_name("CAFE  PILAO") == "Café  pilao"

    def test_dictionary_is_upper_case(self):
        for raw in PRODUCT_CORRECTIONS:
            assert raw == raw.upper(), f"Dictionary key '{raw}' should be upper case"


# =============================================================================
# Idempotence Tests
# =============================================================================

class TestIdempotence:
    """normalize_product_name(normalize_product_name(x)) == normalize_product_name(x)."""

    @pytest.mark.parametrize("raw", [
        "",
        "CAFE",
        "Café",
        "CAFÉ MELITTA",
        "CAFE MELTITA TRADICION",
        "BOM JESU",
        "Bom Jesus",
        "bom jesus",
        "ACUCAR  UNIAO",
        "pão de queijo",
        "123",
        "12/05/2024",
        " LEADING AND TRAILING ",
        "ÓLEO DE SOJA",
        "Straße",
        "STRA\u1E9EE",
        "\u0149 \u0130STANBUL \uFB01LTRO",
    ])
    def test_normalize_twice_is_noop(self, raw):
        once = normalize_product_name(raw)
        assert normalize_product_name(once) == once, (
            f"'{raw}' -> '{once}' -> '{normalize_product_name(once)}'"
        )

    def test_all_dictionary_entries_idempotent(self):
        for raw in PRODUCT_CORRECTIONS:
            once = normalize_product_name(raw)
            assert normalize_product_name(once) == once

    def test_random_mixed_unicode_idempotent(self):
        """Special casings (sharp s, ligatures, dotted I, final sigma) mixed with dictionary words."""
        pieces = list(PRODUCT_CORRECTIONS) + [
            "a", "Z", "ç", "Ã", "é", "Ó", "\u1E9E", "\u00DF", "\u0149", "\u0130", "\u0131",
            "\uFB01", "\u01C5", "\u03A3", "\u03C2", "\u0301", "7", "500G", " ", "  ", "\t",
        ]
        rng = random.Random(1234)
        for _ in range(3000):
            raw = "".join(rng.choice(pieces) for _ in range(rng.randint(0, 8)))
            once = normalize_product_name(raw)
            assert normalize_product_name(once) == once, repr(raw)


# =============================================================================
# Comparison Key Tests
# =============================================================================

class TestComparisonKey:
    """Test normalize_text()."""

    def test_strips_accents_and_case(self):
        assert normalize_text("Café Açúcar PÃO ") == "cafe acucar pao"

    def test_plain_ascii_unchanged_except_case(self):
        assert normalize_text("ARROZ tipo 1") == "arroz tipo 1"

    def test_key_matches_for_accent_variants(self):
        assert normalize_text("Feijão") == normalize_text("FEIJAO")


# =============================================================================
# Relevance Filter Tests
# =============================================================================

class TestRelevanceFilter:
    """Test is_relevant() and filter_relevant()."""

    def test_removes_receipt_noise(self):
        names = ["150.00", "Arroz", "12/05/2024", "TOTAL", "UN", "AB", "Feijão"]
        assert filter_relevant(names) == ["Arroz", "Feijão"]

    @pytest.mark.parametrize("name", [
        "150.00", "150,00", "42", "12/05/2024", "1/5", "01/12/24",
        "TOTAL", "Subtotal", "R$ 10", "quantidade", "NF-e 123",
        "cnpj", "UN", "1 kg", "350 ml", "Pão 500 g", "x", "ab",
    ])
    def test_irrelevant_names(self, name):
        assert not is_relevant(name), f"'{name}' should be filtered out"

    @pytest.mark.parametrize("name", [
        "Arroz", "Café Melitta Tradicional", "Açúcar", "Leite integral", "Biscoito maria",
    ])
    def test_relevant_names(self, name):
        assert is_relevant(name), f"'{name}' should be kept"

    def test_near_duplicates_collapse(self):
        """Names equal up to case and accents keep the first one."""
        names = ["Café", "cafe", "CAFÉ", "Arroz"]
        assert filter_relevant(names) == ["Café", "Arroz"]

    def test_order_preserved(self):
        names = ["Leite integral", "Arroz", "Feijão"]
        assert filter_relevant(names) == names
