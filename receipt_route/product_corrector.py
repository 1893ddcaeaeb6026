"""
Product Name Corrector - dictionary correction and relevance filtering for receipt OCR.

PRINCIPLE: Receipts are printed in upper case without accents. Only words we
KNOW are mangled get a canonical spelling; everything else is simply lower-cased.

Key Design Decisions:
1. CLOSED DICTIONARY: PRODUCT_CORRECTIONS is a fixed table, no fuzzy matching
2. ACCENT-BLIND LOOKUP: "CAFE" and "CAFÉ" hit the same entry, so correcting twice is a no-op
3. PHRASES FIRST: Multi-word entries ("BOM JESU") are matched before single words
4. COMPARISON KEY: normalize_text() is for matching/dedup only, never for display
"""

import re
import unicodedata
from typing import Dict, Iterable, List, Tuple

# =============================================================================
# PRODUCT CORRECTIONS (OCR receipt spelling -> canonical display name)
# =============================================================================

PRODUCT_CORRECTIONS: Dict[str, str] = {
    # Coffee & breakfast
    "CAFE": "Café",
    "MELTITA": "Melitta",
    "TRADICION": "Tradicional",
    "FILTRO": "Filtro",
    "PAPEL": "Papel",
    "BOM JESU": "Bom Jesus",
    "ACUCAR": "Açúcar",
    "LEITE": "Leite",

    # Bakery & pantry
    "FARINHA": "Farinha",
    "PAO": "Pão",
    "BISCOITO": "Biscoito",
    "MACARRAO": "Macarrão",
    "FEIJAO": "Feijão",
    "ARROZ": "Arroz",
    "OLEO": "Óleo",
    "MANTEIGA": "Manteiga",
    "SABAO": "Sabão",
    "LIMAO": "Limão",
}

# =============================================================================
# RECEIPT BOILERPLATE (never a product)
# =============================================================================

# Matched as substrings of the comparison key
BOILERPLATE_TERMS: Tuple[str, ...] = (
    "total", "subtotal", "r$", "rs", "reais", "centavos",
    "quantidade", "qtd", "valor", "preco", "data",
    "hora", "nf", "nota", "fiscal", "cnpj", "cpf", "estabelecimento",
    "loja", "mercado", "supermercado", "caixa", "item", "cod", "codigo",
    "descricao", "un", "unid", "unidade", "kg", "mg", "ml",
)

# Single-letter units, matched only as whole words
BOILERPLATE_UNIT_WORDS = frozenset({"g", "l"})

NUMERIC_PATTERN = re.compile(r"^\d+([,.]\d+)?$", re.ASCII)
DATE_PATTERN = re.compile(r"^\d{1,2}/\d{1,2}(/\d{2,4})?$", re.ASCII)
COMBINING_MARKS = re.compile("[\u0300-\u036f]")

MIN_NAME_LENGTH = 3


# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def normalize_text(text: str) -> str:
    """
    Case and diacritic-insensitive comparison key.

    "Café Melitta " -> "cafe melitta"
    """
    decomposed = unicodedata.normalize("NFD", text.lower())
    return COMBINING_MARKS.sub("", decomposed).strip()


def _lookup_key(word: str) -> str:
    decomposed = unicodedata.normalize("NFD", word.upper())
    return COMBINING_MARKS.sub("", decomposed)


def _build_lookup(corrections: Dict[str, str]) -> Dict[Tuple[str, ...], str]:
    """Index corrections by accent-free word tuples; canonical forms map to themselves."""
    lookup: Dict[Tuple[str, ...], str] = {}
    for raw, canonical in corrections.items():
        canonical_key = tuple(_lookup_key(w) for w in canonical.split(" "))
        lookup.setdefault(canonical_key, canonical)
    for raw, canonical in corrections.items():
        lookup[tuple(_lookup_key(w) for w in raw.split(" "))] = canonical
    return lookup


CORRECTION_LOOKUP = _build_lookup(PRODUCT_CORRECTIONS)
MAX_PHRASE_WORDS = max(len(key) for key in CORRECTION_LOOKUP)


def _stable_upper(word: str) -> str:
    """Upper-case a word until lower-casing and upper-casing it again changes nothing."""
    upper = word.upper()
    while upper.lower().upper() != upper:
        upper = upper.lower().upper()
    return upper


def normalize_product_name(raw_name: str) -> str:
    """
    Correct a candidate name read from a receipt.

    Splits the upper-cased name on single spaces, replaces known words and
    phrases with their canonical spelling and lower-cases the rest.

    "CAFE MELTITA TRADICION 500G" -> "Café Melitta Tradicional 500g"
    """
    # Capital sharp s lower-cases to "ß", which upper-cases to "SS"
    words = [_stable_upper(w) for w in raw_name.split(" ")]
    keys = [_lookup_key(w) for w in words]
    corrected: List[str] = []

    i = 0
    while i < len(words):
        for size in range(min(MAX_PHRASE_WORDS, len(words) - i), 0, -1):
            replacement = CORRECTION_LOOKUP.get(tuple(keys[i:i + size]))
            if replacement is not None:
                corrected.append(replacement)
                i += size
                break
        else:
            corrected.append(words[i].lower())
            i += 1

    return " ".join(corrected)


def is_boilerplate(key: str) -> bool:
    """Check whether a comparison key contains a receipt boilerplate term."""
    if any(term in key for term in BOILERPLATE_TERMS):
        return True
    return any(word in BOILERPLATE_UNIT_WORDS for word in key.split())


def is_relevant(name: str) -> bool:
    """Check if a name can be a product (not boilerplate, number, or date)."""
    key = normalize_text(name)
    if len(key) < MIN_NAME_LENGTH:
        return False
    if NUMERIC_PATTERN.match(key) or DATE_PATTERN.match(key):
        return False
    return not is_boilerplate(key)


def filter_relevant(names: Iterable[str]) -> List[str]:
    """
    Drop irrelevant names and collapse near-duplicates.

    Two names are duplicates when their comparison keys are equal; the first
    one seen wins. Input order is preserved.
    """
    seen = set()
    result = []
    for name in names:
        if not is_relevant(name):
            continue
        key = normalize_text(name)
        if key in seen:
            continue
        seen.add(key)
        result.append(name)
    return result
