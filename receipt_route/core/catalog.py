"""
Product catalog lookups.

The catalog resolves a product name to the aisle it lives in for a given
store. Lookups are independent, so a batch of names is matched on a thread
pool; the route optimizer re-sorts the result afterwards.
"""

import json
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from ..product_corrector import normalize_text
from .utils import CatalogError, DEFAULT_MATCH_WORKERS, Product

logger = logging.getLogger(__name__)


class ProductCatalog(ABC):
    """Interface for catalog backends."""

    @abstractmethod
    def lookup(self, store: str, normalized_name: str) -> Optional[Product]:
        """Return the first product of `store` whose name contains `normalized_name`."""


class InMemoryCatalog(ProductCatalog):
    """Catalog held in memory, matched by accent and case-insensitive substring."""

    def __init__(self, products: Iterable[Product]):
        # Aisle order decides which product wins when several match
        self.products = sorted(products, key=lambda p: (p.aisle or 0))
        self._keys = [normalize_text(p.name) for p in self.products]

    def __len__(self) -> int:
        return len(self.products)

    @property
    def stores(self) -> List[str]:
        return sorted({p.store for p in self.products})

    def lookup(self, store: str, normalized_name: str) -> Optional[Product]:
        needle = normalize_text(normalized_name)
        if not needle:
            return None
        for product, key in zip(self.products, self._keys):
            if product.store == store and needle in key:
                return product
        return None

    @classmethod
    def from_json(cls, path: str) -> "InMemoryCatalog":
        """
        Load a catalog from a JSON list of {"name", "aisle", "store"} objects.

        Raises:
            CatalogError: if the file is missing, not JSON, or has bad entries
        """
        json_path = Path(path)
        try:
            with open(json_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Could not read catalog {json_path}: {e}") from e

        if not isinstance(data, list):
            raise CatalogError(f"Catalog {json_path} must be a JSON list")

        products = []
        for index, entry in enumerate(data):
            try:
                products.append(Product(
                    name=str(entry["name"]),
                    aisle=int(entry["aisle"]),
                    store=str(entry.get("store", "")),
                    product_id=entry.get("product_id"),
                ))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise CatalogError(f"Bad catalog entry #{index} in {json_path}: {entry!r}") from e

        logger.info("[Catalog] Loaded %d products from %s", len(products), json_path)
        return cls(products)


def _safe_lookup(catalog: ProductCatalog, store: str, key: str) -> Optional[Product]:
    try:
        return catalog.lookup(store, key)
    except Exception as e:
        logger.warning("[Catalog] Lookup for '%s' failed: %s", key, e)
        return None


def match_candidates(
    catalog: ProductCatalog,
    store: str,
    names: List[str],
    max_workers: int = DEFAULT_MATCH_WORKERS
) -> Tuple[Dict[str, Product], List[str]]:
    """
    Look up every name in the catalog.

    One lookup is issued per distinct comparison key. A lookup that raises
    counts as no match.

    Returns:
        Tuple of (name -> matched product, unmatched names), both in input order
    """
    keys = list(dict.fromkeys(normalize_text(name) for name in names))
    if not keys:
        return {}, []

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        results = list(executor.map(lambda key: _safe_lookup(catalog, store, key), keys))
    found = dict(zip(keys, results))

    matches: Dict[str, Product] = {}
    unmatched: List[str] = []
    for name in names:
        product = found.get(normalize_text(name))
        if product is not None:
            matches[name] = product
        else:
            unmatched.append(name)

    logger.info("[Catalog] Matched %d of %d names in store '%s'", len(matches), len(names), store)
    return matches, unmatched
