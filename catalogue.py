"""catalogue.py – read-only product catalogue with an in-memory cache.

The catalogue document is `{"products": [...]}`, read either from a local
file or from an http(s) URL. The first successful load is memoized; only an
explicit `reload()` fetches again.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import requests

from config import config
from errors import CatalogueUnavailable
from models import Product

logger = logging.getLogger(__name__)


class CatalogueStore:
    """Loads and caches the fixed product list."""

    def __init__(self, source: Optional[str] = None, timeout: float = config.CATALOGUE_TIMEOUT_S):
        self.source = source or config.CATALOGUE_PATH
        self.timeout = timeout
        self.generation = 0
        self._products: Optional[Tuple[Product, ...]] = None

    @property
    def loaded(self) -> bool:
        return self._products is not None

    def load(self) -> Tuple[Product, ...]:
        if self._products is not None:
            return self._products

        data = self._fetch()
        self._products = self._parse(data)
        self.generation += 1
        logger.info("Loaded %d products from %s", len(self._products), self.source)
        return self._products

    def reload(self) -> Tuple[Product, ...]:
        self._products = None
        return self.load()

    # ------------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------------

    def find(self, product_id: str) -> Optional[Product]:
        """Match by id first, then by sku."""
        key = str(product_id)
        for product in self.load():
            if product.id == key or (product.sku is not None and product.sku == key):
                return product
        return None

    def find_by_name(self, name: str) -> Optional[Product]:
        wanted = (name or "").lower()
        for product in self.load():
            if product.name.lower() == wanted:
                return product
        return None

    def categories(self) -> List[str]:
        found = {p.category.strip() for p in self.load() if p.category.strip()}
        return sorted(found, key=lambda c: (c.casefold(), c))

    def filter(self, category: str = "", query: str = "") -> List[Product]:
        """Category dropdown + search box semantics of the product grid."""
        selected_category = (category or "").strip().lower()
        needle = (query or "").strip().lower()
        if not selected_category and not needle:
            return []

        results = list(self.load())
        if selected_category:
            results = [p for p in results if p.category.strip().lower() == selected_category]
        if needle:
            results = [
                p for p in results
                if needle in p.name.lower() or needle in p.brand.lower() or needle in p.description.lower()
            ]
        return results

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _fetch(self) -> Any:
        if self.source.startswith(("http://", "https://")):
            try:
                resp = requests.get(self.source, timeout=self.timeout)
                resp.raise_for_status()
                return resp.json()
            except requests.RequestException as e:
                raise CatalogueUnavailable(f"Could not fetch catalogue from {self.source}: {e}") from e
            except ValueError as e:
                raise CatalogueUnavailable(f"Invalid JSON in catalogue {self.source}: {e}") from e

        path = Path(self.source)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise CatalogueUnavailable(f"Catalogue not found: {path}") from e
        except OSError as e:
            raise CatalogueUnavailable(f"Could not read catalogue {path}: {e}") from e
        except ValueError as e:
            raise CatalogueUnavailable(f"Invalid JSON in catalogue {path}: {e}") from e

    def _parse(self, data: Any) -> Tuple[Product, ...]:
        if not isinstance(data, dict) or not isinstance(data.get("products"), list):
            raise CatalogueUnavailable(f"Catalogue {self.source} has no 'products' list")

        products: List[Product] = []
        for index, raw in enumerate(data["products"]):
            if not isinstance(raw, dict):
                logger.warning("Skipping catalogue entry %d: not an object", index)
                continue
            products.append(Product.from_raw(raw, index))
        return tuple(products)


def product_summaries(products: Tuple[Product, ...]) -> List[Dict[str, str]]:
    """Compact allowlist entries used in the catalogue prompt."""
    return [
        {"name": p.name, "brand": p.brand, "category": p.category, "description": p.description}
        for p in products
    ]
