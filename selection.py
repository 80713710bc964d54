"""selection.py – the user's working set of selected products.

Every mutation writes the selected id list to the state store; on startup the
stored ids are resolved against the catalogue and ids it no longer contains
are dropped.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from catalogue import CatalogueStore
from errors import CatalogueUnavailable, PersistenceFailure
from models import SelectedProduct
from session_store import BaseStateStore

SELECTED_STORAGE_KEY = "selected_products_v1"

logger = logging.getLogger(__name__)


class SelectionState:
    def __init__(self, store: BaseStateStore):
        self._store = store
        self._selected: Dict[str, SelectedProduct] = {}

    def __contains__(self, product_id: object) -> bool:
        return str(product_id) in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def toggle(self, product_id: str, metadata: Any = None) -> bool:
        """Deselect `product_id` if selected, otherwise select it. Returns the new state."""
        key = str(product_id)
        if key in self._selected:
            del self._selected[key]
            selected = False
        else:
            self._selected[key] = SelectedProduct.from_metadata(key, metadata)
            selected = True
        self.save()
        return selected

    def remove(self, product_id: str) -> bool:
        key = str(product_id)
        if key not in self._selected:
            return False
        del self._selected[key]
        self.save()
        return True

    def clear(self) -> None:
        self._selected.clear()
        self.save()

    def list(self) -> List[SelectedProduct]:
        return list(self._selected.values())

    def ids(self) -> List[str]:
        return list(self._selected.keys())

    def save(self) -> None:
        try:
            self._store.set_item(SELECTED_STORAGE_KEY, json.dumps(self.ids()))
        except PersistenceFailure as e:
            logger.warning("Saving selected products failed: %s", e)

    def load(self, catalogue: CatalogueStore) -> None:
        """Rehydrate from storage, keeping only ids the catalogue still knows."""
        try:
            raw = self._store.get_item(SELECTED_STORAGE_KEY)
            if not raw:
                return
            ids = json.loads(raw)
            if not isinstance(ids, list):
                return
            for stored_id in ids:
                product = catalogue.find(str(stored_id))
                if product is None:
                    logger.debug("Dropping stored selection %s: not in catalogue", stored_id)
                    continue
                self._selected[product.id] = SelectedProduct.from_metadata(product.id, product)
        except (PersistenceFailure, CatalogueUnavailable, ValueError) as e:
            logger.warning("Loading selected products failed: %s", e)
