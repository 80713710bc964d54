"""prompts.py – builds the message lists sent to the relay.

Order for a routine request:
    catalogue allowlist, scope policy, routine task, history, product payload

The product payload only ever exists in the outgoing request; the
conversation log gets `routine_summary()` instead.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from catalogue import CatalogueStore, product_summaries
from errors import CatalogueUnavailable
from models import SelectedProduct

logger = logging.getLogger(__name__)

SCOPE_POLICY_MESSAGE = (
    "You are an expert assistant that provides information only about products listed in the site's "
    "product catalogue. If a product is present in the catalogue, provide factual information and include "
    "it when generating routines, whatever its brand. If the user asks about products not in the catalogue, "
    "politely refuse and offer alternatives from the catalogue. Keep answers factual, concise, and do not "
    "invent products outside the provided list."
)

CATALOGUE_INSTRUCTION = (
    "Only use and discuss products from the following catalogue. Do not mention, recommend, compare, or "
    "provide instructions for any product not in this list. If asked about a product outside this list, "
    "politely refuse and offer an alternative from the list. The catalogue (JSON): "
)

CATALOGUE_FALLBACK_MESSAGE = (
    "You may only discuss products listed on this site. If the product is not in the site's catalogue, "
    "refuse and offer alternatives from the catalogue."
)

ROUTINE_TASK_MESSAGE = (
    "You are a helpful beauty assistant. Given a list of selected products (each with id, brand, name, "
    "category, description, image), produce a clear step-by-step routine that uses only the selected "
    "products. For each step include: the product name (from the provided data), when to use it (AM/PM), "
    "the order, short instructions for application, and a one-sentence rationale. If a routine step "
    "requires a product category that is not present in the selected products, indicate that the user has "
    "not selected a product for that step (do not invent products)."
)


def system_message(content: str) -> Dict[str, str]:
    return {"role": "system", "content": content}


def routine_summary(product_count: int) -> str:
    return f"Requested routine using {product_count} selected product(s)."


class PromptBuilder:
    def __init__(self, catalogue: CatalogueStore):
        self.catalogue = catalogue
        self._catalogue_message: Optional[Tuple[int, Dict[str, str]]] = None

    def catalogue_message(self) -> Dict[str, str]:
        """Allowlist message, rebuilt whenever the catalogue has been (re)loaded."""
        try:
            products = self.catalogue.load()
        except CatalogueUnavailable as e:
            logger.warning("Catalogue unavailable, using fallback scope message: %s", e)
            return system_message(CATALOGUE_FALLBACK_MESSAGE)

        generation = self.catalogue.generation
        if self._catalogue_message is None or self._catalogue_message[0] != generation:
            allowed = json.dumps(product_summaries(products), ensure_ascii=False, separators=(",", ":"))
            self._catalogue_message = (generation, system_message(CATALOGUE_INSTRUCTION + allowed))
        return self._catalogue_message[1]

    def resolve_selected(self, selected: Sequence[SelectedProduct]) -> List[Dict[str, Any]]:
        """Full catalogue records for the selection: by id, then by name, else the snapshot."""
        resolved: List[Dict[str, Any]] = []
        for item in selected:
            try:
                product = self.catalogue.find(item.id) or self.catalogue.find_by_name(item.name)
            except CatalogueUnavailable:
                product = None
            resolved.append(product.record() if product is not None else item.model_dump())
        return resolved

    def routine_payload(self, resolved: List[Dict[str, Any]]) -> Dict[str, str]:
        products_json = json.dumps(resolved, indent=2, ensure_ascii=False)
        return {
            "role": "user",
            "content": (
                "Generate a routine using ONLY the selected products below. Use the provided product fields "
                f"when referencing products. Selected products (JSON):\n{products_json}\n"
                "Respond in plain text, do not recommend products not in this list."
            ),
        }

    def build_chat_messages(self, history: List[Dict[str, str]], user_text: str) -> List[Dict[str, str]]:
        return [
            self.catalogue_message(),
            system_message(SCOPE_POLICY_MESSAGE),
            *history,
            {"role": "user", "content": user_text},
        ]

    def build_routine_messages(
        self,
        selected: Sequence[SelectedProduct],
        history: List[Dict[str, str]],
    ) -> Tuple[List[Dict[str, str]], str]:
        """Returns the outgoing messages and the summary line to persist in their place."""
        resolved = self.resolve_selected(selected)
        summary = routine_summary(len(resolved))
        messages = [
            self.catalogue_message(),
            system_message(SCOPE_POLICY_MESSAGE),
            system_message(ROUTINE_TASK_MESSAGE),
            *history,
            {"role": "user", "content": summary},
            self.routine_payload(resolved),
        ]
        return messages, summary
