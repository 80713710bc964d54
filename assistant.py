"""
Product Routine Assistant
Wires the catalogue, selection, conversation, prompt builder and relay
together into the commands a front end invokes.

A routine request persists only a one-line summary of what was asked; the
catalogue records travel in the outgoing request alone. When the relay call
fails the conversation is left exactly as it was before the turn.
"""

import asyncio
import logging
from typing import List, Optional

from catalogue import CatalogueStore
from config import config
from conversation import ConversationState
from errors import CatalogueUnavailable, RelayRequestError
from models import ChatResponse, MessageRole, Product, RoutineResponse, SelectedProduct
from prompts import PromptBuilder
from relay import RelayGateway
from selection import SelectionState
from session_store import BaseStateStore, JsonFileStateStore
from suggestions import suggest_missing_products
from utils import validate_input

logger = logging.getLogger(__name__)


class RoutineAssistant:
    def __init__(
        self,
        catalogue: CatalogueStore,
        selection: SelectionState,
        conversation: ConversationState,
        prompts: PromptBuilder,
        relay: RelayGateway,
        routine_model: str = config.ROUTINE_MODEL,
        chat_model: Optional[str] = config.CHAT_MODEL or None,
    ):
        self.catalogue = catalogue
        self.selection = selection
        self.conversation = conversation
        self.prompts = prompts
        self.relay = relay
        self.routine_model = routine_model
        self.chat_model = chat_model

        self._session_lock = asyncio.Lock()

    async def startup(self) -> List[str]:
        """Load the catalogue and rehydrate persisted state. Returns user-visible notices."""
        notices: List[str] = []
        try:
            await asyncio.to_thread(self.catalogue.load)
        except CatalogueUnavailable as e:
            logger.error("Catalogue unavailable: %s", e)
            notices.append("Could not load products.")
        self.selection.load(self.catalogue)
        self.conversation.load()
        if not self.relay.configured:
            notices.append("Relay not configured: set RELAY_URL to chat or generate routines.")
        return notices

    # ------------------------------------------------------------------
    # catalogue browsing
    # ------------------------------------------------------------------

    def products(self) -> List[Product]:
        try:
            return list(self.catalogue.load())
        except CatalogueUnavailable as e:
            logger.warning("Catalogue unavailable: %s", e)
            return []

    def categories(self) -> List[str]:
        try:
            return self.catalogue.categories()
        except CatalogueUnavailable as e:
            logger.warning("Catalogue unavailable: %s", e)
            return []

    def browse(self, category: str = "", query: str = "") -> List[Product]:
        try:
            return self.catalogue.filter(category, query)
        except CatalogueUnavailable as e:
            logger.warning("Catalogue unavailable: %s", e)
            return []

    def product_details(self, product_id: str) -> Product:
        product = self.catalogue.find(product_id)
        if product is None:
            raise ValueError(f"Unknown product: {product_id}")
        return product

    # ------------------------------------------------------------------
    # selection commands
    # ------------------------------------------------------------------

    def toggle_product(self, product_id: str) -> bool:
        product = self.catalogue.find(product_id)
        if product is None:
            raise ValueError(f"Unknown product: {product_id}")
        return self.selection.toggle(product.id, product)

    def remove_product(self, product_id: str) -> bool:
        return self.selection.remove(product_id)

    def clear_selections(self) -> None:
        self.selection.clear()

    def selected_products(self) -> List[SelectedProduct]:
        return self.selection.list()

    # ------------------------------------------------------------------
    # conversation commands
    # ------------------------------------------------------------------

    def restart_chat(self) -> None:
        self.conversation.restart()

    def transcript(self):
        return self.conversation.replay()

    async def chat(self, text: str) -> ChatResponse:
        ok, cleaned = validate_input(text)
        if not ok:
            raise ValueError(cleaned)
        self.relay.ensure_configured()

        async with self._session_lock:
            messages = self.prompts.build_chat_messages(self.conversation.as_prompt_messages(), cleaned)
            content = await self.relay.complete(messages, model=self.chat_model)
            if not content:
                raise RelayRequestError("No response from the relay.")

            self.conversation.append(MessageRole.USER, cleaned)
            self.conversation.append(MessageRole.ASSISTANT, content)
            return ChatResponse(message=content)

    async def generate_routine(self) -> RoutineResponse:
        selected = self.selection.list()
        if not selected:
            raise ValueError("Please select one or more products first.")
        self.relay.ensure_configured()

        async with self._session_lock:
            messages, summary = self.prompts.build_routine_messages(
                selected, self.conversation.as_prompt_messages()
            )
            content = await self.relay.complete(messages, model=self.routine_model)
            if not content:
                raise RelayRequestError("No response from the relay.")

            self.conversation.append(MessageRole.USER, summary)
            self.conversation.append(MessageRole.ASSISTANT, content)

            suggestions = suggest_missing_products(content, selected, self.products())
            logger.info("Routine generated for %d products, %d suggestions", len(selected), len(suggestions))
            return RoutineResponse(message=content, product_count=len(selected), suggestions=suggestions)


def build_assistant(store: Optional[BaseStateStore] = None) -> RoutineAssistant:
    """Assemble an assistant from `config`."""
    catalogue = CatalogueStore(config.CATALOGUE_PATH)
    state_store = store or JsonFileStateStore(config.STATE_PATH)
    return RoutineAssistant(
        catalogue=catalogue,
        selection=SelectionState(state_store),
        conversation=ConversationState(state_store),
        prompts=PromptBuilder(catalogue),
        relay=RelayGateway(config.RELAY_URL),
    )
