"""conversation.py – ordered, persisted log of user/assistant turns.

Append-only; `restart()` is the only way to erase it. The log holds what the
user should see in the transcript, never the structured payloads sent to the
relay.
"""
from __future__ import annotations

import json
import logging
from typing import Dict, List, Union

from pydantic import ValidationError

from errors import PersistenceFailure
from models import ChatMessage, MessageRole
from session_store import BaseStateStore

CHAT_HISTORY_KEY = "chat_history_v1"

logger = logging.getLogger(__name__)


class ConversationState:
    def __init__(self, store: BaseStateStore):
        self._store = store
        self._messages: List[ChatMessage] = []

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, role: Union[MessageRole, str], content: str) -> ChatMessage:
        return self.append_message(ChatMessage(role=MessageRole(role), content=content))

    def append_message(self, message: ChatMessage) -> ChatMessage:
        if message.role == MessageRole.SYSTEM:
            raise ValueError("System messages are not part of the conversation log")
        self._messages.append(message)
        self.save()
        return message

    def restart(self) -> None:
        self._messages = []
        try:
            self._store.remove_item(CHAT_HISTORY_KEY)
        except PersistenceFailure as e:
            logger.warning("Removing chat history failed: %s", e)

    def replay(self) -> List[ChatMessage]:
        return list(self._messages)

    def as_prompt_messages(self) -> List[Dict[str, str]]:
        return [msg.to_prompt() for msg in self._messages]

    def save(self) -> None:
        payload = [msg.model_dump(mode="json") for msg in self._messages]
        try:
            self._store.set_item(CHAT_HISTORY_KEY, json.dumps(payload, ensure_ascii=False))
        except PersistenceFailure as e:
            logger.warning("Saving chat history failed: %s", e)

    def load(self) -> None:
        try:
            raw = self._store.get_item(CHAT_HISTORY_KEY)
            entries = json.loads(raw) if raw else []
        except (PersistenceFailure, ValueError) as e:
            logger.warning("Loading chat history failed: %s", e)
            return
        if not isinstance(entries, list):
            logger.warning("Ignoring chat history: not a list")
            return

        messages: List[ChatMessage] = []
        for entry in entries:
            try:
                message = ChatMessage.model_validate(entry)
            except ValidationError:
                logger.debug("Skipping malformed chat history entry: %r", entry)
                continue
            if message.role != MessageRole.SYSTEM:
                messages.append(message)
        self._messages = messages
