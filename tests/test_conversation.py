import json

import pytest

from conversation import CHAT_HISTORY_KEY, ConversationState
from models import ChatMessage, MessageRole


def test_append_then_restart(store):
    conversation = ConversationState(store)
    for i in range(3):
        conversation.append(MessageRole.USER, f"question {i}")
    conversation.append("assistant", "answer")

    assert len(conversation.replay()) == 4
    assert len(json.loads(store.get_item(CHAT_HISTORY_KEY))) == 4

    conversation.restart()
    assert conversation.replay() == []
    assert store.get_item(CHAT_HISTORY_KEY) is None


def test_persisted_shape(store):
    conversation = ConversationState(store)
    conversation.append_message(ChatMessage(role=MessageRole.USER, content="Hi"))
    assert json.loads(store.get_item(CHAT_HISTORY_KEY)) == [{"role": "user", "content": "Hi"}]


def test_system_messages_rejected(store):
    conversation = ConversationState(store)
    with pytest.raises(ValueError):
        conversation.append(MessageRole.SYSTEM, "policy")
    assert len(conversation) == 0


def test_replay_returns_copy(store):
    conversation = ConversationState(store)
    conversation.append(MessageRole.USER, "Hi")
    conversation.replay().clear()
    assert len(conversation) == 1


def test_load_skips_malformed_entries(store):
    store.set_item(CHAT_HISTORY_KEY, json.dumps([
        {"role": "user", "content": "Hello"},
        {"role": "system", "content": "leaked policy"},
        {"role": "robot", "content": "?"},
        "junk",
        {"role": "assistant", "content": "Hi there"},
    ]))
    conversation = ConversationState(store)
    conversation.load()
    assert conversation.as_prompt_messages() == [
        {"role": "user", "content": "Hello"},
        {"role": "assistant", "content": "Hi there"},
    ]


def test_load_unreadable_history_is_empty(store):
    store.set_item(CHAT_HISTORY_KEY, "not json")
    conversation = ConversationState(store)
    conversation.load()
    assert conversation.replay() == []
