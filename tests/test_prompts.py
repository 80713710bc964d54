import json

from catalogue import CatalogueStore
from models import SelectedProduct
from prompts import (
    CATALOGUE_FALLBACK_MESSAGE,
    ROUTINE_TASK_MESSAGE,
    SCOPE_POLICY_MESSAGE,
    PromptBuilder,
    routine_summary,
)


def test_catalogue_message_lists_every_product(catalogue):
    message = PromptBuilder(catalogue).catalogue_message()
    assert message["role"] == "system"
    allowed = json.loads(message["content"].split("The catalogue (JSON): ", 1)[1])
    assert len(allowed) == len(catalogue.load())
    assert allowed[0] == {
        "name": "Gentle Foaming Cleanser",
        "brand": "CeraVe",
        "category": "Cleanser",
        "description": "Removes oil and dirt without stripping.",
    }


def test_catalogue_message_cached_until_reload(catalogue):
    builder = PromptBuilder(catalogue)
    first = builder.catalogue_message()
    assert builder.catalogue_message() is first
    catalogue.reload()
    assert builder.catalogue_message() is not first


def test_catalogue_message_fallback(tmp_path):
    builder = PromptBuilder(CatalogueStore(str(tmp_path / "missing.json")))
    assert builder.catalogue_message()["content"] == CATALOGUE_FALLBACK_MESSAGE


def test_resolve_selected_by_id_then_name_then_snapshot(catalogue):
    builder = PromptBuilder(catalogue)
    selected = [
        SelectedProduct(id="5", name="whatever"),
        SelectedProduct(id="gone", name="daily MOISTURIZER"),
        SelectedProduct(id="ghost", name="Discontinued Toner", category="toner"),
    ]
    resolved = builder.resolve_selected(selected)

    assert resolved[0]["name"] == "Sheer Sunscreen SPF 50"
    assert resolved[0]["image"] == "img/5.jpg"
    assert resolved[1]["id"] == "2"
    assert resolved[2] == {
        "id": "ghost", "name": "Discontinued Toner", "brand": "", "category": "toner", "description": "",
    }


def test_routine_messages_order(catalogue):
    builder = PromptBuilder(catalogue)
    history = [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Hello!"}]
    selected = [SelectedProduct(id="1", name="Gentle Foaming Cleanser", category="Cleanser")]

    messages, summary = builder.build_routine_messages(selected, history)

    assert summary == routine_summary(1) == "Requested routine using 1 selected product(s)."
    assert [m["role"] for m in messages] == ["system", "system", "system", "user", "assistant", "user", "user"]
    assert messages[0] == builder.catalogue_message()
    assert messages[1]["content"] == SCOPE_POLICY_MESSAGE
    assert messages[2]["content"] == ROUTINE_TASK_MESSAGE
    assert messages[5]["content"] == summary
    assert "Selected products (JSON)" in messages[6]["content"]
    assert '"brand": "CeraVe"' in messages[6]["content"]


def test_chat_messages(catalogue):
    builder = PromptBuilder(catalogue)
    messages = builder.build_chat_messages([{"role": "assistant", "content": "Hello!"}], "Any serums?")
    assert [m["role"] for m in messages] == ["system", "system", "assistant", "user"]
    assert messages[-1]["content"] == "Any serums?"
