"""Tests for the mode registry."""

from src.modes import create_registry
from src.modes.base import DEFAULT_MODE, ModeRegistry
from src.modes.chat.handler import ChatMode
from src.modes.classify.handler import ClassifyMode


def test_registry_has_all_modes():
    registry = create_registry()
    names = {m.name for m in registry.all_modes()}
    assert names == {"chat", "classify", "plan", "council"}


def test_known_types_resolve():
    registry = create_registry()
    for request_type in ("classify", "plan", "council", "chat"):
        assert registry.get(request_type).name == request_type


def test_missing_type_defaults_to_chat():
    registry = create_registry()
    assert registry.get(None).name == DEFAULT_MODE
    assert registry.get("").name == DEFAULT_MODE


def test_unknown_type_defaults_to_chat():
    assert create_registry().get("summarize").name == "chat"


def test_type_match_is_exact():
    assert create_registry().get("Classify").name == "chat"


def test_register_maps_every_type():
    registry = ModeRegistry()
    chat = ChatMode()
    classify = ClassifyMode()
    registry.register(chat)
    registry.register(classify)
    assert registry.get("classify") is classify
    assert registry.get("whatever") is chat
    assert len(registry.all_modes()) == 2
