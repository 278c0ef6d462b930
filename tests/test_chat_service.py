import asyncio
import re

import pytest

from relay_service.app.chat_service import FALLBACK_REPLY, ChatService
from relay_service.app.config import Settings
from relay_service.app.errors import (
    AuthError,
    ConfigurationError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from relay_service.app.session_store import SessionStore
from tests.conftest import FakeCompleter


def _service(replies=None, api_key="test-token"):
    store = SessionStore()
    completer = FakeCompleter(replies)
    service = ChatService(store, completer, Settings(upstream_api_key=api_key))
    return service, store, completer


@pytest.mark.parametrize("conversation_id", [None, "", "abc", "session_1_abcdefghi"])
@pytest.mark.parametrize("message", [None, ""])
def test_empty_message_is_rejected(message, conversation_id):
    service, store, completer = _service()
    with pytest.raises(ValidationError):
        asyncio.run(service.handle_chat(message, conversation_id))
    assert store.size() == 0
    assert completer.calls == []


def test_new_conversation_gets_generated_id():
    service, store, _ = _service(["  Hello there!  "])
    result = asyncio.run(service.handle_chat("hi"))
    assert re.match(r"^session_\d+_[a-z0-9]{9}$", result.conversationId)
    assert result.message == "Hello there!"
    turns = store.get(result.conversationId)
    assert [(t.role, t.content) for t in turns] == [
        ("user", "hi"),
        ("assistant", "Hello there!"),
    ]


def test_follow_up_sends_full_history():
    service, store, completer = _service(["first", "second"])
    first = asyncio.run(service.handle_chat("hi"))
    second = asyncio.run(service.handle_chat("again", first.conversationId))

    assert second.conversationId == first.conversationId
    assert second.message == "second"
    assert len(store.get(first.conversationId)) == 4
    assert completer.calls[1]["messages"] == [
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "first"},
        {"role": "user", "content": "again"},
    ]
    assert completer.calls[1]["api_key"] == "test-token"


def test_unknown_id_is_used_verbatim():
    service, store, _ = _service()
    result = asyncio.run(service.handle_chat("hi", "my-own-id"))
    assert result.conversationId == "my-own-id"
    assert len(store.get("my-own-id")) == 2


def test_history_is_capped_at_twenty_turns():
    replies = [f"reply {i}" for i in range(15)]
    service, store, completer = _service(replies)
    for i in range(15):
        asyncio.run(service.handle_chat(f"msg {i}", "conv"))

    turns = store.get("conv")
    assert len(turns) == 20
    assert turns[0].content == "msg 5"
    assert turns[-1].content == "reply 14"
    # last prompt: 19 retained turns plus the new user turn
    assert len(completer.calls[-1]["messages"]) == 20


@pytest.mark.parametrize("content", [None, "", "   \n"])
def test_missing_content_falls_back(content):
    service, store, _ = _service([content])
    result = asyncio.run(service.handle_chat("hi", "conv"))
    assert result.message == FALLBACK_REPLY
    assert store.get("conv")[-1].content == FALLBACK_REPLY


def test_missing_credential_keeps_user_turn():
    service, store, completer = _service(api_key=None)
    with pytest.raises(ConfigurationError):
        asyncio.run(service.handle_chat("hi", "conv"))
    assert completer.calls == []
    assert [t.role for t in store.get("conv")] == ["user"]


@pytest.mark.parametrize("error", [AuthError(), UpstreamError(details="boom")])
def test_upstream_failure_keeps_user_turn(error):
    service, store, _ = _service([error])
    with pytest.raises(type(error)):
        asyncio.run(service.handle_chat("hi", "conv"))
    assert [t.role for t in store.get("conv")] == ["user"]


def test_clear():
    service, store, _ = _service()
    asyncio.run(service.handle_chat("hi", "conv"))
    service.clear("conv")
    assert store.get("conv") == []
    with pytest.raises(NotFoundError):
        service.clear("conv")
