"""Tests for the conversation store and chat controller."""

import threading

import pytest

from voyage_estimator.client.controller import ChatController, Conversation
from voyage_estimator.client.relay_client import RelayClient, RelayClientError
from voyage_estimator.config import MAX_MESSAGE_LENGTH
from voyage_estimator.models import ChatMessage

from fakes import FakeResponse, FakeSession


class StubRelay:
    """Records each payload and answers with a numbered reply (or raises)."""

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def send(self, messages):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return ChatMessage(role="assistant", content=f"reply {len(self.calls)}")


def test_submit_appends_user_then_assistant() -> None:
    relay = StubRelay()
    controller = ChatController(relay)

    reply = controller.submit("  50,000 MT wheat Houston to Alexandria  ")

    assert [(m.role, m.content) for m in controller.messages] == [
        ("user", "50,000 MT wheat Houston to Alexandria"),
        ("assistant", "reply 1"),
    ]
    assert reply is controller.messages[-1]
    assert controller.error is None
    assert not controller.is_loading


@pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
def test_blank_input_is_rejected(text) -> None:
    relay = StubRelay()
    controller = ChatController(relay)

    assert controller.submit(text) is None
    assert controller.messages == ()
    assert relay.calls == []


def test_payload_is_full_history_without_system_prompt() -> None:
    relay = StubRelay()
    controller = ChatController(relay)

    controller.submit("first")
    controller.submit("second")

    assert relay.calls[1] == [
        ChatMessage(role="user", content="first"),
        ChatMessage(role="assistant", content="reply 1"),
        ChatMessage(role="user", content="second"),
    ]
    assert all(m.role != "system" for m in controller.messages)


def test_failure_records_error_and_keeps_user_message() -> None:
    controller = ChatController(StubRelay(error=RelayClientError("Rate limit exceeded.")))

    assert controller.submit("Hello") is None

    assert controller.error == "Rate limit exceeded."
    assert [(m.role, m.content) for m in controller.messages] == [("user", "Hello")]
    assert not controller.is_loading


def test_next_submission_clears_previous_error() -> None:
    relay = StubRelay(error=RelayClientError("Internal server error"))
    controller = ChatController(relay)
    controller.submit("first")

    relay.error = None
    controller.submit("again")

    assert controller.error is None
    assert [m.role for m in controller.messages] == ["user", "user", "assistant"]


def test_submission_while_in_flight_is_rejected() -> None:
    started = threading.Event()
    release = threading.Event()

    class SlowRelay(StubRelay):
        def send(self, messages):
            started.set()
            release.wait(timeout=5)
            return super().send(messages)

    relay = SlowRelay()
    controller = ChatController(relay)
    worker = threading.Thread(target=controller.submit, args=("first",))
    worker.start()
    assert started.wait(timeout=5)

    assert controller.is_loading
    assert controller.submit("second") is None
    assert controller.reset() is False

    release.set()
    worker.join(timeout=5)

    assert len(relay.calls) == 1
    assert [m.content for m in controller.messages] == ["first", "reply 1"]


def test_interrupt_releases_slot_and_keeps_message() -> None:
    relay = StubRelay(error=KeyboardInterrupt())
    controller = ChatController(relay)

    with pytest.raises(KeyboardInterrupt):
        controller.submit("Hello")

    assert not controller.is_loading
    assert [m.content for m in controller.messages] == ["Hello"]


def test_round_trip_payload_has_n_plus_one_entries() -> None:
    relay = StubRelay()
    controller = ChatController(relay)
    for text in ["a", "b", "c"]:
        controller.submit(text)
    prior = len(controller.messages)

    controller.submit("d")

    # The relay adds the system prompt, giving prior + 2 upstream.
    assert len(relay.calls[-1]) == prior + 1
    assert [m.content for m in relay.calls[-1]] == ["a", "reply 1", "b", "reply 2", "c", "reply 3", "d"]


def test_reset_starts_fresh_conversation() -> None:
    controller = ChatController(StubRelay())
    controller.submit("Hello")

    assert controller.reset() is True
    assert controller.messages == ()


def test_conversation_messages_are_immutable_snapshot() -> None:
    conversation = Conversation()
    first = conversation.append("user", "Hello")

    snapshot = conversation.messages
    conversation.append("assistant", "Hi")

    assert snapshot == (first,)
    assert len(conversation) == 2
    with pytest.raises(Exception):
        first.content = "changed"


def test_to_payload_strips_id_and_timestamp() -> None:
    conversation = Conversation()
    conversation.append("user", "Hello")

    payload = conversation.to_payload()

    assert payload == [ChatMessage(role="user", content="Hello")]
    assert set(payload[0].model_dump()) == {"role", "content"}


def test_oversized_input_is_rejected_without_storing() -> None:
    relay = StubRelay()
    controller = ChatController(relay)

    assert controller.submit("x" * (MAX_MESSAGE_LENGTH + 1)) is None

    assert "too long" in controller.error
    assert controller.messages == ()
    assert relay.calls == []

    reply = controller.submit("short follow-up")

    assert reply is not None
    assert controller.error is None
    assert relay.calls == [[ChatMessage(role="user", content="short follow-up")]]


def test_oversized_reply_is_recorded_as_error() -> None:
    session = FakeSession(
        FakeResponse(200, {"message": {"role": "assistant", "content": "x" * (MAX_MESSAGE_LENGTH + 1)}})
    )
    controller = ChatController(RelayClient(base_url="http://relay.test", session=session))

    assert controller.submit("hi") is None
    assert controller.error == "The server returned an unexpected response."
    assert [m.role for m in controller.messages] == ["user"]


def test_conversation_refuses_system_messages() -> None:
    conversation = Conversation()

    with pytest.raises(ValueError):
        conversation.append("system", "You are a voyage estimator.")

    assert len(conversation) == 0
