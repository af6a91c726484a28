"""
CONVERSATION STORE AND CHAT CONTROLLER
======================================

Conversation holds the messages exchanged in one chat session, oldest first.
ChatController accepts user input, appends it, sends the full history to the
relay and appends the reply. At most one request is outstanding at a time:
a submission made while another is waiting is rejected, not queued.
"""

from typing import Optional, Protocol, Sequence, Tuple
import logging
import threading

from voyage_estimator.client.relay_client import RelayClientError
from voyage_estimator.config import MAX_MESSAGE_LENGTH
from voyage_estimator.models import ChatMessage, ClientRole, ConversationMessage

logger = logging.getLogger("VoyageEstimator")


class RelayTransport(Protocol):
    """Anything that can relay a conversation and return the assistant's reply."""

    def send(self, messages: Sequence[ChatMessage]) -> ChatMessage:
        ...


class Conversation:
    """Append-only list of messages for one session. Never holds the system prompt."""

    def __init__(self):
        self._messages = []

    def append(self, role: ClientRole, content: str) -> ConversationMessage:
        message = ConversationMessage(role=role, content=content)
        self._messages.append(message)
        return message

    @property
    def messages(self) -> Tuple[ConversationMessage, ...]:
        return tuple(self._messages)

    def to_payload(self):
        """Messages as sent to the relay: role and content only."""
        return [m.to_wire() for m in self._messages]

    def __len__(self):
        return len(self._messages)


class ChatController:
    """
    Drives one chat session against a relay transport.

    submit() is a single blocking round trip. If the wait is interrupted
    (e.g. Ctrl+C in the terminal client), the interrupt propagates, the
    request slot is released, and the user's message stays in the list.
    """

    def __init__(self, relay: RelayTransport):
        self.relay = relay
        self.conversation = Conversation()
        self.error: Optional[str] = None
        # Single-slot request token: held for the duration of one relay call.
        self._in_flight = threading.Lock()

    @property
    def is_loading(self) -> bool:
        return self._in_flight.locked()

    @property
    def messages(self) -> Tuple[ConversationMessage, ...]:
        return self.conversation.messages

    def submit(self, text: str) -> Optional[ConversationMessage]:
        """
        Send one user message. Returns the assistant's reply, or None when the
        input was rejected (blank, or a request is already in flight) or the
        relay failed (see self.error).
        """
        content = (text or "").strip()
        if not content:
            return None
        if len(content) > MAX_MESSAGE_LENGTH:
            # Never stored: an oversized message would fail every later payload.
            self.error = f"Message is too long (maximum {MAX_MESSAGE_LENGTH:,} characters)."
            return None
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Submission rejected: a request is already in flight")
            return None

        try:
            self.conversation.append("user", content)
            self.error = None
            try:
                reply = self.relay.send(self.conversation.to_payload())
            except RelayClientError as e:
                logger.warning("Chat error: %s", e)
                self.error = str(e)
                return None
            return self.conversation.append("assistant", reply.content)
        finally:
            self._in_flight.release()

    def reset(self) -> bool:
        """Start a fresh conversation. Refused while a request is in flight."""
        if not self._in_flight.acquire(blocking=False):
            return False
        try:
            self.conversation = Conversation()
            self.error = None
        finally:
            self._in_flight.release()
        return True
