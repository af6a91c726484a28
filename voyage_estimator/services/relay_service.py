"""
RELAY SERVICE MODULE
====================

Forwards a conversation to the OpenAI-compatible completion API and turns the
answer into a single assistant ChatMessage (or a RelayError). Used by
POST /api/chat in main.py.

The service is stateless across calls: it keeps no conversation of its own,
so the caller sends the full history every time. The API key and generation
parameters are passed in once, when the FastAPI lifespan builds the service.

FLOW:
  1. is_configured: refuse to do anything without a real API key.
  2. build_payload(messages): system prompt first, then the caller's history
     verbatim, plus model / max_tokens / temperature.
  3. get_response(messages): one POST to {base_url}/chat/completions, map the
     status code to an error type, extract choices[0].message.
"""

from typing import Any, Dict, List, Optional
import logging

import requests
from pydantic import ValidationError

from voyage_estimator.config import (
    MAX_HISTORY_MESSAGES,
    MAX_OUTPUT_TOKENS,
    OPENAI_BASE_URL,
    OPENAI_MODEL,
    REQUEST_TIMEOUT_SECONDS,
    TEMPERATURE,
    VOYAGE_SYSTEM_PROMPT,
    is_api_key_configured,
)
from voyage_estimator.models import ChatMessage
from voyage_estimator.services.errors import (
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    InternalRelayError,
    NoResponseError,
    RateLimitError,
    RelayError,
    UpstreamError,
)

logger = logging.getLogger("VoyageEstimator")

# Upstream status codes with a fixed user-facing error.
STATUS_ERRORS = {
    401: AuthenticationError,
    429: RateLimitError,
    400: BadRequestError,
}


# ==============================================================================
# RELAY SERVICE CLASS
# ==============================================================================

class RelayService:
    """
    Sends system prompt + conversation to the completion API and returns the
    first choice's message. No retries: a failed call fails that request only.
    """

    def __init__(
        self,
        api_key: str,
        model: str = OPENAI_MODEL,
        base_url: str = OPENAI_BASE_URL,
        max_tokens: int = MAX_OUTPUT_TOKENS,
        temperature: float = TEMPERATURE,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_history_messages: int = MAX_HISTORY_MESSAGES,
        system_prompt: str = VOYAGE_SYSTEM_PROMPT,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = (api_key or "").strip()
        self.model = model
        self.endpoint = f"{base_url.rstrip('/')}/chat/completions"
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.max_history_messages = max_history_messages
        self.system_prompt = system_prompt
        # One pooled session for the life of the server; closed in close().
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return is_api_key_configured(self.api_key)

    def build_payload(self, messages: List[ChatMessage]) -> Dict[str, Any]:
        """Outbound request body: system prompt first, then history in order."""
        history = list(messages)
        if self.max_history_messages > 0 and len(history) > self.max_history_messages:
            dropped = len(history) - self.max_history_messages
            history = history[-self.max_history_messages:]
            logger.info("History capped: dropped %s oldest messages", dropped)

        return {
            "model": self.model,
            "messages": [{"role": "system", "content": self.system_prompt}]
            + [{"role": msg.role, "content": msg.content} for msg in history],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def get_response(self, messages: List[ChatMessage]) -> ChatMessage:
        """
        Relay the conversation and return the assistant's reply.

        Raises:
            ConfigurationError: API key missing or placeholder (no network I/O).
            AuthenticationError / RateLimitError / BadRequestError: upstream 401 / 429 / 400.
            UpstreamError: any other upstream failure status.
            NoResponseError: success body without choices[0].message.
            InternalRelayError: network failure, timeout, or non-JSON body.
        """
        if not self.is_configured:
            logger.error("OpenAI API key not configured")
            raise ConfigurationError()

        payload = self.build_payload(messages)
        logger.info(
            "Relaying %s messages to %s (model=%s)",
            len(payload["messages"]),
            self.endpoint,
            self.model,
        )

        try:
            response = self.session.post(
                self.endpoint,
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            logger.error("Completion API timed out after %.1fs: %s", self.timeout, e)
            raise InternalRelayError() from e
        except requests.RequestException as e:
            logger.error("Completion API request failed: %s", e, exc_info=True)
            raise InternalRelayError() from e

        if not response.ok:
            raise self._error_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Completion API returned a non-JSON body: %s", e)
            raise InternalRelayError() from e

        return self._extract_message(data)

    def close(self) -> None:
        """Close the pooled HTTP session (called on server shutdown)."""
        self.session.close()

    # --------------------------------------------------------------------------
    # HELPERS
    # --------------------------------------------------------------------------

    @staticmethod
    def _error_for_status(response: requests.Response) -> RelayError:
        """Map a failed upstream response to the error the caller sees."""
        try:
            error_data = response.json()
        except ValueError:
            error_data = {}

        logger.warning(
            "OpenAI API error: status=%s reason=%s error=%s",
            response.status_code,
            response.reason,
            error_data,
        )

        error_cls = STATUS_ERRORS.get(response.status_code)
        if error_cls is not None:
            return error_cls()

        detail = None
        if isinstance(error_data, dict) and isinstance(error_data.get("error"), dict):
            detail = error_data["error"].get("message")
        if detail:
            return UpstreamError.with_detail(detail)
        return UpstreamError()

    @staticmethod
    def _extract_message(data: Any) -> ChatMessage:
        """Pull choices[0].message out of a completion body, or raise NoResponseError."""
        choices = data.get("choices") if isinstance(data, dict) else None
        message = None
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")

        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            logger.warning("Completion response had no message in its first choice")
            raise NoResponseError()

        try:
            return ChatMessage(
                role=message.get("role") or "assistant",
                content=message["content"],
            )
        except ValidationError as e:
            logger.error("Completion message did not validate: %s", e)
            raise InternalRelayError() from e
