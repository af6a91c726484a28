"""
RELAY CLIENT
============

HTTP client for POST /api/chat. The chat controller calls send() with the
whole conversation (role + content only) and gets back the assistant's
ChatMessage, or a RelayClientError holding a message fit to show the user.
"""

from typing import Iterable, Optional
import logging

import requests
from pydantic import ValidationError

from voyage_estimator.config import VOYAGE_API_URL, VOYAGE_CLIENT_TIMEOUT
from voyage_estimator.models import ChatMessage

logger = logging.getLogger("VoyageEstimator")


class RelayClientError(Exception):
    """A relay round trip failed; str(exc) is the user-facing message."""


class RelayClient:
    """Sends conversations to a running Voyage Estimator server."""

    def __init__(
        self,
        base_url: str = VOYAGE_API_URL,
        timeout: float = VOYAGE_CLIENT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, messages: Iterable[ChatMessage]) -> ChatMessage:
        payload = {"messages": [{"role": m.role, "content": m.content} for m in messages]}
        logger.debug("Sending %s messages to relay", len(payload["messages"]))

        try:
            response = self.session.post(
                f"{self.base_url}/api/chat",
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            raise RelayClientError(
                "Cannot connect to the Voyage Estimator server. Start it with: python run.py"
            ) from e
        except requests.exceptions.Timeout as e:
            raise RelayClientError("Request timed out. Please try again.") from e
        except requests.RequestException as e:
            raise RelayClientError(f"Request failed: {e}") from e

        logger.debug("Relay response status: %s", response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code != 200:
            if isinstance(data, dict) and isinstance(data.get("error"), str):
                raise RelayClientError(data["error"])
            raise RelayClientError(f"HTTP {response.status_code}: {response.reason}")

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            raise RelayClientError("The server returned an unexpected response.")

        try:
            return ChatMessage(role="assistant", content=message["content"])
        except ValidationError as e:
            logger.warning("Relay reply did not validate: %s", e)
            raise RelayClientError("The server returned an unexpected response.") from e

    def close(self) -> None:
        self.session.close()
