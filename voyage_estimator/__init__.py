"""
VOYAGE ESTIMATOR PACKAGE
========================

Chat relay that turns a general-purpose completion model into a commercial
voyage cost estimator.

  from voyage_estimator.main import app
  from voyage_estimator.client.controller import ChatController

FILE STRUCTURE:
  voyage_estimator/
    __init__.py   - This file.
    config.py     - Settings from .env and the voyage estimator system prompt.
    main.py       - FastAPI app and HTTP endpoints (/api/chat, /health).
    models.py     - Pydantic models for the wire format and the client conversation.
    services/     - Relay to the completion API and its error types.
    client/       - Conversation store, chat controller, relay HTTP client, terminal chat.
"""

__version__ = "0.1.0"
