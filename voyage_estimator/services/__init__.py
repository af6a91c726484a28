"""
SERVICES PACKAGE
=================

Business logic lives here. The API layer (voyage_estimator.main) calls these
services; they don't handle HTTP routing, only the completion API call.

MODULES:
    relay_service - System prompt + conversation -> completion API -> assistant message
    errors        - RelayError and one subclass per failure kind
"""
