"""
CLIENT PACKAGE
==============

Everything that runs on the chat side of POST /api/chat:

  relay_client - RelayClient: one HTTP round trip to the server.
  controller   - Conversation and ChatController: message list and the single in-flight guard.
  cli          - Terminal chat loop (voyage-estimator-chat).
"""
