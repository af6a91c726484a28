"""
VOYAGE ESTIMATOR CHAT - Terminal client
========================================

PURPOSE:
Command-line chat against a running Voyage Estimator server. Describe a
voyage (cargo, ports, freight, commission) and the assistant replies with an
estimate. The conversation lives only in this process; /clear or exiting
discards it.

USAGE:
    voyage-estimator-chat

    Make sure the server is running first: python run.py
    Set VOYAGE_API_URL if the server is not on http://localhost:8000.

COMMANDS:
    /history - View the conversation so far
    /clear - Start a new conversation
    /quit or /exit - Exit
"""

from voyage_estimator.client.controller import ChatController
from voyage_estimator.client.relay_client import RelayClient


# -----------------------------------------------------------------------------
# UI HELPERS
# -----------------------------------------------------------------------------

def print_header():
    print("\n" + "="*60)
    print("Law's AI Voyage Estimator")
    print("Estimate commercial voyages using the latest AI technology")
    print("="*60)
    print("\nCommands:")
    print("  /history - See the conversation")
    print("  /clear - Start a new conversation")
    print("  /quit - Exit")
    print("="*60 + "\n")


def get_user_input():
    """Read one line from the user; None on Ctrl+C / Ctrl+D."""
    try:
        return input("\nYou: ").strip()
    except (KeyboardInterrupt, EOFError):
        return None


def format_history(controller):
    messages = controller.messages
    if not messages:
        return "No messages in this conversation"

    output = f"\nConversation ({len(messages)} messages):\n"
    output += "-" * 60 + "\n"
    for i, msg in enumerate(messages, 1):
        role = "You" if msg.role == "user" else "Estimator"
        output += f"{i}. [{msg.timestamp:%H:%M}] {role}: {msg.content}\n"
    output += "-" * 60 + "\n"
    return output


# -----------------------------------------------------------------------------
# MAIN LOOP
# -----------------------------------------------------------------------------

def main():
    """Chat loop: accept messages until /quit or /exit."""
    print_header()
    print("Start a chat below to estimate a voyage, just describe your voyage!\n")

    relay = RelayClient()
    controller = ChatController(relay)

    try:
        while True:
            user_input = get_user_input()
            if user_input is None or user_input in ["/quit", "/exit"]:
                print("\nGoodbye!")
                break

            if user_input == "/history":
                print(format_history(controller))
                continue

            if user_input == "/clear":
                controller.reset()
                print("\nConversation cleared. Starting fresh!")
                continue

            if user_input.startswith("/"):
                print(f"Unknown command: {user_input}")
                continue

            if not user_input:
                continue

            print("Assistant is typing...", flush=True)
            try:
                reply = controller.submit(user_input)
            except KeyboardInterrupt:
                print("\nRequest cancelled. Your message is kept; send another to continue.")
                continue

            if reply is not None:
                print(f"\nEstimator: {reply.content}")
            elif controller.error:
                print(f"Error: {controller.error}")
    finally:
        relay.close()


if __name__ == "__main__":
    main()
