"""
MINDBUDDY SMOKE TEST SCRIPT
===========================

PURPOSE:
Command-line check of a running MindBuddy backend: hits /health, /api/status
and /api/chat once, then drops into an interactive chat loop.

USAGE:
    python test.py                          # local server on port 3000
    python test.py https://your-app.onrender.com

    Make sure the server is running first: python run.py

COMMANDS (in the chat loop):
    /history - Show the history this client is sending
    /clear   - Forget the history (the server never stores it)
    /quit or /exit - Exit

The server is stateless: this client keeps chatHistory itself and sends it
with every message, exactly like the mobile app does.
"""

import json
import sys

import requests


# -----------------------------------------------------------------------------
# CONFIGURATION
# -----------------------------------------------------------------------------
BASE_URL = sys.argv[1].rstrip("/") if len(sys.argv) > 1 else "http://localhost:3000"
# Client-side conversation, oldest first. The server only uses the last 10.
CHAT_HISTORY = []


# -----------------------------------------------------------------------------
# API CALLS
# -----------------------------------------------------------------------------

def check_endpoint(label, method, path, body=None):
    """Call one endpoint and pretty-print the JSON it returns."""
    print(f"\n{label}...")
    try:
        response = requests.request(method, f"{BASE_URL}{path}", json=body, timeout=30)
    except requests.exceptions.ConnectionError:
        print("❌ Cannot connect to backend. Start it with: python run.py")
        return False
    except requests.exceptions.RequestException as e:
        print(f"❌ Request failed: {e}")
        return False

    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(f"❌ Non-JSON response: {response.status_code} {response.text[:200]}")
        return False
    return response.ok


def send_message(message):
    """
    Send a message plus the current history to /api/chat.

    Returns:
        (reply text, source tag), or an error line and None if the request failed.
    """
    try:
        response = requests.post(
            f"{BASE_URL}/api/chat",
            json={"message": message, "chatHistory": CHAT_HISTORY, "userId": "smoke-test"},
            timeout=40,  # server may spend ~12s per provider plus a retry
        )
    except requests.exceptions.ConnectionError:
        return "❌ Cannot connect to backend. Start it with: python run.py", None
    except requests.exceptions.Timeout:
        return "❌ Request timed out.", None

    try:
        data = response.json()
    except ValueError:
        return f"❌ Non-JSON response: {response.text[:200]}", None
    if response.status_code == 200:
        return data.get("response", "No response"), data.get("source")
    return f"❌ {response.status_code}: {data.get('error', response.text)}", None


# -----------------------------------------------------------------------------
# MAIN LOOP
# -----------------------------------------------------------------------------

def main():
    print("🧪 Testing MindBuddy Backend API at " + BASE_URL)
    print("=" * 60)

    if not check_endpoint("1. Health check", "GET", "/health"):
        return
    check_endpoint("2. API status", "GET", "/api/status")
    check_endpoint(
        "3. Chat endpoint",
        "POST",
        "/api/chat",
        {"message": "Hello! This is a test message.", "chatHistory": [], "userId": "test123"},
    )

    print("\n" + "=" * 60)
    print("💬 Interactive chat. Commands: /history  /clear  /quit")
    print("=" * 60)

    while True:
        try:
            user_input = input("\nYou: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue
        if user_input in ["/quit", "/exit"]:
            print("\n👋 Goodbye!")
            break
        if user_input == "/clear":
            CHAT_HISTORY.clear()
            print("🔄 History cleared.")
            continue
        if user_input == "/history":
            for i, msg in enumerate(CHAT_HISTORY, 1):
                print(f"{i}. {msg['role']}: {msg['content']}")
            if not CHAT_HISTORY:
                print("No messages yet")
            continue
        if user_input.startswith("/"):
            print(f"❌ Unknown command: {user_input}")
            continue

        reply, source = send_message(user_input)
        print(f"🤖 MindBuddy [{source or 'error'}]: {reply}")
        if source:
            CHAT_HISTORY.append({"role": "user", "content": user_input})
            CHAT_HISTORY.append({"role": "assistant", "content": reply})


if __name__ == "__main__":
    main()
