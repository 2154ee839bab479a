"""
CANNED RESPONSES
================

Friendly sentences returned when no provider reply is available.

  OFFLINE_RESPONSES  - no provider configured, rate limited, or timed out.
  FALLBACK_RESPONSES - any other provider error.
  API_KEY_ISSUE_RESPONSE - fixed text when a provider rejects our key.

pick_random() is the default picker; ChatService accepts any pick(pool) -> str
so tests can pass a deterministic one.
"""

import random
from typing import Callable, Sequence


OFFLINE_RESPONSES = (
    "Hey! I'm having some connection issues right now, but I'm still here to chat!",
    "Network's acting up, but don't worry - I'm listening!",
    "Having trouble connecting to my brain, but your messages are reaching me!",
    "Tech glitch moment! What else is on your mind?",
    "Connection's a bit wonky, but I'm totally here for you!",
    "My servers are taking a coffee break, but I'm still ready to chat!",
    "Having some internet hiccups, but your thoughts matter to me!",
    "Network's being moody, but I'm not going anywhere!",
    "Tech troubles, but our conversation continues!",
    "Connection issues, but I'm still your MindBuddy!",
)

FALLBACK_RESPONSES = (
    "Oops, having trouble! Try messaging again.",
    "Network acting funny. What else is up?",
    "Not able to reply properly. Slow internet?",
    "Let's chat, don't mind the tech glitch. Your turn!",
    "Servers are a bit busy. Ask me anything!",
    "Having some technical difficulties, but I'm here!",
    "Connection's being stubborn, but I'm listening!",
    "Tech hiccup moment! What's your story?",
    "Network's having a mood, but our chat continues!",
    "Some server drama, but I'm still your buddy!",
)

API_KEY_ISSUE_RESPONSE = "My AI brain is taking a break right now, but I'm still here to chat!"

Picker = Callable[[Sequence[str]], str]


def pick_random(pool: Sequence[str]) -> str:
    """Uniformly random choice from pool."""
    return random.choice(pool)
