"""
CONTEXT BUILDER
===============

Builds the message list sent to a provider:

  1. The MindBuddy system prompt (always first, exactly once).
  2. The last MAX_HISTORY_MESSAGES entries of the client's chatHistory, oldest first.
  3. The new user message.

No I/O and the inputs are never modified.
"""

from typing import List, Sequence

from app.models import ChatMessage
from config import MAX_HISTORY_MESSAGES, MINDBUDDY_SYSTEM_PROMPT


def build_context_messages(
    chat_history: Sequence[ChatMessage],
    user_message: str,
    system_prompt: str = MINDBUDDY_SYSTEM_PROMPT,
    max_history: int = MAX_HISTORY_MESSAGES,
) -> List[ChatMessage]:
    """Return [system prompt] + last max_history history entries + [user message]."""
    messages = [ChatMessage(role="system", content=system_prompt)]

    # Slicing copies; a window of 0 keeps no history (plain [-0:] would keep all).
    recent_history = list(chat_history)[-max_history:] if max_history > 0 else []
    messages.extend(recent_history)

    messages.append(ChatMessage(role="user", content=user_message))
    return messages
