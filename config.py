"""
CONFIGURATION MODULE
====================

PURPOSE:
  Central place for all MindBuddy settings: provider API keys, model names,
  server port, rate limits, and the MindBuddy system prompt.

WHAT THIS FILE DOES:
  - Loads environment variables from .env (so API keys stay out of code).
  - Exposes OPENROUTER_* and OPENAI_* settings for the two LLM providers.
  - Builds the ordered provider list once (load_provider_configs) so the chat
    service never reads the environment itself.
  - Defines the history window, rate limit window, and the persona prompt.

USAGE:
  Import what you need: `from config import PORT, load_provider_configs, MINDBUDDY_SYSTEM_PROMPT`
"""

import os
import logging
from dotenv import load_dotenv

from app.models import ProviderConfig


logger = logging.getLogger("MindBuddy")


# -----------------------------------------------------------------------------
# ENVIRONMENT
# -----------------------------------------------------------------------------
# Load environment variables from .env file (if it exists).
load_dotenv()


# ============================================================================
# SERVER
# ============================================================================

PORT = int(os.getenv("PORT", "3000"))

# 100 requests per IP every 15 minutes on /api/ routes.
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"))
RATE_LIMIT_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))

# JSON bodies above this size are rejected with 413.
MAX_BODY_BYTES = 10 * 1024 * 1024


# ============================================================================
# PROVIDER CONFIGURATION
# ============================================================================
# OpenRouter is preferred when both keys are set; OpenAI is the secondary.
# The .env.example ships these placeholder values, which count as "not set".

OPENROUTER_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_PLACEHOLDER_KEY = "your-openrouter-api-key-here"
OPENROUTER_TIMEOUT_MS = 12_000

OPENAI_ENDPOINT = "https://api.openai.com/v1/chat/completions"
OPENAI_PLACEHOLDER_KEY = "your-openai-api-key-here"
OPENAI_TIMEOUT_MS = 10_000


def load_provider_configs() -> list:
    """
    Build the ordered list of provider configs from the environment.

    Both providers are always returned (OpenRouter first) so the status endpoint
    can report on each; the chat service skips any without a usable key.
    """
    openrouter = ProviderConfig(
        name="openrouter",
        api_key=os.getenv("OPENROUTER_API_KEY", "").strip(),
        endpoint=OPENROUTER_ENDPOINT,
        model=os.getenv("OPENROUTER_MODEL", "openai/gpt-4o-mini"),
        extra_headers={
            "HTTP-Referer": os.getenv("OPENROUTER_SITE_URL", "https://mindbuddy.app"),
            "X-Title": os.getenv("OPENROUTER_APP_NAME", "MindBuddy"),
        },
        timeout_ms=OPENROUTER_TIMEOUT_MS,
        placeholder=OPENROUTER_PLACEHOLDER_KEY,
    )
    openai = ProviderConfig(
        name="openai",
        api_key=os.getenv("OPENAI_API_KEY", "").strip(),
        endpoint=OPENAI_ENDPOINT,
        model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        timeout_ms=OPENAI_TIMEOUT_MS,
        placeholder=OPENAI_PLACEHOLDER_KEY,
    )
    return [openrouter, openai]


# ============================================================================
# CONVERSATION CONTEXT
# ============================================================================
# Only the most recent messages from the client-supplied history are sent.

MAX_HISTORY_MESSAGES = 10

# ============================================================================
# MINDBUDDY PERSONALITY CONFIGURATION
# ============================================================================
# Always sent as the first message of every provider request.

MINDBUDDY_SYSTEM_PROMPT = """You are MindBuddy, an English-first AI companion for Indian youth.
Always reply in simple, clear English unless the user types in Hindi, then you can use friendly Hinglish back.
Never use pure Hindi unless the user clearly does.
Keep responses SHORT (2-3 sentences max).
Don't mention anything you CAN'T do (calling, sending files, meeting physically).
If the user seems stressed, give brief, practical advice that Indian young people relate to.
Use Hindi words sparingly for flavor only (yaar, bhai, dost, chill, scene).
Stay casual, friendly, and never preachy or robotic.
Reference past chats naturally when relevant."""
