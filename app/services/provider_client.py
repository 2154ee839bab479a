"""
PROVIDER CLIENT MODULE
======================

Calls one OpenAI-compatible chat completions endpoint (OpenRouter or OpenAI)
and turns whatever happens into a ProviderOutcome. Never raises for provider
problems; the chat service decides what to do with each outcome.

REQUEST:
  POST <endpoint>
  Authorization: Bearer <api key>  (+ HTTP-Referer / X-Title for OpenRouter)
  {model, messages, max_tokens: 150, temperature: 0.7,
   presence_penalty: 0.5, frequency_penalty: 0.5}

RESPONSE:
  Text is read from choices[0].message.content.
"""

import asyncio
import logging
from typing import Optional, Sequence

import httpx

from app.errors import EmptyContentFailure, TransportFailure
from app.models import (
    ChatMessage,
    EmptyContent,
    FatalFailure,
    ProviderConfig,
    ProviderOutcome,
    RetryableFailure,
    Success,
)
from app.utils.retry import Sleep, is_retryable_status, post_with_retry


logger = logging.getLogger("MindBuddy")

# Generation settings shared by both providers.
MAX_TOKENS = 150
TEMPERATURE = 0.7
PRESENCE_PENALTY = 0.5
FREQUENCY_PENALTY = 0.5


def build_payload(config: ProviderConfig, messages: Sequence[ChatMessage]) -> dict:
    return {
        "model": config.model,
        "messages": [{"role": m.role, "content": m.content} for m in messages],
        "max_tokens": MAX_TOKENS,
        "temperature": TEMPERATURE,
        "presence_penalty": PRESENCE_PENALTY,
        "frequency_penalty": FREQUENCY_PENALTY,
    }


def build_headers(config: ProviderConfig) -> dict:
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config.api_key}",
    }
    headers.update(config.extra_headers)
    return headers


def extract_text(config: ProviderConfig, data) -> str:
    """
    Return the stripped reply text from a chat completions body.
    Raises EmptyContentFailure if there is no usable string.
    """
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise EmptyContentFailure(config.name)
    if not isinstance(content, str) or not content.strip():
        raise EmptyContentFailure(config.name)
    return content.strip()


async def call_provider(
    config: ProviderConfig,
    messages: Sequence[ChatMessage],
    client: Optional[httpx.AsyncClient] = None,
    max_attempts: int = 2,
    sleep: Sleep = asyncio.sleep,
) -> ProviderOutcome:
    """Send messages to one provider and classify the result."""
    try:
        response = await post_with_retry(
            config.endpoint,
            build_payload(config, messages),
            build_headers(config),
            timeout_ms=config.timeout_ms,
            max_attempts=max_attempts,
            client=client,
            sleep=sleep,
        )
    except TransportFailure as e:
        retryable = e.timed_out or e.status_code is None or is_retryable_status(e.status_code)
        failure_type = RetryableFailure if retryable else FatalFailure
        return failure_type(status_code=e.status_code, message=e.message, timed_out=e.timed_out)

    try:
        return Success(text=extract_text(config, response.json()))
    except ValueError:
        # Body was not JSON at all.
        logger.warning("%s returned a non-JSON body", config.name)
        return EmptyContent()
    except EmptyContentFailure as e:
        logger.warning("%s", e.message)
        return EmptyContent()
