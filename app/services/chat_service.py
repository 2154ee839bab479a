"""
CHAT SERVICE MODULE
===================

Decides which provider answers a chat message and what to say when none can.

FLOW (handle):
  1. Validate the request body. A missing or non-string message raises
     ClientInputError; this is the only error that reaches the API layer.
  2. No provider has a usable API key -> random offline response (source "offline").
  3. Try each configured provider in order (OpenRouter, then OpenAI), one at a time:
       - non-empty text            -> return it (source = provider name)
       - empty / missing content   -> try the next provider
       - failure (after retries)   -> try the next provider
  4. Nobody answered -> classify the last failure and return a canned response.

CLASSIFICATION (first match wins):
  429 or "insufficient_quota"                          -> rate_limited  (offline pool)
  401 or "invalid_api_key" / "account_deactivated"     -> api_key_issue (fixed message)
  timeout                                              -> timeout       (offline pool)
  anything else                                        -> fallback      (fallback pool)

Configuration is passed in once at construction; nothing here reads the
environment or holds per-request state, so one instance serves every request.
"""

import asyncio
import logging
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

import httpx
from pydantic import ValidationError

from app.errors import ClientInputError
from app.models import (
    ChatRequest,
    ChatResult,
    EmptyContent,
    FatalFailure,
    ProviderConfig,
    RetryableFailure,
    Success,
)
from app.services.context import build_context_messages
from app.services.provider_client import call_provider
from app.services.responses import (
    API_KEY_ISSUE_RESPONSE,
    FALLBACK_RESPONSES,
    OFFLINE_RESPONSES,
    Picker,
    pick_random,
)
from app.utils.retry import Sleep
from app.utils.time_info import get_timestamp


logger = logging.getLogger("MindBuddy")

MESSAGE_REQUIRED_ERROR = "Message is required and must be a string"
HISTORY_INVALID_ERROR = "chatHistory must be a list of {role, content} messages"

# Keys this short are treated as unconfigured by the status endpoint.
MIN_REPORTED_KEY_LENGTH = 20

Failure = Union[RetryableFailure, FatalFailure]


# ==============================================================================
# KEY CHECKS
# ==============================================================================

def has_usable_key(config: ProviderConfig) -> bool:
    """True if the key is set and is not the .env.example placeholder."""
    key = config.api_key
    return bool(key) and key != config.placeholder


def is_provider_configured(config: ProviderConfig) -> bool:
    """Stricter check used by GET /api/status: usable key longer than 20 characters."""
    return has_usable_key(config) and len(config.api_key) > MIN_REPORTED_KEY_LENGTH


# ==============================================================================
# FAILURE CLASSIFICATION
# ==============================================================================

def classify_failure(failure: Optional[Failure], pick: Picker = pick_random) -> Tuple[str, str]:
    """
    Map a provider failure to (source, user-facing response).
    None means every provider answered with empty content.
    """
    if failure is None:
        return "fallback", pick(FALLBACK_RESPONSES)

    message = failure.message or ""
    status = failure.status_code

    if status == 429 or "insufficient_quota" in message:
        return "rate_limited", pick(OFFLINE_RESPONSES)
    if status == 401 or "invalid_api_key" in message or "account_deactivated" in message:
        return "api_key_issue", API_KEY_ISSUE_RESPONSE
    if failure.timed_out:
        return "timeout", pick(OFFLINE_RESPONSES)
    return "fallback", pick(FALLBACK_RESPONSES)


# ==============================================================================
# CHAT SERVICE CLASS
# ==============================================================================

class ChatService:
    """
    Relays one chat message to the configured providers.

    - configs: provider settings in preference order (built once at startup).
    - pick: chooses a canned response from a pool; defaults to random.choice.
    - client: shared httpx.AsyncClient; None opens a short-lived one per call.
    - sleep: backoff wait, replaced in tests.
    """

    def __init__(
        self,
        configs: Sequence[ProviderConfig],
        pick: Picker = pick_random,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Sleep = asyncio.sleep,
        max_attempts: int = 2,
    ):
        self.configs = tuple(configs)
        self.pick = pick
        self.client = client
        self.sleep = sleep
        self.max_attempts = max_attempts

    @property
    def active_configs(self) -> Tuple[ProviderConfig, ...]:
        return tuple(c for c in self.configs if has_usable_key(c))

    def provider_status(self) -> dict:
        """{"<name>_configured": bool} for every known provider, for GET /api/status."""
        return {f"{c.name}_configured": is_provider_configured(c) for c in self.configs}

    @staticmethod
    def parse_request(body: Union[ChatRequest, Mapping[str, Any], None]) -> ChatRequest:
        """Validate a raw JSON body. Raises ClientInputError on any contract violation."""
        if isinstance(body, ChatRequest):
            return body
        if not isinstance(body, Mapping):
            raise ClientInputError(MESSAGE_REQUIRED_ERROR)

        message = body.get("message")
        if not isinstance(message, str) or not message:
            raise ClientInputError(MESSAGE_REQUIRED_ERROR)

        try:
            return ChatRequest.model_validate(body)
        except ValidationError as e:
            raise ClientInputError(HISTORY_INVALID_ERROR) from e

    async def handle(self, body: Union[ChatRequest, Mapping[str, Any], None]) -> ChatResult:
        """Turn one chat request into exactly one ChatResult."""
        request = self.parse_request(body)

        providers = self.active_configs
        if not providers:
            logger.info("No provider API key configured, using offline response")
            return ChatResult(
                response=self.pick(OFFLINE_RESPONSES),
                source="offline",
                timestamp=get_timestamp(),
            )

        messages = build_context_messages(request.chat_history, request.message)
        last_failure: Optional[Failure] = None

        # Strictly sequential: never spend quota on a provider we might abandon.
        for config in providers:
            logger.info("Calling %s (%s)", config.name, config.model)
            outcome = await call_provider(
                config,
                messages,
                client=self.client,
                max_attempts=self.max_attempts,
                sleep=self.sleep,
            )

            if isinstance(outcome, Success):
                return ChatResult(
                    response=outcome.text,
                    source=config.name,
                    timestamp=get_timestamp(),
                )
            if isinstance(outcome, EmptyContent):
                logger.warning("%s returned empty content, trying next provider", config.name)
                continue

            logger.warning(
                "%s failed (status=%s): %s", config.name, outcome.status_code, outcome.message
            )
            last_failure = outcome

        source, response_text = classify_failure(last_failure, self.pick)
        error = last_failure.message if last_failure else "Empty response from all providers"
        status = last_failure.status_code if last_failure else None
        logger.error("All providers failed, answering with %s response: %s", source, error)

        return ChatResult(
            response=response_text,
            source=source,
            error=error,
            status=status,
            timestamp=get_timestamp(),
        )
