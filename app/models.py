"""
DATA MODELS MODULE
==================

This file defines the Pydantic models used for API requests, responses, provider
configuration, and the outcome of a single provider call. FastAPI uses the
request/response models to serialize JSON; the chat service uses the rest.

MODELS:
  ChatMessage       - One message in a conversation (role + content).
  ChatRequest       - Body of POST /api/chat (message + optional chatHistory + userId).
  ChatResult        - Body returned by POST /api/chat (response text + source tag).
  ProviderConfig    - One LLM provider (key, endpoint, model, extra headers). Built once at startup.
  ProviderOutcome   - Success | EmptyContent | RetryableFailure | FatalFailure for one provider call.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from typing import Any, Dict, List, Literal, Optional, Union

# ==============================================================================
# MESSAGE AND REQUEST/RESPONSE MODELS
# ==============================================================================

Role = Literal["system", "user", "assistant"]

Source = Literal[
    "openrouter",
    "openai",
    "offline",
    "fallback",
    "api_key_issue",
    "rate_limited",
    "timeout",
]


class ChatMessage(BaseModel):
    """
    A single message in a conversation. Immutable once built; order in the
    surrounding list defines chronology.
    """
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class ChatRequest(BaseModel):
    """
    Request body for POST /api/chat.

    - message: Required, non-empty string. Anything else is rejected with 400.
    - chatHistory: Optional. Prior messages, oldest first. Only the last few are sent upstream.
    - userId: Optional and opaque; accepted for client compatibility, never used.
    """
    model_config = ConfigDict(populate_by_name=True)

    message: StrictStr = Field(..., min_length=1)
    chat_history: List[ChatMessage] = Field(default_factory=list, alias="chatHistory")
    user_id: Optional[Any] = Field(default=None, alias="userId")

    @field_validator("chat_history", mode="before")
    @classmethod
    def _null_history_is_empty(cls, value):
        # Clients send "chatHistory": null on the first message.
        return [] if value is None else value


class ChatResult(BaseModel):
    """
    Response body for POST /api/chat. Exactly one is produced per request.

    - response: Text shown to the user (provider reply or a canned sentence).
    - source: Which provider answered, or which fallback category applied.
    - error / status: Set only when a provider failure was absorbed.
    """
    response: str
    source: Source
    error: Optional[str] = None
    status: Optional[int] = None
    timestamp: str


# ==============================================================================
# PROVIDER MODELS
# ==============================================================================

class ProviderConfig(BaseModel):
    """Settings for one upstream LLM provider. Read-only after startup."""
    model_config = ConfigDict(frozen=True)

    name: Literal["openrouter", "openai"]
    api_key: str = ""
    endpoint: str
    model: str
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    timeout_ms: int = 10_000
    placeholder: str = ""


class Success(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    text: str


class EmptyContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["empty"] = "empty"


class RetryableFailure(BaseModel):
    """Rate limit, 5xx, timeout or network error. Retries were already spent."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["retryable"] = "retryable"
    status_code: Optional[int] = None
    message: str
    timed_out: bool = False


class FatalFailure(BaseModel):
    """Any other non-2xx answer (bad key, bad request). Never retried."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["fatal"] = "fatal"
    status_code: Optional[int] = None
    message: str
    timed_out: bool = False


ProviderOutcome = Union[Success, EmptyContent, RetryableFailure, FatalFailure]
