"""
Shared pytest fixtures and helpers for the MindBuddy relay tests.

Provider HTTP traffic never leaves the process: ScriptedTransport replays
queued responses per host through httpx.MockTransport and records every request.
"""

import json

import httpx
import pytest

from app.models import ProviderConfig


OPENROUTER_HOST = "openrouter.test"
OPENAI_HOST = "openai.test"

# Longer than 20 characters so the status endpoint also reports it as configured.
VALID_KEY = "sk-test-0123456789abcdefghijkl"

# Sentinel queued in a script to make the transport raise a timeout.
TIMEOUT = "timeout"


def make_config(name="openai", api_key=VALID_KEY, **overrides):
    host = OPENROUTER_HOST if name == "openrouter" else OPENAI_HOST
    fields = {
        "name": name,
        "api_key": api_key,
        "endpoint": f"https://{host}/v1/chat/completions",
        "model": "test-model",
        "placeholder": f"your-{name}-api-key-here",
    }
    if name == "openrouter":
        fields["extra_headers"] = {"HTTP-Referer": "https://mindbuddy.test", "X-Title": "MindBuddy"}
    fields.update(overrides)
    return ProviderConfig(**fields)


def completion(text):
    """A minimal chat completions success body."""
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": text}}]})


def error(status, message="upstream error"):
    return httpx.Response(status, json={"error": {"message": message}})


class ScriptedTransport:
    """
    Replays queued responses per host. Each item is an httpx.Response or the
    TIMEOUT sentinel. Running past the end of a script fails the test.
    """

    def __init__(self, scripts=None):
        self.scripts = {host: list(items) for host, items in (scripts or {}).items()}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.scripts.get(request.url.host)
        assert queue, f"unexpected request to {request.url}"
        item = queue.pop(0)
        if item == TIMEOUT:
            raise httpx.ReadTimeout("timed out", request=request)
        return item

    def calls_to(self, host):
        return [r for r in self.requests if r.url.host == host]

    def payloads_to(self, host):
        return [json.loads(r.content) for r in self.calls_to(host)]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


class SleepRecorder:
    """Stands in for asyncio.sleep and keeps the requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def first_item(pool):
    return pool[0]


@pytest.fixture
def sleep():
    return SleepRecorder()
