"""Tests for ChatService: validation, provider order, fallthrough and classification."""

import asyncio

import pytest

from app.errors import ClientInputError
from app.models import FatalFailure, RetryableFailure
from app.services.chat_service import (
    ChatService,
    classify_failure,
    has_usable_key,
    is_provider_configured,
)
from app.services.responses import API_KEY_ISSUE_RESPONSE, FALLBACK_RESPONSES, OFFLINE_RESPONSES
from conftest import (
    OPENAI_HOST,
    OPENROUTER_HOST,
    TIMEOUT,
    ScriptedTransport,
    completion,
    error,
    first_item,
    make_config,
)


def handle(configs, transport, body, sleep, pick=first_item):
    async def go():
        async with transport.client() as client:
            service = ChatService(configs, pick=pick, client=client, sleep=sleep)
            return await service.handle(body)
    return asyncio.run(go())


BOTH = [make_config("openrouter"), make_config("openai")]


class TestKeyChecks:

    def test_usable(self):
        assert has_usable_key(make_config(api_key="short"))

    def test_missing_or_placeholder(self):
        assert not has_usable_key(make_config(api_key=""))
        assert not has_usable_key(make_config("openai", api_key="your-openai-api-key-here"))

    def test_status_requires_long_key(self):
        assert not is_provider_configured(make_config(api_key="x" * 20))
        assert is_provider_configured(make_config(api_key="x" * 21))
        assert not is_provider_configured(make_config("openai", api_key="your-openai-api-key-here"))


class TestValidation:

    @pytest.mark.parametrize("body", [
        {},
        {"message": None},
        {"message": 42},
        {"message": ""},
        {"message": ["hi"]},
        None,
        "just a string",
    ])
    def test_bad_message_rejected_without_calls(self, body, sleep):
        transport = ScriptedTransport()
        with pytest.raises(ClientInputError) as exc_info:
            handle(BOTH, transport, body, sleep)
        assert exc_info.value.http_status == 400
        assert exc_info.value.message == "Message is required and must be a string"
        assert transport.requests == []

    def test_bad_history_rejected(self, sleep):
        transport = ScriptedTransport()
        body = {"message": "hi", "chatHistory": [{"role": "robot", "content": "x"}]}
        with pytest.raises(ClientInputError):
            handle(BOTH, transport, body, sleep)
        assert transport.requests == []

    def test_null_history_treated_as_empty(self, sleep):
        transport = ScriptedTransport({OPENAI_HOST: [completion("hi")]})
        body = {"message": "yo", "chatHistory": None}
        result = handle([make_config("openai")], transport, body, sleep)
        assert result.source == "openai"
        sent = transport.payloads_to(OPENAI_HOST)[0]["messages"]
        assert [m["role"] for m in sent] == ["system", "user"]

    def test_user_id_ignored(self, sleep):
        transport = ScriptedTransport({OPENAI_HOST: [completion("hi")]})
        result = handle([make_config("openai")], transport, {"message": "yo", "userId": 123}, sleep)
        assert result.source == "openai"


class TestOffline:

    @pytest.mark.parametrize("configs", [
        [],
        [make_config("openrouter", api_key=""), make_config("openai", api_key="")],
        [make_config("openai", api_key="your-openai-api-key-here")],
    ])
    def test_no_provider_configured(self, configs, sleep):
        transport = ScriptedTransport()
        result = handle(configs, transport, {"message": "hello"}, sleep, pick=lambda pool: pool[3])
        assert result.source == "offline"
        assert result.response == OFFLINE_RESPONSES[3]
        assert result.error is None
        assert transport.requests == []

    def test_random_pick_comes_from_pool(self, sleep):
        async def go():
            return await ChatService([]).handle({"message": "hello"})
        for _ in range(5):
            assert asyncio.run(go()).response in OFFLINE_RESPONSES


class TestProviderOrder:

    def test_primary_answers(self, sleep):
        transport = ScriptedTransport({OPENROUTER_HOST: [completion("from router")]})
        result = handle(BOTH, transport, {"message": "hi"}, sleep)
        assert (result.response, result.source) == ("from router", "openrouter")
        assert result.error is None and result.status is None
        assert transport.calls_to(OPENAI_HOST) == []

    def test_only_openai_configured(self, sleep):
        configs = [make_config("openrouter", api_key=""), make_config("openai")]
        transport = ScriptedTransport({OPENAI_HOST: [completion("from openai")]})
        result = handle(configs, transport, {"message": "hi"}, sleep)
        assert result.source == "openai"
        assert transport.calls_to(OPENROUTER_HOST) == []

    def test_empty_content_falls_through(self, sleep):
        transport = ScriptedTransport({
            OPENROUTER_HOST: [completion("")],
            OPENAI_HOST: [completion("hi")],
        })
        result = handle(BOTH, transport, {"message": "hello"}, sleep)
        assert (result.response, result.source) == ("hi", "openai")

    def test_failure_falls_through(self, sleep):
        transport = ScriptedTransport({
            OPENROUTER_HOST: [error(503), error(503)],
            OPENAI_HOST: [completion("backup")],
        })
        result = handle(BOTH, transport, {"message": "hello"}, sleep)
        assert result.source == "openai"
        assert len(transport.calls_to(OPENROUTER_HOST)) == 2
        assert sleep.delays == [0.5]

    def test_fatal_failure_also_falls_through(self, sleep):
        transport = ScriptedTransport({
            OPENROUTER_HOST: [error(401, "invalid_api_key")],
            OPENAI_HOST: [completion("backup")],
        })
        assert handle(BOTH, transport, {"message": "hello"}, sleep).source == "openai"

    def test_providers_called_sequentially_in_order(self, sleep):
        transport = ScriptedTransport({
            OPENROUTER_HOST: [completion(None)],
            OPENAI_HOST: [completion("second")],
        })
        handle(BOTH, transport, {"message": "hello"}, sleep)
        assert [r.url.host for r in transport.requests] == [OPENROUTER_HOST, OPENAI_HOST]

    def test_context_sent_upstream(self, sleep):
        history = [{"role": "user", "content": f"m{i}"} for i in range(12)]
        transport = ScriptedTransport({OPENAI_HOST: [completion("ok")]})
        handle([make_config("openai")], transport, {"message": "now", "chatHistory": history}, sleep)
        sent = transport.payloads_to(OPENAI_HOST)[0]["messages"]
        assert sent[0]["role"] == "system"
        assert [m["content"] for m in sent[1:-1]] == [f"m{i}" for i in range(2, 12)]
        assert sent[-1] == {"role": "user", "content": "now"}

    def test_idempotent_with_deterministic_stub(self, sleep):
        transport = ScriptedTransport({OPENROUTER_HOST: [completion("same"), completion("same")]})
        first = handle(BOTH, transport, {"message": "hi"}, sleep)
        second = handle(BOTH, transport, {"message": "hi"}, sleep)
        assert (first.response, first.source) == (second.response, second.source)


class TestExhausted:

    def test_unauthorized_everywhere(self, sleep):
        transport = ScriptedTransport({OPENAI_HOST: [error(401, "Incorrect API key provided")]})
        result = handle([make_config("openai")], transport, {"message": "hi"}, sleep)
        assert result.source == "api_key_issue"
        assert result.response == API_KEY_ISSUE_RESPONSE
        assert result.status == 401
        assert "Incorrect API key" in result.error

    def test_rate_limited(self, sleep):
        transport = ScriptedTransport({OPENAI_HOST: [error(429), error(429)]})
        result = handle([make_config("openai")], transport, {"message": "hi"}, sleep, pick=lambda p: p[2])
        assert result.source == "rate_limited"
        assert result.response == OFFLINE_RESPONSES[2]
        assert result.status == 429

    def test_timeout(self, sleep):
        transport = ScriptedTransport({OPENAI_HOST: [TIMEOUT]})
        result = handle([make_config("openai")], transport, {"message": "hi"}, sleep)
        assert result.source == "timeout"
        assert result.response == OFFLINE_RESPONSES[0]
        assert result.status is None

    def test_last_failure_is_classified(self, sleep):
        transport = ScriptedTransport({
            OPENROUTER_HOST: [error(401)],
            OPENAI_HOST: [error(500), error(500)],
        })
        result = handle(BOTH, transport, {"message": "hi"}, sleep)
        assert result.source == "fallback"
        assert result.response == FALLBACK_RESPONSES[0]
        assert result.status == 500

    def test_failure_then_empty_keeps_failure(self, sleep):
        transport = ScriptedTransport({
            OPENROUTER_HOST: [error(429), error(429)],
            OPENAI_HOST: [completion("")],
        })
        result = handle(BOTH, transport, {"message": "hi"}, sleep)
        assert result.source == "rate_limited"

    def test_all_empty(self, sleep):
        transport = ScriptedTransport({
            OPENROUTER_HOST: [completion("")],
            OPENAI_HOST: [completion("  ")],
        })
        result = handle(BOTH, transport, {"message": "hi"}, sleep)
        assert result.source == "fallback"
        assert result.response == FALLBACK_RESPONSES[0]
        assert result.error == "Empty response from all providers"
        assert result.status is None


class TestClassifyFailure:

    def test_rate_limit_status(self):
        assert classify_failure(RetryableFailure(status_code=429, message="x"), first_item) == (
            "rate_limited", OFFLINE_RESPONSES[0])

    def test_insufficient_quota_message(self):
        failure = FatalFailure(status_code=403, message='{"code": "insufficient_quota"}')
        assert classify_failure(failure, first_item)[0] == "rate_limited"

    def test_quota_checked_before_key(self):
        failure = FatalFailure(status_code=401, message="insufficient_quota")
        assert classify_failure(failure, first_item)[0] == "rate_limited"

    @pytest.mark.parametrize("message", ["invalid_api_key", "account_deactivated"])
    def test_key_messages(self, message):
        failure = FatalFailure(status_code=403, message=f"error: {message}")
        assert classify_failure(failure, first_item) == ("api_key_issue", API_KEY_ISSUE_RESPONSE)

    def test_timeout(self):
        failure = RetryableFailure(message="timeout of 10000ms exceeded", timed_out=True)
        assert classify_failure(failure, first_item) == ("timeout", OFFLINE_RESPONSES[0])

    def test_other(self):
        failure = FatalFailure(status_code=400, message="bad request")
        assert classify_failure(failure, first_item) == ("fallback", FALLBACK_RESPONSES[0])
