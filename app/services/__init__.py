"""
SERVICES PACKAGE
=================

Business logic lives here. The API layer (app.main) calls these services;
they don't handle HTTP routing, only chat flow and provider calls.

MODULES:
    chat_service    - ChatService.handle(): provider selection, fallthrough, failure classification.
    provider_client - call_provider(): one OpenAI-compatible call -> ProviderOutcome.
    context         - build_context_messages(): system prompt + recent history + new message.
    responses       - Canned offline/fallback sentences and the default random picker.
"""
