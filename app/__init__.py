"""
MINDBUDDY APPLICATION PACKAGE
=============================

Main Python package for the MindBuddy relay backend.

  from app.main import app
  from app.models import ChatRequest
  from app.services.chat_service import ChatService

FILE STRUCTURE:
  app/
    __init__.py   - This file; marks 'app' as a package.
    main.py       - FastAPI app and HTTP endpoints (/, /health, /api, /api/status, /api/chat).
    models.py     - Pydantic models for requests, responses, provider config and call outcomes.
    errors.py     - ClientInputError, TransportFailure, EmptyContentFailure.
    middleware/   - Security headers and per-IP rate limiting.
    services/     - Chat flow: provider selection, provider calls, context, canned responses.
    utils/        - Helpers: POST with retry/backoff, response timestamps.
"""
