"""
MINDBUDDY MAIN API
==================

This module defines the FastAPI application and all HTTP endpoints. The mobile
app sends each message together with its own recent chat history; the server
keeps no conversation state.

ENDPOINTS:
  GET  /            - API name, status and list of endpoints.
  GET  /health      - Liveness check.
  GET  /api         - API base: lists the /api endpoints.
  GET  /api/status  - Which providers have a usable API key.
  POST /api/chat    - Relay one message to OpenRouter / OpenAI and return the reply.
                      Always 200 with a reply (live or canned) unless the body is invalid (400).

STARTUP:
  The lifespan function reads provider configs once, opens one shared HTTP client
  and creates the ChatService. On shutdown the HTTP client is closed.
"""


from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import json
import httpx
import uvicorn
import logging

from app.errors import ClientInputError
from app.middleware.body_limit import BodySizeLimitMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.models import ChatResult
from app.services.chat_service import ChatService
from app.utils.time_info import get_timestamp
from config import (
    MAX_BODY_BYTES,
    PORT,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
    load_provider_configs,
)


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("MindBuddy")


# -----------------------------------------------------------------------------
# GLOBAL SERVICE REFERENCES
# -----------------------------------------------------------------------------
# Set during startup (lifespan) and used by all route handlers.
chat_service: ChatService = None
http_client: httpx.AsyncClient = None


# -------------------------------------------------------------------------
# LIFESPAN (STARTUP / SHUTDOWN)
# -------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the provider list, the shared HTTP client and the ChatService on
    startup; close the HTTP client on shutdown.
    """
    global chat_service, http_client

    logger.info("=" * 60)
    logger.info("MindBuddy Backend - Starting Up...")
    logger.info("=" * 60)

    try:
        configs = load_provider_configs()
        http_client = httpx.AsyncClient()
        chat_service = ChatService(configs, client=http_client)

        for name, configured in chat_service.provider_status().items():
            logger.info("    - %s: %s", name, "yes" if configured else "no")
        if not chat_service.active_configs:
            logger.warning("No provider API key set. Every chat will get an offline response.")
        logger.info("=" * 60)
        logger.info("Ready to serve the Android app!")
        logger.info("Health check: http://localhost:%s/health", PORT)
        logger.info("Chat endpoint: http://localhost:%s/api/chat", PORT)
        logger.info("=" * 60)

        yield

        logger.info("Shutting down MindBuddy Backend...")
        await http_client.aclose()

    except Exception as e:
        logger.error("Fatal error during startup: %s", e, exc_info=True)
        raise


# -------------------------------------------------------------------------
# FASTAPI APP AND MIDDLEWARE
# -------------------------------------------------------------------------
app = FastAPI(
    title="MindBuddy API",
    description="Chat relay between the MindBuddy app and hosted LLM providers",
    lifespan=lifespan
)

# Any origin: the Android app does not send a fixed Origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(
    RateLimitMiddleware,
    max_requests=RATE_LIMIT_MAX_REQUESTS,
    window_seconds=RATE_LIMIT_WINDOW_SECONDS,
)
app.add_middleware(BodySizeLimitMiddleware, max_bytes=MAX_BODY_BYTES)
app.add_middleware(SecurityHeadersMiddleware)


# -------------------------------------------------------------------------
# ERROR HANDLERS
# -------------------------------------------------------------------------

@app.exception_handler(ClientInputError)
async def client_input_error_handler(request: Request, exc: ClientInputError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={"error": "Not found", "message": "The requested endpoint does not exist"},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": "Something went wrong on our end"},
    )


# =========================================================================
# API ENDPOINTS
# =========================================================================

@app.get("/")
async def root():
    """Return the API name and the main endpoints (for discovery)."""
    return {
        "name": "MindBuddy Backend",
        "status": "OK",
        "message": "Welcome! Use the endpoints below.",
        "endpoints": {
            "health": "/health",
            "status": "/api/status",
            "chat": "/api/chat",
        },
        "timestamp": get_timestamp(),
    }


@app.get("/health")
async def health():
    return {
        "status": "OK",
        "message": "MindBuddy Backend is running!",
        "timestamp": get_timestamp(),
    }


@app.get("/api")
async def api_base():
    return {
        "message": "MindBuddy API base. Try /api/status or POST /api/chat",
        "endpoints": {
            "status": "/api/status",
            "chat": "/api/chat",
        },
        "timestamp": get_timestamp(),
    }


@app.get("/api/status")
async def api_status():
    """Report which providers have a real-looking API key. Never exposes the keys."""
    if not chat_service:
        raise HTTPException(status_code=503, detail="Chat service not initialized")

    return {
        **chat_service.provider_status(),
        "offline_responses_available": True,
        "timestamp": get_timestamp(),
    }


@app.post("/api/chat", response_model=ChatResult, response_model_exclude_none=True)
async def chat(request: Request):
    """
    Chat endpoint - relay one message to the configured LLM providers.

    REQUEST BODY:
    {
        "message": "I'm stressed about exams",
        "chatHistory": [{"role": "user", "content": "..."}, {"role": "assistant", "content": "..."}],
        "userId": "optional"
    }

    RESPONSE:
    {
        "response": "Exams can feel heavy, yaar...",
        "source": "openrouter",
        "timestamp": "2026-02-05T14:03:07.123Z"
    }

    Provider failures never change the status code: the reply is a canned
    sentence and "source", "error" and "status" explain what happened.
    """
    if not chat_service:
        raise HTTPException(status_code=503, detail="Chat service not initialized")

    # Chunked uploads carry no Content-Length, so check what actually arrived.
    raw = await request.body()
    if len(raw) > MAX_BODY_BYTES:
        raise HTTPException(status_code=413, detail="Request body too large")

    try:
        body = json.loads(raw)
    except ValueError:
        raise ClientInputError("Request body must be valid JSON")

    return await chat_service.handle(body)


# -------------------------------------------------------------------------
# STANDALONE RUN (python -m app.main)
# -------------------------------------------------------------------------
def run():
    """Start the uvicorn server (same as run.py); used if someone does python -m app.main"""
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=True,
        log_level="info"
    )

if __name__ == "__main__":
    run()
