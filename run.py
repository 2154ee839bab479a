"""
RUN SCRIPT - Start the MindBuddy server
=======================================

PURPOSE:
  Single entry point to start the backend.

WHAT IT DOES:
  - Imports the FastAPI app from app.main.
  - Runs it with uvicorn on host 0.0.0.0 and PORT (default 3000, set in .env).

USAGE:
  python run.py

  Health check: http://localhost:3000/health
  Chat endpoint: POST http://localhost:3000/api/chat

NOTE:
  Set OPENROUTER_API_KEY and/or OPENAI_API_KEY in .env. With neither set the
  server still runs and answers every message with an offline response.
"""

import uvicorn

from config import PORT

# ------------------------------------------------------------------------------
# ENTRY POINT
# ------------------------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",   # String path to the FastAPI app instance (module:variable).
        host="0.0.0.0",   # Listen on all interfaces so phones on the network can connect.
        port=PORT,
        reload=True       # Auto-restart when .py files change (useful during development).
    )
