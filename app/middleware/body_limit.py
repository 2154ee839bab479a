"""Rejects requests whose declared body is larger than the JSON limit (10 MB by default)."""

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, max_bytes: int = 10 * 1024 * 1024) -> None:
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                size = int(content_length)
            except ValueError:
                return JSONResponse(status_code=400, content={"error": "Invalid Content-Length header"})
            if size > self.max_bytes:
                return JSONResponse(
                    status_code=413,
                    content={"error": f"Request body too large ({size} bytes, limit {self.max_bytes} bytes)"},
                )
        return await call_next(request)
