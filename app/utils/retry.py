"""
RETRY UTILITY
=============

POSTs a JSON payload and, if the server answers 429 or 5xx, retries with
exponential backoff. Knows nothing about providers or chat: callers supply the
URL, payload and headers.

Backoff waits are asyncio sleeps, so other requests keep being served while a
retry is pending. timeout_ms is a deadline for each whole request (connect,
send, and reading the full body), not just for each network read.

Example:
  response = await post_with_retry(url, payload, headers, timeout_ms=10_000, max_attempts=2)
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

import httpx

from app.errors import TransportFailure


logger = logging.getLogger("MindBuddy")

# First retry waits 0.5s, then 1s, 2s, ...
BASE_DELAY_SECONDS = 0.5

Sleep = Callable[[float], Awaitable[None]]


def is_retryable_status(status_code: int) -> bool:
    """True for rate limits (429) and server errors (500-599)."""
    return status_code == 429 or 500 <= status_code <= 599


async def post_with_retry(
    url: str,
    payload: dict,
    headers: Dict[str, str],
    timeout_ms: int = 10_000,
    max_attempts: int = 2,
    client: Optional[httpx.AsyncClient] = None,
    sleep: Sleep = asyncio.sleep,
) -> httpx.Response:
    """
    POST payload as JSON to url. Return the first 2xx response.

    429/5xx answers are retried until max_attempts requests have been made,
    waiting BASE_DELAY_SECONDS * 2**attempt between them. Any other non-2xx
    status, a timeout, a network error, or running out of attempts raises
    TransportFailure carrying the last status and body.
    """
    if client is None:
        async with httpx.AsyncClient() as own_client:
            return await post_with_retry(
                url, payload, headers, timeout_ms, max_attempts, client=own_client, sleep=sleep
            )

    timeout = timeout_ms / 1000
    for attempt in range(max_attempts):
        # httpx timeouts are per phase; wait_for bounds the whole request, body included.
        try:
            response = await asyncio.wait_for(
                client.post(url, json=payload, headers=headers, timeout=timeout), timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise TransportFailure(f"timeout of {timeout_ms}ms exceeded", timed_out=True) from e
        except httpx.RequestError as e:
            raise TransportFailure(f"Network error: {e}") from e

        if response.is_success:
            return response

        status = response.status_code
        body = response.text
        if is_retryable_status(status) and attempt + 1 < max_attempts:
            delay = BASE_DELAY_SECONDS * (2 ** attempt)
            logger.warning(
                "Attempt %s/%s to %s returned %s. Retrying in %.1fs",
                attempt + 1,
                max_attempts,
                url,
                status,
                delay,
            )
            await sleep(delay)
            continue

        raise TransportFailure(
            f"Request failed with status code {status}: {body[:500]}",
            status_code=status,
            body=body,
        )

    raise TransportFailure("No attempts made (max_attempts < 1)")
