"""
ERRORS MODULE
=============

Exceptions raised inside the relay. Only ClientInputError ever reaches the HTTP
layer as an error status; the others are caught by the chat service and turned
into a ChatResult with a fallback source tag.
"""

from typing import Optional


class RelayError(Exception):
    """Base class. http_status is what the API layer would answer with."""

    def __init__(self, message: str, http_status: int = 500):
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class ClientInputError(RelayError):
    """The request body broke the API contract (e.g. message missing or not a string)."""

    def __init__(self, message: str):
        super().__init__(message, http_status=400)


class TransportFailure(RelayError):
    """
    A provider call failed: network error, timeout, or a non-2xx answer.

    status_code and body are set when the provider actually responded.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
        timed_out: bool = False,
    ):
        super().__init__(message, http_status=502)
        self.status_code = status_code
        self.body = body
        self.timed_out = timed_out


class EmptyContentFailure(RelayError):
    """The provider answered 2xx but choices[0].message.content was missing or blank."""

    def __init__(self, provider: str):
        super().__init__(f"Empty response from {provider}", http_status=502)
        self.provider = provider
