"""Exceptions raised by the Gemini chat client."""

from __future__ import annotations


class GeminiError(Exception):
    """Base class for errors surfaced by the Gemini chat client."""

    pass


class GeminiAPIError(GeminiError):
    """Raised when the Gemini API answers with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str, *, streaming: bool = False):
        self.status_code = status_code
        self.body = body
        kind = "stream request" if streaming else "request"
        super().__init__(
            f"Gemini API {kind} failed with status code {status_code}: {body}"
        )


class NoCandidatesError(GeminiError):
    """Raised when a successful response carries no candidates."""

    def __init__(self, block_reason: str | None = None):
        self.block_reason = block_reason
        super().__init__(
            "The request was blocked or returned no candidates. "
            f"Reason: {block_reason or 'Unknown'}"
        )


class RequestCancelledError(GeminiError):
    """Raised when the caller's cancellation event is set mid-call."""

    pass


class ClientClosedError(GeminiError):
    """Raised when a closed client or transport is used again."""

    pass
