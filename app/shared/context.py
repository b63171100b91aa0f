"""Request context management using contextvars.

Holds the request ID for the current HTTP call so log records emitted
anywhere below the endpoint (verifier, tracker, email sender) can carry it.
Set by RequestIDMiddleware; async-safe because each request runs in its
own task context.
"""

from contextvars import ContextVar, Token

_current_request_id: ContextVar[str | None] = ContextVar(
    "current_request_id", default=None
)


def set_request_id(request_id: str | None) -> Token[str | None]:
    """Bind request_id to the current context. Returns a token for reset_request_id."""
    return _current_request_id.set(request_id)


def reset_request_id(token: Token[str | None]) -> None:
    """Restore the request ID that was bound before set_request_id."""
    _current_request_id.reset(token)


def get_request_id() -> str | None:
    """Return the current request ID, or None outside a request."""
    return _current_request_id.get()
