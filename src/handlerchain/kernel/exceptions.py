"""Exception hierarchy for handlerchain.

All library exceptions inherit from HandlerChainException so callers can
catch one type for every error raised by the interceptor pipeline.
"""

from __future__ import annotations


class HandlerChainException(Exception):
    """Base exception for all handlerchain errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "REQUEST_ATTRIBUTE_MISSING").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class MissingRequestAttributeException(HandlerChainException):
    """A hook read a request attribute that no earlier phase has set.

    Raised instead of silently defaulting: a post-hook that needs a value
    recorded by a pre-hook cannot run meaningfully without it.
    """

    def __init__(self, key: str, handler_id: str | None = None) -> None:
        message = f"Request attribute '{key}' is not set"
        if handler_id is not None:
            message += f" (handler '{handler_id}')"
        super().__init__(
            message,
            code="REQUEST_ATTRIBUTE_MISSING",
            context={"key": key, "handler_id": handler_id},
        )
        self.key = key
