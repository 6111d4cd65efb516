"""handlerchain logging — structlog setup and request-scoped log fields."""

from handlerchain.logging.structlog_adapter import StructlogAdapter, bind_request

__all__ = ["StructlogAdapter", "bind_request"]
