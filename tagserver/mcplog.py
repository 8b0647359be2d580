"""Request logging for MCP method handlers."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Mapping

Handler = Callable[[str, Any, str], Awaitable[Any]]

_QUIET_ERRORS = (asyncio.TimeoutError, TimeoutError)


def extract_tool_name(method: str, params: Any) -> str:
    """Tool name of a tools/call request, or an empty string."""
    if method != "tools/call" or not isinstance(params, Mapping):
        return ""
    name = params.get("name")
    return name if isinstance(name, str) else ""


def logging_middleware(logger: logging.Logger, handler: Handler) -> Handler:
    """Wrap an async MCP handler so each request and its outcome is logged.

    The wrapped handler is called as ``handler(method, params, session_id)``.
    Structured fields are attached to each record as its ``mcp`` attribute.
    Cancellation and timeouts pass through without an error record.
    """

    async def logged(method: str, params: Any, session_id: str = "") -> Any:
        start = time.monotonic()
        attrs: dict[str, Any] = {"method": method, "session_id": session_id or ""}
        tool = extract_tool_name(method, params)
        if tool:
            attrs["tool"] = tool

        logger.info("mcp request", extra={"mcp": dict(attrs)})

        try:
            result = await handler(method, params, session_id)
        except Exception as exc:
            attrs["duration_ms"] = int((time.monotonic() - start) * 1000)
            if not isinstance(exc, _QUIET_ERRORS):
                logger.error("mcp request failed", extra={"mcp": {**attrs, "error": str(exc)}})
            raise

        attrs["duration_ms"] = int((time.monotonic() - start) * 1000)
        logger.info("mcp request completed", extra={"mcp": attrs})
        return result

    return logged