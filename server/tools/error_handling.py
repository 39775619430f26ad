"""Turns bridge exceptions into tool errors the calling agent can act on.

The agent only sees the error text, so the text carries the backend message, the
backend response body and the HTTP status as one JSON object.
"""

import functools
import json
from typing import Any, Awaitable, Callable

import httpx
from mcp.server.fastmcp.exceptions import ToolError

from shared.clients.errors import PaperlessBridgeError, RequestError, ValidationError
from shared.logging.logging_setup import ColorLogger


def format_tool_error(message: str, response_data: Any = None, status: int | None = None) -> str:
    return json.dumps({"error": message, "responseData": response_data, "status": status})


def with_error_handling(tool_name: str, handler: Callable[..., Awaitable[Any]], logger: ColorLogger) -> Callable[..., Awaitable[Any]]:
    """
    Wrap a tool coroutine so every failure is logged and re-raised as a ToolError.

    The wrapper keeps the handler's signature, so the tool input schema is unchanged.

    Args:
        tool_name (str): The registered tool name, used in log messages.
        handler (Callable[..., Awaitable[Any]]): The tool coroutine.
        logger (ColorLogger): The application logger.

    Returns:
        Callable[..., Awaitable[Any]]: The wrapped coroutine.
    """

    @functools.wraps(handler)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await handler(*args, **kwargs)
        except RequestError as e:
            logger.error("Tool '%s' failed with status %d: %s", tool_name, e.status_code, e.message)
            raise ToolError(format_tool_error(e.message, e.response_body, e.status_code)) from e
        except ValidationError as e:
            logger.warning("Tool '%s' rejected its arguments: %s", tool_name, e)
            raise ToolError(format_tool_error(str(e))) from e
        except PaperlessBridgeError as e:
            logger.error("Tool '%s' failed: %s", tool_name, e)
            raise ToolError(format_tool_error(str(e))) from e
        except httpx.HTTPError as e:
            logger.error("Tool '%s' could not reach Paperless-NGX: %s", tool_name, e)
            raise ToolError(format_tool_error(f"Request to Paperless-NGX failed: {e}")) from e

    return wrapper
