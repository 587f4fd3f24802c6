"""
FastMCP-based CSS First server.

Tools are registered through wrappers that carry the signature of each
tool's ``apply`` method, so FastMCP builds the argument schema from the real
parameters instead of ``apply_ex``'s ``**kwargs``.
"""

import inspect
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, List, Optional

from mcp.server.fastmcp.server import FastMCP

from .tools import (
    CheckCssBrowserSupportTool,
    ConfirmCssPropertyUsageTool,
    GetCssPropertyDetailsTool,
    SuggestCssSolutionTool,
)
from .tools_base import Tool

logger = logging.getLogger(__name__)

SERVER_NAME = "css-first"


class CSSFirstServer:
    """FastMCP server exposing the CSS First tools."""

    def __init__(self, tools: Optional[List[Tool]] = None):
        """Initialize the server with all tools."""
        self.tools = tools if tools is not None else [
            SuggestCssSolutionTool(),
            CheckCssBrowserSupportTool(),
            GetCssPropertyDetailsTool(),
            ConfirmCssPropertyUsageTool(),
        ]

    @staticmethod
    def _wrap_tool(tool_instance: Tool) -> Callable[..., str]:
        """Plain function with ``apply``'s signature that delegates to ``apply_ex``."""

        def wrapper(**kwargs) -> str:
            return tool_instance.apply_ex(log_call=True, catch_exceptions=True, **kwargs)

        wrapper.__name__ = tool_instance.get_name()
        wrapper.__doc__ = tool_instance.get_apply_docstring()
        wrapper.__signature__ = inspect.signature(tool_instance.apply)  # type: ignore[attr-defined]
        return wrapper

    def create_fastmcp_server(self, host: str = "0.0.0.0", port: int = 8000) -> FastMCP:
        """Create a FastMCP server instance with every tool registered."""
        mcp = FastMCP(SERVER_NAME, host=host, port=port, lifespan=self.server_lifespan)
        for tool_instance in self.tools:
            mcp.add_tool(
                self._wrap_tool(tool_instance),
                name=tool_instance.get_name(),
                description=tool_instance.get_apply_docstring(),
            )
        return mcp

    @asynccontextmanager
    async def server_lifespan(self, mcp_server: FastMCP) -> AsyncIterator[None]:
        """Log startup and shutdown."""
        try:
            logger.info(
                "CSS First server ready with %d tools: %s",
                len(self.tools),
                ", ".join(t.get_name() for t in self.tools),
            )
            yield
        except Exception:
            logger.exception("CSS First server: error while running")
            raise
        finally:
            logger.info("CSS First server shutting down")

