"""Container entrypoint for the location MCP server."""

import sys

import uvicorn
from loguru import logger

from carlocator.config import settings
from carlocator.servers.tool_registry import McpServersRegistry

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)

registry = McpServersRegistry()
_inner_app = registry.get_registry().http_app(stateless_http=True)


async def app(scope, receive, send):
    """ASGI app that forwards lifespan and lazily initializes the registry."""
    if scope["type"] == "lifespan":
        await _inner_app(scope, receive, send)
        return
    if not registry._is_initialized:
        await registry.initialize()
    await _inner_app(scope, receive, send)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
