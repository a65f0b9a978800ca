"""
MCP Tool Registry.

Composition root: builds the single geocoding gateway and facility
directory, initializes observability and mounts the location server.
"""

from loguru import logger
from fastmcp import FastMCP

from carlocator.config import settings
from carlocator.infrastructure.observability import initialize_observability
from carlocator.servers.location_server import create_location_server
from carlocator.services.geocoding import GoogleGeocodingGateway
from carlocator.services.proximity import get_directory


class McpServersRegistry:
    def __init__(self) -> None:
        self.registry = FastMCP("tool_registry")
        self.gateway = GoogleGeocodingGateway()
        self.directory = get_directory()
        self._is_initialized = False

    async def initialize(self) -> None:
        """Mount the location server into the registry."""
        if self._is_initialized:
            return

        logger.info("Initializing MCP tool registry...")

        initialize_observability(
            service_name=settings.OTEL_SERVICE_NAME,
            enabled=settings.OBSERVABILITY_ENABLED,
        )

        location_mcp = create_location_server(self.gateway, self.directory)
        self.registry.mount(location_mcp, namespace="locations")

        self._is_initialized = True

        all_tools = await self.registry.list_tools()
        tool_names = [t.name for t in all_tools]
        logger.info(f"Registry initialized with {len(all_tools)} tools: {tool_names}")

    def get_registry(self) -> FastMCP:
        return self.registry
