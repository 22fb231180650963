"""Wire settings into a ready-to-serve :class:`MCPServer`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from awsmcp.protocol.manifest import FileManifestSource
from awsmcp.protocol.server import MCPServer
from awsmcp.protocol.transport import ServerTransport, StreamTransport
from awsmcp.tool.handler import ToolCallHandler
from awsmcp.tool.invoker import ProcessInvoker
from awsmcp.tool.policy import AcceptancePolicy
from awsmcp.utils.telemetry import configure_telemetry

if TYPE_CHECKING:
    from awsmcp.config import ServerSettings

logger = logging.getLogger(__name__)


def build_server(settings: ServerSettings) -> MCPServer:
    """Build the server and its collaborators from *settings*."""
    handler = ToolCallHandler(
        ProcessInvoker(settings.invoker_config()),
        policy=AcceptancePolicy(settings.policy_config()),
    )
    return MCPServer(handler, FileManifestSource(settings.manifest_path))


async def run_server(settings: ServerSettings, transport: ServerTransport | None = None) -> None:
    """Serve until the peer disconnects.

    Raises:
        FramingError: The peer sent a line that is not valid JSON.
    """
    if settings.telemetry.enabled:
        configure_telemetry(otlp_endpoint=settings.telemetry.otlp_endpoint)
    server = build_server(settings)
    await server.serve(transport or StreamTransport.stdio())
