"""MCPServer — JSON-RPC dispatch loop for a single stdio peer.

Messages are handled strictly in order: the next line is not read until
the current request has been answered and flushed.  Only decoding
failures end the loop; every other failure is reported to the peer as a
JSON-RPC error and the session continues.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from awsmcp import __version__
from awsmcp.protocol.errors import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    InvalidMessageError,
    ServerError,
)
from awsmcp.protocol.models import (
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    RpcMessage,
    decode_message,
)
from awsmcp.utils.telemetry import ATTR_RPC_ERROR_CODE, ATTR_RPC_METHOD, get_tracer

if TYPE_CHECKING:
    from awsmcp.protocol.manifest import ManifestSource
    from awsmcp.protocol.transport import ServerTransport
    from awsmcp.tool.handler import ToolCallHandler

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "use_aws"

RequestHandler = Callable[[JsonRpcRequest], Awaitable["dict[str, Any] | JsonRpcError"]]


class MCPServer:
    """Serve the ``use_aws`` tool over a :class:`ServerTransport`.

    Usage::

        server = MCPServer(ToolCallHandler(), FileManifestSource("schema.json"))
        await server.serve(StreamTransport.stdio())
    """

    def __init__(
        self,
        handler: ToolCallHandler,
        manifest: ManifestSource,
        *,
        server_name: str = SERVER_NAME,
        server_version: str = __version__,
    ) -> None:
        self._handler = handler
        self._manifest = manifest
        self._server_name = server_name
        self._server_version = server_version
        self._initialized = False
        self._methods: dict[str, RequestHandler] = {
            "initialize": self._handle_initialize,
            "ping": self._handle_ping,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
        }

    @property
    def initialized(self) -> bool:
        """Whether the peer has sent ``notifications/initialized``."""
        return self._initialized

    async def serve(self, transport: ServerTransport) -> None:
        """Read and answer messages until the peer closes the stream.

        Raises:
            FramingError: A line could not be decoded as JSON.
        """
        logger.info("Serving %s %s", self._server_name, self._server_version)
        while True:
            line = await transport.receive()
            if line is None:
                logger.info("Peer closed the stream")
                return
            response = await self.handle_line(line)
            if response is not None:
                await transport.send(response.encode())

    async def handle_line(self, line: str) -> JsonRpcResponse | None:
        """Process one raw line; return the response to write, if any."""
        if not line.strip():
            return None
        try:
            message = decode_message(line)
        except InvalidMessageError as exc:
            logger.warning("Rejected message: %s", exc.message)
            if not exc.expects_reply:
                return None
            return JsonRpcResponse.failure(exc.message_id, exc.code, exc.message, exc.data)
        return await self.handle_message(message)

    async def handle_message(self, message: RpcMessage) -> JsonRpcResponse | None:
        if isinstance(message, JsonRpcRequest):
            return await self.handle_request(message)
        if isinstance(message, JsonRpcNotification):
            self.handle_notification(message)
            return None
        # This server never sends requests, so there is nothing to correlate.
        logger.debug("Ignoring response with id %r", message.id)
        return None

    async def handle_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        with _tracer.start_as_current_span("awsmcp.rpc.request") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            method = self._methods.get(request.method)
            if method is None:
                outcome: dict[str, Any] | JsonRpcError = JsonRpcError(
                    code=METHOD_NOT_FOUND,
                    message=f"Method '{request.method}' not found",
                )
            else:
                outcome = await self._run(method, request)

            if isinstance(outcome, JsonRpcError):
                span.set_attribute(ATTR_RPC_ERROR_CODE, outcome.code)
                return JsonRpcResponse(id=request.id, error=outcome)
            return JsonRpcResponse.success(request.id, outcome)

    def handle_notification(self, notification: JsonRpcNotification) -> None:
        if notification.method == "notifications/initialized":
            self._initialized = True
            logger.info("Client initialized")
        else:
            logger.debug("Ignoring notification %s", notification.method)

    @staticmethod
    async def _run(method: RequestHandler, request: JsonRpcRequest) -> dict[str, Any] | JsonRpcError:
        try:
            return await method(request)
        except ServerError as exc:
            logger.warning("%s failed: %s", request.method, exc.message)
            return JsonRpcError(code=exc.code, message=exc.message, data=exc.data)
        except Exception as exc:
            logger.exception("Unhandled error in %s", request.method)
            return JsonRpcError(code=INTERNAL_ERROR, message=f"Internal error: {exc}")

    # -- method handlers ------------------------------------------------------

    async def _handle_initialize(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": True}},
            "serverInfo": {"name": self._server_name, "version": self._server_version},
        }

    async def _handle_ping(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {}

    async def _handle_tools_list(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {"tools": self._manifest.load_tools()}

    async def _handle_tools_call(self, request: JsonRpcRequest) -> dict[str, Any] | JsonRpcError:
        return await self._handler.handle(request.params)
