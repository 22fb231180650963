"""JSON-RPC protocol layer: message models, transport and dispatch."""

from awsmcp.protocol.errors import (
    FramingError,
    InvalidMessageError,
    InvalidRequestError,
    ManifestError,
    SerializationError,
    ServerError,
)
from awsmcp.protocol.manifest import FileManifestSource, ManifestSource, StaticManifestSource
from awsmcp.protocol.models import (
    InboundResponse,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    classify_message,
    decode_message,
)
from awsmcp.protocol.transport import ServerTransport, StreamTransport

__all__ = [
    "FileManifestSource",
    "FramingError",
    "InboundResponse",
    "InvalidMessageError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "ManifestError",
    "ManifestSource",
    "SerializationError",
    "ServerError",
    "ServerTransport",
    "StaticManifestSource",
    "StreamTransport",
    "classify_message",
    "decode_message",
]
