"""Error types for the JSON-RPC protocol layer.

Every recoverable error carries the JSON-RPC code it is reported under, so
the engine can turn it into an error response without a lookup table.
"""

from __future__ import annotations

from typing import Any

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
TOOL_EXECUTION_ERROR = -32000


class ServerError(Exception):
    """Base error for all protocol-layer failures."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, *, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)


class FramingError(ServerError):
    """An inbound line could not be decoded as JSON.

    Fatal: the read loop stops when this is raised.
    """

    code = PARSE_ERROR


class InvalidMessageError(ServerError):
    """A decoded value matches none of the JSON-RPC message shapes."""

    code = INVALID_REQUEST

    def __init__(
        self,
        message: str,
        *,
        message_id: Any = None,
        data: Any = None,
        expects_reply: bool = True,
    ) -> None:
        self.message_id = message_id
        self.expects_reply = expects_reply
        super().__init__(message, data=data)


class InvalidRequestError(ServerError):
    """A request is missing something its method requires."""

    code = INVALID_PARAMS


class SerializationError(ServerError):
    """Request params could not be deserialized into the expected model."""

    code = INVALID_PARAMS


class ManifestError(ServerError):
    """The capability manifest is missing or malformed."""

    code = INTERNAL_ERROR
