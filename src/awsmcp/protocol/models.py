"""JSON-RPC 2.0 messages for the MCP server.

Inbound lines are decoded in two stages: :func:`parse_line` turns text into
a generic JSON value, then :func:`classify_message` inspects its shape and
validates the matching variant.  Outbound responses always carry exactly
one of ``result`` or ``error``.
"""

from __future__ import annotations

import json
from typing import Any, Union

from pydantic import BaseModel, ValidationError, model_validator

from awsmcp.protocol.errors import FramingError, InvalidMessageError

JSONRPC_VERSION = "2.0"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message; ``id`` is echoed verbatim."""

    jsonrpc: str = JSONRPC_VERSION
    id: Any
    method: str
    params: dict[str, Any] | list[Any] | None = None


class JsonRpcNotification(BaseModel):
    """A JSON-RPC 2.0 notification (no ``id``, never answered)."""

    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: Any = None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            wire["data"] = self.data
        return wire


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    result: Any = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> JsonRpcResponse:
        if (self.result is None) == (self.error is None):
            msg = "response must carry exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, message_id: Any, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=message_id, result=result)

    @classmethod
    def failure(
        cls,
        message_id: Any,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(id=message_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the wire; ``id`` is kept even when ``null``."""
        wire: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            wire["error"] = self.error.to_wire()
        else:
            wire["result"] = self.result
        return wire

    def encode(self) -> str:
        return json.dumps(self.to_wire(), separators=(",", ":"), ensure_ascii=False)


class InboundResponse(BaseModel):
    """A response sent to this server; accepted as-is and never answered."""

    jsonrpc: Any = JSONRPC_VERSION
    id: Any = None
    result: Any = None
    error: Any = None


RpcMessage = Union[JsonRpcRequest, JsonRpcNotification, InboundResponse]

# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def parse_line(line: str) -> Any:
    """Decode one line of JSON.

    Raises:
        FramingError: The line is not valid JSON.
    """
    try:
        return json.loads(line)
    except json.JSONDecodeError as exc:
        raise FramingError(f"Parse error: {exc}") from exc


def classify_message(value: Any) -> RpcMessage:
    """Determine which JSON-RPC variant *value* is and validate it.

    Raises:
        InvalidMessageError: *value* matches no variant, or matches one
            structurally but fails its validation.
    """
    if not isinstance(value, dict):
        raise InvalidMessageError(f"Invalid Request: expected a JSON object, got {type(value).__name__}")

    message_id = value.get("id")
    model: type[BaseModel]
    if "method" in value:
        model = JsonRpcRequest if "id" in value else JsonRpcNotification
    elif "id" in value and ("result" in value or "error" in value):
        return InboundResponse.model_validate(value)
    else:
        raise InvalidMessageError(
            "Invalid Request: message has neither 'method' nor a result/error",
            message_id=message_id,
        )

    try:
        return model.model_validate(value)  # type: ignore[return-value]
    except ValidationError as exc:
        raise InvalidMessageError(
            f"Invalid Request: malformed {model.__name__}",
            message_id=message_id,
            data=exc.errors(include_url=False, include_context=False),
            expects_reply="id" in value,
        ) from exc


def decode_message(line: str) -> RpcMessage:
    """Decode and classify one inbound line."""
    return classify_message(parse_line(line))
