"""Tests for the MCPServer dispatch engine."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from awsmcp import __version__
from awsmcp.protocol.errors import FramingError, InvalidRequestError, ManifestError
from awsmcp.protocol.manifest import StaticManifestSource
from awsmcp.protocol.models import JsonRpcError
from awsmcp.protocol.server import PROTOCOL_VERSION, MCPServer


class FakeTransport:
    """In-memory ServerTransport fed from a list of lines."""

    def __init__(self, lines: list[str]) -> None:
        self._lines = list(lines)
        self.sent: list[str] = []

    async def receive(self) -> str | None:
        return self._lines.pop(0) if self._lines else None

    async def send(self, line: str) -> None:
        self.sent.append(line)


def _request(method: str, id: Any = 1, params: Any = None) -> str:
    msg: dict[str, Any] = {"jsonrpc": "2.0", "id": id, "method": method}
    if params is not None:
        msg["params"] = params
    return json.dumps(msg)


def _make_server(
    outcome: dict[str, Any] | JsonRpcError | None = None,
    *,
    manifest: Any = None,
) -> tuple[MCPServer, MagicMock]:
    handler = MagicMock()
    handler.handle = AsyncMock(return_value=outcome if outcome is not None else {"content": []})
    return MCPServer(handler, manifest or StaticManifestSource([{"name": "use_aws"}])), handler


class TestHandleLine:
    async def test_initialize(self) -> None:
        server, _ = _make_server()
        resp = await server.handle_line(_request("initialize", params={"protocolVersion": PROTOCOL_VERSION}))
        assert resp is not None
        assert resp.result == {
            "protocolVersion": "2024-11-05",
            "capabilities": {"tools": {"listChanged": True}},
            "serverInfo": {"name": "use_aws", "version": __version__},
        }

    async def test_tools_list(self) -> None:
        server, _ = _make_server()
        resp = await server.handle_line(_request("tools/list", id="list-1"))
        assert resp is not None
        assert resp.id == "list-1"
        assert resp.result == {"tools": [{"name": "use_aws"}]}

    async def test_tools_list_manifest_error(self) -> None:
        manifest = MagicMock()
        manifest.load_tools.side_effect = ManifestError("Failed to read schema.json")
        server, _ = _make_server(manifest=manifest)
        resp = await server.handle_line(_request("tools/list"))
        assert resp is not None
        assert resp.result is None
        assert resp.error is not None
        assert resp.error.code == -32603
        assert "schema.json" in resp.error.message

    async def test_tools_call_delegates(self) -> None:
        server, handler = _make_server({"content": [{"type": "text", "text": "ok"}]})
        params = {"name": "use_aws", "arguments": {"service_name": "s3"}}
        resp = await server.handle_line(_request("tools/call", id=4, params=params))
        handler.handle.assert_awaited_once_with(params)
        assert resp is not None
        assert resp.id == 4
        assert resp.result == {"content": [{"type": "text", "text": "ok"}]}

    async def test_tools_call_missing_params_forwarded_as_none(self) -> None:
        server, handler = _make_server()
        await server.handle_line(_request("tools/call"))
        handler.handle.assert_awaited_once_with(None)

    async def test_tools_call_error_outcome(self) -> None:
        server, _ = _make_server(JsonRpcError(code=-32601, message="Tool 'x' not found"))
        resp = await server.handle_line(_request("tools/call", params={"name": "x", "arguments": {}}))
        assert resp is not None
        assert resp.result is None
        assert resp.error is not None
        assert resp.error.code == -32601
        assert "result" not in resp.to_wire()

    async def test_tools_call_server_error_mapped(self) -> None:
        server, handler = _make_server()
        handler.handle.side_effect = InvalidRequestError("Missing params for tools/call")
        resp = await server.handle_line(_request("tools/call"))
        assert resp is not None
        assert resp.error is not None
        assert resp.error.code == -32602
        assert resp.error.message == "Missing params for tools/call"

    async def test_unexpected_exception_is_internal_error(self) -> None:
        server, handler = _make_server()
        handler.handle.side_effect = RuntimeError("kaboom")
        resp = await server.handle_line(_request("tools/call", params={}))
        assert resp is not None
        assert resp.error is not None
        assert resp.error.code == -32603

    async def test_unknown_method(self) -> None:
        server, _ = _make_server()
        resp = await server.handle_line(_request("resources/list", id=12))
        assert resp is not None
        assert resp.id == 12
        assert resp.error is not None
        assert resp.error.code == -32601
        assert resp.error.message == "Method 'resources/list' not found"

    async def test_ping(self) -> None:
        server, _ = _make_server()
        resp = await server.handle_line(_request("ping"))
        assert resp is not None
        assert resp.result == {}

    async def test_id_echoed_verbatim(self) -> None:
        server, _ = _make_server()
        resp = await server.handle_line(_request("ping", id={"k": [1, "two"]}))
        assert resp is not None
        assert json.loads(resp.encode())["id"] == {"k": [1, "two"]}

    async def test_initialized_notification(self) -> None:
        server, _ = _make_server()
        assert not server.initialized
        resp = await server.handle_line('{"jsonrpc": "2.0", "method": "notifications/initialized"}')
        assert resp is None
        assert server.initialized

    async def test_other_notification_ignored(self) -> None:
        server, _ = _make_server()
        assert await server.handle_line('{"jsonrpc": "2.0", "method": "notifications/cancelled"}') is None

    async def test_response_ignored(self) -> None:
        server, _ = _make_server()
        assert await server.handle_line('{"jsonrpc": "2.0", "id": 1, "result": {}}') is None

    @pytest.mark.parametrize(
        "line",
        [
            '{"jsonrpc": "2.0", "id": 1, "result": null}',
            '{"jsonrpc": "2.0", "id": 2, "error": {"code": -1}}',
            '{"jsonrpc": "2.0", "method": "notifications/x", "params": "x"}',
            '{"jsonrpc": "2.0", "method": 7}',
        ],
    )
    async def test_no_reply_without_request(self, line: str) -> None:
        server, handler = _make_server()
        assert await server.handle_line(line) is None
        handler.handle.assert_not_awaited()

    async def test_blank_line(self) -> None:
        server, _ = _make_server()
        assert await server.handle_line("   ") is None

    async def test_invalid_shape_rejected(self) -> None:
        server, handler = _make_server()
        resp = await server.handle_line('{"jsonrpc": "2.0", "id": 8}')
        assert resp is not None
        assert resp.id == 8
        assert resp.error is not None
        assert resp.error.code == -32600
        handler.handle.assert_not_awaited()

    async def test_invalid_json_is_fatal(self) -> None:
        server, _ = _make_server()
        with pytest.raises(FramingError):
            await server.handle_line("{oops")


class TestServe:
    async def test_session(self) -> None:
        server, _ = _make_server()
        transport = FakeTransport(
            [
                _request("initialize", id=0),
                '{"jsonrpc": "2.0", "method": "notifications/initialized"}',
                "",
                _request("tools/list", id=1),
                _request("nope", id=2),
                _request("tools/call", id=3, params={"name": "use_aws", "arguments": {}}),
            ]
        )

        await server.serve(transport)

        replies = [json.loads(line) for line in transport.sent]
        assert [r["id"] for r in replies] == [0, 1, 2, 3]
        assert "result" in replies[0]
        assert replies[1]["result"]["tools"] == [{"name": "use_aws"}]
        assert replies[2]["error"]["code"] == -32601
        assert replies[3]["result"] == {"content": []}
        for reply in replies:
            assert ("result" in reply) != ("error" in reply)

    async def test_recoverable_errors_do_not_stop_session(self) -> None:
        manifest = MagicMock()
        manifest.load_tools.side_effect = ManifestError("missing")
        server, _ = _make_server(manifest=manifest)
        transport = FakeTransport([_request("tools/list", id=1), "[]", _request("ping", id=2)])

        await server.serve(transport)

        replies = [json.loads(line) for line in transport.sent]
        assert replies[0]["error"]["code"] == -32603
        assert replies[1]["error"]["code"] == -32600
        assert replies[1]["id"] is None
        assert replies[2]["result"] == {}

    async def test_responses_and_notifications_produce_no_output(self) -> None:
        server, _ = _make_server()
        transport = FakeTransport(
            [
                '{"jsonrpc": "2.0", "id": 1, "result": null}',
                '{"jsonrpc": "2.0", "method": "notifications/progress", "params": 5}',
                _request("ping", id=2),
            ]
        )

        await server.serve(transport)

        assert [json.loads(line)["id"] for line in transport.sent] == [2]

    async def test_framing_error_stops_session(self) -> None:
        server, _ = _make_server()
        transport = FakeTransport([_request("ping", id=1), "not json", _request("ping", id=2)])

        with pytest.raises(FramingError):
            await server.serve(transport)

        assert len(transport.sent) == 1
