"""ToolCallHandler — the ``use_aws`` capability behind ``tools/call``.

Processing order is fixed: build the :class:`CommandSpec`, render its
description, invoke the process, then assemble the response content.  A
failure to render the description is logged and replaced by an empty
string; every other failure becomes a JSON-RPC error.
"""

from __future__ import annotations

import io
import logging
from typing import Any

from pydantic import ValidationError

from awsmcp.protocol.errors import (
    METHOD_NOT_FOUND,
    TOOL_EXECUTION_ERROR,
    InvalidRequestError,
    SerializationError,
)
from awsmcp.protocol.models import JsonRpcError
from awsmcp.tool.description import write_description
from awsmcp.tool.errors import CommandFailedError, ToolError
from awsmcp.tool.invoker import ProcessInvoker
from awsmcp.tool.models import CommandSpec, InvocationResult, ToolCallParams
from awsmcp.tool.policy import AcceptancePolicy
from awsmcp.utils.telemetry import (
    ATTR_OPERATION,
    ATTR_REQUIRES_ACCEPTANCE,
    ATTR_SERVICE,
    ATTR_TOOL_NAME,
    get_tracer,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

TOOL_NAME = "use_aws"


class ToolCallHandler:
    """Handle ``tools/call`` requests for the ``use_aws`` tool."""

    def __init__(
        self,
        invoker: ProcessInvoker | None = None,
        *,
        policy: AcceptancePolicy | None = None,
        tool_name: str = TOOL_NAME,
    ) -> None:
        self._invoker = invoker or ProcessInvoker()
        self._policy = policy or AcceptancePolicy()
        self._tool_name = tool_name

    @property
    def tool_name(self) -> str:
        return self._tool_name

    @property
    def policy(self) -> AcceptancePolicy:
        return self._policy

    async def handle(self, params: Any) -> dict[str, Any] | JsonRpcError:
        """Run one tool call and return its ``result`` payload or an error.

        Raises:
            InvalidRequestError: *params* is absent.
            SerializationError: *params* or its arguments have the wrong shape.
        """
        call = self.parse_params(params)
        if call.name != self._tool_name:
            return JsonRpcError(code=METHOD_NOT_FOUND, message=f"Tool '{call.name}' not found")

        spec = self.build_spec(call.arguments)
        requires_acceptance = self._policy.requires_acceptance(spec)

        with _tracer.start_as_current_span("awsmcp.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, call.name)
            span.set_attribute(ATTR_SERVICE, spec.service_name)
            span.set_attribute(ATTR_OPERATION, spec.operation_name)
            span.set_attribute(ATTR_REQUIRES_ACCEPTANCE, requires_acceptance)
            logger.info(
                "tools/call %s %s (%s)",
                spec.service_name,
                spec.operation_name,
                "requires acceptance" if requires_acceptance else "read-only",
            )

            description = self._describe_or_empty(spec)

            try:
                result = await self._invoker.invoke(spec)
            except CommandFailedError as exc:
                return JsonRpcError(
                    code=TOOL_EXECUTION_ERROR,
                    message=exc.stderr,
                    data={"exit_status": exc.exit_status},
                )
            except ToolError as exc:
                logger.error("Tool execution failed: %s", exc)
                return JsonRpcError(code=TOOL_EXECUTION_ERROR, message=str(exc))

        return self.build_content(description, result)

    def describe_call(self, name: str, arguments: dict[str, Any]) -> str:
        """Render the description of a tool call without running it."""
        if name != self._tool_name:
            return f"Unknown tool: {name}"
        buf = io.StringIO()
        write_description(self.build_spec(arguments), buf)
        return buf.getvalue()

    @staticmethod
    def parse_params(params: Any) -> ToolCallParams:
        if params is None:
            raise InvalidRequestError("Missing params for tools/call")
        try:
            return ToolCallParams.model_validate(params)
        except ValidationError as exc:
            raise SerializationError(
                "Invalid params for tools/call",
                data=exc.errors(include_url=False, include_context=False),
            ) from exc

    @staticmethod
    def build_spec(arguments: dict[str, Any]) -> CommandSpec:
        try:
            return CommandSpec.model_validate(arguments)
        except ValidationError as exc:
            raise SerializationError(
                f"Invalid arguments for {TOOL_NAME}",
                data=exc.errors(include_url=False, include_context=False),
            ) from exc

    @staticmethod
    def build_content(description: str, result: InvocationResult) -> dict[str, Any]:
        text = f"{description}\n\nResult:\n{result.model_dump_json()}"
        return {"content": [{"type": "text", "text": text}]}

    @staticmethod
    def _describe_or_empty(spec: CommandSpec) -> str:
        buf = io.StringIO()
        try:
            write_description(spec, buf)
        except Exception:
            logger.warning("Failed to generate command description", exc_info=True)
            return ""
        return buf.getvalue()
