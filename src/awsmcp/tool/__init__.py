"""The ``use_aws`` tool: command model, description, policy and invocation."""

from awsmcp.tool.description import render_description, write_description
from awsmcp.tool.handler import TOOL_NAME, ToolCallHandler
from awsmcp.tool.invoker import (
    AsyncioProcessRunner,
    InvokerConfig,
    ProcessInvoker,
    ProcessOutput,
    ProcessRunner,
)
from awsmcp.tool.models import CommandSpec, InvocationResult, ToolCallParams
from awsmcp.tool.policy import AcceptancePolicy, PolicyConfig

__all__ = [
    "TOOL_NAME",
    "AcceptancePolicy",
    "AsyncioProcessRunner",
    "CommandSpec",
    "InvocationResult",
    "InvokerConfig",
    "PolicyConfig",
    "ProcessInvoker",
    "ProcessOutput",
    "ProcessRunner",
    "ToolCallHandler",
    "ToolCallParams",
    "render_description",
    "write_description",
]
