"""Data models for the ``use_aws`` tool."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CommandSpec(BaseModel):
    """One invocation of the AWS CLI, as requested by the peer.

    Built fresh from untrusted ``tools/call`` arguments and never mutated.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    service_name: str = Field(..., min_length=1, description="AWS CLI service, e.g. 's3'.")
    operation_name: str = Field(..., min_length=1, description="Service operation, e.g. 'list-buckets'.")
    parameters: dict[str, Any] | None = Field(
        default=None,
        description="Operation parameters; an empty-string value is emitted as a bare flag.",
    )
    region: str = Field(..., min_length=1, description="AWS region passed as --region.")
    profile_name: str | None = Field(default=None, description="Named profile passed as --profile.")
    label: str | None = Field(default=None, description="Human-readable label for the call.")


class InvocationResult(BaseModel):
    """Outcome of a successful AWS CLI invocation."""

    exit_status: str = Field(..., description="Process exit code as a string.")
    stdout: str = Field(default="", description="Captured stdout, possibly truncated.")
    stderr: str = Field(default="", description="Captured stderr, possibly truncated.")


class ToolCallParams(BaseModel):
    """The ``params`` object of a ``tools/call`` request."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
