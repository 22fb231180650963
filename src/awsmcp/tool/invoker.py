"""ProcessInvoker — runs the AWS CLI for a :class:`CommandSpec`.

Argument and environment construction are pure functions so they can be
tested without spawning anything.  The spawn itself goes through the
narrow :class:`ProcessRunner` protocol; :class:`AsyncioProcessRunner` is
the real implementation.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from awsmcp import __version__
from awsmcp.tool.errors import CommandFailedError, InvocationError, InvocationTimeoutError
from awsmcp.tool.models import InvocationResult
from awsmcp.utils.telemetry import ATTR_EXIT_STATUS, ATTR_OPERATION, ATTR_SERVICE, get_tracer

if TYPE_CHECKING:
    from awsmcp.tool.models import CommandSpec

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

USER_AGENT_ENV_VAR = "AWS_EXECUTION_ENV"
USER_AGENT_TOKEN = f"UseAws-MCP-Server Version/{__version__}"
TRUNCATION_MARKER = " ... truncated"

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s_\-]+")


class InvokerConfig(BaseModel):
    """Configuration for the process invoker."""

    executable: str = Field(default="aws", description="Program to run.")
    max_response_size: int = Field(
        default=100_000,
        gt=0,
        description="Total output budget in bytes, split evenly between stdout and stderr.",
    )
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for the command; None waits indefinitely.",
    )

    @property
    def stream_budget(self) -> int:
        return self.max_response_size // 2


class ProcessOutput(BaseModel):
    """Raw result of running a process."""

    returncode: int | None = None
    stdout: bytes = b""
    stderr: bytes = b""


@runtime_checkable
class ProcessRunner(Protocol):
    """Spawns a process and waits for it to finish."""

    async def run(
        self,
        argv: list[str],
        env: Mapping[str, str],
        *,
        timeout: float | None = None,
    ) -> ProcessOutput:
        """Run *argv* with *env* and return its captured output."""
        ...


class AsyncioProcessRunner:
    """Runs processes with :func:`asyncio.create_subprocess_exec`.

    Satisfies the :class:`ProcessRunner` protocol.
    """

    async def run(
        self,
        argv: list[str],
        env: Mapping[str, str],
        *,
        timeout: float | None = None,
    ) -> ProcessOutput:
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=dict(env),
            )
        except OSError as exc:
            raise InvocationError(f"Unable to spawn command '{argv[0]}': {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except TimeoutError:
            proc.kill()
            await proc.wait()
            raise InvocationTimeoutError(timeout or 0.0)

        return ProcessOutput(returncode=proc.returncode, stdout=stdout, stderr=stderr)


def to_flag_name(key: str) -> str:
    """Convert a parameter key to an AWS CLI flag (``TableName`` -> ``--table-name``)."""
    name = key.lstrip("-")
    name = _ACRONYM_BOUNDARY.sub(r"\1-\2", name)
    name = _CAMEL_BOUNDARY.sub(r"\1-\2", name)
    name = _SEPARATORS.sub("-", name).strip("-")
    return f"--{name.lower()}"


def _flag_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def cli_parameters(spec: CommandSpec) -> list[tuple[str, str]]:
    """Return ``(flag, value)`` pairs for the parameters of *spec*."""
    if not spec.parameters:
        return []
    return [(to_flag_name(key), _flag_value(value)) for key, value in spec.parameters.items()]


def build_argv(spec: CommandSpec, executable: str = "aws") -> list[str]:
    """Build the full argument vector for *spec*."""
    argv = [executable, "--region", spec.region]
    if spec.profile_name is not None:
        argv += ["--profile", spec.profile_name]
    argv += [spec.service_name, spec.operation_name]
    for flag, value in cli_parameters(spec):
        argv.append(flag)
        # An empty value marks a boolean flag.
        if value != "":
            argv.append(value)
    return argv


def build_env(base: Mapping[str, str], token: str = USER_AGENT_TOKEN) -> dict[str, str]:
    """Return a copy of *base* with *token* appended to the user-agent variable."""
    env = dict(base)
    existing = env.get(USER_AGENT_ENV_VAR, "")
    env[USER_AGENT_ENV_VAR] = f"{existing} {token}" if existing else token
    return env


def truncate_output(data: bytes, limit: int) -> str:
    """Decode *data*, cutting it to *limit* bytes and marking the cut."""
    if len(data) <= limit:
        return data.decode(errors="replace")
    return data[:limit].decode(errors="ignore") + TRUNCATION_MARKER


class ProcessInvoker:
    """Execute a :class:`CommandSpec` through the AWS CLI."""

    def __init__(
        self,
        config: InvokerConfig | None = None,
        *,
        runner: ProcessRunner | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._config = config or InvokerConfig()
        self._runner = runner or AsyncioProcessRunner()
        self._environ = environ

    @property
    def config(self) -> InvokerConfig:
        return self._config

    async def invoke(self, spec: CommandSpec) -> InvocationResult:
        """Run *spec* and return its result.

        Raises:
            InvocationError: The process could not be spawned or timed out.
            CommandFailedError: The process exited with a non-zero status.
        """
        argv = build_argv(spec, self._config.executable)
        env = build_env(self._environ if self._environ is not None else os.environ)

        with _tracer.start_as_current_span("awsmcp.tool.invoke") as span:
            span.set_attribute(ATTR_SERVICE, spec.service_name)
            span.set_attribute(ATTR_OPERATION, spec.operation_name)

            logger.info("Invoking %s %s in %s", spec.service_name, spec.operation_name, spec.region)
            output = await self._runner.run(argv, env, timeout=self._config.timeout)

            status = str(output.returncode if output.returncode is not None else 0)
            span.set_attribute(ATTR_EXIT_STATUS, status)

        budget = self._config.stream_budget
        stdout = truncate_output(output.stdout, budget)
        stderr = truncate_output(output.stderr, budget)

        if status != "0":
            logger.warning("Command %s %s exited with status %s", spec.service_name, spec.operation_name, status)
            raise CommandFailedError(status, stderr)

        return InvocationResult(exit_status=status, stdout=stdout, stderr=stderr)
