"""Error types for the tool execution layer."""


class ToolError(Exception):
    """Base error for all tool execution failures."""


class InvocationError(ToolError):
    """The external command could not be spawned or did not complete."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Command invocation failed" + (f": {detail}" if detail else ""))


class InvocationTimeoutError(InvocationError):
    """The external command exceeded the configured timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"timed out after {timeout}s")


class CommandFailedError(ToolError):
    """The external command exited with a non-zero status.

    The message is the captured (already truncated) stderr so it can be
    forwarded to the peer untouched.
    """

    def __init__(self, exit_status: str, stderr: str) -> None:
        self.exit_status = exit_status
        self.stderr = stderr
        super().__init__(stderr)
