"""AcceptancePolicy — classifies commands as read-only or mutating.

Pure logic, no I/O.  An operation is read-only only when its name starts
with one of the configured prefixes; every other operation, including the
empty string, requires acceptance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from awsmcp.tool.models import CommandSpec

DEFAULT_READ_ONLY_PREFIXES: tuple[str, ...] = (
    "get",
    "describe",
    "list",
    "ls",
    "search",
    "batch_get",
)


class PolicyConfig(BaseModel):
    """Configuration for the acceptance policy."""

    read_only_prefixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_READ_ONLY_PREFIXES),
        description="Operation-name prefixes treated as read-only.",
    )


class AcceptancePolicy:
    """Decide whether a :class:`CommandSpec` needs human acceptance."""

    def __init__(self, config: PolicyConfig | None = None) -> None:
        self._config = config or PolicyConfig()
        self._prefixes = tuple(p for p in self._config.read_only_prefixes if p)

    @property
    def config(self) -> PolicyConfig:
        return self._config

    def is_read_only(self, operation_name: str) -> bool:
        return operation_name.startswith(self._prefixes) if self._prefixes else False

    def requires_acceptance(self, spec: CommandSpec) -> bool:
        """Return ``True`` when *spec* may mutate state."""
        return not self.is_read_only(spec.operation_name)
