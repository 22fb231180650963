"""Human-readable rendering of a :class:`CommandSpec`.

Output is written incrementally to any text sink (``io.StringIO``, a
terminal stream, ...).  Write errors from the sink propagate.
"""

from __future__ import annotations

import io
import json
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from awsmcp.tool.models import CommandSpec

HEADER = "Running aws cli command:\n\n"
DEFAULT_PROFILE = "default"


class TextSink(Protocol):
    def write(self, text: str, /) -> Any: ...


def write_description(spec: CommandSpec, sink: TextSink) -> None:
    """Write the description of *spec* to *sink*."""
    sink.write(HEADER)
    sink.write(f"Service name: {spec.service_name}\n")
    sink.write(f"Operation name: {spec.operation_name}\n")

    if spec.parameters:
        sink.write("Parameters:\n")
        for name, value in spec.parameters.items():
            if value == "":
                sink.write(f"- {name}\n")
            else:
                sink.write(f"- {name}: {_render_value(value)}\n")

    profile = spec.profile_name if spec.profile_name is not None else DEFAULT_PROFILE
    sink.write(f"Profile name: {profile}\n")
    sink.write(f"Region: {spec.region}")

    if spec.label is not None:
        sink.write(f"\nLabel: {spec.label}")


def render_description(spec: CommandSpec) -> str:
    """Return the description of *spec* as a string."""
    buf = io.StringIO()
    write_description(spec, buf)
    return buf.getvalue()


def _render_value(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
