"""use_aws MCP server — exposes the AWS CLI as a single JSON-RPC tool."""

from __future__ import annotations

__version__ = "0.1.0"
