"""Capability manifest sources for ``tools/list``.

The manifest is a static JSON document with a top-level ``tools`` key.  It
is read on every ``tools/list`` so edits take effect without a restart.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from awsmcp.protocol.errors import ManifestError

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_PATH = Path("schema.json")


@runtime_checkable
class ManifestSource(Protocol):
    """Supplies the tool list advertised by ``tools/list``."""

    def load_tools(self) -> list[Any]:
        """Return the advertised tool schemas.

        Raises:
            ManifestError: The manifest is missing or malformed.
        """
        ...


class FileManifestSource:
    """Reads the manifest from a JSON file on disk."""

    def __init__(self, path: Path | str = DEFAULT_MANIFEST_PATH) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_tools(self) -> list[Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestError(f"Failed to read {self._path}: {exc}") from exc

        try:
            document: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Failed to parse {self._path}: {exc}") from exc

        if not isinstance(document, dict) or "tools" not in document:
            raise ManifestError(f"{self._path} does not contain a 'tools' key")

        tools = document["tools"]
        if not isinstance(tools, list):
            raise ManifestError(f"'tools' in {self._path} must be a list")

        logger.debug("Loaded %d tool(s) from %s", len(tools), self._path)
        return tools


class StaticManifestSource:
    """Serves a fixed in-memory tool list."""

    def __init__(self, tools: list[Any]) -> None:
        self._tools = list(tools)

    def load_tools(self) -> list[Any]:
        return list(self._tools)
