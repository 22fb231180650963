"""Server settings, loaded from an optional YAML file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from awsmcp.protocol.manifest import DEFAULT_MANIFEST_PATH
from awsmcp.tool.invoker import InvokerConfig
from awsmcp.tool.policy import DEFAULT_READ_ONLY_PREFIXES, PolicyConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Raised when a settings file fails parsing or validation."""


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerSettings(BaseModel):
    """Top-level server configuration."""

    manifest_path: Path = DEFAULT_MANIFEST_PATH
    executable: str = "aws"
    max_response_size: int = Field(default=100_000, gt=0)
    timeout: float | None = Field(default=None, gt=0)
    read_only_prefixes: list[str] = Field(default_factory=lambda: list(DEFAULT_READ_ONLY_PREFIXES))
    log_level: LogLevel = "INFO"
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    def invoker_config(self) -> InvokerConfig:
        return InvokerConfig(
            executable=self.executable,
            max_response_size=self.max_response_size,
            timeout=self.timeout,
        )

    def policy_config(self) -> PolicyConfig:
        return PolicyConfig(read_only_prefixes=list(self.read_only_prefixes))


class SettingsLoader:
    """Load and validate a YAML settings file into :class:`ServerSettings`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self, **overrides: Any) -> ServerSettings:
        """Read YAML, interpolate env vars, apply *overrides* and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.  Overrides whose
        value is ``None`` are ignored.

        Raises:
            ConfigError: On read errors, YAML parse errors or validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        try:
            data: Any = yaml.safe_load(os.path.expandvars(raw))
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Settings YAML must be a mapping")

        return build_settings(data, **overrides)


def build_settings(data: dict[str, Any] | None = None, **overrides: Any) -> ServerSettings:
    """Validate *data* merged with the non-``None`` *overrides*.

    Raises:
        ConfigError: Validation failed.
    """
    merged = dict(data or {})
    merged.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return ServerSettings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
