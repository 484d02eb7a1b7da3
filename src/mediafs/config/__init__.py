"""YAML-backed configuration for mediafs."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import MediaFSConfig
from .resolver import overrides_from_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.mediafs/config.yaml")
_HEADER_LINES = (
    "# mediafs configuration file",
    "# Edit by hand or with `mediafs config set KEY --value VALUE`.",
)


class ConfigManager:
    """Own the on-disk configuration file and resolve the effective settings.

    Args:
        config_path: YAML file to use; defaults to ``~/.mediafs/config.yaml``.
        env: Environment mapping scanned for ``MEDIAFS__`` overrides;
            defaults to ``os.environ``.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = os.environ if env is None else env

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
    ) -> MediaFSConfig:
        """Return the effective configuration, creating the file on first use."""
        self.ensure_exists()
        return resolve_with_precedence(
            defaults=MediaFSConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=overrides_from_env(self._env) if include_env else None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored in the configuration file.

        Raises:
            ConfigError: If the file is not valid YAML or not a mapping.
        """
        text = self.read_text()
        try:
            data = yaml.safe_load(text) if text else None
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return data

    def save(self, data: Mapping[str, Any]) -> None:
        """Write ``data`` as YAML beneath a generated header."""
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(
            "\n".join((*_HEADER_LINES, f"# Last updated: {stamp}", body)), encoding="utf-8"
        )

    def ensure_exists(self) -> Path:
        """Write the default configuration if no file exists yet."""
        if not self.config_path.exists():
            self.save(MediaFSConfig().model_dump(mode="python"))
        return self.config_path

    def read_text(self) -> str:
        if not self.config_path.exists():
            return ""
        return self.config_path.read_text(encoding="utf-8")


__all__ = [
    "ConfigManager",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "MediaFSConfig",
    "resolve_with_precedence",
]
