"""Layered configuration resolution."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import MediaFSConfig

ENV_PREFIX = "MEDIAFS__"


def resolve_with_precedence(
    *,
    defaults: MediaFSConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> MediaFSConfig:
    """Layer override sources over ``defaults`` and validate the result.

    Sources apply in order file, environment, CLI; a later layer wins on
    every key it sets. Keys may be nested mappings, dotted paths such as
    ``"adapter.root_path"``, or a mix of both.

    Raises:
        ConfigError: If a layer is malformed or the merged values fail validation.
    """
    merged = defaults.model_dump(mode="python")
    for layer, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if source is None:
            continue
        if not isinstance(source, MappingABC):
            raise ConfigError(f"{layer.capitalize()} overrides must be a mapping.")
        _apply_layer(merged, source, layer=layer)

    try:
        return MediaFSConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def overrides_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``MEDIAFS__SECTION__KEY`` variables as dotted-key overrides.

    Values are parsed as YAML scalars so ``"false"`` and ``"240"`` arrive typed;
    anything YAML rejects is kept as the raw string.
    """
    overrides: dict[str, Any] = {}
    for key, raw_value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        segments = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
        if not segments:
            continue
        try:
            value: Any = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        overrides[".".join(segments)] = value
    return overrides


def _apply_layer(target: dict[str, Any], source: Mapping[str, Any], *, layer: str) -> None:
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{layer.capitalize()} override keys must be strings.")
        *parents, leaf = key.split(".")
        node = target
        for segment in parents:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(
                    f"{layer.capitalize()} override '{key}' conflicts with a non-mapping value."
                )
            node = child

        if isinstance(value, MappingABC):
            existing = node.get(leaf)
            if not isinstance(existing, dict):
                existing = {}
                node[leaf] = existing
            _apply_layer(existing, value, layer=layer)
        else:
            node[leaf] = deepcopy(value)


__all__ = ["ENV_PREFIX", "resolve_with_precedence", "overrides_from_env"]
