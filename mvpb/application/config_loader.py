"""Layered YAML configuration.

Layers, lowest precedence first:
    built-in defaults
    ~/.mvpb/config.yml          (user)
    ./.mvpb/config.yml          (project)
    CLI overrides

Mappings are merged key by key at every depth; any other value from a
higher layer replaces the lower one outright. A missing file is an empty
layer.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mvpb.application.config_models import BuilderConfig
from mvpb.domain.constants import CONFIG_DIRNAME, CONFIG_FILENAME


class ConfigLoadError(Exception):
    """A config file could not be read or parsed, or the result is invalid."""

    def __init__(self, message: str, *, path: Path | None = None, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        return self.message if self.path is None else f"{self.message}: {self.path}"


def _defaults() -> dict[str, Any]:
    return BuilderConfig().model_dump()


def _overlay(lower: dict[str, Any], upper: dict[str, Any]) -> dict[str, Any]:
    result = dict(lower)
    for key, value in upper.items():
        below = result.get(key)
        result[key] = _overlay(below, value) if isinstance(below, dict) and isinstance(value, dict) else value
    return result


def _read_layer(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigLoadError("Failed to read config file", path=path, cause=e) from e
    except yaml.YAMLError as e:
        raise ConfigLoadError("Malformed YAML", path=path, cause=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError("YAML root must be a mapping", path=path)
    return data


def _layer_path(root: Path) -> Path:
    return root / CONFIG_DIRNAME / CONFIG_FILENAME


def load_config(*, project_root: Path | None = None, user_home: Path | None = None) -> dict[str, Any]:
    """Merge defaults, the user file and the project file into one mapping."""
    merged = _defaults()
    for root in (user_home or Path.home(), project_root or Path.cwd()):
        merged = _overlay(merged, _read_layer(_layer_path(root)))
    return merged


def load_builder_config(
    *,
    project_root: Path | None = None,
    user_home: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> BuilderConfig:
    """Load every layer, apply CLI overrides and validate.

    Args:
        overrides: Values from command-line flags; None means "not given".

    Raises:
        ConfigLoadError: If a file is malformed or the merged config is invalid.
    """
    merged = load_config(project_root=project_root, user_home=user_home)
    given = {key: value for key, value in (overrides or {}).items() if value is not None}
    merged = _overlay(merged, given)

    try:
        return BuilderConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid configuration: {e}", cause=e) from e
