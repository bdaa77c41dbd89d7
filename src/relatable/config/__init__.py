"""
relatable.config - Configuration loading and defaults

Configuration lives in ``.relatable.toml``, found by walking up from the
indexed directory. Values are merged over DEFAULT_CONFIG, then
``RELATABLE_<SECTION>_<KEY>`` environment variables are applied on top.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import tomlkit
from tomlkit.exceptions import TOMLKitError

from relatable.errors import ConfigError

CONFIG_FILENAME = ".relatable.toml"
ENV_PREFIX = "RELATABLE_"

DEFAULT_CONFIG: dict[str, Any] = {
    "tags": {
        "extension": "tags",
        "directory_file": "dir.tags",
    },
    "walk": {
        "follow_symlinks": False,
    },
    "logging": {
        "level": "WARNING",
    },
}


@dataclass(frozen=True)
class TagConfig:
    """Settings consumed by the graph builder.

    Attributes:
        extension: Tag file extension, without the leading dot.
        directory_file: Tag file name whose tags attach to its directory.
        follow_symlinks: Whether the walker descends into symlinked directories.
    """

    extension: str = "tags"
    directory_file: str = "dir.tags"
    follow_symlinks: bool = False

    @property
    def suffix(self) -> str:
        """The extension as a path suffix (``.tags``)."""
        return f".{self.extension}"

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> TagConfig:
        """Create a TagConfig from a merged configuration dictionary.

        Raises:
            ConfigError: If a value has the wrong type or is empty.
        """
        tags = config.get("tags", {})
        walk = config.get("walk", {})
        extension = str(tags.get("extension", cls.extension)).lstrip(".")
        directory_file = str(tags.get("directory_file", cls.directory_file))
        follow_symlinks = walk.get("follow_symlinks", cls.follow_symlinks)

        if not extension:
            raise ConfigError("tags.extension must not be empty")
        if not directory_file.endswith(f".{extension}"):
            raise ConfigError(
                f"tags.directory_file '{directory_file}' must end with '.{extension}'"
            )
        if not isinstance(follow_symlinks, bool):
            raise ConfigError("walk.follow_symlinks must be a boolean")

        return cls(
            extension=extension,
            directory_file=directory_file,
            follow_symlinks=follow_symlinks,
        )


def find_config_file(start: Path) -> Path | None:
    """Find .relatable.toml in start or any parent directory.

    Args:
        start: Directory (or file) to start searching from.

    Returns:
        Path to the config file, or None if not found.
    """
    current = Path(start).resolve()
    if not current.is_dir():
        current = current.parent
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def parse_toml_document(content: str) -> dict[str, Any]:
    """Parse TOML text into plain Python containers.

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        return tomlkit.parse(content).unwrap()
    except TOMLKitError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def merge_configs(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base.

    Nested tables are merged key by key; any other value replaces the base
    value.
    """
    result = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment override value.

    JSON arrays and objects are decoded, ``true``/``false`` become booleans,
    anything else (including malformed JSON) is returned as a string.
    """
    stripped = value.strip()
    if stripped.lower() == "true":
        return True
    if stripped.lower() == "false":
        return False
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    return value


def apply_env_overrides(
    config: Mapping[str, Any], environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Apply RELATABLE_<SECTION>_<KEY> overrides for known sections.

    The section is matched against the top-level tables of the config, so
    keys containing underscores (``FOLLOW_SYMLINKS``) are preserved.
    """
    environ = os.environ if environ is None else environ
    result = copy.deepcopy(dict(config))
    for name, raw in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        rest = name[len(ENV_PREFIX):].lower()
        for section in result:
            prefix = f"{section}_"
            if rest.startswith(prefix) and len(rest) > len(prefix):
                if not isinstance(result[section], dict):
                    break
                result[section][rest[len(prefix):]] = _try_parse_env_value(raw)
                break
    return result


def load_config(config_path: Path | None = None, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Load configuration merged over the defaults.

    Args:
        config_path: Path to a .relatable.toml file, or None for defaults only.
        environ: Environment mapping for overrides (defaults to os.environ).

    Returns:
        The merged configuration dictionary.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        try:
            content = Path(config_path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
        config = merge_configs(config, parse_toml_document(content))
    return apply_env_overrides(config, environ)


def get_config(root: Path, config_path: Path | None = None) -> dict[str, Any]:
    """Load the configuration that applies to an indexed root.

    Uses config_path when given, otherwise searches upward from root.
    """
    if config_path is None:
        config_path = find_config_file(root)
    return load_config(config_path)


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "TagConfig",
    "apply_env_overrides",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
    "parse_toml_document",
]
