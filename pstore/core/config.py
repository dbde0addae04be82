"""Typed loading of the optional ``pstore.toml`` config file.

The file lets CI pipelines keep stable publish settings next to the project
instead of repeating them as flags. Every key is optional; command-line flags
take precedence over file values.

Example:

    [publish]
    package_name = "com.sample.app"
    track = "beta"
    credentials = "secrets/play.json"
    apk = false

    [[publish.binaries]]
    path = "build/app-release.aab"
    mapping = "build/mapping.txt"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_list, get_str, get_table

__all__ = [
    "ConfigError",
    "PublishConfig",
    "load_config",
]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the config file cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PublishConfig:
    """Publish settings read from the config file.

    Fields left as None were not set in the file. ``binaries`` holds
    ``(path, mapping)`` pairs with an empty mapping when none was given.
    """

    package_name: str | None = None
    track: str | None = None
    credentials: str | None = None
    apk: bool | None = None
    verbose: bool | None = None
    binaries: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> PublishConfig:
        """Create PublishConfig from parsed TOML.

        Raises:
            ValueError: If a ``[[publish.binaries]]`` entry has no path.
        """
        publish: StrDict = get_table(data, "publish") or {}

        binaries: list[tuple[str, str]] = []
        for index, item in enumerate(get_list(publish, "binaries") or []):
            entry = as_str_dict(item)
            path = get_str(entry, "path") if entry is not None else None
            if entry is None or path is None:
                raise ValueError(f"publish.binaries[{index}] must be a table with a 'path'")
            binaries.append((path, get_str(entry, "mapping") or ""))

        return cls(
            package_name=get_str(publish, "package_name"),
            track=get_str(publish, "track"),
            credentials=get_str(publish, "credentials"),
            apk=get_bool(publish, "apk"),
            verbose=get_bool(publish, "verbose"),
            binaries=tuple(binaries),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[PublishConfig, ConfigError]:
    """Load publish settings from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(PublishConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(PublishConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
