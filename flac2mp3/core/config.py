"""
Configuration management for flac2mp3.

This module handles loading, validating, and providing access to the
conversion settings. Settings come from a YAML document given with
--config, or from the built-in default when no file is given.

The configuration contains:
    - The decode command template (lossless file -> raw audio on stdout)
    - The encode command template (raw audio on stdin -> lossy file)
    - Whether to remove source files after a successful conversion
    - Whether existing destination files may be overwritten
    - Number of parallel workers
    - Source and destination file extensions

Command Templates:
    A template is a list of tokens, the first being the program. A token
    equal to "{}" is replaced with the path of the file being processed and
    a token equal to "{{}}" is replaced with a literal "{}".

Example config.yaml:
    decode_command: ["flac", "-cd", "{}"]
    encode_command: ["lame", "-V0", "-", "{}"]
    remove_after: false
    overwrite: false
    workers: 4
    source_extension: flac
    destination_extension: mp3
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from flac2mp3.core.exceptions import ConfigError


# Used when no configuration file is given on the command line
DEFAULT_CONFIG = """
decode_command: ["flac", "-cd", "{}"]
encode_command: ["lame", "-V0", "-", "{}"]
"""

DEFAULT_SOURCE_EXTENSION = "flac"
DEFAULT_DESTINATION_EXTENSION = "mp3"


@dataclass(frozen=True)
class Config:
    """
    Complete conversion configuration.

    Created by load_config() or parse_config() and treated as immutable
    for the whole run. Worker threads share it without locking.

    Attributes:
        decode_command: Template producing raw audio on stdout.
        encode_command: Template reading raw audio from stdin.
        remove_after: Delete the source file once conversion and tagging succeeded.
        overwrite: Allow replacing an existing destination file.
        workers: Number of parallel workers. 0 means unset (serial, unless
                 the command line resolves it to something else).
        source_extension: Extension of the files to convert, without the dot.
        destination_extension: Extension of the converted files, without the dot.

    Example:
        config = load_config(Path("flac2mp3.yaml"))
        print(f"Decoding with: {' '.join(config.decode_command)}")
    """
    decode_command: tuple[str, ...]
    encode_command: tuple[str, ...]
    remove_after: bool = False
    overwrite: bool = False
    workers: int = 0
    source_extension: str = DEFAULT_SOURCE_EXTENSION
    destination_extension: str = DEFAULT_DESTINATION_EXTENSION


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from a YAML file.

    Args:
        config_path: Path to the config file. If None, the built-in
                     default configuration is used.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If the config file is not found, cannot be read, has
                     invalid YAML syntax, or contains invalid values.

    Example:
        try:
            config = load_config(path)
        except ConfigError as e:
            print(f"Configuration error: {e.message}")
            sys.exit(1)
    """
    if config_path is None:
        return parse_config(DEFAULT_CONFIG)

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    return parse_config(content, source=str(config_path))


def parse_config(content: str, source: str = "<default>") -> Config:
    """
    Parse and validate a YAML configuration document.

    Args:
        content: YAML text.
        source: Where the text came from, used in error details.

    Returns:
        Config with defaults applied for optional fields.

    Raises:
        ConfigError: On invalid YAML or invalid values.
    """
    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": source, "original_error": str(e)}
        ) from e

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": source}
        )

    source_extension = _parse_extension(raw_config, "source_extension", DEFAULT_SOURCE_EXTENSION)
    destination_extension = _parse_extension(
        raw_config, "destination_extension", DEFAULT_DESTINATION_EXTENSION
    )
    # Same extension would make every destination its own source
    if source_extension.lower() == destination_extension.lower():
        raise ConfigError(
            "'source_extension' and 'destination_extension' must differ",
            details={
                "field": "destination_extension",
                "value": destination_extension,
                "file_path": source,
            }
        )

    return Config(
        decode_command=_parse_command(raw_config, "decode_command"),
        encode_command=_parse_command(raw_config, "encode_command"),
        remove_after=_parse_flag(raw_config, "remove_after"),
        overwrite=_parse_flag(raw_config, "overwrite"),
        workers=_parse_workers(raw_config.get("workers")),
        source_extension=source_extension,
        destination_extension=destination_extension,
    )


def _parse_command(raw_config: dict[str, Any], field: str) -> tuple[str, ...]:
    """
    Validate a command template.

    Raises:
        ConfigError: If the template is missing, empty, or has non-string tokens.
    """
    command = raw_config.get(field)

    if not isinstance(command, list) or not command:
        raise ConfigError(
            f"'{field}' must be a non-empty list of strings",
            details={"field": field}
        )

    for token in command:
        if not isinstance(token, str):
            raise ConfigError(
                f"'{field}' must only contain strings, got {token!r}",
                details={"field": field, "value": token}
            )

    if not command[0].strip():
        raise ConfigError(
            f"'{field}' must start with a program name",
            details={"field": field}
        )

    return tuple(command)


def _parse_flag(raw_config: dict[str, Any], field: str) -> bool:
    """Validate an optional boolean flag (default False)."""
    value = raw_config.get(field)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(
            f"'{field}' must be true or false",
            details={"field": field, "value": value}
        )
    return value


def _parse_workers(value: Any) -> int:
    """
    Validate the worker count.

    Zero (or absent) is accepted here and means "unset"; the command line
    decides what it turns into.
    """
    if value is None:
        return 0
    # bool is a subclass of int, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(
            "'workers' must be a non-negative integer",
            details={"field": "workers", "value": value}
        )
    return value


def _parse_extension(raw_config: dict[str, Any], field: str, default: str) -> str:
    """
    Validate a file extension, stripping a leading dot.

    Raises:
        ConfigError: If the extension is empty or contains a path separator.
    """
    value = raw_config.get(field)
    if value is None:
        return default

    if not isinstance(value, str):
        raise ConfigError(
            f"'{field}' must be a string",
            details={"field": field, "value": value}
        )

    extension = value.strip().lstrip(".")
    if not extension or "/" in extension or "\\" in extension:
        raise ConfigError(
            f"'{field}' must be a file extension like 'flac'",
            details={"field": field, "value": value}
        )
    return extension
