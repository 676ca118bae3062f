"""Reading and merging YAML configuration files."""

import logging
from copy import deepcopy
from os import PathLike
from pathlib import Path

import yaml

__all__ = [
    "merge_config_dicts",
    "read_and_merge_config_files",
]

log = logging.getLogger(__name__)


def _merge_into(target: dict, overrides: dict, path: tuple[str, ...]) -> None:
    for key, value in overrides.items():
        key_path = ".".join((*path, str(key)))
        current = target.get(key)

        if value is None:
            target.setdefault(key, None)
        elif current is None:
            target[key] = deepcopy(value)
        elif isinstance(current, dict) and isinstance(value, dict):
            _merge_into(current, value, (*path, str(key)))
        elif type(current) is type(value):
            log.debug(f"Configuration key {key_path} overridden: {current!r} -> {value!r}")
            target[key] = deepcopy(value)
        else:
            raise ValueError(f"Conflict at {key_path}: {current!r} != {value!r}")


def merge_config_dicts(a: dict, b: dict) -> dict:
    """
    Return a copy of ``a`` with ``b`` merged into it.

    Nested mappings are merged key by key. Values from ``b`` replace values of
    the same type in ``a``; ``None`` on either side yields the other value.

    :raises ValueError: If a key holds values of different types
    """
    merged = deepcopy(a)
    _merge_into(merged, b, ())
    return merged


def read_and_merge_config_files(config_files: list[str | PathLike]) -> dict:
    """
    Merge YAML configuration files, later files taking precedence.

    Empty files count as empty configurations.

    :raises RuntimeError: If a file cannot be read, is not a YAML mapping or conflicts with earlier files
    """
    configuration: dict = {}
    for config_path in map(Path, config_files):
        try:
            content = yaml.safe_load(config_path.read_text()) or {}
            if not isinstance(content, dict):
                raise ValueError(f"expected a mapping, got {type(content).__name__}")
            configuration = merge_config_dicts(configuration, content)
        except (OSError, yaml.YAMLError, ValueError) as e:
            raise RuntimeError(f"Error reading configuration file: '{config_path}'") from e
        log.debug(f"Loaded configuration file {config_path}")

    return configuration
