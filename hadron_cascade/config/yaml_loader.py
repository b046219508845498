"""Configuration file access for the cascade.

Reads the packaged defaults.yaml (or the file named by
HADRON_CASCADE_DEFAULTS_PATH) and user configuration files in YAML or JSON.
Both are checked against the cascade sections (nuclear, fates, absorption,
kinematics) before anything else sees them.
It has no dependencies on other config modules to avoid circular imports.

Usage:
    from hadron_cascade.config.yaml_loader import get_default, read_config_file
    k_F = get_default('nuclear.fermi_momentum')
    sections = read_config_file('cascade.yaml')
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

CONFIG_SECTIONS = ("nuclear", "fates", "absorption", "kinematics")
DEFAULTS_ENV_VAR = "HADRON_CASCADE_DEFAULTS_PATH"

Sections = dict[str, dict[str, Any]]

_DEFAULTS: Sections | None = None


def check_sections(data: Any, source: str = "configuration") -> Sections:
    """Check that ``data`` maps cascade section names to mappings.

    Args:
        data: Parsed configuration (None is read as empty)
        source: Name used in error messages

    Returns:
        Deep copy of ``data`` with every section present, empty when absent.

    Raises:
        ValueError: The top level or a section is not a mapping, or an
            unknown section is named
    """
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{source}: top level must be a mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - set(CONFIG_SECTIONS))
    if unknown:
        raise ValueError(
            f"{source}: unknown section(s) {unknown}, expected some of {list(CONFIG_SECTIONS)}"
        )

    sections: Sections = {}
    for name in CONFIG_SECTIONS:
        section = data.get(name) or {}
        if not isinstance(section, Mapping):
            raise ValueError(
                f"{source}: section '{name}' must be a mapping, got {type(section).__name__}"
            )
        sections[name] = copy.deepcopy(dict(section))
    return sections


def read_config_file(path: Union[str, Path]) -> Sections:
    """Read cascade sections from a .yaml/.yml or .json file.

    Raises:
        ValueError: Unsupported suffix or malformed sections
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".yaml", ".yml", ".json"):
        raise ValueError(f"Unsupported config format: {path.suffix}")

    with open(path, encoding="utf-8") as f:
        data = json.load(f) if suffix == ".json" else yaml.safe_load(f)
    return check_sections(data, source=str(path))


def _defaults_path() -> Path:
    env_path = os.getenv(DEFAULTS_ENV_VAR)
    if env_path and Path(env_path).exists():
        return Path(env_path)

    yaml_path = Path(__file__).parent / "defaults.yaml"
    if not yaml_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {yaml_path}\n"
            f"Set {DEFAULTS_ENV_VAR} if the file is relocated."
        )
    return yaml_path


def _defaults() -> Sections:
    global _DEFAULTS
    if _DEFAULTS is None:
        _DEFAULTS = read_config_file(_defaults_path())
    return _DEFAULTS


def get_defaults() -> Sections:
    """All default sections; the caller owns the returned copy.

    Example:
        >>> get_defaults()['nuclear']['fermi_momentum']
        250.0
    """
    return copy.deepcopy(_defaults())


def get_default(key_path: str, default: Any = None) -> Any:
    """Default value at a dotted ``section.key`` path, or ``default`` if unset.

    Example:
        >>> get_default('absorption.max_absorbed_nucleons')
        85
    """
    section, _, key = key_path.partition(".")
    value = _defaults().get(section, {}).get(key)
    return default if value is None else value


def reload_defaults() -> None:
    """Re-read the defaults file, e.g. after changing HADRON_CASCADE_DEFAULTS_PATH."""
    global _DEFAULTS
    _DEFAULTS = read_config_file(_defaults_path())
