"""
Configuration Validation Utilities

This module provides validation functions for cascade configurations.

Import Policy:
    from hadron_cascade.config.validation import validate_config, warn_if_unsafe

DO NOT use: from hadron_cascade.config.validation import *
"""

import warnings
from typing import List, Tuple

from hadron_cascade.config.cascade_config import CascadeConfig
from hadron_cascade.config.enums import RetryExhaustedPolicy


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


class ConfigurationWarning(Warning):
    """Warning for potentially unsafe configuration choices."""

    pass


def validate_config(config: CascadeConfig, raise_on_error: bool = True) -> Tuple[bool, List[str]]:
    """Validate a cascade configuration.

    Args:
        config: CascadeConfig to validate
        raise_on_error: If True, raise ConfigurationError on validation failure

    Returns:
        Tuple of (is_valid, error_messages)

    Raises:
        ConfigurationError: If validation fails and raise_on_error=True
    """
    errors = config.validate()

    if errors:
        if raise_on_error:
            raise ConfigurationError(
                f"Configuration validation failed with {len(errors)} error(s):\n"
                + "\n".join(f"  - {err}" for err in errors)
            )
        return False, errors

    return True, []


def warn_if_unsafe(config: CascadeConfig) -> List[str]:
    """Check for configuration choices that are legal but questionable.

    Warnings are issued via Python's warnings module.

    Args:
        config: CascadeConfig to check

    Returns:
        List of warning messages (empty if no warnings)
    """
    warnings_list = []

    if not config.nuclear.do_fermi:
        warnings_list.append(
            "do_fermi is disabled. Target nucleons are struck at rest, "
            "which removes the Fermi smearing of outgoing spectra."
        )

    if config.nuclear.fermi_factor > 1.5:
        warnings_list.append(
            f"fermi_factor ({config.nuclear.fermi_factor}) is large. "
            "Sampled Fermi momenta will exceed any realistic nucleus."
        )

    if config.kinematics.max_kinematics_attempts < 10:
        warnings_list.append(
            f"max_kinematics_attempts ({config.kinematics.max_kinematics_attempts}) is small. "
            "Many particles near threshold will degrade to stable pass-through."
        )

    if config.kinematics.retry_exhausted_policy == RetryExhaustedPolicy.RAISE:
        warnings_list.append(
            "retry_exhausted_policy=RAISE aborts the cascade on the first particle "
            "whose kinematics never succeed. Use STABLE_FINAL_STATE for production runs."
        )

    if not config.kinematics.validate_conservation:
        warnings_list.append(
            "validate_conservation is disabled. Bookkeeping errors will go unnoticed."
        )

    for warning_msg in warnings_list:
        warnings.warn(warning_msg, ConfigurationWarning, stacklevel=2)

    return warnings_list


def create_validated_config(**kwargs) -> CascadeConfig:
    """Create a cascade configuration with validation.

    Keyword arguments are matched against the fields of each sub-config
    (nuclear, fates, absorption, kinematics).

    Args:
        **kwargs: Parameters to override in default config

    Returns:
        Validated CascadeConfig

    Raises:
        ConfigurationError: If a key is unknown or the resulting configuration is invalid

    Example:
        >>> config = create_validated_config(do_fermi=False, max_kinematics_attempts=20)
    """
    from hadron_cascade.config.cascade_config import create_default_config

    config = create_default_config()
    sections = (config.nuclear, config.fates, config.absorption, config.kinematics)

    for key, value in kwargs.items():
        for section in sections:
            if hasattr(section, key):
                if key == "retry_exhausted_policy" and isinstance(value, str):
                    value = RetryExhaustedPolicy(value)
                setattr(section, key, value)
                break
        else:
            raise ConfigurationError(f"Unknown configuration parameter: {key}")

    validate_config(config, raise_on_error=True)
    return config
