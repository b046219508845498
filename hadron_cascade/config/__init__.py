"""Configuration Module - Single Source of Truth for Transport Parameters

Default Configuration (loaded from defaults.yaml):
    from hadron_cascade.config import get_default, get_defaults

    k_F = get_default('nuclear.fermi_momentum')
    all_defaults = get_defaults()

Recommended Usage:
    from hadron_cascade.config import CascadeConfig, create_validated_config

    config = create_validated_config()
    config = create_validated_config(do_fermi=False, max_kinematics_attempts=20)

Import Policy:
    DO NOT use: from hadron_cascade.config import *

Submodules:
    enums: Configuration enumerations (RetryExhaustedPolicy)
    yaml_loader: defaults and configuration files (get_default, read_config_file)
    cascade_config: Configuration dataclasses (NuclearConfig, KinematicsConfig, etc.)
    validation: Validation utilities (validate_config, warn_if_unsafe, etc.)
"""

from hadron_cascade.config.enums import RetryExhaustedPolicy
# Import YAML loader functions first (no circular dependencies)
from hadron_cascade.config.yaml_loader import (
    get_default,
    get_defaults,
    read_config_file,
    reload_defaults,
)
from hadron_cascade.config.cascade_config import (
    AbsorptionConfig,
    CascadeConfig,
    FateConfig,
    KinematicsConfig,
    NuclearConfig,
    create_default_config,
)
from hadron_cascade.config.validation import (
    ConfigurationError,
    ConfigurationWarning,
    create_validated_config,
    validate_config,
    warn_if_unsafe,
)


__all__ = [
    # Enums
    "RetryExhaustedPolicy",
    # Config classes
    "NuclearConfig",
    "FateConfig",
    "AbsorptionConfig",
    "KinematicsConfig",
    "CascadeConfig",
    # Factory functions
    "create_default_config",
    "create_validated_config",
    # Validation
    "ConfigurationError",
    "ConfigurationWarning",
    "validate_config",
    "warn_if_unsafe",
    # YAML defaults access
    "get_default",
    "get_defaults",
    "reload_defaults",
    "read_config_file",
]
