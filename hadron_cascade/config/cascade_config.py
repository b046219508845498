"""Cascade Configuration - Single Source of Truth (SSOT)

This module provides the central configuration dataclasses for hA-mode
hadron transport. ALL transport parameters must flow through these classes.

Import Policy:
    from hadron_cascade.config.cascade_config import CascadeConfig, NuclearConfig

DO NOT use: from hadron_cascade.config.cascade_config import *
"""

from dataclasses import asdict, dataclass, field

from hadron_cascade.config.defaults import (
    DEFAULT_DO_FERMI,
    DEFAULT_FERMI_FACTOR,
    DEFAULT_FERMI_MOMENTUM,
    DEFAULT_MAX_ABSORBED_NUCLEONS,
    DEFAULT_MAX_FATE_ITERATIONS,
    DEFAULT_MAX_KINEMATICS_ATTEMPTS,
    DEFAULT_MAX_MULTIPLICITY_ITERATIONS,
    DEFAULT_MAX_SUM_ITERATIONS,
    DEFAULT_N_SPLIT_GROUPS,
    DEFAULT_NUCLEON_REMOVAL_ENERGY,
    DEFAULT_PHASE_SPACE_MAX_ITERATIONS,
    DEFAULT_PHASE_SPACE_MAX_PARTICLES,
    DEFAULT_PHASE_SPACE_WEIGHT_TRIALS,
    DEFAULT_RETRY_EXHAUSTED_POLICY,
    DEFAULT_TWO_BODY_BINDING_ENERGY,
    DEFAULT_VALIDATE_CONSERVATION,
)
from hadron_cascade.config.enums import RetryExhaustedPolicy


@dataclass
class NuclearConfig:
    """Nuclear model configuration.

    Attributes:
        do_fermi: Sample target nucleon momenta from the Fermi gas
        fermi_factor: Scale factor on sampled Fermi momenta
        fermi_momentum: Fermi momentum k_F (MeV/c)
        nucleon_removal_energy: Removal energy of a bound nucleon (MeV)

    """

    do_fermi: bool = DEFAULT_DO_FERMI
    fermi_factor: float = DEFAULT_FERMI_FACTOR
    fermi_momentum: float = DEFAULT_FERMI_MOMENTUM
    nucleon_removal_energy: float = DEFAULT_NUCLEON_REMOVAL_ENERGY

    def validate(self) -> list[str]:
        """Validate nuclear configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []

        if self.fermi_factor < 0:
            errors.append(f"fermi_factor must be >= 0, got {self.fermi_factor}")
        if self.fermi_momentum < 0:
            errors.append(f"fermi_momentum must be >= 0, got {self.fermi_momentum}")
        if self.nucleon_removal_energy < 0:
            errors.append(
                f"nucleon_removal_energy must be >= 0, got {self.nucleon_removal_energy}",
            )

        return errors


@dataclass
class FateConfig:
    """Fate selection configuration.

    Attributes:
        max_fate_iterations: Redraws allowed before a particle is left Undefined

    """

    max_fate_iterations: int = DEFAULT_MAX_FATE_ITERATIONS

    def validate(self) -> list[str]:
        errors = []
        if self.max_fate_iterations <= 0:
            errors.append(f"max_fate_iterations must be > 0, got {self.max_fate_iterations}")
        return errors


@dataclass
class AbsorptionConfig:
    """Absorption channel configuration.

    Attributes:
        two_body_binding_energy: Binding subtraction in pi d -> N N (MeV)
        max_multiplicity_iterations: Bound on the (np, nn) rejection loop
        max_sum_iterations: Bound on the meson sum sampler
        max_absorbed_nucleons: Cap on nucleons emitted by one absorption
        phase_space_max_particles: Largest product list of one phase-space decay
        n_split_groups: Decay groups used above phase_space_max_particles

    """

    two_body_binding_energy: float = DEFAULT_TWO_BODY_BINDING_ENERGY
    max_multiplicity_iterations: int = DEFAULT_MAX_MULTIPLICITY_ITERATIONS
    max_sum_iterations: int = DEFAULT_MAX_SUM_ITERATIONS
    max_absorbed_nucleons: int = DEFAULT_MAX_ABSORBED_NUCLEONS
    phase_space_max_particles: int = DEFAULT_PHASE_SPACE_MAX_PARTICLES
    n_split_groups: int = DEFAULT_N_SPLIT_GROUPS

    def validate(self) -> list[str]:
        """Validate absorption configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []

        if self.two_body_binding_energy < 0:
            errors.append(
                f"two_body_binding_energy must be >= 0, got {self.two_body_binding_energy}",
            )
        if self.max_multiplicity_iterations <= 0:
            errors.append(
                "max_multiplicity_iterations must be > 0, "
                f"got {self.max_multiplicity_iterations}",
            )
        if self.max_sum_iterations <= 0:
            errors.append(f"max_sum_iterations must be > 0, got {self.max_sum_iterations}")
        if self.max_absorbed_nucleons < 2:
            errors.append(
                f"max_absorbed_nucleons must be >= 2, got {self.max_absorbed_nucleons}",
            )
        if self.phase_space_max_particles < 2:
            errors.append(
                f"phase_space_max_particles must be >= 2, got {self.phase_space_max_particles}",
            )
        if self.n_split_groups < 2:
            errors.append(f"n_split_groups must be >= 2, got {self.n_split_groups}")

        # Each split group carries at most phase_space_max_particles products
        capacity = self.n_split_groups * self.phase_space_max_particles
        if self.max_absorbed_nucleons > capacity:
            errors.append(
                f"max_absorbed_nucleons ({self.max_absorbed_nucleons}) exceeds the split "
                f"capacity n_split_groups * phase_space_max_particles ({capacity})",
            )

        return errors


@dataclass
class KinematicsConfig:
    """Kinematics generation and retry configuration.

    Attributes:
        max_kinematics_attempts: Attempts per particle for the selected fate
        retry_exhausted_policy: Outcome once every attempt has failed
        phase_space_weight_trials: Trial events for the weight maximum
        phase_space_max_iterations: Accept/reject bound of one decay
        validate_conservation: Check conservation after each committed channel

    """

    max_kinematics_attempts: int = DEFAULT_MAX_KINEMATICS_ATTEMPTS
    retry_exhausted_policy: RetryExhaustedPolicy = RetryExhaustedPolicy(
        DEFAULT_RETRY_EXHAUSTED_POLICY,
    )
    phase_space_weight_trials: int = DEFAULT_PHASE_SPACE_WEIGHT_TRIALS
    phase_space_max_iterations: int = DEFAULT_PHASE_SPACE_MAX_ITERATIONS
    validate_conservation: bool = DEFAULT_VALIDATE_CONSERVATION

    def validate(self) -> list[str]:
        """Validate kinematics configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []

        if self.max_kinematics_attempts <= 0:
            errors.append(
                f"max_kinematics_attempts must be > 0, got {self.max_kinematics_attempts}",
            )
        if self.phase_space_weight_trials <= 0:
            errors.append(
                f"phase_space_weight_trials must be > 0, got {self.phase_space_weight_trials}",
            )
        if self.phase_space_max_iterations <= 0:
            errors.append(
                "phase_space_max_iterations must be > 0, "
                f"got {self.phase_space_max_iterations}",
            )

        return errors


@dataclass
class CascadeConfig:
    """Complete hadron transport configuration (SSOT).

    Example:
        >>> config = CascadeConfig()
        >>> errors = config.validate()
        >>> if errors:
        ...     for err in errors:
        ...         print(f"Configuration error: {err}")

    Attributes:
        nuclear: Nuclear model configuration
        fates: Fate selection configuration
        absorption: Absorption channel configuration
        kinematics: Kinematics generation and retry configuration

    """

    nuclear: NuclearConfig = field(default_factory=NuclearConfig)
    fates: FateConfig = field(default_factory=FateConfig)
    absorption: AbsorptionConfig = field(default_factory=AbsorptionConfig)
    kinematics: KinematicsConfig = field(default_factory=KinematicsConfig)

    def validate(self) -> list[str]:
        """Validate complete cascade configuration.

        Returns:
            List of error messages (empty if valid)

        """
        errors = []

        errors.extend(self.nuclear.validate())
        errors.extend(self.fates.validate())
        errors.extend(self.absorption.validate())
        errors.extend(self.kinematics.validate())

        return errors

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for serialization.

        Returns:
            Dictionary representation of configuration

        """
        config_dict = asdict(self)
        policy = config_dict["kinematics"]["retry_exhausted_policy"]
        if isinstance(policy, RetryExhaustedPolicy):
            config_dict["kinematics"]["retry_exhausted_policy"] = policy.value
        return config_dict

    @classmethod
    def from_dict(cls, data: dict) -> "CascadeConfig":
        """Create configuration from dictionary.

        Missing sections and keys fall back to the YAML defaults.

        Args:
            data: Dictionary representation of configuration

        Returns:
            CascadeConfig instance

        """
        kinematics_data = dict(data.get("kinematics", {}))
        policy = kinematics_data.get("retry_exhausted_policy")
        if isinstance(policy, str):
            kinematics_data["retry_exhausted_policy"] = RetryExhaustedPolicy(policy)

        return cls(
            nuclear=NuclearConfig(**data.get("nuclear", {})),
            fates=FateConfig(**data.get("fates", {})),
            absorption=AbsorptionConfig(**data.get("absorption", {})),
            kinematics=KinematicsConfig(**kinematics_data),
        )


def create_default_config() -> CascadeConfig:
    """Create a default cascade configuration.

    Returns:
        CascadeConfig with default values from defaults.yaml

    """
    return CascadeConfig()
