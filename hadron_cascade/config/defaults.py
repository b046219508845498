"""
Default Configuration Constants for hA-mode hadron transport

Every value here is read from defaults.yaml, which is the Single Source of
Truth (SSOT) for default configuration. The literal fallbacks only apply when
a key is missing from a relocated YAML file.

IMPORTANT Import Policies:
    1. DO NOT use: from hadron_cascade.config.defaults import *
       This causes namespace pollution and makes tracking difficult.

    2. DO use explicit imports:
       from hadron_cascade.config.defaults import DEFAULT_FERMI_MOMENTUM

    3. DO NOT define defaults elsewhere. All defaults must be in this file.
"""

from hadron_cascade.config.yaml_loader import get_default

# =============================================================================
# Nuclear Model Defaults
# =============================================================================

# Sample the struck nucleon's momentum from the Fermi gas
DEFAULT_DO_FERMI = bool(get_default("nuclear.do_fermi", True))

# Multiplier applied to every sampled Fermi momentum
DEFAULT_FERMI_FACTOR = float(get_default("nuclear.fermi_factor", 1.0))

# Fermi momentum k_F (MeV/c)
DEFAULT_FERMI_MOMENTUM = float(get_default("nuclear.fermi_momentum", 250.0))

# Nucleon removal energy (MeV)
# Binding subtraction for two-body knock-out and per-nucleon removal term
# of the phase-space decays.
DEFAULT_NUCLEON_REMOVAL_ENERGY = float(get_default("nuclear.nucleon_removal_energy", 7.4))

# =============================================================================
# Fate Selection Defaults
# =============================================================================

DEFAULT_MAX_FATE_ITERATIONS = int(get_default("fates.max_fate_iterations", 1000))

# =============================================================================
# Absorption Defaults
# =============================================================================

# Binding energy subtracted in pi d -> N N (MeV), fit to McKeown data
DEFAULT_TWO_BODY_BINDING_ENERGY = float(get_default("absorption.two_body_binding_energy", 75.0))

DEFAULT_MAX_MULTIPLICITY_ITERATIONS = int(
    get_default("absorption.max_multiplicity_iterations", 10000)
)

DEFAULT_MAX_SUM_ITERATIONS = int(get_default("absorption.max_sum_iterations", 100))

# Hard ceiling on nucleons emitted by one absorption
DEFAULT_MAX_ABSORBED_NUCLEONS = int(get_default("absorption.max_absorbed_nucleons", 85))

# The phase-space generator refuses more than this many products
DEFAULT_PHASE_SPACE_MAX_PARTICLES = int(get_default("absorption.phase_space_max_particles", 18))

DEFAULT_N_SPLIT_GROUPS = int(get_default("absorption.n_split_groups", 5))

# =============================================================================
# Kinematics / Retry Defaults
# =============================================================================

DEFAULT_MAX_KINEMATICS_ATTEMPTS = int(get_default("kinematics.max_kinematics_attempts", 100))

DEFAULT_RETRY_EXHAUSTED_POLICY = str(
    get_default("kinematics.retry_exhausted_policy", "stable_final_state")
)

DEFAULT_PHASE_SPACE_WEIGHT_TRIALS = int(get_default("kinematics.phase_space_weight_trials", 200))

DEFAULT_PHASE_SPACE_MAX_ITERATIONS = int(
    get_default("kinematics.phase_space_max_iterations", 1000)
)

DEFAULT_VALIDATE_CONSERVATION = bool(get_default("kinematics.validate_conservation", True))

# Absolute tolerance on four-momentum residuals (MeV)
FOUR_MOMENTUM_TOLERANCE = 1e-6
