"""hA-Mode Intranuclear Hadron Cascade

A single-step intranuclear transport for pions, kaons and nucleons.
Each hadron inside the nucleus gets one fate (charge exchange, elastic,
inelastic, absorption, pion production) drawn from energy-dependent fate
fractions, and the channel generators produce an explicit final state
while the remnant nucleus keeps baryon number, charge and four-momentum
balanced.

Key Principles:
- Fate selection by cumulative fractions in a fixed priority order
- Bounded kinematics retries with the selected fate kept
- Staged emissions: nothing reaches the record or the remnant until a channel succeeds
- Strict conservation accounting on every commit

Version: 1.0
"""

__version__ = "1.0.0"

# Core data structures
from hadron_cascade.core.particles import Particle, ParticleStatus, Species, make_particle
from hadron_cascade.core.random import RandomStream
from hadron_cascade.core.record import EventRecord
from hadron_cascade.core.remnant import RemnantNucleus, RemnantTracker

# Fates
from hadron_cascade.fates import (
    ConstantFateTable,
    Fate,
    FateSelector,
    TabulatedFateTable,
    load_fate_table,
)

# Configuration
from hadron_cascade.config import CascadeConfig, create_default_config, create_validated_config

# Transport orchestration
from hadron_cascade.transport import HadronTransport, RetryOrchestrator, TransportOutcome
from hadron_cascade.transport.api import CascadeResult, run_cascade

__all__ = [
    # Version
    "__version__",
    # Core
    "Particle",
    "ParticleStatus",
    "Species",
    "make_particle",
    "RandomStream",
    "EventRecord",
    "RemnantNucleus",
    "RemnantTracker",
    # Fates
    "Fate",
    "FateSelector",
    "ConstantFateTable",
    "TabulatedFateTable",
    "load_fate_table",
    # Config
    "CascadeConfig",
    "create_default_config",
    "create_validated_config",
    # Transport
    "HadronTransport",
    "RetryOrchestrator",
    "TransportOutcome",
    "CascadeResult",
    "run_cascade",
]
