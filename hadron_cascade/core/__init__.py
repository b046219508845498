"""Core data model: species, particles, remnant, event record and errors."""

from hadron_cascade.core.accounting import ConservationReport, check_conservation
from hadron_cascade.core.constants import DEFAULT_MASS_FORMULA, MassFormulaCoefficients
from hadron_cascade.core.exceptions import (
    CascadeError,
    KinematicsFailure,
    NoPhysicalSolution,
    RemnantExhausted,
    RetriesExhausted,
    SamplingDeadlock,
    TerminalChannelError,
    UnhandledFate,
)
from hadron_cascade.core.particles import (
    Particle,
    ParticleStatus,
    Species,
    four_momentum,
    make_particle,
)
from hadron_cascade.core.random import RandomStream
from hadron_cascade.core.record import EventRecord
from hadron_cascade.core.remnant import RemnantNucleus, RemnantTracker, propose_remnant

__all__ = [
    "ConservationReport",
    "check_conservation",
    "DEFAULT_MASS_FORMULA",
    "MassFormulaCoefficients",
    "CascadeError",
    "KinematicsFailure",
    "SamplingDeadlock",
    "TerminalChannelError",
    "RemnantExhausted",
    "UnhandledFate",
    "NoPhysicalSolution",
    "RetriesExhausted",
    "Particle",
    "ParticleStatus",
    "Species",
    "four_momentum",
    "make_particle",
    "RandomStream",
    "EventRecord",
    "RemnantNucleus",
    "RemnantTracker",
    "propose_remnant",
]
