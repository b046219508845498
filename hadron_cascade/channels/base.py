"""
Channel generator interface and typed results.

Generators raise from the error taxonomy internally; ``ChannelGenerator.generate``
turns every outcome into a ``ChannelResult`` so that the retry loop never
has to catch exceptions. Nothing a generator produces is visible to the
event record or the remnant tracker until the orchestrator commits a
SUCCESS result.

Import Policy:
    from hadron_cascade.channels.base import ChannelGenerator, ChannelResult, ChannelServices

DO NOT use: from hadron_cascade.channels.base import *
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from hadron_cascade.channels.angles import IsotropicAngleSampler
from hadron_cascade.config.cascade_config import CascadeConfig
from hadron_cascade.core.exceptions import (
    KinematicsFailure,
    SamplingDeadlock,
    TerminalChannelError,
)
from hadron_cascade.core.particles import Particle
from hadron_cascade.core.remnant import RemnantNucleus
from hadron_cascade.fates.fate import Fate
from hadron_cascade.kinematics.angular import AngularSampler
from hadron_cascade.kinematics.phase_space import PhaseSpaceDecayer
from hadron_cascade.kinematics.two_body import TwoBodyKinematicsEngine
from hadron_cascade.nuclear.fermi_gas import FermiGasModel

logger = logging.getLogger(__name__)


class ChannelOutcome(Enum):
    """Outcome of one kinematics attempt.

    Options:
        SUCCESS: Particles and remnant proposal are ready to commit
        RETRY: Recoverable kinematics failure, try the same fate again
        STABLE: Terminal failure, the particle passes through stable
    """
    SUCCESS = "success"
    RETRY = "retry"
    STABLE = "stable"


@dataclass
class ChannelResult:
    """Result of one kinematics attempt.

    Attributes:
        outcome: SUCCESS, RETRY or STABLE
        particles: Staged emissions in record order (SUCCESS only)
        remnant: Proposed remnant (SUCCESS only)
        reason: Failure reason (RETRY and STABLE)
        error: Exception that produced a RETRY or STABLE result
        attempts: Kinematics attempts spent on the fate (set by the retry loop)
    """

    outcome: ChannelOutcome
    particles: List[Particle] = field(default_factory=list)
    remnant: Optional[RemnantNucleus] = None
    reason: str = ""
    error: Optional[Exception] = None
    attempts: int = 1

    @classmethod
    def success(cls, particles: List[Particle], remnant: RemnantNucleus) -> "ChannelResult":
        return cls(ChannelOutcome.SUCCESS, particles=list(particles), remnant=remnant)

    @classmethod
    def retry(cls, error: Exception) -> "ChannelResult":
        return cls(ChannelOutcome.RETRY, reason=str(error), error=error)

    @classmethod
    def stable(cls, error: Exception) -> "ChannelResult":
        return cls(ChannelOutcome.STABLE, reason=str(error), error=error)

    @property
    def ok(self) -> bool:
        return self.outcome == ChannelOutcome.SUCCESS


@dataclass
class ChannelRequest:
    """Input of one kinematics attempt.

    Attributes:
        particle: Hadron being transported (not modified)
        fate: Selected fate
        remnant: Current remnant (not modified)
        original_probe_ke: Kinetic energy of the cascade's incident hadron [MeV]
    """

    particle: Particle
    fate: Fate
    remnant: RemnantNucleus
    original_probe_ke: float


@dataclass
class ChannelServices:
    """Collaborators shared by every channel generator."""

    rng: object
    config: CascadeConfig
    fermi: FermiGasModel
    two_body: TwoBodyKinematicsEngine
    angular: AngularSampler
    hn_angles: object
    decayer: PhaseSpaceDecayer

    @classmethod
    def create(cls, rng, config: CascadeConfig = None, hn_angles=None) -> "ChannelServices":
        """Build the default collaborators around one random stream."""
        config = config if config is not None else CascadeConfig()
        return cls(
            rng=rng,
            config=config,
            fermi=FermiGasModel(rng, config.nuclear),
            two_body=TwoBodyKinematicsEngine(rng),
            angular=AngularSampler(rng),
            hn_angles=hn_angles if hn_angles is not None else IsotropicAngleSampler(rng),
            decayer=PhaseSpaceDecayer(
                rng,
                weight_trials=config.kinematics.phase_space_weight_trials,
                max_iterations=config.kinematics.phase_space_max_iterations,
            ),
        )


class ChannelGenerator:
    """Base class of the channel generators.

    Subclasses list the fates they handle in ``fates`` and implement
    ``_generate``, which returns (staged particles, proposed remnant) or
    raises from the error taxonomy.
    """

    fates: Tuple[Fate, ...] = ()

    def __init__(self, services: ChannelServices):
        self.services = services
        self.rng = services.rng
        self.config = services.config

    def handles(self, fate: Fate) -> bool:
        return fate in self.fates

    def _generate(self, request: ChannelRequest) -> Tuple[List[Particle], RemnantNucleus]:
        raise NotImplementedError

    def generate(self, request: ChannelRequest) -> ChannelResult:
        """Run one kinematics attempt and classify its outcome."""
        name = type(self).__name__
        try:
            particles, remnant = self._generate(request)
        except SamplingDeadlock as exc:
            logger.warning("%s: sampling deadlock: %s", name, exc.reason)
            return ChannelResult.retry(exc)
        except KinematicsFailure as exc:
            logger.info("%s: kinematics failure, retrying: %s", name, exc.reason)
            return ChannelResult.retry(exc)
        except TerminalChannelError as exc:
            logger.warning("%s: %s: %s", name, type(exc).__name__, exc.reason)
            return ChannelResult.stable(exc)
        return ChannelResult.success(particles, remnant)
