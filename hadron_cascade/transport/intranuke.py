"""
hA-mode intranuclear hadron transport.

``HadronTransport`` decides the final state of one hadron inside the
remnant nucleus in a single step:

1. Select a fate from the fate table (``FateSelector``).
2. Tag the particle's mother (or the particle) with the fate as rescatter code.
3. Run the channel generator for that fate through ``RetryOrchestrator``.
4. On success, check conservation, append the staged particles to the
   event record and commit the proposed remnant. Otherwise append the
   particle unchanged as a stable final-state particle.

The transport owns the remnant through a ``RemnantTracker``; generators
only ever see it read-only.

Import Policy:
    from hadron_cascade.transport.intranuke import HadronTransport, TransportOutcome

DO NOT use: from hadron_cascade.transport.intranuke import *
"""

import logging
from dataclasses import dataclass
from typing import Optional

from hadron_cascade.channels.absorption import AbsorptionGenerator
from hadron_cascade.channels.base import (
    ChannelOutcome,
    ChannelRequest,
    ChannelServices,
)
from hadron_cascade.channels.elastic import ElasticGenerator
from hadron_cascade.channels.inelastic import InelasticGenerator
from hadron_cascade.channels.pion_production import PionProductionGenerator
from hadron_cascade.config.cascade_config import CascadeConfig, create_default_config
from hadron_cascade.config.validation import validate_config
from hadron_cascade.core.accounting import ConservationReport, check_conservation
from hadron_cascade.core.particles import Particle, ParticleStatus
from hadron_cascade.core.record import EventRecord
from hadron_cascade.core.remnant import RemnantNucleus, RemnantTracker
from hadron_cascade.fates.fate import Fate, is_transportable
from hadron_cascade.fates.selector import FateSelector
from hadron_cascade.fates.tables import FateTable
from hadron_cascade.transport.retry import RetryOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class TransportOutcome:
    """What happened to one transported hadron.

    Attributes:
        fate: Selected fate (UNDEFINED for pass-through)
        outcome: SUCCESS if a channel was committed, STABLE otherwise
        attempts: Kinematics attempts spent on the fate
        reason: Why the particle passed through (empty on SUCCESS)
        n_emitted: Particles appended to the event record
        conservation: Conservation report of the committed channel, if checked
    """

    fate: Fate
    outcome: ChannelOutcome
    attempts: int = 0
    reason: str = ""
    n_emitted: int = 0
    conservation: Optional[ConservationReport] = None

    @property
    def committed(self) -> bool:
        return self.outcome == ChannelOutcome.SUCCESS


class HadronTransport:
    """Single-step intranuclear transport of hadrons.

    Args:
        fate_table: Source of hadron-nucleus fate fractions
        rng: Random stream exposing ``rndm()``, shared by every sampler
        remnant: Remnant nucleus at the start of the cascade
        config: Cascade configuration (defaults if None)
        hn_angles: Hadron-nucleon angle sampler (isotropic if None)

    Example:
        >>> rng = RandomStream(seed=42)
        >>> transport = HadronTransport(load_fate_table(), rng, RemnantNucleus.at_rest(12, 6))
        >>> record = EventRecord()
        >>> index = record.add_particle(make_particle(Species.PI_PLUS, 165.0))
        >>> outcome = transport.simulate_final_state(record, record[index].copy(first_mother=index))
    """

    def __init__(self, fate_table: FateTable, rng, remnant: RemnantNucleus,
                 config: Optional[CascadeConfig] = None, hn_angles=None):
        if config is None:
            config = create_default_config()
        validate_config(config, raise_on_error=True)
        self.config = config
        self.rng = rng

        self.services = ChannelServices.create(rng, config, hn_angles=hn_angles)
        self.selector = FateSelector(fate_table, rng, config.fates)
        self.generators = [
            InelasticGenerator(self.services),
            ElasticGenerator(self.services),
            AbsorptionGenerator(self.services),
            PionProductionGenerator(self.services),
        ]
        self.orchestrator = RetryOrchestrator(self.generators, config.kinematics)
        self.tracker = RemnantTracker(remnant)

    @property
    def remnant(self) -> RemnantNucleus:
        return self.tracker.state

    def reset(self, remnant: RemnantNucleus) -> None:
        """Start a new cascade on ``remnant``."""
        self.tracker.reset(remnant)

    def _pass_through(self, record: EventRecord, particle: Particle, fate: Fate,
                      attempts: int = 0, reason: str = "") -> TransportOutcome:
        record.add_particle(particle.copy(status=ParticleStatus.STABLE_FINAL_STATE))
        return TransportOutcome(
            fate=fate,
            outcome=ChannelOutcome.STABLE,
            attempts=attempts,
            reason=reason,
            n_emitted=1,
        )

    def simulate_final_state(self, record: EventRecord, particle: Particle) -> TransportOutcome:
        """Decide and generate the final state of ``particle``.

        The particle itself is not modified; its outgoing state (or its
        daughters) are appended to ``record``.

        Args:
            record: Event record of the cascade
            particle: Hadron inside the remnant

        Returns:
            TransportOutcome

        Raises:
            RetriesExhausted: Every attempt failed and the policy is RAISE
        """
        if not is_transportable(particle.species):
            logger.error(
                "Cannot transport particle with PDG code %d, passing it through",
                int(particle.species),
            )
            return self._pass_through(record, particle, Fate.UNDEFINED,
                                      reason="species not transportable")

        ke = particle.kinetic_energy
        fate = self.selector.select(particle.species, ke)

        mother = particle.first_mother
        if 0 <= mother < len(record):
            record.set_rescatter_code(mother, int(fate))
        else:
            particle.rescatter_code = int(fate)

        logger.debug("%s (%.2f MeV): fate %s", particle.species.name, ke, fate.name)

        if fate == Fate.UNDEFINED:
            return self._pass_through(record, particle, fate, reason="no fate")

        original_ke = record.probe.kinetic_energy if len(record) > 0 else ke
        request = ChannelRequest(
            particle=particle,
            fate=fate,
            remnant=self.tracker.state,
            original_probe_ke=original_ke,
        )
        result = self.orchestrator.run(request)

        if not result.ok:
            return self._pass_through(record, particle, fate,
                                      attempts=result.attempts, reason=result.reason)

        report = None
        if self.config.kinematics.validate_conservation:
            report = check_conservation(
                self.tracker.state, [particle], result.remnant, result.particles,
            )

        record.extend(result.particles)
        self.tracker.commit(result.remnant)

        logger.info(
            "%s (%.2f MeV) -> %s: %d particles, remnant (A, Z) = (%d, %d)",
            particle.species.name, ke, fate.name, len(result.particles),
            result.remnant.A, result.remnant.Z,
        )
        return TransportOutcome(
            fate=fate,
            outcome=ChannelOutcome.SUCCESS,
            attempts=result.attempts,
            n_emitted=len(result.particles),
            conservation=report,
        )
