"""
Pion production on a single bound nucleon.

The probe strikes one nucleon (proton with probability Z/A, with Fermi
motion) and the pair goes to three bodies by phase-space decay. The final
state is chosen uniformly among the charge-conserving combinations:
nucleon probes give N N pi, pion probes give pi pi N.
"""

import logging
from itertools import combinations_with_replacement
from typing import List, Tuple

import numpy as np

from hadron_cascade.channels.base import ChannelGenerator
from hadron_cascade.core.exceptions import KinematicsFailure, RemnantExhausted, UnhandledFate
from hadron_cascade.core.particles import Particle, ParticleStatus, Species
from hadron_cascade.core.remnant import propose_remnant
from hadron_cascade.fates.fate import Fate

logger = logging.getLogger(__name__)

NUCLEONS = (Species.PROTON, Species.NEUTRON)
PIONS = (Species.PI_PLUS, Species.PI_ZERO, Species.PI_MINUS)


def production_final_states(probe: Species, target: Species) -> List[Tuple[Species, Species, Species]]:
    """Charge-conserving three-body final states for probe + target nucleon."""
    charge = probe.charge + target.charge
    states = []
    if probe.is_nucleon:
        for pair in combinations_with_replacement(NUCLEONS, 2):
            for pion in PIONS:
                if pair[0].charge + pair[1].charge + pion.charge == charge:
                    states.append((pair[0], pair[1], pion))
    elif probe.is_pion:
        for pair in combinations_with_replacement(PIONS, 2):
            for nucleon in NUCLEONS:
                if pair[0].charge + pair[1].charge + nucleon.charge == charge:
                    states.append((pair[0], pair[1], nucleon))
    return states


class PionProductionGenerator(ChannelGenerator):
    """Three-body pion production."""

    fates = (Fate.PION_PRODUCTION,)

    def _generate(self, request):
        probe = request.particle
        remnant = request.remnant

        if request.fate not in self.fates:
            raise UnhandledFate(f"{type(self).__name__} cannot handle {request.fate.name}")
        if not (probe.species.is_pion or probe.species.is_nucleon):
            raise UnhandledFate(f"no pion production for {probe.species.name}")
        if remnant.A < 1:
            raise RemnantExhausted(f"no nucleon to strike in remnant (A={remnant.A})")

        target = Species.PROTON if self.rng.rndm() < remnant.proton_fraction else Species.NEUTRON
        target_p4 = self.services.fermi.target_p4(target, remnant)

        states = production_final_states(probe.species, target)
        final_state = states[min(int(self.rng.rndm() * len(states)), len(states) - 1)]

        removal = self.config.nuclear.nucleon_removal_energy
        parent_p4 = probe.p4 + target_p4 - np.array([removal, 0.0, 0.0, 0.0])
        masses = [s.mass for s in final_state]
        if parent_p4[0] <= sum(masses):
            raise KinematicsFailure(
                f"{probe.species.name} + {target.name} below threshold for "
                f"{' '.join(s.name for s in final_state)}"
            )

        vectors = self.services.decayer.generate(parent_p4, masses)
        emitted = [
            Particle(species, vec, ParticleStatus.STABLE_FINAL_STATE, probe.first_mother)
            for species, vec in zip(final_state, vectors)
        ]
        proposal = propose_remnant(remnant, [probe], emitted)

        logger.debug(
            "Pion production: %s + %s -> %s",
            probe.species.name, target.name, " ".join(s.name for s in final_state),
        )
        return emitted, proposal
