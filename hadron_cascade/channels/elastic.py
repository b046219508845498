"""
Elastic scattering of a hadron off the remnant as a whole.

The remnant is the target, with mass equal to the invariant mass of its
four-momentum. The scattering angle comes from the empirical angular
tables (nucleon table for nucleons, pion table otherwise) and the remnant
four-momentum becomes the recoil.
"""

import logging

import numpy as np

from hadron_cascade.channels.base import ChannelGenerator
from hadron_cascade.core.exceptions import RemnantExhausted
from hadron_cascade.core.particles import Particle, ParticleStatus
from hadron_cascade.core.remnant import propose_remnant
from hadron_cascade.fates.fate import Fate

logger = logging.getLogger(__name__)


class ElasticGenerator(ChannelGenerator):
    """hA elastic scattering."""

    fates = (Fate.ELASTIC,)

    def _generate(self, request):
        probe = request.particle
        remnant = request.remnant

        if remnant.A < 1 or remnant.Z < 0:
            raise RemnantExhausted(
                f"elastic scattering needs a remnant, got (A={remnant.A}, Z={remnant.Z})"
            )

        theta = self.services.angular.sample_angle(probe.species)
        target_mass = remnant.invariant_mass
        p3, _ = self.services.two_body.scatter(
            probe.p4, remnant.p4, probe.mass, target_mass, float(np.cos(theta)),
        )

        outgoing = probe.copy(p4=p3, status=ParticleStatus.STABLE_FINAL_STATE)
        proposal = propose_remnant(remnant, [probe], [outgoing])

        logger.debug(
            "Elastic %s: KE %.2f -> %.2f MeV, theta = %.2f deg",
            probe.species.name, probe.kinetic_energy, outgoing.kinetic_energy, np.degrees(theta),
        )
        return [outgoing], proposal
