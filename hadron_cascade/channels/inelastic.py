"""
Inelastic (quasi-elastic knock-out) and charge-exchange channels.

The probe strikes one bound nucleon. Charge exchange uses a fixed species
map; ordinary inelastic scattering picks a proton target with probability
Z/A and keeps both species. The struck nucleon carries Fermi motion and
the nucleon removal energy is subtracted in the two-body kinematics.
"""

import logging
from typing import Tuple

import numpy as np

from hadron_cascade.channels.angles import NO_PHYSICAL_SOLUTION
from hadron_cascade.channels.base import ChannelGenerator
from hadron_cascade.core.exceptions import (
    KinematicsFailure,
    NoPhysicalSolution,
    RemnantExhausted,
    UnhandledFate,
)
from hadron_cascade.core.particles import Particle, ParticleStatus, Species
from hadron_cascade.core.remnant import RemnantNucleus, propose_remnant
from hadron_cascade.fates.fate import Fate
from hadron_cascade.kinematics.lorentz import invariant_mass_squared

logger = logging.getLogger(__name__)

# probe -> (target, scattered probe, recoil)
CHARGE_EXCHANGE_MAP = {
    Species.PI_PLUS: (Species.NEUTRON, Species.PI_ZERO, Species.PROTON),
    Species.PI_MINUS: (Species.PROTON, Species.PI_ZERO, Species.NEUTRON),
    Species.PROTON: (Species.NEUTRON, Species.NEUTRON, Species.PROTON),
    Species.NEUTRON: (Species.PROTON, Species.PROTON, Species.NEUTRON),
}


def effective_projectile(probe_p4: np.ndarray, probe_mass: float,
                         target_p4: np.ndarray, target_mass: float) -> np.ndarray:
    """Projectile four-momentum on a target at rest giving the same invariant mass.

    E_p = (s - m_t^2 - m_p^2) / (2 m_t), along the probe's flight direction.
    """
    s = invariant_mass_squared(probe_p4 + target_p4)
    energy = (s - target_mass ** 2 - probe_mass ** 2) / (2.0 * target_mass)
    energy = max(energy, probe_mass)
    p_mag = np.sqrt(max(energy * energy - probe_mass * probe_mass, 0.0))
    direction = np.asarray(probe_p4[1:], dtype=np.float64)
    norm = np.linalg.norm(direction)
    direction = direction / norm if norm > 0 else np.array([0.0, 0.0, 1.0])
    return np.concatenate(([energy], p_mag * direction))


class InelasticGenerator(ChannelGenerator):
    """Two-body inelastic and charge-exchange final states."""

    fates = (Fate.CHARGE_EXCHANGE, Fate.INELASTIC)

    def _choose_species(self, probe: Species, fate: Fate,
                        remnant: RemnantNucleus) -> Tuple[Species, Species, Species]:
        """(target, scattered probe, recoil) species for the collision."""
        if fate == Fate.CHARGE_EXCHANGE:
            if probe == Species.PI_ZERO:
                if self.rng.rndm() < remnant.proton_fraction:
                    return Species.PROTON, Species.PI_PLUS, Species.NEUTRON
                return Species.NEUTRON, Species.PI_MINUS, Species.PROTON
            if probe not in CHARGE_EXCHANGE_MAP:
                raise UnhandledFate(f"no charge exchange for {probe.name}")
            return CHARGE_EXCHANGE_MAP[probe]

        target = Species.PROTON if self.rng.rndm() < remnant.proton_fraction else Species.NEUTRON
        return target, probe, target

    def _generate(self, request):
        probe = request.particle
        remnant = request.remnant
        fate = request.fate

        if fate not in self.fates:
            raise UnhandledFate(f"{type(self).__name__} cannot handle {fate.name}")
        if fate == Fate.CHARGE_EXCHANGE and probe.species.is_kaon:
            raise UnhandledFate(f"no charge exchange for {probe.species.name}")
        if remnant.A < 1:
            raise RemnantExhausted(f"no nucleon to strike in remnant (A={remnant.A})")

        target, scattered, recoil = self._choose_species(probe.species, fate, remnant)

        if remnant.Z + probe.species.charge - scattered.charge - recoil.charge < 0:
            raise RemnantExhausted(
                f"{probe.species.name} -> {scattered.name} + {recoil.name} needs more "
                f"protons than the remnant holds (Z={remnant.Z})"
            )
        if (target == Species.PROTON and remnant.Z < 1) or (target == Species.NEUTRON and remnant.N < 1):
            raise RemnantExhausted(
                f"no {target.name.lower()} left in remnant (A={remnant.A}, Z={remnant.Z})"
            )

        target_p4 = self.services.fermi.target_p4(target, remnant)

        projectile = effective_projectile(probe.p4, probe.mass, target_p4, target.mass)
        cos_theta = self.services.hn_angles.cos_theta(
            probe.species, projectile, target, scattered, fate,
        )
        if cos_theta < -1.0:
            raise NoPhysicalSolution(
                f"no hN angle for {probe.species.name} + {target.name} -> {scattered.name} "
                f"at E_eff = {projectile[0]:.1f} MeV"
            )

        p3, p4 = self.services.two_body.scatter(
            probe.p4, target_p4, scattered.mass, recoil.mass, cos_theta,
            binding_energy=self.config.nuclear.nucleon_removal_energy,
        )

        ke3 = p3[0] - scattered.mass
        ke4 = p4[0] - recoil.mass
        if ke3 > request.original_probe_ke or ke4 > request.original_probe_ke:
            raise KinematicsFailure(
                f"outgoing kinetic energies ({ke3:.2f}, {ke4:.2f}) MeV exceed the "
                f"incident {request.original_probe_ke:.2f} MeV"
            )

        emitted = [
            Particle(scattered, p3, ParticleStatus.STABLE_FINAL_STATE, probe.first_mother),
            Particle(recoil, p4, ParticleStatus.STABLE_FINAL_STATE, probe.first_mother),
        ]
        proposal = propose_remnant(remnant, [probe], emitted)

        logger.debug(
            "%s: %s + %s -> %s (%.2f MeV) + %s (%.2f MeV)",
            fate.name, probe.species.name, target.name, scattered.name, ke3, recoil.name, ke4,
        )
        return emitted, proposal
