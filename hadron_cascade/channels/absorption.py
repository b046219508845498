"""
Absorption of a hadron by the remnant.

Two regimes:

1. Two-body absorption (mesons only), pi d -> N N: the probe is absorbed on
   a nucleon pair chosen by isospin-weighted branching ratios and two
   nucleons come out of a two-body collision with a fixed binding
   subtraction. The regime probability is the empirical fit

       P = 1.14 (0.903 - 0.00189 A)(1.35 - 0.00467 ke)

2. Multi-nucleon absorption: the number of emitted protons and neutrons is
   drawn from the sum (ns = np + nn) and difference (nd = np - nn)
   distributions of ``AbsorptionMultiplicityModel`` and the nucleons are
   emitted by phase-space decay. Above ``phase_space_max_particles`` the
   nucleons are split into ``n_split_groups`` decay groups by
   ``split_into_groups``.

Import Policy:
    from hadron_cascade.channels.absorption import AbsorptionGenerator, split_into_groups

DO NOT use: from hadron_cascade.channels.absorption import *
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from hadron_cascade.channels.base import ChannelGenerator
from hadron_cascade.config.cascade_config import AbsorptionConfig
from hadron_cascade.core.exceptions import (
    KinematicsFailure,
    RemnantExhausted,
    SamplingDeadlock,
    UnhandledFate,
)
from hadron_cascade.core.particles import Particle, ParticleStatus, Species
from hadron_cascade.core.remnant import RemnantNucleus, propose_remnant
from hadron_cascade.fates.fate import Fate
from hadron_cascade.kinematics.phase_space import PhaseSpaceGroup

logger = logging.getLogger(__name__)

P, N = Species.PROTON, Species.NEUTRON


def two_body_probability(A: int, kinetic_energy: float) -> float:
    """Probability of the pi d -> N N regime (fit to McKeown data)."""
    return 1.14 * (0.903 - 0.00189 * A) * (1.35 - 0.00467 * kinetic_energy)


def two_body_branches(probe: Species, proton_fraction: float):
    """Isospin-weighted branches of two-body absorption.

    Returns:
        List of (weight, (target1, target2), (product1, product2))
    """
    f = proton_fraction
    if probe in (Species.PI_PLUS, Species.K_PLUS):
        return [
            (2.0 * f * (1.0 - f), (N, P), (P, P)),
            (0.083 * (1.0 - f) ** 2, (N, N), (P, N)),
        ]
    if probe in (Species.PI_MINUS, Species.K_MINUS):
        return [
            (2.0 * f * (1.0 - f), (P, N), (N, N)),
            (0.083 * f ** 2, (P, P), (P, N)),
        ]
    if probe == Species.PI_ZERO:
        return [
            (0.88 * f * (1.0 - f), (N, P), (N, P)),
            (0.14 * f ** 2, (P, P), (P, P)),
            (0.14 * (1.0 - f) ** 2, (N, N), (N, N)),
        ]
    raise UnhandledFate(f"no two-body absorption for {probe.name}")


@dataclass
class MultiplicityParameters:
    """Parameters of the (ns, nd) distributions.

    Attributes:
        ns0: Mean of the sum (meson probes)
        nd0: Mean of the difference
        sig_ns: Width of the sum (meson probes)
        sig_nd: Width of the difference
        gam_ns: Exponential slope of the sum (nucleon probes)
    """

    ns0: float = 0.0
    nd0: float = 0.0
    sig_ns: float = 0.0
    sig_nd: float = 0.0
    gam_ns: float = 0.0

    @classmethod
    def for_probe(cls, probe: Species, A: int, Z: int, ke: float) -> "MultiplicityParameters":
        """Parameters for a probe of kinetic energy ``ke`` [MeV] on remnant (A, Z)."""
        params = cls()
        N_ = A - Z
        if probe.is_nucleon:
            # antisymmetric about Z = N
            if N_ > Z:
                params.nd0 = 135.227 * np.exp(-7.124 * N_ / A) - 2.762
            else:
                params.nd0 = -135.227 * np.exp(-7.124 * Z / A) + 4.914
            params.sig_nd = 2.034 + A * 0.007846
            c1 = 0.041 + ke * 0.0001525
            c2 = -0.003444 - ke * 0.00002324
            c3 = 0.064 - ke * 0.00002993
            params.gam_ns = c1 * np.exp(c2 * A) + c3
        elif probe.is_meson:
            params.ns0 = 0.0001 * (1.0 + ke / 250.0) * (A - 50) ** 2 + 8
            params.nd0 = (1.0 + ke / 250.0) - (A / 200.0) * (1.0 + 2.0 * ke / 250.0)
            params.sig_ns = (10.0 + 4.0 * ke / 250.0) * (1.0 - np.exp(-0.02 * A))
            params.sig_nd = 4.0 * (1.0 - np.exp(-0.03 * ke))
        else:
            raise UnhandledFate(f"no multi-nucleon absorption for {probe.name}")

        # isospin
        if probe in (Species.PI_ZERO, Species.NEUTRON):
            params.nd0 -= 2.0
        if probe == Species.PI_MINUS:
            params.nd0 -= 4.0
        return params

    def __str__(self) -> str:
        return (
            f"N_s0 = {self.ns0:.3f}, Sig_ns = {self.sig_ns:.3f}, N_d0 = {self.nd0:.3f}, "
            f"Sig_nd = {self.sig_nd:.3f}, Gam_ns = {self.gam_ns:.4f}"
        )


class AbsorptionMultiplicityModel:
    """Samples the numbers of protons and neutrons emitted in absorption.

    Args:
        rng: Random stream exposing ``rndm()``
        config: Absorption configuration (iteration bounds and nucleon cap)
    """

    def __init__(self, rng, config: AbsorptionConfig = None):
        self.rng = rng
        self.config = config if config is not None else AbsorptionConfig()

    def _uniform(self) -> float:
        """Uniform draw, redrawn once if it is exactly zero."""
        u = self.rng.rndm()
        if u == 0.0:
            u = self.rng.rndm()
        return u

    def _sample_meson_sum(self, params: MultiplicityParameters, A: int) -> float:
        """Gaussian sum with linear acceptance, capped at min(ns0 + 20 sigma, A)."""
        ns_max = min(params.ns0 + 20.0 * params.sig_ns, float(A))
        for _ in range(self.config.max_sum_iterations):
            u1 = self._uniform()
            u2 = self._uniform()
            x1 = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
            ns = params.ns0 + params.sig_ns * x1
            if ns > ns_max or ns < 0:
                continue
            if self.rng.rndm() > ns / ns_max:
                continue
            return ns
        raise SamplingDeadlock(
            f"meson sum sampler did not converge in {self.config.max_sum_iterations} "
            f"iterations ({params}, A = {A})"
        )

    def sample(self, probe: Species, remnant: RemnantNucleus, ke: float) -> Tuple[int, int]:
        """Draw (np, nn) for a probe of kinetic energy ``ke`` [MeV].

        Guarantees np >= 0, nn >= 0, np + nn >= 2, np <= Z + q(probe),
        nn <= A + B(probe) - Z - q(probe), and that at least one nucleon of
        the post-absorption nucleus stays behind.

        Raises:
            SamplingDeadlock: No acceptable draw within the iteration bound
        """
        A, Z = remnant.A, remnant.Z
        params = MultiplicityParameters.for_probe(probe, A, Z, ke)
        z_ceiling = Z + probe.charge
        n_ceiling = A + probe.baryon_number - z_ceiling
        cap = self.config.max_absorbed_nucleons

        for iteration in range(self.config.max_multiplicity_iterations):
            u1 = self._uniform()
            u2 = self._uniform()
            x2 = np.sqrt(-2.0 * np.log(u1)) * np.sin(2.0 * np.pi * u2)

            if probe.is_nucleon:
                ns = -np.log(self._uniform()) / params.gam_ns
            else:
                ns = self._sample_meson_sum(params, A)
            nd = params.nd0 + params.sig_nd * x2

            n_p = int((ns + nd) / 2.0 + 0.5)
            n_n = int((ns - nd) / 2.0 + 0.5)

            if n_p < 0 or n_n < 0:
                continue
            if n_p + n_n < 2:
                continue
            if n_p + n_n == 2 and probe.is_nucleon:
                continue
            if n_p > z_ceiling or n_n > n_ceiling:
                continue

            if n_p + n_n > cap:
                frac = cap / float(n_p + n_n)
                n_p = int(n_p * frac)
                n_n = int(n_n * frac)

            if n_p == z_ceiling and n_n == n_ceiling:
                # leave at least one nucleon behind
                if self.rng.rndm() < n_p / float(n_p + n_n):
                    n_p -= 1
                else:
                    n_n -= 1
                if n_p + n_n < 2:
                    continue

            logger.debug(
                "Multiplicity accepted after %d iterations: np = %d, nn = %d",
                iteration + 1, n_p, n_n,
            )
            return n_p, n_n

        raise SamplingDeadlock(
            f"could not choose absorption final state in "
            f"{self.config.max_multiplicity_iterations} iterations "
            f"({params}, A = {A}, Z = {Z}, ke = {ke:.1f} MeV)"
        )


def carrier_p4(species: Species, probe_p4: np.ndarray, probe_mass: float,
               n_groups: int) -> np.ndarray:
    """Carrier sharing 1/n_groups of the probe momentum and kinetic energy."""
    kinetic = probe_p4[0] - probe_mass
    return np.concatenate(([species.mass + kinetic / n_groups], probe_p4[1:] / n_groups))


def split_into_groups(n_protons: int, n_neutrons: int, probe: Species,
                      probe_p4: np.ndarray, rng, n_groups: int = 5,
                      energy_removal: float = 0.0) -> List[PhaseSpaceGroup]:
    """Split an absorption final state into independent decay groups.

    Group 0 is carried by the probe. Groups 1..n_groups-1 are carried by
    nucleons taken from the counts (proton with probability np / (np + nn),
    one draw each), and each such carrier heads its own product list. A
    nucleon probe heads group 0 when a nucleon of its species is left. The
    remaining nucleons, protons first, are dealt round-robin.

    Every carrier takes 1/n_groups of the probe momentum and kinetic energy.

    Args:
        n_protons: Emitted protons
        n_neutrons: Emitted neutrons
        probe: Probe species
        probe_p4: Probe four-momentum [MeV]
        rng: Random stream exposing ``rndm()``
        n_groups: Number of groups
        energy_removal: Removal energy per bound nucleon [MeV]

    Returns:
        ``n_groups`` PhaseSpaceGroups whose products hold exactly
        n_protons protons and n_neutrons neutrons
    """
    if n_protons < 0 or n_neutrons < 0:
        raise ValueError(f"counts must be >= 0, got ({n_protons}, {n_neutrons})")
    if n_protons + n_neutrons < n_groups - 1:
        raise ValueError(
            f"{n_protons + n_neutrons} nucleons cannot seed {n_groups - 1} carriers"
        )

    probe_p4 = np.asarray(probe_p4, dtype=np.float64)
    n_p, n_n = n_protons, n_neutrons
    groups = [
        PhaseSpaceGroup(probe, carrier_p4(probe, probe_p4, probe.mass, n_groups),
                        energy_removal=energy_removal)
    ]
    for _ in range(n_groups - 1):
        if (n_p + n_n) * rng.rndm() < n_p:
            species = P
            n_p -= 1
        else:
            species = N
            n_n -= 1
        groups.append(
            PhaseSpaceGroup(species, carrier_p4(species, probe_p4, probe.mass, n_groups),
                            products=[species], energy_removal=energy_removal)
        )

    if probe == P and n_p > 0:
        groups[0].products.append(P)
        n_p -= 1
    elif probe == N and n_n > 0:
        groups[0].products.append(N)
        n_n -= 1

    remaining = [P] * n_p + [N] * n_n
    for i, species in enumerate(remaining):
        groups[i % n_groups].products.append(species)

    return groups


class AbsorptionGenerator(ChannelGenerator):
    """Two-body and multi-nucleon absorption."""

    fates = (Fate.ABSORPTION,)

    def __init__(self, services):
        super().__init__(services)
        self.multiplicity = AbsorptionMultiplicityModel(self.rng, self.config.absorption)

    def _generate(self, request):
        probe = request.particle
        remnant = request.remnant
        species = probe.species

        if request.fate not in self.fates:
            raise UnhandledFate(f"{type(self).__name__} cannot handle {request.fate.name}")
        if not (species.is_meson or species.is_nucleon):
            raise UnhandledFate(f"no absorption for {species.name}")
        if remnant.A < 2:
            raise RemnantExhausted(f"absorption needs A >= 2, remnant has A = {remnant.A}")
        if species in (Species.PI_MINUS, Species.K_MINUS) and remnant.Z < 1:
            raise RemnantExhausted(f"{species.name} cannot be absorbed by neutrons only")
        if species in (Species.PI_PLUS, Species.K_PLUS) and remnant.N < 1:
            raise RemnantExhausted(f"{species.name} cannot be absorbed by protons only")

        ke = probe.kinetic_energy
        if species.is_meson and self.rng.rndm() < two_body_probability(remnant.A, ke):
            return self._two_body(probe, remnant)

        n_p, n_n = self.multiplicity.sample(species, remnant, ke)
        return self.emit_nucleons(probe, remnant, n_p, n_n)

    def _two_body(self, probe: Particle, remnant: RemnantNucleus):
        """pi d -> N N."""
        branches = two_body_branches(probe.species, remnant.proton_fraction)
        total = sum(weight for weight, _, _ in branches)
        r = self.rng.rndm() * total
        cumulative = 0.0
        targets, products = branches[-1][1], branches[-1][2]
        for weight, branch_targets, branch_products in branches:
            cumulative += weight
            if r < cumulative:
                targets, products = branch_targets, branch_products
                break

        n_target_p = sum(1 for t in targets if t == P)
        n_target_n = len(targets) - n_target_p
        if n_target_p > remnant.Z or n_target_n > remnant.N:
            raise KinematicsFailure(
                f"two-body absorption on {targets[0].name} {targets[1].name} not possible "
                f"in remnant (A={remnant.A}, Z={remnant.Z})"
            )

        fermi = self.services.fermi
        t1_p4 = fermi.target_p4(targets[0], remnant)
        t2_p4 = fermi.target_p4(targets[1], remnant)
        pair_p4 = t1_p4 + t2_p4

        cos_theta = self.services.hn_angles.cos_theta(
            probe.species, probe.p4, targets[0], products[0], Fate.ABSORPTION,
        )
        if cos_theta < -1.0:
            raise KinematicsFailure("hN angle sampler returned no physical angle for absorption")

        p3, p4 = self.services.two_body.scatter(
            probe.p4, pair_p4, products[0].mass, products[1].mass, cos_theta,
            binding_energy=self.config.absorption.two_body_binding_energy,
        )
        emitted = [
            Particle(products[0], p3, ParticleStatus.STABLE_FINAL_STATE, probe.first_mother),
            Particle(products[1], p4, ParticleStatus.STABLE_FINAL_STATE, probe.first_mother),
        ]
        proposal = propose_remnant(remnant, [probe], emitted)
        logger.debug(
            "Two-body absorption: %s + %s %s -> %s %s",
            probe.species.name, targets[0].name, targets[1].name,
            products[0].name, products[1].name,
        )
        return emitted, proposal

    def _groups(self, probe: Particle, n_p: int, n_n: int) -> List[PhaseSpaceGroup]:
        cfg = self.config.absorption
        removal = self.config.nuclear.nucleon_removal_energy
        if n_p + n_n > cfg.phase_space_max_particles:
            return split_into_groups(
                n_p, n_n, probe.species, probe.p4, self.rng,
                n_groups=cfg.n_split_groups, energy_removal=removal,
            )

        products = []
        if probe.species == P and n_p > 0:
            products.append(P)
            n_p -= 1
        elif probe.species == N and n_n > 0:
            products.append(N)
            n_n -= 1
        products.extend([P] * n_p + [N] * n_n)
        return [PhaseSpaceGroup(probe.species, probe.p4.copy(), products, removal)]

    def emit_nucleons(self, probe: Particle, remnant: RemnantNucleus, n_p: int, n_n: int):
        """Emit np protons and nn neutrons by phase-space decay.

        Every carrier is staged with status DECAYED, followed by its
        products. Any decay failure discards the whole attempt.

        Returns:
            (staged particles, proposed remnant)
        """
        groups = self._groups(probe, n_p, n_n)
        if len(groups) > 1:
            logger.info(
                "Absorption of %s: %d nucleons split into %d decay groups",
                probe.species.name, n_p + n_n, len(groups),
            )

        staged: List[Particle] = []
        for group in groups:
            if len(group.products) > self.config.absorption.phase_space_max_particles:
                raise KinematicsFailure(
                    f"decay group of {len(group.products)} products exceeds "
                    f"{self.config.absorption.phase_space_max_particles}"
                )
            products = self.services.decayer.decay_group(group, first_mother=probe.first_mother)
            staged.append(Particle(group.carrier, group.carrier_p4.copy(),
                                   ParticleStatus.DECAYED, probe.first_mother))
            staged.extend(products)

        proposal = propose_remnant(remnant, [probe], staged)
        logger.debug(
            "Absorption of %s: np = %d, nn = %d, remnant (A, Z) -> (%d, %d)",
            probe.species.name, n_p, n_n, proposal.A, proposal.Z,
        )
        return staged, proposal
