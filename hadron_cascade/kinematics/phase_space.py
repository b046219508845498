"""
N-body phase-space decays (Raubold–Lynch) with accept/reject unweighting.

A decay is described by a ``PhaseSpaceGroup``: a carrier particle that
picks up a list of bound nucleons at rest and decays into the product list.
Each bound nucleon costs the removal energy, and the decaying system is

    P_parent = P_carrier + (sum(m_bound) - R, 0, 0, 0)
    R = min(removal * n_bound, MAX_REMOVAL_FRACTION * excess)

where the bound nucleons are the products minus the carrier itself when
the carrier heads its own product list, and ``excess`` is the energy the
system has above the product threshold before any removal. The removal term
never pushes a decay that is open without it below threshold.

Units: MeV, c = 1.

Import Policy:
    from hadron_cascade.kinematics.phase_space import PhaseSpaceDecayer, PhaseSpaceGroup

DO NOT use: from hadron_cascade.kinematics.phase_space import *
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from hadron_cascade.config.defaults import (
    DEFAULT_PHASE_SPACE_MAX_ITERATIONS,
    DEFAULT_PHASE_SPACE_WEIGHT_TRIALS,
)
from hadron_cascade.core.exceptions import KinematicsFailure
from hadron_cascade.core.particles import Particle, ParticleStatus, Species
from hadron_cascade.kinematics.lorentz import (
    boost,
    boost_vector,
    invariant_mass,
    isotropic_direction,
    two_body_momentum,
)

logger = logging.getLogger(__name__)

# Share of the above-threshold energy the removal term may take
MAX_REMOVAL_FRACTION = 0.9


@dataclass
class PhaseSpaceGroup:
    """One multi-body decay group.

    Attributes:
        carrier: Species of the decaying carrier
        carrier_p4: Carrier four-momentum [MeV]
        products: Product species (duplicates allowed)
        energy_removal: Removal energy per bound nucleon [MeV]
    """

    carrier: Species
    carrier_p4: np.ndarray
    products: List[Species] = field(default_factory=list)
    energy_removal: float = 0.0

    def __post_init__(self):
        self.carrier_p4 = np.asarray(self.carrier_p4, dtype=np.float64)

    @property
    def carrier_in_products(self) -> bool:
        """True when the carrier is a nucleon heading its own product list."""
        return (
            self.carrier.is_nucleon
            and len(self.products) > 0
            and self.products[0] == self.carrier
        )

    @property
    def bound_nucleons(self) -> List[Species]:
        return list(self.products[1:]) if self.carrier_in_products else list(self.products)

    @property
    def removal_energy(self) -> float:
        """Total removal energy charged to the bound nucleons [MeV]."""
        bound = self.bound_nucleons
        nominal = self.energy_removal * len(bound)
        energy = self.carrier_p4[0] + sum(s.mass for s in bound)
        p_sq = float(np.dot(self.carrier_p4[1:], self.carrier_p4[1:]))
        threshold = np.sqrt(sum(s.mass for s in self.products) ** 2 + p_sq)
        excess = energy - threshold
        if excess <= 0:
            return nominal
        return min(nominal, MAX_REMOVAL_FRACTION * float(excess))

    @property
    def parent_p4(self) -> np.ndarray:
        added = sum(s.mass for s in self.bound_nucleons) - self.removal_energy
        return self.carrier_p4 + np.array([added, 0.0, 0.0, 0.0])

    @property
    def baryon_number(self) -> int:
        return sum(s.baryon_number for s in self.products)

    @property
    def charge(self) -> int:
        return sum(s.charge for s in self.products)


class PhaseSpaceDecayer:
    """Raubold–Lynch N-body generator.

    Args:
        rng: Random stream exposing ``rndm()``
        weight_trials: Trial weights used to estimate the maximum weight
        max_iterations: Accept/reject bound for one decay
    """

    def __init__(self, rng, weight_trials: int = DEFAULT_PHASE_SPACE_WEIGHT_TRIALS,
                 max_iterations: int = DEFAULT_PHASE_SPACE_MAX_ITERATIONS):
        self.rng = rng
        self.weight_trials = weight_trials
        self.max_iterations = max_iterations

    def _intermediate_masses(self, masses: np.ndarray, available: float) -> Tuple[np.ndarray, float]:
        """Sample the intermediate invariant masses and return them with the event weight."""
        n = len(masses)
        draws = sorted(self.rng.rndm() for _ in range(n - 2))
        r = np.concatenate(([0.0], draws, [1.0]))
        inv = r * available + np.cumsum(masses)
        weight = 1.0
        for i in range(n - 1):
            weight *= two_body_momentum(inv[i + 1], inv[i], masses[i + 1])
        return inv, weight

    def _build_event(self, masses: np.ndarray, inv: np.ndarray) -> List[np.ndarray]:
        """Sequential isotropic two-body decays in the parent rest frame."""
        n = len(masses)
        p = two_body_momentum(inv[1], inv[0], masses[1])
        d = isotropic_direction(self.rng)
        vectors = [
            np.concatenate(([np.sqrt(p * p + masses[0] ** 2)], p * d)),
            np.concatenate(([np.sqrt(p * p + masses[1] ** 2)], -p * d)),
        ]
        for i in range(2, n):
            p = two_body_momentum(inv[i], inv[i - 1], masses[i])
            d = isotropic_direction(self.rng)
            system = np.concatenate(([np.sqrt(p * p + inv[i - 1] ** 2)], p * d))
            beta = boost_vector(system)
            vectors = [boost(v, beta) for v in vectors]
            vectors.append(np.concatenate(([np.sqrt(p * p + masses[i] ** 2)], -p * d)))
        return vectors

    def generate(self, parent_p4: np.ndarray, masses: Sequence[float]) -> List[np.ndarray]:
        """Generate one unweighted decay of ``parent_p4`` into ``masses``.

        Args:
            parent_p4: Parent four-momentum (any frame) [MeV]
            masses: Product masses [MeV]

        Returns:
            Product four-momenta in the frame of ``parent_p4``, same order as ``masses``

        Raises:
            KinematicsFailure: Fewer than two products, parent below threshold,
                or no event accepted within ``max_iterations``
        """
        masses = np.asarray(masses, dtype=np.float64)
        if len(masses) < 2:
            raise KinematicsFailure(f"phase-space decay needs >= 2 products, got {len(masses)}")
        parent_p4 = np.asarray(parent_p4, dtype=np.float64)
        if parent_p4[0] <= 0:
            raise KinematicsFailure(f"parent energy {parent_p4[0]:.3f} MeV is not positive")

        M = invariant_mass(parent_p4)
        available = M - float(np.sum(masses))
        if available <= 0:
            raise KinematicsFailure(
                f"parent mass {M:.3f} MeV below product mass sum {np.sum(masses):.3f} MeV"
            )

        w_max = max(self._intermediate_masses(masses, available)[1] for _ in range(self.weight_trials))
        w_max *= 2.0

        beta_parent = boost_vector(parent_p4)
        for iteration in range(self.max_iterations):
            inv, weight = self._intermediate_masses(masses, available)
            if weight >= w_max * self.rng.rndm():
                vectors = self._build_event(masses, inv)
                logger.debug(
                    "Phase space: %d products accepted after %d iterations",
                    len(masses), iteration + 1,
                )
                return [boost(v, beta_parent) for v in vectors]

        raise KinematicsFailure(
            f"phase-space generation for {len(masses)} products did not converge "
            f"in {self.max_iterations} iterations"
        )

    def decay_group(self, group: PhaseSpaceGroup, first_mother: int = -1) -> List[Particle]:
        """Decay one group into stable final-state particles.

        Args:
            group: Decay group
            first_mother: Record index stamped on every product

        Returns:
            Product particles with status STABLE_FINAL_STATE
        """
        masses = [s.mass for s in group.products]
        vectors = self.generate(group.parent_p4, masses)
        return [
            Particle(
                species=species,
                p4=vec,
                status=ParticleStatus.STABLE_FINAL_STATE,
                first_mother=first_mother,
            )
            for species, vec in zip(group.products, vectors)
        ]
