"""Remnant nucleus state and its transactional bookkeeping.

The remnant is what is left of the target nucleus as the cascade proceeds:
mass number A, charge Z and four-momentum P4. Channel generators never
mutate it. They propose a new remnant with ``propose_remnant`` and the
``RemnantTracker`` commits the proposal only once the whole channel has
succeeded.

Bookkeeping rule (baryon number, charge and four-momentum alike)::

    remnant_new = remnant_old + sum(incoming probes) - sum(stable emissions)

Intermediate (DECAYED) particles do not enter the sum.

Import Policy:
    from hadron_cascade.core.remnant import RemnantNucleus, RemnantTracker, propose_remnant

DO NOT use: from hadron_cascade.core.remnant import *
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

import numpy as np

from hadron_cascade.core.constants import DEFAULT_MASS_FORMULA
from hadron_cascade.core.exceptions import RemnantExhausted
from hadron_cascade.core.particles import Particle, ParticleStatus

logger = logging.getLogger(__name__)


@dataclass
class RemnantNucleus:
    """Remnant nucleus (A, Z, P4).

    Attributes:
        A: Mass number (>= 0)
        Z: Charge (0 <= Z <= A)
        p4: Four-momentum (E, px, py, pz) [MeV]
    """

    A: int
    Z: int
    p4: np.ndarray = field(default_factory=lambda: np.zeros(4))

    def __post_init__(self):
        self.p4 = np.asarray(self.p4, dtype=np.float64)

    @classmethod
    def at_rest(cls, A: int, Z: int) -> "RemnantNucleus":
        """Remnant at rest with the semi-empirical mass of (A, Z)."""
        mass = DEFAULT_MASS_FORMULA.nuclear_mass(A, Z)
        return cls(A=A, Z=Z, p4=np.array([mass, 0.0, 0.0, 0.0]))

    @property
    def N(self) -> int:
        return self.A - self.Z

    @property
    def proton_fraction(self) -> float:
        """Z/A, zero for an empty remnant."""
        if self.A <= 0:
            return 0.0
        return self.Z / self.A

    @property
    def invariant_mass(self) -> float:
        m2 = self.p4[0] ** 2 - float(np.dot(self.p4[1:], self.p4[1:]))
        return float(np.sqrt(max(m2, 0.0)))

    def is_valid(self) -> bool:
        return self.A >= 0 and 0 <= self.Z <= self.A

    def copy(self) -> "RemnantNucleus":
        return RemnantNucleus(A=self.A, Z=self.Z, p4=self.p4.copy())

    def __repr__(self) -> str:
        return f"RemnantNucleus(A={self.A}, Z={self.Z}, p4={np.round(self.p4, 3).tolist()})"


def propose_remnant(remnant: RemnantNucleus,
                    incoming: Iterable[Particle],
                    emitted: Iterable[Particle]) -> RemnantNucleus:
    """Apply the bookkeeping rule and return a new remnant.

    Args:
        remnant: Current remnant (not modified)
        incoming: Probes entering the remnant (normally the transported particle)
        emitted: Staged emissions; only STABLE_FINAL_STATE particles count

    Returns:
        Proposed remnant

    Raises:
        RemnantExhausted: If the proposal violates A >= 0 or 0 <= Z <= A
    """
    A = remnant.A
    Z = remnant.Z
    p4 = remnant.p4.copy()

    for particle in incoming:
        A += particle.species.baryon_number
        Z += particle.species.charge
        p4 += particle.p4

    for particle in emitted:
        if particle.status != ParticleStatus.STABLE_FINAL_STATE:
            continue
        A -= particle.species.baryon_number
        Z -= particle.species.charge
        p4 -= particle.p4

    proposal = RemnantNucleus(A=A, Z=Z, p4=p4)
    if not proposal.is_valid():
        raise RemnantExhausted(
            f"remnant (A={A}, Z={Z}) would violate 0 <= Z <= A "
            f"starting from (A={remnant.A}, Z={remnant.Z})"
        )
    return proposal


class RemnantTracker:
    """Owner of the remnant for one cascade.

    Generators receive ``tracker.state`` read-only and return proposals.
    Only ``commit`` changes the state.

    Args:
        initial: Remnant at the start of the cascade
    """

    def __init__(self, initial: RemnantNucleus):
        if not initial.is_valid():
            raise ValueError(f"Invalid initial remnant: {initial}")
        self._state = initial.copy()
        self.n_commits = 0
        self.history: List[RemnantNucleus] = []

    @property
    def state(self) -> RemnantNucleus:
        return self._state

    def commit(self, proposal: RemnantNucleus) -> None:
        """Replace the remnant with a validated proposal."""
        if not proposal.is_valid():
            raise RemnantExhausted(f"refusing to commit invalid remnant {proposal}")
        self.history.append(self._state)
        self._state = proposal.copy()
        self.n_commits += 1
        logger.debug("Remnant committed: (A, Z) = (%d, %d)", proposal.A, proposal.Z)

    def reset(self, remnant: RemnantNucleus) -> None:
        if not remnant.is_valid():
            raise ValueError(f"Invalid remnant: {remnant}")
        self._state = remnant.copy()
        self.n_commits = 0
        self.history.clear()
