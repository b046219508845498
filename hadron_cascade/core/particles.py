"""Species and particle model.

Species are identified by their PDG Monte Carlo codes. Four-momenta are
numpy arrays ordered (E, px, py, pz) in MeV.

Import Policy:
    from hadron_cascade.core.particles import Species, Particle, ParticleStatus

DO NOT use: from hadron_cascade.core.particles import *
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

import numpy as np

from hadron_cascade.core.constants import (
    KAON_CHARGED_MASS,
    NEUTRON_MASS,
    PHOTON_MASS,
    PION_CHARGED_MASS,
    PION_NEUTRAL_MASS,
    PROTON_MASS,
)


class Species(IntEnum):
    """Hadrons (and the photon) handled by the transport, keyed by PDG code."""

    PROTON = 2212
    NEUTRON = 2112
    PI_PLUS = 211
    PI_MINUS = -211
    PI_ZERO = 111
    K_PLUS = 321
    K_MINUS = -321
    PHOTON = 22

    @property
    def mass(self) -> float:
        return _MASSES[self]

    @property
    def charge(self) -> int:
        return _CHARGES[self]

    @property
    def baryon_number(self) -> int:
        return 1 if self.is_nucleon else 0

    @property
    def is_nucleon(self) -> bool:
        return self in (Species.PROTON, Species.NEUTRON)

    @property
    def is_pion(self) -> bool:
        return self in (Species.PI_PLUS, Species.PI_MINUS, Species.PI_ZERO)

    @property
    def is_kaon(self) -> bool:
        return self in (Species.K_PLUS, Species.K_MINUS)

    @property
    def is_meson(self) -> bool:
        return self.is_pion or self.is_kaon

    @classmethod
    def from_name(cls, name: str) -> "Species":
        """Look up a species by a short name ('pi+', 'p', 'K-') or enum name."""
        key = name.strip()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls[key.upper()]
        except KeyError:
            raise ValueError(f"Unknown species: {name}") from None


_MASSES = {
    Species.PROTON: PROTON_MASS,
    Species.NEUTRON: NEUTRON_MASS,
    Species.PI_PLUS: PION_CHARGED_MASS,
    Species.PI_MINUS: PION_CHARGED_MASS,
    Species.PI_ZERO: PION_NEUTRAL_MASS,
    Species.K_PLUS: KAON_CHARGED_MASS,
    Species.K_MINUS: KAON_CHARGED_MASS,
    Species.PHOTON: PHOTON_MASS,
}

_CHARGES = {
    Species.PROTON: 1,
    Species.NEUTRON: 0,
    Species.PI_PLUS: 1,
    Species.PI_MINUS: -1,
    Species.PI_ZERO: 0,
    Species.K_PLUS: 1,
    Species.K_MINUS: -1,
    Species.PHOTON: 0,
}

_ALIASES = {
    "p": Species.PROTON,
    "n": Species.NEUTRON,
    "pi+": Species.PI_PLUS,
    "pi-": Species.PI_MINUS,
    "pi0": Species.PI_ZERO,
    "K+": Species.K_PLUS,
    "K-": Species.K_MINUS,
    "gamma": Species.PHOTON,
}


class ParticleStatus(IntEnum):
    """Event-record status of a particle.

    Options:
        IN_NUCLEUS: Still being transported through the nucleus
        STABLE_FINAL_STATE: Leaves the nucleus, final
        DECAYED: Intermediate state consumed by a decay
    """
    IN_NUCLEUS = 14
    STABLE_FINAL_STATE = 1
    DECAYED = 2


@dataclass
class Particle:
    """A particle in the event record.

    Attributes:
        species: Particle species
        p4: Four-momentum (E, px, py, pz) [MeV]
        status: Event-record status
        first_mother: Index of the mother in the record (-1 if none)
        rescatter_code: Fate tag attached by the transport (-1 if unset)
    """

    species: Species
    p4: np.ndarray
    status: ParticleStatus = ParticleStatus.IN_NUCLEUS
    first_mother: int = -1
    rescatter_code: int = -1

    def __post_init__(self):
        self.p4 = np.asarray(self.p4, dtype=np.float64)
        if self.p4.shape != (4,):
            raise ValueError(f"p4 must have shape (4,), got {self.p4.shape}")

    @property
    def mass(self) -> float:
        return self.species.mass

    @property
    def energy(self) -> float:
        return float(self.p4[0])

    @property
    def momentum(self) -> np.ndarray:
        return self.p4[1:]

    @property
    def kinetic_energy(self) -> float:
        return float(self.p4[0] - self.species.mass)

    def copy(self, **changes) -> "Particle":
        """Return a copy with its own p4 array, applying field overrides."""
        values = {
            "species": self.species,
            "p4": self.p4.copy(),
            "status": self.status,
            "first_mother": self.first_mother,
            "rescatter_code": self.rescatter_code,
        }
        values.update(changes)
        return Particle(**values)


def four_momentum(species: Species, kinetic_energy: float,
                  direction: Optional[np.ndarray] = None) -> np.ndarray:
    """Build an on-shell four-momentum from a kinetic energy and direction.

    Args:
        species: Particle species (sets the mass)
        kinetic_energy: Kinetic energy [MeV]
        direction: Flight direction, normalised internally (default +z)

    Returns:
        Four-momentum (E, px, py, pz) [MeV]
    """
    if kinetic_energy < 0:
        raise ValueError(f"kinetic_energy must be >= 0, got {kinetic_energy}")
    if direction is None:
        direction = np.array([0.0, 0.0, 1.0])
    direction = np.asarray(direction, dtype=np.float64)
    norm = np.linalg.norm(direction)
    if norm == 0:
        raise ValueError("direction must be non-zero")
    mass = species.mass
    energy = mass + kinetic_energy
    p = np.sqrt(max(energy * energy - mass * mass, 0.0))
    return np.concatenate(([energy], p * direction / norm))


def make_particle(species: Species, kinetic_energy: float,
                  direction: Optional[np.ndarray] = None,
                  status: ParticleStatus = ParticleStatus.IN_NUCLEUS,
                  first_mother: int = -1) -> Particle:
    """Create an on-shell particle with the given kinetic energy."""
    return Particle(
        species=species,
        p4=four_momentum(species, kinetic_energy, direction),
        status=status,
        first_mother=first_mother,
    )
