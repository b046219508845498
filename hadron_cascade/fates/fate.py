"""
Reaction channel ("fate") enumeration and species-dependent legal sets.

Import Policy:
    from hadron_cascade.fates.fate import Fate, legal_fates

DO NOT use: from hadron_cascade.fates.fate import *
"""

from enum import IntEnum
from typing import Tuple

from hadron_cascade.core.particles import Species


class Fate(IntEnum):
    """Reaction channel of a transported hadron.

    Options:
        UNDEFINED: No channel selected, particle passes through stable
        CHARGE_EXCHANGE: Two-body scattering with a change of species
        ELASTIC: Scattering off the remnant as a whole
        INELASTIC: Quasi-elastic knock-out of one nucleon
        ABSORPTION: Multi-nucleon absorption of the probe
        PION_PRODUCTION: Three-body production off one nucleon

    Note:
        The integer values are written as the rescatter code of the mother.
    """
    UNDEFINED = 0
    CHARGE_EXCHANGE = 1
    ELASTIC = 2
    INELASTIC = 3
    ABSORPTION = 4
    PION_PRODUCTION = 5


# Selection priority order
FATE_PRIORITY: Tuple[Fate, ...] = (
    Fate.CHARGE_EXCHANGE,
    Fate.ELASTIC,
    Fate.INELASTIC,
    Fate.ABSORPTION,
    Fate.PION_PRODUCTION,
)

KAON_FATES: Tuple[Fate, ...] = (Fate.INELASTIC, Fate.ABSORPTION)


def is_transportable(species) -> bool:
    """Species this transport knows how to handle (photons included, they never interact).

    Accepts a Species or a bare PDG code; unknown codes are not transportable.
    """
    try:
        species = Species(species)
    except ValueError:
        return False
    return species.is_pion or species.is_kaon or species.is_nucleon or species == Species.PHOTON


def legal_fates(species: Species) -> Tuple[Fate, ...]:
    """Channels available to a species, in selection priority order."""
    if species.is_pion or species.is_nucleon:
        return FATE_PRIORITY
    if species.is_kaon:
        return KAON_FATES
    return ()
