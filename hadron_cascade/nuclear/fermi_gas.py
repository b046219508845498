"""Fermi-gas momentum model for struck nucleons.

Nucleons fill a sphere of radius k_F uniformly in momentum space:
|p| = k_F u^(1/3) with an isotropic direction.

Import Policy:
    from hadron_cascade.nuclear.fermi_gas import FermiGasModel

DO NOT use: from hadron_cascade.nuclear.fermi_gas import *
"""

import logging

import numpy as np

from hadron_cascade.config.cascade_config import NuclearConfig
from hadron_cascade.core.particles import Species
from hadron_cascade.core.remnant import RemnantNucleus
from hadron_cascade.kinematics.lorentz import isotropic_direction

logger = logging.getLogger(__name__)


class FermiGasModel:
    """Samples the momentum of a bound nucleon.

    Args:
        rng: Random stream exposing ``rndm()``
        config: Nuclear configuration (k_F, scale factor, on/off switch)
    """

    def __init__(self, rng, config: NuclearConfig = None):
        self.rng = rng
        self.config = config if config is not None else NuclearConfig()

    def sample_momentum(self, species: Species, remnant: RemnantNucleus = None) -> np.ndarray:
        """Fermi momentum of a struck nucleon [MeV/c].

        Uses three uniform draws (magnitude, cos theta, phi). The species and
        remnant are accepted for interface compatibility with nucleus-dependent
        models; a single global k_F is used here.
        """
        k_f = self.config.fermi_momentum
        magnitude = k_f * self.rng.rndm() ** (1.0 / 3.0)
        return self.config.fermi_factor * magnitude * isotropic_direction(self.rng)

    def target_p4(self, species: Species, remnant: RemnantNucleus = None) -> np.ndarray:
        """Four-momentum of a struck nucleon, on shell, at rest when Fermi motion is off."""
        if not self.config.do_fermi:
            return np.array([species.mass, 0.0, 0.0, 0.0])
        p = self.sample_momentum(species, remnant)
        energy = np.sqrt(float(np.dot(p, p)) + species.mass ** 2)
        return np.concatenate(([energy], p))
