"""
Hadron-nucleon scattering angle samplers.

A sampler returns the cosine of the CM scattering angle for a
projectile-nucleon collision, or a value below -1 when no physical
solution exists for the requested species pair.
"""

import numpy as np

from hadron_cascade.core.particles import Species
from hadron_cascade.fates.fate import Fate

# Returned by a sampler when no physical angle exists
NO_PHYSICAL_SOLUTION = -2.0


class HadronNucleonAngleSampler:
    """Interface of an hN angle sampler."""

    def cos_theta(self, projectile: Species, projectile_p4: np.ndarray,
                  target: Species, product: Species, fate: Fate) -> float:
        raise NotImplementedError


class IsotropicAngleSampler(HadronNucleonAngleSampler):
    """Isotropic CM angles: cos theta uniform in [-1, 1], one draw per call."""

    def __init__(self, rng):
        self.rng = rng

    def cos_theta(self, projectile: Species, projectile_p4: np.ndarray,
                  target: Species, product: Species, fate: Fate) -> float:
        return 2.0 * self.rng.rndm() - 1.0
