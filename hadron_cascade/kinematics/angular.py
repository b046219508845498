"""Empirical elastic angular distributions.

Two tables of relative weights against laboratory scattering angle are kept,
one for pion-class projectiles and one for nucleons. Sampling walks one
degree steps, adding the linearly interpolated weight at each step centre
divided by the table normalisation, and stops at the first step whose
cumulative sum exceeds the uniform draw.

Import Policy:
    from hadron_cascade.kinematics.angular import AngularSampler, PION_ELASTIC_TABLE

DO NOT use: from hadron_cascade.kinematics.angular import *
"""

import logging
from dataclasses import dataclass

import numpy as np

from hadron_cascade.core.particles import Species

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AngularTable:
    """Tabulated angular weights.

    Attributes:
        angles_deg: Tabulation angles, increasing [deg]
        weights: Relative weight at each tabulation angle
        normalisation: Sum of the interpolated weights over all steps
        n_steps: Number of one-degree steps walked during sampling
    """

    angles_deg: np.ndarray
    weights: np.ndarray
    normalisation: float
    n_steps: int

    def __post_init__(self):
        if len(self.angles_deg) != len(self.weights):
            raise ValueError(
                f"angles_deg ({len(self.angles_deg)}) and weights ({len(self.weights)}) "
                "must have the same length"
            )
        if np.any(np.diff(self.angles_deg) <= 0):
            raise ValueError("angles_deg must be strictly increasing")
        if self.normalisation <= 0:
            raise ValueError(f"normalisation must be > 0, got {self.normalisation}")

    @property
    def max_angle_deg(self) -> float:
        return float(self.angles_deg[-1])

    def weight_at(self, theta_deg: float) -> float:
        return float(np.interp(theta_deg, self.angles_deg, self.weights))


PION_ELASTIC_TABLE = AngularTable(
    angles_deg=2.5 * np.arange(25),
    weights=np.array([
        5000., 4200., 3000., 2600., 2100., 1800., 1200., 750., 500., 230., 120., 35.,
        9., 3., 11., 18., 29., 27., 20., 14., 10., 6., 2., 0.14, 0.19,
    ]),
    normalisation=47979.453,
    n_steps=60,
)

NUCLEON_ELASTIC_TABLE = AngularTable(
    angles_deg=np.arange(20, dtype=np.float64),
    weights=np.array([
        2400., 2350., 2200., 2000., 1728., 1261., 713., 312., 106., 35.,
        6., 5., 10., 12., 11., 9., 6., 1., 1., 1.,
    ]),
    normalisation=11967.,
    n_steps=20,
)


class AngularSampler:
    """Samples elastic scattering angles from the empirical tables.

    Args:
        rng: Random stream exposing ``rndm()``
        pion_table: Table used for pion-class (and kaon) projectiles
        nucleon_table: Table used for nucleon projectiles
    """

    def __init__(self, rng, pion_table: AngularTable = PION_ELASTIC_TABLE,
                 nucleon_table: AngularTable = NUCLEON_ELASTIC_TABLE):
        self.rng = rng
        self.pion_table = pion_table
        self.nucleon_table = nucleon_table

    def table_for(self, species: Species) -> AngularTable:
        return self.nucleon_table if species.is_nucleon else self.pion_table

    def sample_angle(self, species: Species) -> float:
        """Scattering angle [rad] for a projectile of the given species.

        Uses exactly one uniform draw.
        """
        table = self.table_for(species)
        r = self.rng.rndm()
        xsum = 0.0
        theta = 0.0
        for i in range(table.n_steps):
            theta = min(i + 0.5, table.max_angle_deg)
            xsum += table.weight_at(theta) / table.normalisation
            if xsum > r:
                break
        else:
            # draw beyond the cumulative weight scatters forward
            theta = 0.0
        logger.debug("Elastic angle for %s: %.2f deg (r = %.4f)", species.name, theta, r)
        return float(np.radians(theta))

    def sample_cos_theta(self, species: Species) -> float:
        return float(np.cos(self.sample_angle(species)))
