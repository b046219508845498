"""Two-body relativistic scattering kinematics.

The engine takes a projectile and a (possibly moving, possibly bound)
target, goes to the centre-of-mass frame, places the outgoing pair at the
requested polar angle about the projectile direction with a random azimuth,
and boosts back. It returns four-vectors only; remnant bookkeeping is the
caller's job.

Import Policy:
    from hadron_cascade.kinematics.two_body import TwoBodyKinematicsEngine

DO NOT use: from hadron_cascade.kinematics.two_body import *
"""

import logging
from typing import Tuple

import numpy as np

from hadron_cascade.core.constants import ENERGY_TOLERANCE
from hadron_cascade.core.exceptions import KinematicsFailure
from hadron_cascade.kinematics.lorentz import (
    boost,
    boost_vector,
    direction_from_angles,
    invariant_mass_squared,
    rotate_uz,
)

logger = logging.getLogger(__name__)


class TwoBodyKinematicsEngine:
    """Computes two-body final states.

    Args:
        rng: Random stream exposing ``rndm()`` (one draw per call, the azimuth)
        energy_tolerance: Outgoing energies below m - tolerance are rejected [MeV]
    """

    def __init__(self, rng, energy_tolerance: float = ENERGY_TOLERANCE):
        self.rng = rng
        self.energy_tolerance = energy_tolerance

    def scatter(self, projectile_p4: np.ndarray, target_p4: np.ndarray,
                m3: float, m4: float, cos_theta: float,
                binding_energy: float = 0.0) -> Tuple[np.ndarray, np.ndarray]:
        """Two-body scattering a + b -> c + d.

        Args:
            projectile_p4: Projectile four-momentum [MeV]
            target_p4: Target four-momentum before binding subtraction [MeV]
            m3: Mass of the outgoing particle along the scattering angle [MeV]
            m4: Mass of the recoiling partner [MeV]
            cos_theta: Cosine of the CM scattering angle about the projectile
            binding_energy: Energy removed from the target before the collision [MeV]

        Returns:
            (p3, p4) outgoing four-momenta, with p3 + p4 = projectile + target - (B, 0, 0, 0)

        Raises:
            KinematicsFailure: Below threshold or non-physical result
        """
        if not -1.0 <= cos_theta <= 1.0:
            raise KinematicsFailure(f"cos_theta {cos_theta:.4f} outside [-1, 1]")

        projectile = np.asarray(projectile_p4, dtype=np.float64)
        target = np.array(target_p4, dtype=np.float64)
        target[0] -= binding_energy

        total = projectile + target
        s = invariant_mass_squared(total)
        if s <= 0 or total[0] <= 0:
            raise KinematicsFailure(f"non-physical two-body system, s = {s:.3f} MeV^2")
        W = np.sqrt(s)
        if W < m3 + m4:
            raise KinematicsFailure(
                f"invariant mass {W:.3f} MeV below threshold m3 + m4 = {m3 + m4:.3f} MeV"
            )

        beta = boost_vector(total)
        projectile_cm = boost(projectile, -beta)
        axis = projectile_cm[1:]
        if np.linalg.norm(axis) == 0:
            axis = np.array([0.0, 0.0, 1.0])

        E3 = (s + m3 * m3 - m4 * m4) / (2.0 * W)
        p_mag = np.sqrt(max(E3 * E3 - m3 * m3, 0.0))
        phi = 2.0 * np.pi * self.rng.rndm()

        p3_vec = p_mag * rotate_uz(axis, direction_from_angles(cos_theta, phi))
        p3_cm = np.concatenate(([E3], p3_vec))
        p4_cm = np.concatenate(([W - E3], -p3_vec))

        p3 = boost(p3_cm, beta)
        p4 = boost(p4_cm, beta)

        for label, vec, mass in (("p3", p3, m3), ("p4", p4, m4)):
            if not np.all(np.isfinite(vec)):
                raise KinematicsFailure(f"{label} is not finite")
            if vec[0] < mass - self.energy_tolerance:
                raise KinematicsFailure(
                    f"{label} energy {vec[0]:.3f} MeV below its mass {mass:.3f} MeV"
                )

        logger.debug("Two-body: W = %.3f MeV, E3 = %.3f, E4 = %.3f MeV", W, p3[0], p4[0])
        return p3, p4
