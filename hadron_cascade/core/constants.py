"""Physics constants for hA-mode hadron transport.

This module is the Single Source of Truth (SSOT) for particle masses and
nuclear mass-formula coefficients. Import from here rather than defining
constants locally.

Import Policy:
    from hadron_cascade.core.constants import PROTON_MASS, DEFAULT_MASS_FORMULA

DO NOT use: from hadron_cascade.core.constants import *
"""

from dataclasses import dataclass

import numpy as np

# =============================================================================
# Particle Masses [MeV/c²]
# =============================================================================

PROTON_MASS = 938.272
NEUTRON_MASS = 939.565
PION_CHARGED_MASS = 139.570
PION_NEUTRAL_MASS = 134.977
KAON_CHARGED_MASS = 493.677
PHOTON_MASS = 0.0

# Mean nucleon mass, used where the isospin of a bound nucleon is unknown
NUCLEON_MASS = 0.5 * (PROTON_MASS + NEUTRON_MASS)

# =============================================================================
# Numerical Tolerances
# =============================================================================

# Energies below m - ENERGY_TOLERANCE are rejected as unphysical [MeV]
ENERGY_TOLERANCE = 1e-3

# =============================================================================
# Nuclear Mass Formula
# =============================================================================


@dataclass
class MassFormulaCoefficients:
    """Semi-empirical (Weizsäcker) mass formula coefficients.

    Units: MeV.
    """

    a_volume: float = 15.75
    """Volume term"""

    a_surface: float = 17.8
    """Surface term"""

    a_coulomb: float = 0.711
    """Coulomb term"""

    a_asymmetry: float = 23.7
    """Asymmetry term"""

    a_pairing: float = 11.18
    """Pairing term"""

    def binding_energy(self, A: int, Z: int) -> float:
        """Total binding energy of a nucleus (A, Z) [MeV].

        Single nucleons and the empty nucleus are unbound.
        """
        if A < 2:
            return 0.0
        N = A - Z
        binding = (
            self.a_volume * A
            - self.a_surface * A ** (2.0 / 3.0)
            - self.a_coulomb * Z * (Z - 1) / A ** (1.0 / 3.0)
            - self.a_asymmetry * (N - Z) ** 2 / A
        )
        if Z % 2 == 0 and N % 2 == 0:
            binding += self.a_pairing / np.sqrt(A)
        elif Z % 2 == 1 and N % 2 == 1:
            binding -= self.a_pairing / np.sqrt(A)
        return float(max(binding, 0.0))

    def nuclear_mass(self, A: int, Z: int) -> float:
        """Rest mass of a nucleus (A, Z) [MeV/c²]."""
        if A <= 0:
            return 0.0
        return Z * PROTON_MASS + (A - Z) * NEUTRON_MASS - self.binding_energy(A, Z)


DEFAULT_MASS_FORMULA = MassFormulaCoefficients()
