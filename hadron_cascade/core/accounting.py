"""Conservation Accounting for Channel Commits

This module checks that every committed channel conserves baryon number,
charge and four-momentum between the initial system (remnant before plus
incoming probe) and the final system (remnant after plus stable emissions).

Balance Equation:
    X_in = X_out

        X_in:  remnant_before + sum(incoming)
        X_out: remnant_after + sum(stable emissions)

    for X in {baryon number, charge, four-momentum}. DECAYED intermediate
    particles are excluded on both sides.

Import Policy:
    from hadron_cascade.core.accounting import ConservationReport, check_conservation

DO NOT use: from hadron_cascade.core.accounting import *
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from hadron_cascade.config.defaults import FOUR_MOMENTUM_TOLERANCE
from hadron_cascade.core.particles import Particle, ParticleStatus
from hadron_cascade.core.remnant import RemnantNucleus

logger = logging.getLogger(__name__)


@dataclass
class ConservationReport:
    """Conservation report for one committed channel.

    Attributes:
        baryon_residual: Baryon number in minus out
        charge_residual: Charge in minus out
        p4_residual: Four-momentum in minus out [MeV]
        tolerance: Absolute tolerance on the four-momentum residual [MeV]
        is_valid: Whether conservation holds within tolerance

    """

    baryon_residual: int = 0
    charge_residual: int = 0
    p4_residual: np.ndarray = field(default_factory=lambda: np.zeros(4))
    tolerance: float = FOUR_MOMENTUM_TOLERANCE
    is_valid: bool = True

    @property
    def max_p4_residual(self) -> float:
        return float(np.max(np.abs(self.p4_residual)))

    def __str__(self) -> str:
        status = "PASS" if self.is_valid else "FAIL"
        return (
            f"Conservation [{status}]: dB={self.baryon_residual} dQ={self.charge_residual} "
            f"max|dP4|={self.max_p4_residual:.3e} MeV (tol {self.tolerance:.1e})"
        )


def check_conservation(remnant_before: RemnantNucleus,
                       incoming: Iterable[Particle],
                       remnant_after: RemnantNucleus,
                       emitted: Iterable[Particle],
                       tolerance: float = FOUR_MOMENTUM_TOLERANCE) -> ConservationReport:
    """Build the conservation report for one channel.

    Args:
        remnant_before: Remnant before the channel
        incoming: Particles entering the remnant
        remnant_after: Remnant after the channel
        emitted: Particles emitted by the channel
        tolerance: Absolute tolerance on the four-momentum residual [MeV]

    Returns:
        ConservationReport
    """
    baryons = remnant_before.A - remnant_after.A
    charge = remnant_before.Z - remnant_after.Z
    p4 = remnant_before.p4 - remnant_after.p4

    for particle in incoming:
        baryons += particle.species.baryon_number
        charge += particle.species.charge
        p4 = p4 + particle.p4

    for particle in emitted:
        if particle.status != ParticleStatus.STABLE_FINAL_STATE:
            continue
        baryons -= particle.species.baryon_number
        charge -= particle.species.charge
        p4 = p4 - particle.p4

    # Relative tolerance for the large remnant energies
    scale = max(1.0, abs(float(remnant_before.p4[0])))
    is_valid = (
        baryons == 0
        and charge == 0
        and bool(np.all(np.abs(p4) <= tolerance * scale))
    )

    report = ConservationReport(
        baryon_residual=baryons,
        charge_residual=charge,
        p4_residual=p4,
        tolerance=tolerance,
        is_valid=is_valid,
    )
    if not is_valid:
        logger.warning("%s", report)
    return report
