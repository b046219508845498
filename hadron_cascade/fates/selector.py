"""
Weighted selection of the reaction channel for one hadron.

Import Policy:
    from hadron_cascade.fates.selector import FateSelector

DO NOT use: from hadron_cascade.fates.selector import *
"""

import logging
from typing import Dict

from hadron_cascade.config.cascade_config import FateConfig
from hadron_cascade.core.particles import Species
from hadron_cascade.fates.fate import Fate, legal_fates
from hadron_cascade.fates.tables import FateTable

logger = logging.getLogger(__name__)


class FateSelector:
    """Picks a fate from the tabulated fractions.

    One uniform draw r in [0, tf) is compared against the cumulative
    fractions in priority order (charge exchange, elastic, inelastic,
    absorption, pion production); the first channel with r < cumulative
    wins. If no channel wins the draw is repeated, up to
    ``max_fate_iterations`` times, after which the fate is UNDEFINED.

    Args:
        table: Fate fraction source
        rng: Random stream exposing ``rndm()``
        config: Fate selection configuration
    """

    def __init__(self, table: FateTable, rng, config: FateConfig = None):
        self.table = table
        self.rng = rng
        self.config = config if config is not None else FateConfig()

    def fractions(self, species: Species, kinetic_energy: float) -> Dict[Fate, float]:
        """Fractions of the legal fates, in priority order."""
        return {
            fate: self.table.fraction(species, fate, kinetic_energy)
            for fate in legal_fates(species)
        }

    def select(self, species: Species, kinetic_energy: float) -> Fate:
        """Select a fate for a hadron of the given species and kinetic energy [MeV]."""
        fractions = self.fractions(species, kinetic_energy)
        if not fractions:
            logger.debug("%s has no interacting fates", species.name)
            return Fate.UNDEFINED

        tf = sum(fractions.values())
        logger.debug(
            "Fate fractions for %s at %.1f MeV: %s (total %.4f)",
            species.name, kinetic_energy,
            ", ".join(f"{fate.name}={value:.4f}" for fate, value in fractions.items()), tf,
        )
        if tf <= 0:
            logger.info("All fates switched off for %s at %.1f MeV", species.name, kinetic_energy)
            return Fate.UNDEFINED

        for _ in range(self.config.max_fate_iterations):
            r = tf * self.rng.rndm()
            cf = 0.0
            for fate, value in fractions.items():
                cf += value
                if r < cf:
                    logger.debug("Selected fate %s (r = %.4f)", fate.name, r)
                    return fate
            logger.debug("No fate selected for r = %.6f of tf = %.6f, redrawing", r, tf)

        logger.warning(
            "No fate selected for %s at %.1f MeV after %d draws",
            species.name, kinetic_energy, self.config.max_fate_iterations,
        )
        return Fate.UNDEFINED
