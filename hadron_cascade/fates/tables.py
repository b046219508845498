"""
Fate fraction sources.

A fate table answers ``fraction(species, fate, kinetic_energy)`` with a
non-negative probability. Fractions for one species need not sum to one.

Import Policy:
    from hadron_cascade.fates.tables import ConstantFateTable, TabulatedFateTable, load_fate_table

DO NOT use: from hadron_cascade.fates.tables import *
"""

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import numpy as np
import yaml
from scipy.interpolate import interp1d

from hadron_cascade.core.particles import Species
from hadron_cascade.fates.fate import Fate

logger = logging.getLogger(__name__)

DEFAULT_FATE_TABLE_PATH = Path(__file__).resolve().parent.parent / "data" / "fate_fractions.yaml"


class FateTable:
    """Interface of a fate fraction source."""

    def fraction(self, species: Species, fate: Fate, kinetic_energy: float) -> float:
        raise NotImplementedError


class ConstantFateTable(FateTable):
    """Energy-independent fractions per species.

    Args:
        fractions: {species: {fate: fraction}}; missing entries are zero

    Example:
        >>> table = ConstantFateTable({Species.PI_PLUS: {Fate.ELASTIC: 0.4, Fate.ABSORPTION: 0.6}})
        >>> table.fraction(Species.PI_PLUS, Fate.ELASTIC, 100.0)
        0.4
    """

    def __init__(self, fractions: Mapping[Species, Mapping[Fate, float]]):
        self._fractions: Dict[Species, Dict[Fate, float]] = {}
        for species, by_fate in fractions.items():
            for fate, value in by_fate.items():
                if value < 0:
                    raise ValueError(
                        f"Negative fraction {value} for {Species(species).name}/{Fate(fate).name}"
                    )
            self._fractions[Species(species)] = {Fate(f): float(v) for f, v in by_fate.items()}

    def fraction(self, species: Species, fate: Fate, kinetic_energy: float) -> float:
        return self._fractions.get(species, {}).get(fate, 0.0)


class TabulatedFateTable(FateTable):
    """Fractions tabulated on a kinetic-energy grid per species.

    Values between grid points are linearly interpolated; outside the grid
    the edge values are used. Interpolated values are floored at zero.

    Args:
        energy_grids: {species: energy grid [MeV], strictly increasing}
        fractions: {species: {fate: fraction at each grid point}}
    """

    def __init__(self, energy_grids: Mapping[Species, np.ndarray],
                 fractions: Mapping[Species, Mapping[Fate, np.ndarray]]):
        self._interpolators: Dict[Species, Dict[Fate, interp1d]] = {}

        for species, by_fate in fractions.items():
            species = Species(species)
            if species not in energy_grids:
                raise ValueError(f"No energy grid for {species.name}")
            grid = np.asarray(energy_grids[species], dtype=np.float64)
            if grid.ndim != 1 or len(grid) < 2:
                raise ValueError(f"Energy grid for {species.name} needs at least two points")
            if np.any(np.diff(grid) <= 0):
                raise ValueError(f"Energy grid for {species.name} must be strictly increasing")

            self._interpolators[species] = {}
            for fate, values in by_fate.items():
                values = np.asarray(values, dtype=np.float64)
                if values.shape != grid.shape:
                    raise ValueError(
                        f"{species.name}/{Fate(fate).name}: {len(values)} fractions for "
                        f"{len(grid)} energy points"
                    )
                self._interpolators[species][Fate(fate)] = interp1d(
                    grid, values, kind="linear",
                    bounds_error=False, fill_value=(values[0], values[-1]),
                )

    def fraction(self, species: Species, fate: Fate, kinetic_energy: float) -> float:
        f = self._interpolators.get(species, {}).get(fate)
        if f is None:
            return 0.0
        return max(float(f(kinetic_energy)), 0.0)

    @property
    def species(self):
        return tuple(self._interpolators)


def _parse_fate(name: str) -> Fate:
    try:
        return Fate[name.upper()]
    except KeyError:
        raise ValueError(f"Unknown fate in fate table: {name}") from None


def load_fate_table(path: Optional[Union[str, Path]] = None) -> TabulatedFateTable:
    """Load a tabulated fate table from YAML.

    Expected layout::

        species:
          pi+:
            kinetic_energy: [50, 100, ...]
            fractions:
              charge_exchange: [...]
              elastic: [...]

    Args:
        path: YAML file (default: the table shipped in hadron_cascade/data)

    Returns:
        TabulatedFateTable
    """
    path = Path(path) if path is not None else DEFAULT_FATE_TABLE_PATH
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    energy_grids = {}
    fractions = {}
    for name, entry in (data.get("species") or {}).items():
        species = Species.from_name(str(name))
        energy_grids[species] = entry["kinetic_energy"]
        fractions[species] = {
            _parse_fate(fate_name): values
            for fate_name, values in (entry.get("fractions") or {}).items()
        }

    logger.info("Loaded fate table for %d species from %s", len(fractions), path)
    return TabulatedFateTable(energy_grids, fractions)
