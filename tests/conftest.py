"""Pytest configuration and shared fixtures for hadron_cascade tests."""

import pytest
import numpy as np

from hadron_cascade.config import CascadeConfig, create_default_config
from hadron_cascade.core.particles import Species, make_particle
from hadron_cascade.core.random import RandomStream
from hadron_cascade.core.remnant import RemnantNucleus
from hadron_cascade.channels.base import ChannelServices
from hadron_cascade.fates.fate import Fate
from hadron_cascade.fates.tables import ConstantFateTable


class ScriptedRandomStream:
    """Random stream replaying a fixed list of uniforms.

    Once the list is used up, ``default`` is returned for every further
    draw; without a default the stream fails the test.
    """

    def __init__(self, values, default=None):
        self.values = list(values)
        self.default = default
        self.n_draws = 0

    def rndm(self):
        if self.n_draws < len(self.values):
            value = self.values[self.n_draws]
        elif self.default is not None:
            value = self.default
        else:
            raise AssertionError(f"scripted random stream exhausted after {self.n_draws} draws")
        self.n_draws += 1
        return value


# Fixtures for random streams


@pytest.fixture
def scripted_rng():
    """Factory for scripted random streams."""
    return ScriptedRandomStream


@pytest.fixture
def rng():
    """Seeded random stream."""
    return RandomStream(seed=12345)


# Fixtures for configuration


@pytest.fixture
def default_config():
    """Default cascade configuration."""
    return create_default_config()


@pytest.fixture
def no_fermi_config():
    """Configuration with Fermi motion switched off."""
    config = create_default_config()
    config.nuclear.do_fermi = False
    return config


@pytest.fixture
def services(rng, default_config):
    """Channel services around the seeded stream."""
    return ChannelServices.create(rng, default_config)


# Fixtures for nuclei and particles


@pytest.fixture
def carbon():
    """Carbon-12 remnant at rest."""
    return RemnantNucleus.at_rest(12, 6)


@pytest.fixture
def iron():
    """Iron-56 remnant at rest."""
    return RemnantNucleus.at_rest(56, 26)


@pytest.fixture
def hydrogen():
    """Single-proton remnant at rest."""
    return RemnantNucleus.at_rest(1, 1)


@pytest.fixture
def pi_plus_165():
    """165 MeV pi+ along +z, pointing at record index 0."""
    return make_particle(Species.PI_PLUS, 165.0, first_mother=0)


@pytest.fixture
def scenario_fractions():
    """Fate fractions CEx 0.1, Elas 0.3, Inel 0.3, Abs 0.2, PiProd 0.1."""
    return {
        Fate.CHARGE_EXCHANGE: 0.1,
        Fate.ELASTIC: 0.3,
        Fate.INELASTIC: 0.3,
        Fate.ABSORPTION: 0.2,
        Fate.PION_PRODUCTION: 0.1,
    }


@pytest.fixture
def constant_fate_table(scenario_fractions):
    """Constant fate table with the scenario fractions for pions and nucleons."""
    species = (
        Species.PI_PLUS, Species.PI_MINUS, Species.PI_ZERO,
        Species.PROTON, Species.NEUTRON,
    )
    table = {s: dict(scenario_fractions) for s in species}
    table[Species.K_PLUS] = {Fate.INELASTIC: 0.5, Fate.ABSORPTION: 0.5}
    table[Species.K_MINUS] = {Fate.INELASTIC: 0.5, Fate.ABSORPTION: 0.5}
    return ConstantFateTable(table)


def single_fate_table(fate):
    """Constant table in which every species gets only ``fate``."""
    return ConstantFateTable({s: {fate: 1.0} for s in Species})


@pytest.fixture
def fate_table_for():
    """Factory for single-fate tables."""
    return single_fate_table


def total_p4(particles):
    """Sum of the four-momenta of ``particles``."""
    return np.sum([p.p4 for p in particles], axis=0)


@pytest.fixture
def sum_p4():
    return total_p4
