"""Tests for the elastic, inelastic/charge-exchange and pion production generators."""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from hadron_cascade.channels import (
    NO_PHYSICAL_SOLUTION,
    ChannelOutcome,
    ChannelRequest,
    ChannelServices,
    ElasticGenerator,
    HadronNucleonAngleSampler,
    InelasticGenerator,
    PionProductionGenerator,
)
from hadron_cascade.channels.inelastic import effective_projectile
from hadron_cascade.channels.pion_production import production_final_states
from hadron_cascade.core.accounting import check_conservation
from hadron_cascade.core.exceptions import (
    KinematicsFailure,
    NoPhysicalSolution,
    RemnantExhausted,
    UnhandledFate,
)
from hadron_cascade.core.particles import ParticleStatus, Species, make_particle
from hadron_cascade.core.random import RandomStream
from hadron_cascade.core.remnant import RemnantNucleus
from hadron_cascade.fates.fate import Fate
from hadron_cascade.kinematics.lorentz import invariant_mass_squared

P, N = Species.PROTON, Species.NEUTRON


def request_for(particle, fate, remnant, original_ke=None):
    if original_ke is None:
        original_ke = particle.kinetic_energy
    return ChannelRequest(particle=particle, fate=fate, remnant=remnant,
                          original_probe_ke=original_ke)


class NoSolutionSampler(HadronNucleonAngleSampler):
    """hN sampler that never finds a physical angle."""

    def cos_theta(self, projectile, projectile_p4, target, product, fate):
        return NO_PHYSICAL_SOLUTION


@pytest.fixture
def no_fermi_services(no_fermi_config):
    return ChannelServices.create(RandomStream(seed=99), no_fermi_config)


class TestElastic:
    """Tests for hA elastic scattering."""

    def test_proton_loses_energy_to_remnant(self, services, carbon):
        """Outgoing KE <= incoming KE and the remnant takes the momentum difference."""
        probe = make_particle(P, 200.0, first_mother=0)
        result = ElasticGenerator(services).generate(request_for(probe, Fate.ELASTIC, carbon))

        assert result.outcome == ChannelOutcome.SUCCESS
        assert len(result.particles) == 1
        outgoing = result.particles[0]
        assert outgoing.species == P
        assert outgoing.status == ParticleStatus.STABLE_FINAL_STATE
        assert outgoing.kinetic_energy <= probe.kinetic_energy + 1e-9

        remnant = result.remnant
        assert (remnant.A, remnant.Z) == (12, 6)
        assert_allclose(remnant.p4 - carbon.p4, probe.p4 - outgoing.p4, atol=1e-8)

    def test_remnant_stays_on_shell(self, services, carbon):
        """The recoiling remnant keeps its invariant mass."""
        probe = make_particle(Species.PI_MINUS, 120.0)
        result = ElasticGenerator(services).generate(request_for(probe, Fate.ELASTIC, carbon))
        assert result.ok
        assert np.sqrt(invariant_mass_squared(result.remnant.p4)) == pytest.approx(
            carbon.invariant_mass, rel=1e-9
        )

    def test_empty_remnant(self, services):
        probe = make_particle(P, 200.0)
        result = ElasticGenerator(services).generate(
            request_for(probe, Fate.ELASTIC, RemnantNucleus(A=0, Z=0))
        )
        assert result.outcome == ChannelOutcome.STABLE
        assert isinstance(result.error, RemnantExhausted)
        assert result.particles == []


class TestInelastic:
    """Tests for inelastic knock-out and charge exchange."""

    def test_pi_plus_charge_exchange(self, no_fermi_services, carbon):
        """pi+ n -> pi0 p, remnant loses one neutron."""
        probe = make_particle(Species.PI_PLUS, 165.0, first_mother=0)
        result = InelasticGenerator(no_fermi_services).generate(
            request_for(probe, Fate.CHARGE_EXCHANGE, carbon)
        )

        assert result.outcome == ChannelOutcome.SUCCESS
        assert [p.species for p in result.particles] == [Species.PI_ZERO, P]
        assert all(p.first_mother == 0 for p in result.particles)
        assert (result.remnant.A, result.remnant.Z) == (11, 6)
        assert check_conservation(carbon, [probe], result.remnant, result.particles).is_valid

    def test_outgoing_energies_bounded(self, no_fermi_services, carbon):
        probe = make_particle(Species.PI_MINUS, 165.0)
        result = InelasticGenerator(no_fermi_services).generate(
            request_for(probe, Fate.CHARGE_EXCHANGE, carbon)
        )
        assert result.ok
        assert all(p.kinetic_energy <= 165.0 for p in result.particles)

    def test_inelastic_keeps_species(self, no_fermi_services, iron):
        """Inelastic scattering keeps the probe species and knocks out a nucleon."""
        probe = make_particle(P, 300.0)
        result = InelasticGenerator(no_fermi_services).generate(request_for(probe, Fate.INELASTIC, iron))

        assert result.ok
        scattered, knocked = result.particles
        assert scattered.species == P
        assert knocked.species in (P, N)
        assert result.remnant.A == 55
        assert result.remnant.Z == 26 - knocked.species.charge
        assert check_conservation(iron, [probe], result.remnant, result.particles).is_valid

    def test_missing_target_nucleon(self, services, hydrogen):
        """pi+ charge exchange needs a neutron."""
        probe = make_particle(Species.PI_PLUS, 165.0)
        result = InelasticGenerator(services).generate(
            request_for(probe, Fate.CHARGE_EXCHANGE, hydrogen)
        )
        assert result.outcome == ChannelOutcome.STABLE
        assert isinstance(result.error, RemnantExhausted)

    def test_kaon_charge_exchange_unhandled(self, services, carbon):
        probe = make_particle(Species.K_PLUS, 400.0)
        result = InelasticGenerator(services).generate(
            request_for(probe, Fate.CHARGE_EXCHANGE, carbon)
        )
        assert result.outcome == ChannelOutcome.STABLE
        assert isinstance(result.error, UnhandledFate)

    def test_no_physical_angle(self, no_fermi_config, carbon):
        services = ChannelServices.create(RandomStream(seed=1), no_fermi_config,
                                          hn_angles=NoSolutionSampler())
        probe = make_particle(P, 300.0)
        result = InelasticGenerator(services).generate(request_for(probe, Fate.INELASTIC, carbon))
        assert result.outcome == ChannelOutcome.STABLE
        assert isinstance(result.error, NoPhysicalSolution)

    def test_energy_above_incident_retries(self, no_fermi_services, carbon):
        """Outgoing KE above the cascade's incident KE is a recoverable failure."""
        probe = make_particle(P, 300.0)
        result = InelasticGenerator(no_fermi_services).generate(
            request_for(probe, Fate.INELASTIC, carbon, original_ke=1.0)
        )
        assert result.outcome == ChannelOutcome.RETRY
        assert isinstance(result.error, KinematicsFailure)

    def test_effective_projectile_at_rest_target(self):
        """For a target at rest the effective projectile is the probe itself."""
        probe = make_particle(P, 250.0)
        target = np.array([N.mass, 0.0, 0.0, 0.0])
        assert_allclose(effective_projectile(probe.p4, P.mass, target, N.mass), probe.p4, atol=1e-8)


class TestPionProduction:
    """Tests for three-body pion production."""

    def test_final_state_tables(self):
        assert production_final_states(P, P) == [(P, P, Species.PI_ZERO), (P, N, Species.PI_PLUS)]
        assert production_final_states(Species.PI_PLUS, P) == [
            (Species.PI_PLUS, Species.PI_PLUS, N),
            (Species.PI_PLUS, Species.PI_ZERO, P),
        ]

    def test_final_states_conserve_charge(self):
        for probe in (P, N, Species.PI_PLUS, Species.PI_MINUS, Species.PI_ZERO):
            for target in (P, N):
                states = production_final_states(probe, target)
                assert states
                for state in states:
                    assert sum(s.charge for s in state) == probe.charge + target.charge
                    assert sum(s.baryon_number for s in state) == probe.baryon_number + 1

    def test_proton_production(self, no_fermi_services, carbon):
        probe = make_particle(P, 800.0)
        result = PionProductionGenerator(no_fermi_services).generate(
            request_for(probe, Fate.PION_PRODUCTION, carbon)
        )

        assert result.ok
        assert len(result.particles) == 3
        assert sum(p.species.baryon_number for p in result.particles) == 2
        assert sum(1 for p in result.particles if p.species.is_pion) == 1
        assert result.remnant.A == 11
        assert check_conservation(carbon, [probe], result.remnant, result.particles).is_valid

    def test_pion_production_by_pion(self, no_fermi_services, carbon):
        probe = make_particle(Species.PI_PLUS, 600.0)
        result = PionProductionGenerator(no_fermi_services).generate(
            request_for(probe, Fate.PION_PRODUCTION, carbon)
        )
        assert result.ok
        assert sum(1 for p in result.particles if p.species.is_pion) == 2

    def test_below_threshold_retries(self, no_fermi_services, carbon):
        probe = make_particle(P, 100.0)
        result = PionProductionGenerator(no_fermi_services).generate(
            request_for(probe, Fate.PION_PRODUCTION, carbon)
        )
        assert result.outcome == ChannelOutcome.RETRY

    def test_kaon_unhandled(self, services, carbon):
        probe = make_particle(Species.K_MINUS, 800.0)
        result = PionProductionGenerator(services).generate(
            request_for(probe, Fate.PION_PRODUCTION, carbon)
        )
        assert result.outcome == ChannelOutcome.STABLE
        assert isinstance(result.error, UnhandledFate)
