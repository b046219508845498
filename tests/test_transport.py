"""Tests for single-step hadron transport."""

import logging

import pytest
import numpy as np

from hadron_cascade.channels import ChannelOutcome
from hadron_cascade.config import create_default_config
from hadron_cascade.config.enums import RetryExhaustedPolicy
from hadron_cascade.core.exceptions import RetriesExhausted
from hadron_cascade.core.particles import Particle, ParticleStatus, Species, make_particle
from hadron_cascade.core.random import RandomStream
from hadron_cascade.core.record import EventRecord
from hadron_cascade.fates.fate import Fate
from hadron_cascade.transport import HadronTransport


def start_event(particle):
    """Record holding the probe, plus the copy that gets transported."""
    record = EventRecord()
    index = record.add_particle(particle)
    return record, record[index].copy(first_mother=index)


class TestHadronTransport:
    """Tests for HadronTransport.simulate_final_state."""

    def test_charge_exchange_event(self, constant_fate_table, no_fermi_config, scripted_rng,
                                   carbon, pi_plus_165):
        """165 MeV pi+ on carbon with a 0.05 fate draw ends as pi0 + p."""
        stream = scripted_rng([0.05], default=0.5)
        transport = HadronTransport(constant_fate_table, stream, carbon, no_fermi_config)
        record, particle = start_event(pi_plus_165)

        outcome = transport.simulate_final_state(record, particle)

        assert outcome.fate == Fate.CHARGE_EXCHANGE
        assert outcome.committed
        assert outcome.attempts == 1
        assert record[0].rescatter_code == int(Fate.CHARGE_EXCHANGE)
        final = record.stable_final_state()
        assert [p.species for p in final] == [Species.PI_ZERO, Species.PROTON]
        assert all(p.first_mother == 0 for p in final)
        assert (transport.remnant.A, transport.remnant.Z) == (11, 6)
        assert transport.tracker.n_commits == 1
        assert outcome.conservation.is_valid

    def test_photon_passes_through(self, constant_fate_table, scripted_rng, carbon):
        """Photons get UNDEFINED without consuming a draw."""
        stream = scripted_rng([])
        transport = HadronTransport(constant_fate_table, stream, carbon)
        record, particle = start_event(make_particle(Species.PHOTON, 30.0))

        outcome = transport.simulate_final_state(record, particle)

        assert outcome.fate == Fate.UNDEFINED
        assert not outcome.committed
        assert record[0].rescatter_code == int(Fate.UNDEFINED)
        assert [p.species for p in record.stable_final_state()] == [Species.PHOTON]
        assert stream.n_draws == 0
        assert transport.remnant.A == 12

    def test_unknown_species(self, constant_fate_table, rng, carbon, caplog):
        """Species outside the transportable set are logged and passed through."""
        transport = HadronTransport(constant_fate_table, rng, carbon)
        lam = Particle(species=3122, p4=np.array([1200.0, 0.0, 0.0, 500.0]))
        record = EventRecord()

        with caplog.at_level(logging.ERROR):
            outcome = transport.simulate_final_state(record, lam)

        assert outcome.fate == Fate.UNDEFINED
        assert len(record) == 1
        assert record[0].status == ParticleStatus.STABLE_FINAL_STATE
        assert any('3122' in r.getMessage() for r in caplog.records if r.levelname == 'ERROR')

    def test_absorption_on_hydrogen(self, fate_table_for, rng, hydrogen):
        """Absorption on a lone proton leaves the particle and the remnant alone."""
        transport = HadronTransport(fate_table_for(Fate.ABSORPTION), rng, hydrogen)
        record, particle = start_event(make_particle(Species.PI_PLUS, 165.0))

        outcome = transport.simulate_final_state(record, particle)

        assert outcome.fate == Fate.ABSORPTION
        assert outcome.outcome == ChannelOutcome.STABLE
        assert outcome.reason
        final = record.stable_final_state()
        assert len(final) == 1
        assert final[0].species == Species.PI_PLUS
        np.testing.assert_allclose(final[0].p4, particle.p4)
        assert (transport.remnant.A, transport.remnant.Z) == (1, 1)
        assert transport.tracker.n_commits == 0

    def test_exhausted_retries_pass_through(self, fate_table_for, rng, carbon):
        """A final state out of reach passes through after the attempt bound."""
        config = create_default_config()
        config.kinematics.max_kinematics_attempts = 4
        transport = HadronTransport(fate_table_for(Fate.PION_PRODUCTION), rng, carbon, config)
        record, particle = start_event(make_particle(Species.PROTON, 100.0))

        outcome = transport.simulate_final_state(record, particle)

        assert outcome.fate == Fate.PION_PRODUCTION
        assert outcome.outcome == ChannelOutcome.STABLE
        assert outcome.attempts == 4
        assert [p.species for p in record.stable_final_state()] == [Species.PROTON]
        assert transport.tracker.n_commits == 0

    def test_exhausted_retries_raise(self, fate_table_for, rng, carbon):
        config = create_default_config()
        config.kinematics.max_kinematics_attempts = 2
        config.kinematics.retry_exhausted_policy = RetryExhaustedPolicy.RAISE
        transport = HadronTransport(fate_table_for(Fate.PION_PRODUCTION), rng, carbon, config)
        record, particle = start_event(make_particle(Species.PROTON, 100.0))

        with pytest.raises(RetriesExhausted):
            transport.simulate_final_state(record, particle)
        assert transport.tracker.n_commits == 0

    def test_remnant_carried_between_particles(self, fate_table_for, carbon):
        """Each committed channel starts from the previous remnant."""
        transport = HadronTransport(fate_table_for(Fate.INELASTIC), RandomStream(seed=77), carbon)
        record, first = start_event(make_particle(Species.PROTON, 250.0))

        transport.simulate_final_state(record, first)
        after_first = transport.remnant.A
        second = make_particle(Species.NEUTRON, 250.0, first_mother=0)
        transport.simulate_final_state(record, second)

        assert transport.remnant.A <= after_first
        assert transport.tracker.history[0].A == 12

    def test_reset(self, constant_fate_table, rng, carbon, iron):
        transport = HadronTransport(constant_fate_table, rng, carbon)
        transport.reset(iron)
        assert (transport.remnant.A, transport.remnant.Z) == (56, 26)
        assert transport.tracker.n_commits == 0

    def test_event_conserves_quantum_numbers(self, constant_fate_table, carbon):
        """Probe + target = stable final state + remnant across many events."""
        transport = HadronTransport(constant_fate_table, RandomStream(seed=101), carbon)
        for _ in range(40):
            transport.reset(carbon)
            probe = make_particle(Species.PI_PLUS, 165.0)
            record, particle = start_event(probe)
            outcome = transport.simulate_final_state(record, particle)

            final = record.stable_final_state()
            remnant = transport.remnant
            baryons = sum(p.species.baryon_number for p in final) + remnant.A
            charge = sum(p.species.charge for p in final) + remnant.Z
            assert baryons == carbon.A
            assert charge == carbon.Z + 1
            if outcome.committed:
                assert outcome.conservation.is_valid
