"""Tests for core data structures: species, particles, remnant, record and accounting."""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from hadron_cascade.core.accounting import check_conservation
from hadron_cascade.core.constants import DEFAULT_MASS_FORMULA, NEUTRON_MASS, PROTON_MASS
from hadron_cascade.core.exceptions import RemnantExhausted
from hadron_cascade.core.particles import (
    Particle,
    ParticleStatus,
    Species,
    four_momentum,
    make_particle,
)
from hadron_cascade.core.random import RandomStream
from hadron_cascade.core.record import EventRecord
from hadron_cascade.core.remnant import RemnantNucleus, RemnantTracker, propose_remnant


class TestSpecies:
    """Tests for the Species enumeration."""

    def test_quantum_numbers(self):
        """Charge and baryon number of each class."""
        assert Species.PROTON.charge == 1
        assert Species.NEUTRON.baryon_number == 1
        assert Species.PI_MINUS.charge == -1
        assert Species.PI_ZERO.baryon_number == 0
        assert Species.K_PLUS.is_kaon and Species.K_PLUS.is_meson
        assert not Species.PHOTON.is_meson

    def test_from_name(self):
        """Short names and enum names resolve."""
        assert Species.from_name('pi+') == Species.PI_PLUS
        assert Species.from_name('n') == Species.NEUTRON
        assert Species.from_name('k_minus') == Species.K_MINUS

    def test_from_name_unknown(self):
        with pytest.raises(ValueError):
            Species.from_name('lambda')


class TestParticle:
    """Tests for Particle and four-momentum construction."""

    def test_on_shell(self):
        """make_particle builds an on-shell four-momentum along +z."""
        p = make_particle(Species.PROTON, 200.0)
        assert p.kinetic_energy == pytest.approx(200.0)
        mass2 = p.p4[0] ** 2 - np.dot(p.p4[1:], p.p4[1:])
        assert np.sqrt(mass2) == pytest.approx(PROTON_MASS, rel=1e-9)
        assert_allclose(p.p4[1:3], 0.0)

    def test_direction_normalised(self):
        p4 = four_momentum(Species.PI_PLUS, 100.0, direction=np.array([3.0, 0.0, 4.0]))
        p = np.linalg.norm(p4[1:])
        assert_allclose(p4[1:] / p, [0.6, 0.0, 0.8])

    def test_negative_energy_rejected(self):
        with pytest.raises(ValueError):
            four_momentum(Species.PROTON, -1.0)

    def test_copy_is_independent(self):
        """copy() owns its p4 and applies overrides."""
        p = make_particle(Species.NEUTRON, 50.0)
        q = p.copy(status=ParticleStatus.STABLE_FINAL_STATE)
        q.p4[0] += 1.0
        assert q.status == ParticleStatus.STABLE_FINAL_STATE
        assert p.status == ParticleStatus.IN_NUCLEUS
        assert p.p4[0] != q.p4[0]

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            Particle(Species.PROTON, np.zeros(3))


class TestRemnant:
    """Tests for the remnant nucleus and its bookkeeping rule."""

    def test_at_rest_mass(self, carbon):
        """Remnant at rest carries the mass formula energy."""
        expected = 6 * PROTON_MASS + 6 * NEUTRON_MASS - DEFAULT_MASS_FORMULA.binding_energy(12, 6)
        assert carbon.p4[0] == pytest.approx(expected)
        assert carbon.invariant_mass == pytest.approx(expected)
        assert carbon.N == 6
        assert carbon.proton_fraction == pytest.approx(0.5)

    def test_binding_energy_sensible(self):
        """Binding per nucleon of iron is in the 8-9 MeV range."""
        assert 8.0 < DEFAULT_MASS_FORMULA.binding_energy(56, 26) / 56 < 9.5
        assert DEFAULT_MASS_FORMULA.binding_energy(1, 1) == 0.0

    def test_propose_remnant_rule(self, carbon):
        """New = old + incoming - stable emissions; decayed particles are ignored."""
        probe = make_particle(Species.PI_PLUS, 165.0)
        proton = make_particle(Species.PROTON, 40.0, status=ParticleStatus.STABLE_FINAL_STATE)
        carrier = make_particle(Species.PI_PLUS, 10.0, status=ParticleStatus.DECAYED)

        proposal = propose_remnant(carbon, [probe], [carrier, proton])

        assert proposal.A == 11
        assert proposal.Z == 6
        assert_allclose(proposal.p4, carbon.p4 + probe.p4 - proton.p4)
        # original untouched
        assert carbon.A == 12

    def test_propose_remnant_exhausted(self, hydrogen):
        """Emitting more charge than the remnant holds is refused."""
        protons = [
            make_particle(Species.PROTON, 10.0, status=ParticleStatus.STABLE_FINAL_STATE)
            for _ in range(2)
        ]
        with pytest.raises(RemnantExhausted):
            propose_remnant(hydrogen, [], protons)

    def test_tracker_commit_and_reset(self, carbon):
        """Only commit changes the tracked state."""
        tracker = RemnantTracker(carbon)
        proposal = RemnantNucleus(A=11, Z=5, p4=carbon.p4 * 0.9)

        assert tracker.state.A == 12
        tracker.commit(proposal)
        assert tracker.state.A == 11
        assert tracker.n_commits == 1
        assert tracker.history[0].A == 12

        tracker.reset(carbon)
        assert tracker.state.A == 12
        assert tracker.n_commits == 0
        assert tracker.history == []

    def test_tracker_refuses_invalid(self, carbon):
        tracker = RemnantTracker(carbon)
        with pytest.raises(RemnantExhausted):
            tracker.commit(RemnantNucleus(A=2, Z=3))
        assert tracker.state.A == 12


class TestEventRecord:
    """Tests for the append-only event record."""

    def test_add_and_index(self):
        record = EventRecord()
        probe = make_particle(Species.PROTON, 100.0)
        assert record.add_particle(probe) == 0
        daughter = make_particle(Species.NEUTRON, 20.0,
                                 status=ParticleStatus.STABLE_FINAL_STATE, first_mother=0)
        assert record.extend([daughter]) == [1]
        assert len(record) == 2
        assert record.probe is probe
        assert record.daughters_of(0) == [1]
        assert record.stable_final_state() == [daughter]

    def test_rescatter_code(self):
        record = EventRecord()
        record.add_particle(make_particle(Species.PI_PLUS, 100.0))
        record.set_rescatter_code(0, 4)
        assert record[0].rescatter_code == 4

    def test_empty_probe(self):
        with pytest.raises(IndexError):
            EventRecord().probe


class TestConservation:
    """Tests for conservation accounting."""

    def test_balanced_channel(self, carbon):
        probe = make_particle(Species.PI_PLUS, 165.0)
        emitted = [
            make_particle(Species.PROTON, 60.0, np.array([1.0, 0.0, 1.0]),
                          status=ParticleStatus.STABLE_FINAL_STATE),
        ]
        after = propose_remnant(carbon, [probe], emitted)
        report = check_conservation(carbon, [probe], after, emitted)
        assert report.is_valid
        assert report.baryon_residual == 0
        assert report.max_p4_residual < 1e-9

    def test_unbalanced_channel(self, carbon, caplog):
        """A missing emission is reported and logged."""
        probe = make_particle(Species.PI_PLUS, 165.0)
        report = check_conservation(carbon, [probe], carbon, [])
        assert not report.is_valid
        assert report.charge_residual == 1
        assert 'FAIL' in str(report)
        assert any(record.levelname == 'WARNING' for record in caplog.records)


class TestRandomStream:
    """Tests for the seeded random stream."""

    def test_reproducible(self):
        a = RandomStream(seed=7)
        b = RandomStream(seed=7)
        assert [a.rndm() for _ in range(5)] == [b.rndm() for _ in range(5)]
        assert a.n_draws == 5

    def test_range(self):
        stream = RandomStream(seed=1)
        values = np.array([stream.rndm() for _ in range(1000)])
        assert np.all(values >= 0.0)
        assert np.all(values < 1.0)
