"""Append-only event record.

Particles are keyed by insertion order. The record links daughters to
mothers through ``Particle.first_mother`` and carries the rescatter code
tag written by the transport.
"""

from typing import Iterator, List

from hadron_cascade.core.particles import Particle, ParticleStatus


class EventRecord:
    """Append-only particle store for one event."""

    def __init__(self):
        self._particles: List[Particle] = []

    def add_particle(self, particle: Particle) -> int:
        """Append a particle and return its index."""
        self._particles.append(particle)
        return len(self._particles) - 1

    def extend(self, particles) -> List[int]:
        return [self.add_particle(p) for p in particles]

    def __getitem__(self, index: int) -> Particle:
        return self._particles[index]

    def __len__(self) -> int:
        return len(self._particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self._particles)

    @property
    def probe(self) -> Particle:
        """The first particle in the record, i.e. the cascade's incident hadron."""
        if not self._particles:
            raise IndexError("Event record is empty")
        return self._particles[0]

    def set_rescatter_code(self, index: int, code: int) -> None:
        self._particles[index].rescatter_code = int(code)

    def stable_final_state(self) -> List[Particle]:
        return [p for p in self._particles if p.status == ParticleStatus.STABLE_FINAL_STATE]

    def daughters_of(self, index: int) -> List[int]:
        return [i for i, p in enumerate(self._particles) if p.first_mother == index]
