"""
High-Level API for hA-Mode Hadron Cascade Simulation

This module provides a convenient Python API and CLI interface for
transporting a beam of identical hadrons through a nucleus, one
single-step cascade per event.

This is the recommended entry point for users who want to:
- Run cascades with simple function calls
- Use command-line interface for batch processing
- Access fate statistics and final states in a convenient format

Import Policy:
    from hadron_cascade.transport.api import run_cascade, run_from_config
    # Or use CLI: python -m hadron_cascade.transport.api --species pi+ --kinetic-energy 165 -A 12 -Z 6

DO NOT use: from hadron_cascade.transport.api import *
"""

from __future__ import annotations

import sys
import time
import logging
import argparse
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from hadron_cascade import __version__
from hadron_cascade.channels.base import ChannelOutcome
from hadron_cascade.config import CascadeConfig, create_default_config, validate_config
from hadron_cascade.config.yaml_loader import read_config_file
from hadron_cascade.core.particles import Particle, ParticleStatus, Species, make_particle
from hadron_cascade.core.random import RandomStream
from hadron_cascade.core.record import EventRecord
from hadron_cascade.core.remnant import RemnantNucleus
from hadron_cascade.fates.fate import Fate
from hadron_cascade.fates.tables import FateTable, load_fate_table
from hadron_cascade.transport.intranuke import HadronTransport

logger = logging.getLogger(__name__)


@dataclass
class EventSummary:
    """Outcome of one cascade event.

    Attributes:
        event: Event number
        fate: Fate selected for the incident hadron
        outcome: SUCCESS if a channel was committed, STABLE otherwise
        attempts: Kinematics attempts spent on the fate
        final_state: Stable final-state particles of the event record
        remnant: Remnant nucleus at the end of the event
        conservation_valid: Whether the committed channel conserved B, Q and P4
        reason: Why the hadron passed through (empty on SUCCESS)
    """

    event: int
    fate: Fate
    outcome: ChannelOutcome
    attempts: int
    final_state: List[Particle]
    remnant: RemnantNucleus
    conservation_valid: bool = True
    reason: str = ""

    @property
    def multiplicity(self) -> int:
        return len(self.final_state)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.event,
            "fate": self.fate.name,
            "outcome": self.outcome.value,
            "attempts": self.attempts,
            "reason": self.reason,
            "conservation_valid": self.conservation_valid,
            "remnant": {"A": self.remnant.A, "Z": self.remnant.Z, "p4": self.remnant.p4.tolist()},
            "final_state": [
                {
                    "pdg": int(p.species),
                    "species": p.species.name,
                    "p4": p.p4.tolist(),
                    "first_mother": p.first_mother,
                }
                for p in self.final_state
            ],
        }


@dataclass
class CascadeResult:
    """Results of a batch of cascade events.

    Attributes:
        species: Incident hadron species
        kinetic_energy: Incident kinetic energy [MeV]
        A: Target mass number
        Z: Target charge
        events: Per-event summaries
        config: Cascade configuration used
        seed: Random seed (None if unseeded)
        runtime_seconds: Wall-clock runtime
    """

    species: Species
    kinetic_energy: float
    A: int
    Z: int
    events: List[EventSummary] = field(default_factory=list)
    config: Optional[CascadeConfig] = None
    seed: Optional[int] = None
    runtime_seconds: float = 0.0

    @property
    def n_events(self) -> int:
        return len(self.events)

    @property
    def fate_counts(self) -> Dict[Fate, int]:
        return dict(Counter(event.fate for event in self.events))

    @property
    def outcome_counts(self) -> Dict[ChannelOutcome, int]:
        return dict(Counter(event.outcome for event in self.events))

    @property
    def fate_fractions(self) -> Dict[Fate, float]:
        if not self.events:
            return {}
        return {fate: count / self.n_events for fate, count in self.fate_counts.items()}

    @property
    def mean_multiplicity(self) -> float:
        if not self.events:
            return 0.0
        return sum(event.multiplicity for event in self.events) / self.n_events

    @property
    def conservation_valid(self) -> bool:
        return all(event.conservation_valid for event in self.events)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "species": self.species.name,
            "kinetic_energy": self.kinetic_energy,
            "A": self.A,
            "Z": self.Z,
            "n_events": self.n_events,
            "seed": self.seed,
            "runtime_seconds": self.runtime_seconds,
            "fate_counts": {fate.name: count for fate, count in self.fate_counts.items()},
            "outcome_counts": {o.value: count for o, count in self.outcome_counts.items()},
            "mean_multiplicity": self.mean_multiplicity,
            "conservation_valid": self.conservation_valid,
            "config": self.config.to_dict() if self.config is not None else None,
            "events": [event.to_dict() for event in self.events],
        }


def run_cascade(
    species: Union[Species, str],
    kinetic_energy: float,
    A: int,
    Z: int,
    n_events: int = 1,
    config: Optional[CascadeConfig] = None,
    fate_table: Optional[FateTable] = None,
    seed: Optional[int] = None,
    hn_angles=None,
    verbose: bool = False,
) -> CascadeResult:
    """Transport ``n_events`` identical hadrons through nucleus (A, Z).

    Every event starts from a fresh remnant at rest. The incident hadron
    is stored at index 0 of the event record and a copy pointing back to
    it is transported.

    Args:
        species: Incident species (Species or name such as 'pi+', 'p')
        kinetic_energy: Incident kinetic energy [MeV]
        A: Target mass number
        Z: Target charge
        n_events: Number of events
        config: Optional CascadeConfig (uses defaults if None)
        fate_table: Fate fractions (bundled table if None)
        seed: Random seed for reproducibility
        hn_angles: Hadron-nucleon angle sampler (isotropic if None)
        verbose: Print progress information

    Returns:
        CascadeResult with fate statistics and final states

    Example:
        >>> from hadron_cascade.transport.api import run_cascade
        >>> result = run_cascade("pi+", 165.0, A=12, Z=6, n_events=1000, seed=1)
        >>> print(result.fate_fractions)
    """
    if isinstance(species, str):
        species = Species.from_name(species)
    if n_events < 0:
        raise ValueError(f"n_events must be >= 0, got {n_events}")
    if config is None:
        config = create_default_config()
    if fate_table is None:
        fate_table = load_fate_table()

    initial = RemnantNucleus.at_rest(A, Z)
    rng = RandomStream(seed)
    transport = HadronTransport(fate_table, rng, initial, config=config, hn_angles=hn_angles)

    if verbose:
        print(f"Transporting {n_events} x {species.name} at {kinetic_energy} MeV "
              f"through A={A}, Z={Z}...")

    start = time.time()
    events = []
    for event in range(n_events):
        transport.reset(initial)
        record = EventRecord()
        probe_index = record.add_particle(
            make_particle(species, kinetic_energy, status=ParticleStatus.IN_NUCLEUS)
        )
        outcome = transport.simulate_final_state(
            record, record[probe_index].copy(first_mother=probe_index),
        )
        events.append(EventSummary(
            event=event,
            fate=outcome.fate,
            outcome=outcome.outcome,
            attempts=outcome.attempts,
            final_state=record.stable_final_state(),
            remnant=transport.remnant.copy(),
            conservation_valid=outcome.conservation is None or outcome.conservation.is_valid,
            reason=outcome.reason,
        ))

    result = CascadeResult(
        species=species,
        kinetic_energy=kinetic_energy,
        A=A,
        Z=Z,
        events=events,
        config=config,
        seed=seed,
        runtime_seconds=time.time() - start,
    )

    if verbose:
        print(f"\nCascade completed in {result.runtime_seconds:.3f} seconds")
        print(f"Mean multiplicity: {result.mean_multiplicity:.3f}")
        print(f"Conservation valid: {result.conservation_valid}")
        print("\nFate summary:")
        fractions = result.fate_fractions
        for fate in Fate:
            print(f"  {fate.name:20s}: {fractions.get(fate, 0.0):.4f}")

    return result


def load_config(config_path: Union[str, Path]) -> CascadeConfig:
    """Load and validate a cascade configuration from YAML or JSON."""
    config = CascadeConfig.from_dict(read_config_file(config_path))
    validate_config(config, raise_on_error=True)
    return config


def run_from_config(
    config_path: Union[str, Path],
    species: Union[Species, str],
    kinetic_energy: float,
    A: int,
    Z: int,
    n_events: int = 1,
    seed: Optional[int] = None,
    verbose: bool = False,
) -> CascadeResult:
    """Run cascades with the configuration stored in a YAML or JSON file.

    Example:
        >>> from hadron_cascade.transport.api import run_from_config
        >>> result = run_from_config("cascade.yaml", "p", 300.0, A=56, Z=26, n_events=100)
    """
    config = load_config(config_path)
    return run_cascade(species, kinetic_energy, A, Z, n_events=n_events,
                       config=config, seed=seed, verbose=verbose)


def save_result(
    result: CascadeResult,
    output_path: Union[str, Path],
    format: Optional[str] = None,
) -> Path:
    """Save cascade results to file.

    Args:
        result: CascadeResult to save
        output_path: Output file path
        format: Output format ("csv", "json"); inferred from the suffix if None

    Returns:
        Path to output file
    """
    from hadron_cascade.transport.runners.exporters import (
        export_final_state_csv,
        export_result_json,
    )

    output_path = Path(output_path)
    if format is None:
        format = output_path.suffix.lstrip(".").lower()

    if format == "csv":
        return export_final_state_csv(result, output_path)
    if format == "json":
        return export_result_json(result, output_path)
    raise ValueError(f"Unsupported format: {format}")


def create_cli_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="hA-Mode Intranuclear Hadron Cascade",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 165 MeV pi+ on carbon
  python -m hadron_cascade.transport.api --species pi+ --kinetic-energy 165 -A 12 -Z 6

  # More events, reproducible
  python -m hadron_cascade.transport.api --species p --kinetic-energy 300 -A 56 -Z 26 --n-events 10000 --seed 7

  # Custom configuration and fate table
  python -m hadron_cascade.transport.api --config cascade.yaml --fate-table fates.yaml

  # Export final states and plot
  python -m hadron_cascade.transport.api --export output/final_state.csv --plot output/cascade.png
        """
    )

    # Probe and target
    parser.add_argument('--species', type=str, default='pi+',
                       help="Incident hadron: p, n, pi+, pi-, pi0, K+, K- (default: pi+)")
    parser.add_argument('--kinetic-energy', type=float, default=165.0,
                       dest='kinetic_energy',
                       help='Incident kinetic energy in MeV (default: 165.0)')
    parser.add_argument('-A', type=int, default=12,
                       help='Target mass number (default: 12)')
    parser.add_argument('-Z', type=int, default=6,
                       help='Target charge (default: 6)')

    # Run parameters
    parser.add_argument('--n-events', type=int, default=1000,
                       dest='n_events',
                       help='Number of events (default: 1000)')
    parser.add_argument('--seed', type=int,
                       help='Random seed')

    # Inputs
    parser.add_argument('--config', type=str,
                       help='Path to configuration file (YAML/JSON)')
    parser.add_argument('--fate-table', type=str, dest='fate_table',
                       help='Path to a YAML fate fraction table')

    # Output
    parser.add_argument('--export', type=str,
                       help='Output file path (format by suffix: .csv, .json)')
    parser.add_argument('--plot', type=str,
                       help='Save a combined results figure to this path')

    # Other options
    parser.add_argument('--quiet', action='store_true',
                       help='Suppress progress output')
    parser.add_argument('--version', action='version',
                       version=f'hadron_cascade v{__version__}')

    return parser


def main() -> int:
    """CLI entry point."""
    parser = create_cli_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else None
        fate_table = load_fate_table(args.fate_table) if args.fate_table else None

        result = run_cascade(
            args.species,
            args.kinetic_energy,
            args.A,
            args.Z,
            n_events=args.n_events,
            config=config,
            fate_table=fate_table,
            seed=args.seed,
            verbose=not args.quiet,
        )

        if args.export:
            path = save_result(result, args.export)
            if not args.quiet:
                print(f"\nResults saved to: {path}")

        if args.plot:
            from hadron_cascade.transport.runners.visualization import save_combined_results_figure
            path = save_combined_results_figure(result, args.plot)
            if not args.quiet:
                print(f"Figure saved to: {path}")

        if not result.conservation_valid:
            if not args.quiet:
                print("\nWarning: Conservation check failed!", file=sys.stderr)
            return 1

        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.debug("CLI failure", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
