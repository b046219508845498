"""Export functions for cascade output data.

This module provides functions for exporting cascade results to various formats:
- CSV files with one row per final-state particle
- Fate summary statistics as CSV
- Full results as JSON
"""

import csv
import json
from pathlib import Path

from hadron_cascade.fates.fate import Fate


def export_final_state_csv(result, filename="cascade_final_state.csv"):
    """Export every stable final-state particle to CSV.

    Args:
        result: CascadeResult
        filename: Output CSV filename

    Returns:
        Path to output file
    """
    filename = Path(filename)
    filename.parent.mkdir(parents=True, exist_ok=True)

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)

        header = [
            "event",
            "fate",
            "outcome",
            "pdg",
            "species",
            "first_mother",
            "E_MeV",
            "px_MeV",
            "py_MeV",
            "pz_MeV",
            "kinetic_energy_MeV",
            "remnant_A",
            "remnant_Z",
        ]
        writer.writerow(header)

        for event in result.events:
            for particle in event.final_state:
                E, px, py, pz = particle.p4
                writer.writerow([
                    event.event,
                    event.fate.name,
                    event.outcome.value,
                    int(particle.species),
                    particle.species.name,
                    particle.first_mother,
                    f"{E:.6e}",
                    f"{px:.6e}",
                    f"{py:.6e}",
                    f"{pz:.6e}",
                    f"{particle.kinetic_energy:.6e}",
                    event.remnant.A,
                    event.remnant.Z,
                ])

    return filename


def export_summary_csv(result, filename="cascade_summary.csv"):
    """Export fate counts and run parameters to CSV.

    Args:
        result: CascadeResult
        filename: Output CSV filename

    Returns:
        Path to output file
    """
    filename = Path(filename)
    filename.parent.mkdir(parents=True, exist_ok=True)

    fractions = result.fate_fractions
    counts = result.fate_counts

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)

        writer.writerow(["Parameter", "Value", "Unit"])

        writer.writerow(["PROBE", "", ""])
        writer.writerow(["Species", result.species.name, "-"])
        writer.writerow(["Kinetic Energy", result.kinetic_energy, "MeV"])
        writer.writerow(["Target A", result.A, "-"])
        writer.writerow(["Target Z", result.Z, "-"])
        writer.writerow(["Events", result.n_events, "-"])

        writer.writerow(["FATES", "", ""])
        for fate in Fate:
            writer.writerow([fate.name, counts.get(fate, 0), f"{fractions.get(fate, 0.0):.6f}"])

        writer.writerow(["OUTCOMES", "", ""])
        for outcome, count in result.outcome_counts.items():
            writer.writerow([outcome.value, count, "-"])

        writer.writerow(["RESULTS", "", ""])
        writer.writerow(["Mean Multiplicity", f"{result.mean_multiplicity:.4f}", "-"])
        writer.writerow(["Conservation Valid", result.conservation_valid, "-"])
        writer.writerow(["Runtime", f"{result.runtime_seconds:.4f}", "s"])

    return filename


def export_result_json(result, filename="cascade_result.json"):
    """Export the full result dictionary to JSON.

    Args:
        result: CascadeResult
        filename: Output JSON filename

    Returns:
        Path to output file
    """
    filename = Path(filename)
    filename.parent.mkdir(parents=True, exist_ok=True)

    with open(filename, "w") as f:
        json.dump(result.to_dict(), f, indent=2)

    return filename
