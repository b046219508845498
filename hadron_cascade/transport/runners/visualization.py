"""Visualization functions for cascade results.

This module provides functions for creating plots and figures:
- Fate fractions bar chart
- Final-state multiplicity histogram
- Kinetic energy spectra of the emitted species
- Combined results figure
"""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from hadron_cascade.fates.fate import Fate


def _kinetic_energies_by_species(result):
    spectra = {}
    for event in result.events:
        for particle in event.final_state:
            spectra.setdefault(particle.species.name, []).append(particle.kinetic_energy)
    return spectra


def _plot_fates(ax, result):
    fractions = result.fate_fractions
    fates = [fate for fate in Fate if fate != Fate.UNDEFINED]
    values = [fractions.get(fate, 0.0) for fate in fates]
    ax.bar([fate.name for fate in fates], values, color="steelblue")
    ax.set_ylabel("Fraction of events")
    ax.set_title(f"{result.species.name} {result.kinetic_energy:.0f} MeV on A={result.A}, Z={result.Z}")
    ax.tick_params(axis="x", labelrotation=30)
    ax.grid(True, axis="y", alpha=0.3)


def _plot_multiplicity(ax, result):
    multiplicities = np.array([event.multiplicity for event in result.events])
    if multiplicities.size:
        bins = np.arange(multiplicities.max() + 2) - 0.5
        ax.hist(multiplicities, bins=bins, color="darkorange", edgecolor="black")
    ax.set_xlabel("Final-state multiplicity")
    ax.set_ylabel("Events")
    ax.set_title(f"Mean multiplicity {result.mean_multiplicity:.2f}")
    ax.grid(True, alpha=0.3)


def _plot_spectra(ax, result):
    spectra = _kinetic_energies_by_species(result)
    upper = max((max(values) for values in spectra.values()), default=1.0)
    bins = np.linspace(0.0, max(upper, 1.0), 40)
    for name, values in sorted(spectra.items()):
        ax.hist(values, bins=bins, histtype="step", linewidth=1.5, label=name)
    ax.set_xlabel("Kinetic energy [MeV]")
    ax.set_ylabel("Particles")
    ax.set_title("Final-state kinetic energy spectra")
    if spectra:
        ax.legend()
    ax.grid(True, alpha=0.3)


def save_separate_figures(result, output_dir, figure_format="png", dpi=150):
    """Save separate figures for fates, multiplicity and spectra.

    Args:
        result: CascadeResult
        output_dir: Output directory for figures
        figure_format: Figure format (png, pdf, svg)
        dpi: Figure DPI

    Returns:
        Tuple of (fates_file, multiplicity_file, spectra_file) paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(exist_ok=True, parents=True)

    files = []
    for name, plot in (("fates", _plot_fates),
                       ("multiplicity", _plot_multiplicity),
                       ("spectra", _plot_spectra)):
        path = output_dir / f"cascade_{name}.{figure_format}"
        fig, ax = plt.subplots(figsize=(10, 6))
        plot(ax, result)
        plt.tight_layout()
        fig.savefig(path, dpi=dpi)
        plt.close(fig)
        files.append(path)

    return tuple(files)


def save_combined_results_figure(result, output_path, dpi=150):
    """Save a combined 1x3 results figure.

    Args:
        result: CascadeResult
        output_path: Output file path
        dpi: Figure DPI

    Returns:
        Path to output file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(exist_ok=True, parents=True)

    fig, axes = plt.subplots(1, 3, figsize=(18, 5))
    _plot_fates(axes[0], result)
    _plot_multiplicity(axes[1], result)
    _plot_spectra(axes[2], result)
    plt.tight_layout()
    fig.savefig(output_path, dpi=dpi)
    plt.close(fig)

    return output_path
