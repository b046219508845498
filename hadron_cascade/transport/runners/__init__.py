"""Output runners for cascade results.

This package provides modular components for writing cascade results:
- exporters: CSV/JSON export functions
- visualization: Plotting and figure generation

Example usage:
    from hadron_cascade.transport.api import run_cascade
    from hadron_cascade.transport.runners import export_final_state_csv, save_combined_results_figure

    result = run_cascade("pi+", 165.0, A=12, Z=6, n_events=1000)
    export_final_state_csv(result, "output/final_state.csv")
    save_combined_results_figure(result, "output/cascade.png")
"""

from hadron_cascade.transport.runners.exporters import (
    export_final_state_csv,
    export_result_json,
    export_summary_csv,
)
from hadron_cascade.transport.runners.visualization import (
    save_combined_results_figure,
    save_separate_figures,
)

__all__ = [
    # Exporters
    "export_final_state_csv",
    "export_summary_csv",
    "export_result_json",
    # Visualization
    "save_separate_figures",
    "save_combined_results_figure",
]
