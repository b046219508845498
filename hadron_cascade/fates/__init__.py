"""Reaction channel enumeration, fraction tables and selection."""

from hadron_cascade.fates.fate import FATE_PRIORITY, Fate, is_transportable, legal_fates
from hadron_cascade.fates.selector import FateSelector
from hadron_cascade.fates.tables import (
    ConstantFateTable,
    FateTable,
    TabulatedFateTable,
    load_fate_table,
)

__all__ = [
    "Fate",
    "FATE_PRIORITY",
    "is_transportable",
    "legal_fates",
    "FateSelector",
    "FateTable",
    "ConstantFateTable",
    "TabulatedFateTable",
    "load_fate_table",
]
