"""Nuclear model collaborators."""

from hadron_cascade.nuclear.fermi_gas import FermiGasModel

__all__ = ["FermiGasModel"]
