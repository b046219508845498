"""Kinematics: Lorentz helpers, elastic angular tables, two-body and N-body generators."""

from hadron_cascade.kinematics.angular import (
    NUCLEON_ELASTIC_TABLE,
    PION_ELASTIC_TABLE,
    AngularSampler,
    AngularTable,
)
from hadron_cascade.kinematics.phase_space import PhaseSpaceDecayer, PhaseSpaceGroup
from hadron_cascade.kinematics.two_body import TwoBodyKinematicsEngine

__all__ = [
    "AngularSampler",
    "AngularTable",
    "PION_ELASTIC_TABLE",
    "NUCLEON_ELASTIC_TABLE",
    "PhaseSpaceDecayer",
    "PhaseSpaceGroup",
    "TwoBodyKinematicsEngine",
]
