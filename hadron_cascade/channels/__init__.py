"""Channel generators producing the final state of each fate."""

from hadron_cascade.channels.absorption import (
    AbsorptionGenerator,
    AbsorptionMultiplicityModel,
    MultiplicityParameters,
    split_into_groups,
)
from hadron_cascade.channels.angles import (
    NO_PHYSICAL_SOLUTION,
    HadronNucleonAngleSampler,
    IsotropicAngleSampler,
)
from hadron_cascade.channels.base import (
    ChannelGenerator,
    ChannelOutcome,
    ChannelRequest,
    ChannelResult,
    ChannelServices,
)
from hadron_cascade.channels.elastic import ElasticGenerator
from hadron_cascade.channels.inelastic import InelasticGenerator
from hadron_cascade.channels.pion_production import PionProductionGenerator

__all__ = [
    "AbsorptionGenerator",
    "AbsorptionMultiplicityModel",
    "MultiplicityParameters",
    "split_into_groups",
    "NO_PHYSICAL_SOLUTION",
    "HadronNucleonAngleSampler",
    "IsotropicAngleSampler",
    "ChannelGenerator",
    "ChannelOutcome",
    "ChannelRequest",
    "ChannelResult",
    "ChannelServices",
    "ElasticGenerator",
    "InelasticGenerator",
    "PionProductionGenerator",
]
