"""Error taxonomy for hadron transport.

Recoverable failures (KinematicsFailure) make the retry loop try the same
fate again. Terminal failures (TerminalChannelError) degrade the particle
to a stable pass-through.

Import Policy:
    from hadron_cascade.core.exceptions import KinematicsFailure, RemnantExhausted

DO NOT use: from hadron_cascade.core.exceptions import *
"""


class CascadeError(Exception):
    """Base class for all transport errors."""

    def __init__(self, reason: str = ""):
        super().__init__(reason)
        self.reason = reason


class KinematicsFailure(CascadeError):
    """A requested final state is kinematically unreachable. Retry."""

    pass


class SamplingDeadlock(KinematicsFailure):
    """A rejection-sampling loop exceeded its iteration bound."""

    pass


class TerminalChannelError(CascadeError):
    """The channel cannot be completed for this particle at all."""

    pass


class RemnantExhausted(TerminalChannelError):
    """The remnant has too few nucleons or the wrong charge for the channel."""

    pass


class UnhandledFate(TerminalChannelError):
    """The channel generator does not handle this fate and species."""

    pass


class NoPhysicalSolution(TerminalChannelError):
    """The hN angle sampler reported no physical scattering angle."""

    pass


class RetriesExhausted(CascadeError):
    """Every kinematics attempt for a particle failed."""

    def __init__(self, reason: str = "", attempts: int = 0):
        super().__init__(reason)
        self.attempts = attempts
