"""
Configuration Enums for hadron transport

Import Policy:
    from hadron_cascade.config.enums import RetryExhaustedPolicy

DO NOT use: from hadron_cascade.config.enums import *
"""

from enum import Enum


class RetryExhaustedPolicy(Enum):
    """What happens when every kinematics attempt for a particle has failed.

    Options:
        STABLE_FINAL_STATE: Emit the particle unchanged as stable final state (default)
        RAISE: Raise RetriesExhausted to the caller (debugging)

    Note:
        The default keeps the cascade running: the driver always receives a
        fully-specified outgoing particle set.
    """
    STABLE_FINAL_STATE = "stable_final_state"
    RAISE = "raise"
