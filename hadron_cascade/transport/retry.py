"""
Bounded retry of channel kinematics.

Once a fate is selected it is kept: recoverable kinematics failures
(RETRY results) make the orchestrator call the same generator again with
fresh random draws, up to ``KinematicsConfig.max_kinematics_attempts``.
Terminal failures (STABLE results) end the loop immediately. When every
attempt fails the particle passes through as a stable final-state
particle, or ``RetriesExhausted`` is raised under
``RetryExhaustedPolicy.RAISE``.

Import Policy:
    from hadron_cascade.transport.retry import RetryOrchestrator

DO NOT use: from hadron_cascade.transport.retry import *
"""

import logging
from typing import Dict, Iterable, Optional

from hadron_cascade.channels.base import (
    ChannelGenerator,
    ChannelOutcome,
    ChannelRequest,
    ChannelResult,
)
from hadron_cascade.config.cascade_config import KinematicsConfig
from hadron_cascade.config.enums import RetryExhaustedPolicy
from hadron_cascade.core.exceptions import RetriesExhausted, UnhandledFate
from hadron_cascade.fates.fate import Fate

logger = logging.getLogger(__name__)


class RetryOrchestrator:
    """Runs a channel generator until it succeeds, fails terminally or runs out of attempts.

    Args:
        generators: Channel generators; each is registered for the fates it lists
        config: Kinematics configuration (attempt bound and exhaustion policy)

    Example:
        >>> orchestrator = RetryOrchestrator([ElasticGenerator(services)])
        >>> result = orchestrator.run(request)
        >>> result.outcome, result.attempts
    """

    def __init__(self, generators: Iterable[ChannelGenerator],
                 config: Optional[KinematicsConfig] = None):
        self.config = config if config is not None else KinematicsConfig()
        self._by_fate: Dict[Fate, ChannelGenerator] = {}
        for generator in generators:
            for fate in generator.fates:
                self._by_fate[fate] = generator

    def generator_for(self, fate: Fate) -> Optional[ChannelGenerator]:
        return self._by_fate.get(fate)

    def run(self, request: ChannelRequest) -> ChannelResult:
        """Generate the final state of ``request.fate``.

        Returns:
            SUCCESS result with staged particles and proposed remnant, or a
            STABLE result carrying the failure reason

        Raises:
            RetriesExhausted: Every attempt failed and the policy is RAISE
        """
        generator = self.generator_for(request.fate)
        if generator is None:
            error = UnhandledFate(f"no channel generator registered for {request.fate.name}")
            logger.warning("%s: %s", request.particle.species.name, error.reason)
            result = ChannelResult.stable(error)
            result.attempts = 0
            return result

        max_attempts = self.config.max_kinematics_attempts
        last = None
        for attempt in range(1, max_attempts + 1):
            result = generator.generate(request)
            result.attempts = attempt
            if result.outcome != ChannelOutcome.RETRY:
                if attempt > 1:
                    logger.debug(
                        "%s for %s resolved after %d attempts (%s)",
                        request.fate.name, request.particle.species.name,
                        attempt, result.outcome.value,
                    )
                return result
            last = result

        reason = (
            f"{request.fate.name} kinematics for {request.particle.species.name} "
            f"failed {max_attempts} times; last failure: {last.reason}"
        )
        if self.config.retry_exhausted_policy == RetryExhaustedPolicy.RAISE:
            raise RetriesExhausted(reason, attempts=max_attempts)

        logger.warning("%s; passing the particle through as stable", reason)
        error = RetriesExhausted(reason, attempts=max_attempts)
        result = ChannelResult.stable(error)
        result.attempts = max_attempts
        return result
