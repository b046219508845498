"""Transport orchestration package."""

from hadron_cascade.transport.intranuke import HadronTransport, TransportOutcome
from hadron_cascade.transport.retry import RetryOrchestrator

__all__ = [
    'HadronTransport',
    'TransportOutcome',
    'RetryOrchestrator',
]
