"""
Hyperlane CLI package.

Dispatches interchain messages, pays for their delivery and queries
historical dispatches on Hyperlane Mailbox contracts.
"""

from .config import QueryConfig, SendConfig
from .dispatcher import DispatchOrchestrator
from .domains import ChainDomain, DomainType, lookup_domain
from .event_correlator import DispatchFilter, DispatchQuery, correlate
from .message_id import extract_message_id
from .models import CorrelatedDispatch, DispatchEvent, DispatchIdEvent, DispatchResult, GasQuote

__all__ = [
    "ChainDomain",
    "CorrelatedDispatch",
    "DispatchEvent",
    "DispatchFilter",
    "DispatchIdEvent",
    "DispatchOrchestrator",
    "DispatchQuery",
    "DispatchResult",
    "DomainType",
    "GasQuote",
    "QueryConfig",
    "SendConfig",
    "correlate",
    "extract_message_id",
    "lookup_domain",
]
__version__ = "0.1.0"
