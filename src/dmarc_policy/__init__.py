"""DMARC (RFC 7489) policy discovery and enforcement decisions."""

from .discovery import PolicyDiscovery, evaluate, load_policy
from .dns_fetcher import DnsFetcher, TxtLookup, create_fetcher
from .domains import organizational_domain
from .exceptions import (
    DmarcError,
    IncompatibleVersionError,
    InternalError,
    MissingRequiredTagError,
    PolicyParseError,
    PolicyRecordError,
)
from .models import (
    Alignment,
    DkimResult,
    DkimVerification,
    DmarcOutcome,
    DmarcResult,
    PolicyContext,
    ReceiverAction,
    SpfResult,
    Tag,
)
from .parser import parse_policy
from .policy import Policy

__version__ = "0.1.0"

__all__ = [
    "Alignment",
    "DkimResult",
    "DkimVerification",
    "DmarcError",
    "DmarcOutcome",
    "DmarcResult",
    "DnsFetcher",
    "IncompatibleVersionError",
    "InternalError",
    "MissingRequiredTagError",
    "Policy",
    "PolicyContext",
    "PolicyDiscovery",
    "PolicyParseError",
    "PolicyRecordError",
    "ReceiverAction",
    "SpfResult",
    "Tag",
    "TxtLookup",
    "create_fetcher",
    "evaluate",
    "load_policy",
    "organizational_domain",
    "parse_policy",
]
