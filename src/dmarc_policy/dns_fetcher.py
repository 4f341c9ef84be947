"""DNS TXT lookup: the resolver capability used by policy discovery and its dnspython implementation."""

import abc
import logging
from typing import Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

from .exceptions import InternalError
from .models import DnsRecord, DnsResponse, DnsStatus

logger = logging.getLogger(__name__)


# ── Capability ─────────────────────────────────────────────────────────────────

class TxtLookup(abc.ABC):
    """Anything that can answer TXT queries.

    Implementations return an empty list when the name has no TXT records
    and raise InternalError only for transport or protocol failures.
    """

    @abc.abstractmethod
    async def lookup_txt(self, name: str) -> list:
        """Return the TXT strings published at `name`, in answer order."""


# ── DNS Fetcher ────────────────────────────────────────────────────────────────

class DnsFetcher(TxtLookup):
    def __init__(self, resolver: Optional[dns.asyncresolver.Resolver] = None):
        self._resolver = resolver if resolver is not None else _system_resolver()

    @property
    def nameservers(self) -> list:
        return [getattr(ns, "address", str(ns)) for ns in self._resolver.nameservers]

    async def lookup_txt(self, name: str) -> list:
        response = await self.query_txt(name)
        return [r.value for r in response.records]

    async def query_txt(self, name: str) -> DnsResponse:
        """Single TXT query. No cache, no retries: a failure is surfaced at once."""
        try:
            answer = await self._resolver.resolve(name, "TXT")
        except dns.resolver.NXDOMAIN:
            return DnsResponse(domain=name, record_type="TXT", status=DnsStatus.NXDOMAIN)
        except dns.resolver.NoAnswer:
            # Record type doesn't exist but domain does
            return DnsResponse(domain=name, record_type="TXT", status=DnsStatus.NOERROR)
        except dns.exception.DNSException as e:
            logger.debug("TXT lookup for %s failed: %s", name, e)
            raise InternalError(f"failed to query DNS: {e}") from e

        return DnsResponse(
            domain=name,
            record_type="TXT",
            status=DnsStatus.NOERROR,
            records=self._parse_records(answer),
        )

    @staticmethod
    def _parse_records(answer) -> list:
        ttl = answer.rrset.ttl if answer.rrset else 0
        records = []
        for rdata in answer:
            # Concatenate multi-string TXT records per RFC
            value = b"".join(rdata.strings).decode("utf-8", errors="replace")
            records.append(DnsRecord(record_type="TXT", value=value, ttl=ttl))
        return records


def _system_resolver() -> dns.asyncresolver.Resolver:
    try:
        return dns.asyncresolver.Resolver()
    except dns.exception.DNSException as e:
        raise InternalError(f"failed to create DNS resolver: {e}") from e


def create_fetcher(nameservers: Optional[list] = None, lifetime: Optional[float] = None) -> DnsFetcher:
    """Build a fetcher from the system resolver configuration or explicit nameservers.

    `lifetime` bounds each query; None keeps dnspython's default.
    """
    if nameservers:
        resolver = dns.asyncresolver.Resolver(configure=False)
        resolver.nameservers = list(nameservers)
    else:
        resolver = _system_resolver()
    if lifetime is not None:
        resolver.lifetime = lifetime
    return DnsFetcher(resolver)
