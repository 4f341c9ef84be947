"""DMARC policy discovery (RFC 7489 section 6.6.3) and whole-message evaluation."""

import logging
from typing import Optional

from .dns_fetcher import TxtLookup, create_fetcher
from .domains import normalize_domain, organizational_domain
from .exceptions import PolicyRecordError
from .models import DmarcResult, PolicyContext
from .parser import parse_policy
from .policy import Policy

DNS_SUBDOMAIN = "_dmarc"


class PolicyDiscovery:
    def __init__(self, resolver: TxtLookup, logger: Optional[logging.Logger] = None):
        self._resolver = resolver
        self._logger = logger or logging.getLogger(__name__)

    async def load(self, domain: str) -> Optional[Policy]:
        """
        Look for a policy at _dmarc.<domain>, then at _dmarc.<organizational domain>.

        Returns None when neither level publishes a valid record. Invalid
        records are logged and skipped; InternalError from the resolver
        propagates.
        """
        policy = await self._load_level(domain, is_root=False)
        if policy is not None:
            return policy

        root = organizational_domain(domain)
        if root is None or root == normalize_domain(domain):
            return None
        return await self._load_level(root, is_root=True)

    async def _load_level(self, domain: str, is_root: bool) -> Optional[Policy]:
        name = f"{DNS_SUBDOMAIN}.{domain}"
        self._logger.debug("querying DMARC policy at %s", name)

        for record in await self._resolver.lookup_txt(name):
            if not record.startswith("v="):
                continue
            try:
                return parse_policy(record, is_root)
            except PolicyRecordError as e:
                self._logger.warning("DMARC policy parse error at %s: %s", name, e)
        return None


async def load_policy(
    domain: str,
    resolver: Optional[TxtLookup] = None,
    logger: Optional[logging.Logger] = None,
) -> Optional[Policy]:
    """Load the DMARC policy for `domain`, using the system resolver unless one is given."""
    if resolver is None:
        resolver = create_fetcher()
    return await PolicyDiscovery(resolver, logger).load(domain)


async def evaluate(ctx: PolicyContext, resolver: Optional[TxtLookup] = None) -> DmarcResult:
    """Discover the policy of the From domain and apply it to the message."""
    policy = await load_policy(ctx.from_domain, resolver, ctx.logger)
    if policy is None:
        ctx.logger.debug("no DMARC policy published for %s", ctx.from_domain)
        return DmarcResult.none()
    return policy.apply(ctx)
