"""Shared test factories for resolver doubles and authentication inputs."""

from unittest.mock import AsyncMock, MagicMock

from dmarc_policy.dns_fetcher import TxtLookup
from dmarc_policy.models import DkimResult, PolicyContext, SpfResult


def mock_resolver(mapping=None):
    """
    Build a mock TxtLookup whose lookup_txt() answers from `mapping`.

    mapping: dict of query name -> list[str] of TXT values, or an exception
    instance to raise. Unknown names return an empty list.
    """
    mapping = mapping or {}
    resolver = MagicMock(spec=TxtLookup)

    async def _lookup_txt(name):
        val = mapping.get(name, [])
        if isinstance(val, Exception):
            raise val
        return list(val)

    resolver.lookup_txt = AsyncMock(side_effect=_lookup_txt)
    return resolver


def queried_names(resolver):
    return [c.args[0] for c in resolver.lookup_txt.await_args_list]


def fixed_sampler(value):
    """Sampler that always draws `value`."""
    return lambda: value


def context(
    from_domain="a.com",
    dkim_domain="a.com",
    dkim="pass",
    spf_domain="a.com",
    spf="pass",
    sampler=None,
    logger=None,
):
    extra = {}
    if sampler is not None:
        extra["sampler"] = sampler
    if logger is not None:
        extra["logger"] = logger
    return PolicyContext(
        dkim_result=DkimResult(domain=dkim_domain, result=dkim),
        spf_result=SpfResult(domain_used=spf_domain, value=spf),
        from_domain=from_domain,
        **extra,
    )
