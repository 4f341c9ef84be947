"""DMARC policy value and the decision engine that applies it to a message."""

import random
from dataclasses import dataclass, replace
from typing import Callable

from .domains import organizational_domain
from .models import (
    Alignment,
    DkimVerification,
    DmarcResult,
    PolicyContext,
    ReceiverAction,
    SpfResult,
)

DEFAULT_PCT = 100


@dataclass(frozen=True)
class Policy:
    """DMARC policy.

    action: requested Mail Receiver policy (p, or sp when inherited from the
        organizational domain)
    adkim: DKIM identifier alignment mode
    aspf: SPF identifier alignment mode
    pct: percentage of messages the policy is applied to, always 0..100
    """
    action: ReceiverAction
    adkim: Alignment = Alignment.RELAXED
    aspf: Alignment = Alignment.RELAXED
    pct: int = DEFAULT_PCT

    def __post_init__(self):
        pct = self.pct
        if isinstance(pct, bool) or not isinstance(pct, int) or not 0 <= pct <= 100:
            object.__setattr__(self, "pct", DEFAULT_PCT)

    @classmethod
    def new(cls, action: ReceiverAction) -> "Policy":
        """Policy with the defaults of RFC 7489 section 6.3."""
        return cls(action=action)

    def with_changes(self, **changes) -> "Policy":
        return replace(self, **changes)

    # ── Sampling ───────────────────────────────────────────────────────────────

    def should_apply(self, sampler: Callable[[], float] = random.random) -> bool:
        """Bernoulli draw with probability pct / 100 deciding whether this message is evaluated."""
        probability = self.pct / 100.0
        if not 0.0 <= probability <= 1.0:
            # An unusable probability selects the message, as pct=100 would
            return True
        return sampler() < probability

    # ── Alignment (RFC 7489 section 3.1) ───────────────────────────────────────

    def check_spf_alignment(self, from_domain: str, spf_result: SpfResult) -> bool:
        return _aligned(self.aspf, from_domain, spf_result.domain_used)

    def check_dkim_alignment(self, from_domain: str, dkim_result: DkimVerification) -> bool:
        return _aligned(self.adkim, from_domain, dkim_result.domain_used())

    # ── Decision ───────────────────────────────────────────────────────────────

    def apply(self, ctx: PolicyContext) -> DmarcResult:
        """
        Apply the policy as in RFC 7489 section 6.6.

        DKIM is considered before SPF; the first mechanism that is both
        aligned and passing makes DMARC pass. The "pass" comparison is exact,
        so temperror and friends count as failures.
        """
        if not self.should_apply(ctx.sampler):
            ctx.logger.debug("pct=%d sampling skipped DMARC policy for %s", self.pct, ctx.from_domain)
            return DmarcResult.neutral(self)

        if self.check_dkim_alignment(ctx.from_domain, ctx.dkim_result):
            res = ctx.dkim_result.summary()
            if res == "pass":
                return DmarcResult.pass_(self)
            ctx.logger.debug("dkim aligned but result %s", res)
        else:
            ctx.logger.debug(
                "dkim domain %s not aligned with %s", ctx.dkim_result.domain_used(), ctx.from_domain
            )

        if self.check_spf_alignment(ctx.from_domain, ctx.spf_result):
            res = ctx.spf_result.value
            if res == "pass":
                return DmarcResult.pass_(self)
            ctx.logger.debug("spf aligned but result %s", res)
        else:
            ctx.logger.debug(
                "spf domain %s not aligned with %s", ctx.spf_result.domain_used, ctx.from_domain
            )

        return DmarcResult.fail(self)


def _aligned(mode: Alignment, from_domain: str, used_domain: str) -> bool:
    if mode == Alignment.STRICT:
        return from_domain == used_domain

    root_from = organizational_domain(from_domain)
    if root_from is None:
        return False
    return root_from == organizational_domain(used_domain)
