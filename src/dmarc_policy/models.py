"""Shared data contracts between all dmarc-policy modules. No DNS and no parsing here."""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Protocol

if TYPE_CHECKING:
    from .policy import Policy

_package_logger = logging.getLogger("dmarc_policy")


# ── Enums ──────────────────────────────────────────────────────────────────────

class Alignment(Enum):
    RELAXED = "r"
    STRICT = "s"


class ReceiverAction(Enum):
    NONE = "none"
    QUARANTINE = "quarantine"
    REJECT = "reject"

    def to_str(self) -> str:
        return self.value


class DmarcOutcome(Enum):
    NONE = "none"
    NEUTRAL = "neutral"
    PASS = "pass"
    FAIL = "fail"


class DnsStatus(Enum):
    NOERROR = "NOERROR"
    NXDOMAIN = "NXDOMAIN"


# ── DNS Layer ──────────────────────────────────────────────────────────────────

@dataclass
class DnsRecord:
    record_type: str
    value: str
    ttl: int


@dataclass
class DnsResponse:
    domain: str
    record_type: str
    status: DnsStatus
    records: list = field(default_factory=list)  # list[DnsRecord]


# ── Record Layer ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Tag:
    """One decoded key=value pair of a tag-value record."""
    name: str
    value: str      # folding whitespace removed
    raw_value: str  # as written, outer whitespace trimmed


@dataclass(frozen=True)
class TagRecord:
    """Tags in record order, plus the name -> value mapping where the last duplicate wins."""
    tags: tuple          # tuple[Tag, ...]
    values: dict         # dict[str, str]

    def get(self, name: str) -> Optional[str]:
        return self.values.get(name)


# ── Authentication Inputs ──────────────────────────────────────────────────────

class DkimVerification(Protocol):
    """What the decision engine needs from a DKIM verifier's result."""

    def domain_used(self) -> str: ...

    def summary(self) -> str: ...


@dataclass(frozen=True)
class DkimResult:
    """Plain DKIM outcome for verifiers that don't expose DkimVerification themselves."""
    domain: str
    result: str

    @classmethod
    def pass_(cls, domain: str) -> "DkimResult":
        return cls(domain=domain, result="pass")

    @classmethod
    def neutral(cls, domain: str) -> "DkimResult":
        return cls(domain=domain, result="neutral")

    @classmethod
    def fail(cls, domain: str) -> "DkimResult":
        return cls(domain=domain, result="fail")

    @classmethod
    def temperror(cls, domain: str) -> "DkimResult":
        return cls(domain=domain, result="temperror")

    def domain_used(self) -> str:
        return self.domain

    def summary(self) -> str:
        return self.result


@dataclass(frozen=True)
class SpfResult:
    """SPF outcome supplied by the caller, with the domain the check was run against."""
    domain_used: str
    value: str


@dataclass(frozen=True)
class PolicyContext:
    dkim_result: DkimVerification
    spf_result: SpfResult
    from_domain: str                    # RFC5322.From domain
    logger: logging.Logger = _package_logger
    sampler: Callable[[], float] = random.random  # uniform draw in [0, 1)


# ── Result Layer ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DmarcResult:
    """Result of applying a DMARC policy. `policy` is None only for the none outcome."""
    outcome: DmarcOutcome
    policy: Optional["Policy"] = None

    @classmethod
    def none(cls) -> "DmarcResult":
        return cls(outcome=DmarcOutcome.NONE)

    @classmethod
    def neutral(cls, policy: "Policy") -> "DmarcResult":
        return cls(outcome=DmarcOutcome.NEUTRAL, policy=policy)

    @classmethod
    def pass_(cls, policy: "Policy") -> "DmarcResult":
        return cls(outcome=DmarcOutcome.PASS, policy=policy)

    @classmethod
    def fail(cls, policy: "Policy") -> "DmarcResult":
        return cls(outcome=DmarcOutcome.FAIL, policy=policy)

    def to_str(self) -> str:
        return self.outcome.value

    def should_reject(self) -> bool:
        """True only when DMARC failed and the policy asks receivers to reject."""
        return (
            self.outcome == DmarcOutcome.FAIL
            and self.policy is not None
            and self.policy.action == ReceiverAction.REJECT
        )
