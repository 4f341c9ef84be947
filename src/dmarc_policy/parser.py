"""DMARC record parser: tag-list tokenizer, per-tag converters and policy construction."""

import re

from .exceptions import IncompatibleVersionError, MissingRequiredTagError, PolicyParseError
from .models import Alignment, ReceiverAction, Tag, TagRecord
from .policy import DEFAULT_PCT, Policy

VERSION = "DMARC1"

_TAG_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
# VALCHAR (%x21-3A / %x3C-7E) runs separated by folding whitespace
_TAG_VALUE = re.compile(r"^[\x21-\x3a\x3c-\x7e \t\r\n]*$")
_FWS = re.compile(r"[ \t\r\n]+")
_DIGITS = re.compile(r"^[0-9]+$")

_RECEIVER_ACTIONS = {
    "none": ReceiverAction.NONE,
    "quarantine": ReceiverAction.QUARANTINE,
    "reject": ReceiverAction.REJECT,
}


# ── Tokenizer ──────────────────────────────────────────────────────────────────

def parse_tag_list(record: str) -> list:
    """
    Split a record using the tag-value syntax DKIM key records use (RFC 6376 section 3.2),
    which DMARC records share. A trailing ";" is allowed.

    Raises PolicyParseError on any deviation from the grammar.
    """
    specs = record.split(";")
    if len(specs) > 1 and not specs[-1].strip():
        specs.pop()

    tags = []
    for spec in specs:
        if not spec.strip():
            raise PolicyParseError(f"empty tag-spec in {record!r}")

        name, sep, raw = spec.partition("=")
        if not sep:
            raise PolicyParseError(f"expected '=' after tag name in {spec.strip()!r}")

        name = name.strip()
        if not _TAG_NAME.match(name):
            raise PolicyParseError(f"invalid tag name {name!r}")

        raw_value = raw.strip(" \t\r\n")
        if not _TAG_VALUE.match(raw_value):
            raise PolicyParseError(f"invalid characters in value of tag {name!r}")

        tags.append(Tag(name=name, value=_FWS.sub("", raw_value), raw_value=raw_value))
    return tags


def parse_record(record: str) -> TagRecord:
    """Tokenize and fold tags by name. Later duplicates overwrite earlier ones."""
    tags = parse_tag_list(record)
    values = {}
    for tag in tags:
        values[tag.name] = tag.value
    return TagRecord(tags=tuple(tags), values=values)


# ── Tag Converters ─────────────────────────────────────────────────────────────

def parse_alignment_mode(value: str) -> Alignment:
    if value == "s":
        return Alignment.STRICT
    return Alignment.RELAXED


def parse_receiver_action(value: str) -> ReceiverAction:
    try:
        return _RECEIVER_ACTIONS[value]
    except KeyError:
        raise PolicyParseError(f"invalid receiver policy (p): {value}") from None


def parse_percentage(value: str) -> int:
    if not _DIGITS.match(value):
        return DEFAULT_PCT
    digits = value.lstrip("0") or "0"
    if len(digits) > 3:
        return DEFAULT_PCT
    pct = int(digits)
    if pct > 100:
        return DEFAULT_PCT
    return pct


# ── Policy ─────────────────────────────────────────────────────────────────────

def parse_policy(record: str, is_root: bool) -> Policy:
    """Parse a DMARC TXT record into a Policy.

    `is_root` must be True when the record was found at the organizational
    domain rather than at the queried domain: the action then comes from the
    `sp` tag when present, and from `p` otherwise. At the queried domain
    only `p` is consulted.
    """
    tags = parse_record(record)

    version = tags.get("v")
    if version is None:
        raise MissingRequiredTagError("v")
    if version != VERSION:
        raise IncompatibleVersionError(version)

    if is_root:
        action = tags.get("sp")
        if action is None:
            action = tags.get("p")
    else:
        action = tags.get("p")
    if action is None:
        raise MissingRequiredTagError("p")

    adkim = tags.get("adkim")
    aspf = tags.get("aspf")
    pct = tags.get("pct")

    return Policy(
        action=parse_receiver_action(action),
        adkim=parse_alignment_mode(adkim) if adkim is not None else Alignment.RELAXED,
        aspf=parse_alignment_mode(aspf) if aspf is not None else Alignment.RELAXED,
        pct=parse_percentage(pct) if pct is not None else DEFAULT_PCT,
    )
