"""Organizational domain lookup (RFC 7489 section 3.2) backed by the public suffix list."""

import re
from functools import lru_cache
from typing import Optional

import idna
import tldextract

# Public Suffix handling: use bundled list only (no network fetch)
_EXTRACT = tldextract.TLDExtract(cache_dir=False, suffix_list_urls=None)

_DOMAIN_PATTERN = re.compile(
    r"^(?:_?[a-z0-9](?:[a-z0-9\-]{0,61}[a-z0-9])?\.)*_?[a-z0-9](?:[a-z0-9\-]{0,61}[a-z0-9])?$"
)

MAX_DOMAIN_LENGTH = 253


def to_ascii(name: str) -> Optional[str]:
    """Lowercased A-label form of `name`, or None when a label isn't valid IDNA.

    ASCII labels pass through untouched so _dmarc style labels survive.
    """
    labels = []
    for label in name.strip().rstrip(".").lower().split("."):
        if label.isascii():
            labels.append(label)
            continue
        try:
            labels.append(idna.encode(label, uts46=True).decode("ascii"))
        except idna.IDNAError:
            return None
    return ".".join(labels)


def normalize_domain(name: str) -> str:
    ascii_name = to_ascii(name)
    if ascii_name is None:
        return name.strip().rstrip(".").lower()
    return ascii_name


@lru_cache(maxsize=4096)
def organizational_domain(name: str) -> Optional[str]:
    """
    Return the registrable domain of `name` (e.g. example.com for mail.example.com),
    in A-label form for internationalized names.

    None when `name` isn't a valid host name, is an IP address, or is itself a
    public suffix.
    """
    domain = to_ascii(name)
    if not domain or len(domain) > MAX_DOMAIN_LENGTH:
        return None
    if not _DOMAIN_PATTERN.match(domain):
        return None

    ext = _EXTRACT(domain)
    if not ext.domain or not ext.suffix:
        return None
    return f"{ext.domain}.{ext.suffix}"
