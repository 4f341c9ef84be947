"""Custom exception hierarchy for dmarc-policy."""


class DmarcError(Exception):
    """Base exception for all dmarc-policy errors."""

    _payload = "detail"

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return getattr(self, self._payload) == getattr(other, self._payload)

    def __hash__(self):
        return hash((type(self), getattr(self, self._payload)))


# ── Record Errors ──────────────────────────────────────────────────────────────

class PolicyRecordError(DmarcError):
    """Base class for errors caused by the content of a DMARC record."""


class PolicyParseError(PolicyRecordError):
    """Malformed tag-list syntax or an invalid receiver action."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"failed to parse policy: {detail}")


class MissingRequiredTagError(PolicyRecordError):
    """A tag required by the applicable selection rule is absent."""

    _payload = "tag"

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"missing required tag: {tag}")


class IncompatibleVersionError(PolicyRecordError):
    """The v= tag is present but is not exactly DMARC1."""

    _payload = "value"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"incompatible version: {value}")


# ── Transport Errors ───────────────────────────────────────────────────────────

class InternalError(DmarcError):
    """DNS transport or protocol failure. Never a policy-content condition."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"internal error: {detail}")
