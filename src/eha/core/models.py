"""Domain models for eha.

All models are **frozen** dataclasses — immutable value objects.  They
carry zero I/O and no dependencies on external packages.

Two closed unions sit on top of them:

* :data:`Line` — every line of a hosts file is either foreign text or a
  managed record.
* :data:`Command` — the three operations the reconciler understands.
"""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from eha.exceptions import MalformedRecordError

LOOPBACK_ADDRESS: str = "127.0.0.1"
"""Address every managed alias points at."""

DEFAULT_TTL_SECONDS: int = 86400
"""Lifetime of a record when the caller does not supply one (24 hours)."""

MIN_TTL_SECONDS: int = 1
"""Shortest lifetime written; a new record is never expired when written."""

MARKER: str = "# eha "
"""Signature token that identifies a managed line."""

_CREATED_KEY = "created_at"
_TTL_KEY = "ttl"
_SOURCE_KEY = "source"

_SOURCE_RE = re.compile(rf"(?:^|\s){_SOURCE_KEY}=(.*)$")


def has_signature(text: str) -> bool:
    """Return ``True`` when *text* claims to be a managed line."""
    return MARKER in text


# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Record:
    """One managed alias in the hosts file."""

    domain: str
    """Host name mapped to :attr:`address`.  Opaque to the core."""

    created_at: int
    """Seconds since the epoch when the record was written."""

    ttl_seconds: int = DEFAULT_TTL_SECONDS
    """Seconds after :attr:`created_at` at which the record expires."""

    address: str = LOOPBACK_ADDRESS
    """IP literal the domain resolves to."""

    source: str | None = None
    """Free-text provenance, e.g. the directory the alias was set from."""

    @property
    def expires_at(self) -> int:
        return self.created_at + self.ttl_seconds

    def is_expired(self, now: int) -> bool:
        """Return ``True`` once *now* has reached :attr:`expires_at`."""
        return now >= self.expires_at

    def matches(self, domain: str) -> bool:
        """Compare host names case-insensitively."""
        return self.domain.lower() == domain.lower()

    def to_hosts_line(self) -> str:
        """Encode as a hosts file line (without terminator).

        Format: ``<IP>\\t<domain>\\t# eha created_at=<int> ttl=<int>``,
        followed by `` source=<text>`` when :attr:`source` is set.
        """
        line = (
            f"{self.address}\t{self.domain}\t"
            f"{MARKER}{_CREATED_KEY}={self.created_at} {_TTL_KEY}={self.ttl_seconds}"
        )
        if self.source:
            line += f" {_SOURCE_KEY}={self.source}"
        return line

    @classmethod
    def from_hosts_line(cls, text: str) -> Record:
        """Decode a managed line produced by :meth:`to_hosts_line`.

        Whitespace between fields is not significant.  Unknown
        ``key=value`` pairs in the metadata comment are ignored.  A
        ``source=`` key swallows the rest of the line.

        Raises
        ------
        MalformedRecordError
            If *text* has no signature or its fields cannot be decoded.
        """
        host_part, marker, meta_part = text.partition(MARKER)
        if not marker:
            raise MalformedRecordError(f"missing {MARKER.strip()!r} marker")

        if host_part.lstrip().startswith("#"):
            raise MalformedRecordError("host entry is commented out")

        fields = host_part.split()
        if len(fields) != 2:
            raise MalformedRecordError(
                f"expected an address and one host name, got {len(fields)} field(s)",
            )
        address, domain = fields
        try:
            ipaddress.ip_address(address)
        except ValueError as exc:
            raise MalformedRecordError(f"invalid address {address!r}") from exc

        source: str | None = None
        source_match = _SOURCE_RE.search(meta_part)
        if source_match:
            source = source_match.group(1).strip() or None
            meta_part = meta_part[: source_match.start()]

        meta: dict[str, str] = {}
        for token in meta_part.split():
            key, sep, value = token.partition("=")
            if sep:
                meta[key] = value

        return cls(
            domain=domain,
            created_at=_decode_int(meta, _CREATED_KEY),
            ttl_seconds=_decode_int(meta, _TTL_KEY),
            address=address,
            source=source,
        )


def _decode_int(meta: dict[str, str], key: str) -> int:
    """Pull a plain decimal integer out of the metadata comment."""
    raw = meta.get(key)
    if raw is None:
        raise MalformedRecordError(f"missing {key!r}")
    if not raw.isascii() or not raw.isdigit():
        raise MalformedRecordError(f"non-numeric {key!r}: {raw!r}")
    return int(raw)


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ForeignLine:
    """A line eha does not own; kept byte-for-byte."""

    text: bytes
    """Original line content without its terminator."""

    ending: bytes = b"\n"
    """Original terminator: ``\\n``, ``\\r\\n``, ``\\r`` or empty."""


@dataclass(frozen=True, slots=True)
class ManagedLine:
    """A line owned by eha."""

    record: Record

    ending: bytes = b"\n"

    raw: bytes | None = None
    """Original bytes when parsed from a file; ``None`` for new lines."""


Line = Union[ForeignLine, ManagedLine]


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Document:
    """Ordered, immutable sequence of lines making up one hosts file."""

    lines: tuple[Line, ...] = ()

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)

    def managed(self) -> list[Record]:
        """Return the managed records in file order."""
        return [line.record for line in self.lines if isinstance(line, ManagedLine)]

    def find(self, domain: str) -> Record | None:
        """Return the first managed record for *domain*, or ``None``."""
        return next(
            (record for record in self.managed() if record.matches(domain)),
            None,
        )

    @property
    def newline(self) -> bytes:
        """Line terminator style of the file (first one seen, ``\\n`` if none)."""
        return next((line.ending for line in self.lines if line.ending), b"\n")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Add:
    """Add *domain*, or refresh it in place when it already exists."""

    domain: str
    ttl_seconds: int | None = None
    source: str | None = None


@dataclass(frozen=True, slots=True)
class Remove:
    """Remove *domain* if present."""

    domain: str


@dataclass(frozen=True, slots=True)
class RemoveExpired:
    """Only sweep expired records."""


Command = Union[Add, Remove, RemoveExpired]
