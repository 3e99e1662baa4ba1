"""Hosts file parser: raw bytes → :class:`~eha.core.models.Document`.

The parser never fails.  Every line is classified exhaustively:

* signature present and decodable  → :class:`ManagedLine`
* anything else                    → :class:`ForeignLine`

A line carrying the signature that fails to decode is kept as foreign
text.  It is thereby orphaned from expiry sweeps until someone fixes or
deletes it by hand.
"""

from __future__ import annotations

import logging

from eha.core.models import Document, ForeignLine, Line, ManagedLine, Record, has_signature
from eha.exceptions import MalformedRecordError

logger = logging.getLogger(__name__)

_ENDINGS: tuple[bytes, ...] = (b"\r\n", b"\n", b"\r")


def split_ending(chunk: bytes) -> tuple[bytes, bytes]:
    """Split one ``keepends`` chunk into ``(content, terminator)``."""
    for ending in _ENDINGS:
        if chunk.endswith(ending):
            return chunk[: -len(ending)], ending
    return chunk, b""


def parse_line(content: bytes, ending: bytes = b"\n") -> Line:
    """Classify a single line (content without its terminator)."""
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        return ForeignLine(text=content, ending=ending)

    if not has_signature(text):
        return ForeignLine(text=content, ending=ending)

    try:
        record = Record.from_hosts_line(text)
    except MalformedRecordError as exc:
        logger.debug("orphaned managed line %r: %s", text, exc)
        return ForeignLine(text=content, ending=ending)

    return ManagedLine(record=record, ending=ending, raw=content)


def parse(data: bytes) -> Document:
    """Parse the full content of a hosts file.

    Splits on ``\\n``, ``\\r\\n`` and ``\\r`` while keeping each line's
    own terminator, so mixed line endings survive a round trip.
    """
    lines = [parse_line(*split_ending(chunk)) for chunk in data.splitlines(keepends=True)]
    return Document(lines=tuple(lines))
