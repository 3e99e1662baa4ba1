"""Hosts file serializer: :class:`~eha.core.models.Document` → bytes."""

from __future__ import annotations

from eha.core.models import Document, ForeignLine, Line


def render_line(line: Line) -> bytes:
    """Return the exact bytes of *line*, terminator included."""
    if isinstance(line, ForeignLine):
        return line.text + line.ending
    if line.raw is not None:
        return line.raw + line.ending
    return line.record.to_hosts_line().encode("utf-8") + line.ending


def render(doc: Document) -> bytes:
    """Concatenate every line.  No newline normalization is applied."""
    return b"".join(render_line(line) for line in doc)
