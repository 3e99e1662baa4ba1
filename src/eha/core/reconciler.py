"""Reconciler: applies one :data:`~eha.core.models.Command` to a document.

Every call runs the same pipeline:

1. **Sweep** — drop every managed record that has expired at ``now``.
2. **Act** — add, remove, or nothing (for :class:`RemoveExpired`).
3. **Terminate** — keep line terminators consistent and preserve the
   file's trailing-newline state.

``now`` is always passed in; this module never reads a clock.
"""

from __future__ import annotations

from dataclasses import replace

from eha.core.models import (
    DEFAULT_TTL_SECONDS,
    MIN_TTL_SECONDS,
    Add,
    Command,
    Document,
    Line,
    ManagedLine,
    Record,
    Remove,
    RemoveExpired,
)


def _is_expired(line: Line, now: int) -> bool:
    return isinstance(line, ManagedLine) and line.record.is_expired(now)


def _is_managed_for(line: Line, domain: str) -> bool:
    return isinstance(line, ManagedLine) and line.record.matches(domain)


def expired_domains(doc: Document, now: int) -> tuple[str, ...]:
    """Return the domains a sweep at *now* would drop, in file order."""
    return tuple(record.domain for record in doc.managed() if record.is_expired(now))


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

def _sweep(lines: list[Line], now: int) -> list[Line]:
    return [line for line in lines if not _is_expired(line, now)]


def _remove(lines: list[Line], domain: str) -> list[Line]:
    return [line for line in lines if not _is_managed_for(line, domain)]


def _clean_source(source: str | None) -> str | None:
    """Fold *source* onto one line; blank means no source."""
    if source is None:
        return None
    return " ".join(source.splitlines()).strip() or None


def _add(lines: list[Line], command: Add, now: int, newline: bytes) -> list[Line]:
    ttl = command.ttl_seconds if command.ttl_seconds is not None else DEFAULT_TTL_SECONDS
    record = Record(
        domain=command.domain,
        created_at=now,
        ttl_seconds=max(ttl, MIN_TTL_SECONDS),
        source=_clean_source(command.source),
    )

    result: list[Line] = []
    replaced = False
    for line in lines:
        if not _is_managed_for(line, command.domain):
            result.append(line)
        elif not replaced:
            result.append(ManagedLine(record=record, ending=line.ending))
            replaced = True
        # Further duplicates of the same domain are dropped.

    if not replaced:
        result.append(ManagedLine(record=record, ending=newline))
    return result


# ---------------------------------------------------------------------------
# Line termination
# ---------------------------------------------------------------------------

def _terminate(lines: list[Line], original: Document) -> list[Line]:
    """Give every inner line a terminator and restore the file's tail state.

    An empty original counts as newline-terminated so a fresh file ends
    with a newline.
    """
    newline = original.newline
    had_final_newline = not original.lines or bool(original.lines[-1].ending)

    result = [
        line if line.ending else replace(line, ending=newline)
        for line in lines[:-1]
    ]
    if lines:
        last = lines[-1]
        if had_final_newline and not last.ending:
            last = replace(last, ending=newline)
        elif not had_final_newline and last.ending:
            last = replace(last, ending=b"")
        result.append(last)
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def apply(doc: Document, command: Command, now: int) -> Document:
    """Sweep expired records from *doc*, then apply *command*.

    Returns *doc* itself when nothing changed.  Removing an absent domain
    is a no-op, not an error.
    """
    lines = _sweep(list(doc.lines), now)

    if isinstance(command, Add):
        lines = _add(lines, command, now, doc.newline)
    elif isinstance(command, Remove):
        lines = _remove(lines, command.domain)
    elif not isinstance(command, RemoveExpired):
        raise TypeError(f"unsupported command: {command!r}")

    if len(lines) == len(doc.lines) and all(
        new is old for new, old in zip(lines, doc.lines)
    ):
        return doc
    return Document(lines=tuple(_terminate(lines, doc)))
