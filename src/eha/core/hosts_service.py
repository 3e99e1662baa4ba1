"""Core hosts service — orchestrates one read → transform → write cycle.

The service delegates file access to a
:class:`~eha.core.protocols.HostsStore` injected at construction time.
It is responsible for:

* Running the pure ``parse → apply → render`` pipeline once.
* Skipping the write when nothing changed or in dry-run mode.
* Ensuring only :class:`~eha.exceptions.EhaError` subclasses escape.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from eha.core.models import Add, Command, Record, Remove
from eha.core.parser import parse
from eha.core.protocols import HostsStore
from eha.core.reconciler import apply, expired_domains
from eha.core.serializer import render
from eha.exceptions import EhaError, HostsFileError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Reconciliation:
    """Outcome of a single :meth:`HostsService.reconcile` call."""

    content: bytes
    """Rendered file content after the command."""

    changed: bool
    """Whether *content* differs from what was read."""

    written: bool
    """Whether *content* was written back to the store."""

    expired: tuple[str, ...] = ()
    """Domains dropped by the expiry sweep."""

    removed: tuple[str, ...] = ()
    """Live domains dropped by a :class:`~eha.core.models.Remove` command."""

    record: Record | None = None
    """Record written by an :class:`~eha.core.models.Add` command."""


class HostsService:
    """Stateless service that applies one command to a hosts store.

    Parameters
    ----------
    store:
        Any object satisfying the :class:`HostsStore` protocol.
    """

    def __init__(self, store: HostsStore) -> None:
        self._store: HostsStore = store

    def reconcile(
        self,
        command: Command,
        now: int,
        *,
        dry_run: bool = False,
    ) -> Reconciliation:
        """Apply *command* at time *now* and persist the result.

        Parameters
        ----------
        command:
            The operation to run after the expiry sweep.
        now:
            Current time in seconds since the epoch.
        dry_run:
            When ``True`` the store is never written.

        Raises
        ------
        HostsFileError
            When the store cannot be read or written.
        """
        original = self._call(self._store.read_bytes)
        doc = parse(original)
        logger.debug(
            "read %d lines (%d managed) from %s",
            len(doc), len(doc.managed()), self._store.location,
        )

        expired = expired_domains(doc, now)
        updated = apply(doc, command, now)
        content = render(updated)
        changed = content != original

        record = updated.find(command.domain) if isinstance(command, Add) else None
        removed: tuple[str, ...] = ()
        if isinstance(command, Remove):
            removed = tuple(
                r.domain for r in doc.managed()
                if r.matches(command.domain) and not r.is_expired(now)
            )

        written = False
        if dry_run:
            logger.debug("dry run: not writing %s", self._store.location)
        elif not changed:
            logger.debug("no changes for %s", self._store.location)
        else:
            self._call(lambda: self._store.write_bytes(content))
            written = True
            logger.info("wrote %d bytes to %s", len(content), self._store.location)

        return Reconciliation(
            content=content,
            changed=changed,
            written=written,
            expired=expired,
            removed=removed,
            record=record,
        )

    def _call(self, operation: Callable[[], T]) -> T:
        """Invoke a store operation and ensure only our exceptions escape."""
        try:
            return operation()
        except EhaError:
            raise
        except Exception as exc:
            raise HostsFileError(
                f"Unexpected hosts file error: {exc}",
                path=self._store.location,
            ) from exc
