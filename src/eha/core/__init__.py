"""Core / service layer — pure hosts file model and reconciliation.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* No clock reads — ``now`` is always a parameter.
"""

from eha.core.hosts_service import HostsService, Reconciliation
from eha.core.models import (
    Add,
    Command,
    Document,
    ForeignLine,
    Line,
    ManagedLine,
    Record,
    Remove,
    RemoveExpired,
)
from eha.core.parser import parse
from eha.core.protocols import HostsStore
from eha.core.reconciler import apply, expired_domains
from eha.core.serializer import render

__all__: list[str] = [
    "Add",
    "Command",
    "Document",
    "ForeignLine",
    "HostsService",
    "HostsStore",
    "Line",
    "ManagedLine",
    "Reconciliation",
    "Record",
    "Remove",
    "RemoveExpired",
    "apply",
    "expired_domains",
    "parse",
    "render",
]
