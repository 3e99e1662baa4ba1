"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations.
"""

from __future__ import annotations

from typing import Protocol


class HostsStore(Protocol):
    """Contract for hosts file backends.

    Any object that implements :meth:`read_bytes` and :meth:`write_bytes`
    satisfies this protocol structurally (no explicit inheritance
    required).  Implementations must map all OS-level exceptions to
    :class:`~eha.exceptions.HostsFileError` subclasses.
    """

    @property
    def location(self) -> str:
        """Human-readable location of the store, used in messages."""
        ...  # pragma: no cover

    def read_bytes(self) -> bytes:
        """Return the full current content.

        Raises
        ------
        HostsFileNotFoundError
            When the file does not exist.
        HostsFilePermissionError
            When the file cannot be read.
        """
        ...  # pragma: no cover

    def write_bytes(self, data: bytes) -> None:
        """Replace the full content with *data*.

        Raises
        ------
        HostsFileError
            When the content cannot be written.
        """
        ...  # pragma: no cover
