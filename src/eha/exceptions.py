"""Custom exception hierarchy for eha.

All exceptions that cross layer boundaries must inherit from
:class:`EhaError`.  Raw ``OSError`` instances must NEVER propagate beyond
the infrastructure layer — they are caught and re-raised as a typed
subclass defined here.

Hierarchy
---------
EhaError
├── MalformedRecordError
├── InvalidDomainError
├── InvalidTTLError
├── UsageError
└── HostsFileError
    ├── HostsFileNotFoundError
    └── HostsFilePermissionError
"""

from __future__ import annotations


class EhaError(Exception):
    """Base exception for all eha errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Record decoding -------------------------------------------------------

class MalformedRecordError(EhaError):
    """Raised when a line carries the managed signature but cannot be decoded.

    The parser catches this and keeps the line as foreign text; it never
    reaches the user.
    """


# --- Input validation ------------------------------------------------------

class InvalidDomainError(EhaError):
    """Raised when the requested host name fails validation."""


class InvalidTTLError(EhaError):
    """Raised when the requested expiry is out of range."""


class UsageError(EhaError):
    """Raised for invalid option combinations or configuration."""


# --- Hosts file I/O --------------------------------------------------------

class HostsFileError(EhaError):
    """Raised when the hosts file cannot be read or written."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.path: str | None = path


class HostsFileNotFoundError(HostsFileError):
    """Raised when the target hosts file does not exist."""


class HostsFilePermissionError(HostsFileError):
    """Raised when the process lacks permission to read or replace the file."""


def append_privilege_hint(hint: str | None) -> str:
    """Append the elevated-privileges suggestion to an existing hint.

    The suggestion is appended only once and preserves the original hint
    content verbatim.
    """
    marker = "Try again with elevated privileges:"
    if hint and marker in hint:
        return hint
    lines = [hint] if hint else []
    lines.extend((marker, "    sudo eha ..."))
    return "\n".join(lines)
