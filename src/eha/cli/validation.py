"""Input validation for host names and expiry values.

The core treats domains as opaque strings; the CLI rejects obviously
bad input here before building a command.
"""

from __future__ import annotations

from eha.exceptions import InvalidDomainError, InvalidTTLError

ALLOWED_SUFFIXES: tuple[str, ...] = (".local", ".localhost")

MAX_LABEL_LENGTH: int = 63

MIN_EXPIRE_MINUTES: int = 1
MAX_EXPIRE_MINUTES: int = 525600
"""365 days."""


def _label_error(index: int, label: str) -> str | None:
    """Return a description of what is wrong with *label*, or ``None``."""
    if not label:
        return f"invalid DNS name part #{index}: cannot be empty"
    if len(label) > MAX_LABEL_LENGTH:
        return (
            f"invalid DNS name part #{index}: longer than "
            f"{MAX_LABEL_LENGTH} characters"
        )
    for position, char in enumerate(label):
        if not (char.isascii() and (char.isalnum() or char == "-")):
            return f"invalid DNS name char in part #{index} @ {position}: {char}"
        if char == "-" and position in (0, len(label) - 1):
            return f"invalid DNS name part #{index}: cannot start or end with '-'"
    return None


def validate_domain(name: str) -> str:
    """Return the stripped *name* or raise :class:`InvalidDomainError`."""
    stripped = name.strip()
    if not stripped:
        raise InvalidDomainError("Name must not be empty.")
    if any(char.isspace() for char in stripped):
        raise InvalidDomainError(f"Name must not contain whitespace: {stripped!r}")
    if not stripped.lower().endswith(ALLOWED_SUFFIXES):
        raise InvalidDomainError(
            f"Invalid name: {stripped}",
            hint="Name must end in .local or .localhost",
        )
    for index, label in enumerate(stripped.split(".")):
        problem = _label_error(index, label)
        if problem is not None:
            raise InvalidDomainError(problem)
    return stripped


def expire_minutes_to_seconds(minutes: int) -> int:
    """Convert an ``--expire-minutes`` value to a TTL in seconds.

    Raises
    ------
    InvalidTTLError
        Unless ``1 <= minutes <= 525600`` (one minute to 365 days).
    """
    if not MIN_EXPIRE_MINUTES <= minutes <= MAX_EXPIRE_MINUTES:
        raise InvalidTTLError(
            f"Expiry of {minutes} minutes is out of range.",
            hint="Expiry must be between 1m and 365d (1 to 525600 minutes, inclusive).",
        )
    return minutes * 60
