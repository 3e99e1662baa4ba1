"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass, field

from eha.exceptions import UsageError

POSIX_HOSTS_FILE: str = "/etc/hosts"
WINDOWS_HOSTS_FILE: str = r"C:\Windows\System32\drivers\etc\hosts"

VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_hosts_file() -> str:
    """Return the system hosts file path for the current OS."""
    if platform.system().lower() == "windows":
        return WINDOWS_HOSTS_FILE
    return POSIX_HOSTS_FILE


@dataclass
class Settings:
    """Application settings; command-line flags override these."""

    hosts_file: str = field(default_factory=default_hosts_file)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from the environment.

        Environment variables:
            EHA_HOSTS_FILE: default target file (default: system hosts file)
            EHA_LOG_LEVEL: logging level (default: WARNING)
        """
        return cls(
            hosts_file=os.getenv("EHA_HOSTS_FILE") or default_hosts_file(),
            log_level=os.getenv("EHA_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> None:
        """Raise :class:`UsageError` for an unknown log level."""
        if self.log_level not in VALID_LOG_LEVELS:
            raise UsageError(
                f"Invalid EHA_LOG_LEVEL: {self.log_level}",
                hint=f"Must be one of: {', '.join(VALID_LOG_LEVELS)}",
            )
