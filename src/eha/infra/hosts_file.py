"""Infrastructure: hosts file access with atomic replacement.

This module is the **only** place in the codebase that touches the
target file.  Every ``OSError`` is caught here and re-raised as a
:class:`~eha.exceptions.HostsFileError` subclass naming the path.

Writes go to a temporary file in the same directory, which then
replaces the target with :func:`os.replace`.  A crash mid-write leaves
the original file intact.  A symlinked target is resolved first, so the
link stays in place and the file it points at is replaced.  Concurrent
writers between our read and our replace are not detected.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from eha.exceptions import (
    HostsFileError,
    HostsFileNotFoundError,
    HostsFilePermissionError,
    append_privilege_hint,
)

logger = logging.getLogger(__name__)


class HostsFile:
    """Concrete :class:`~eha.core.protocols.HostsStore` backed by a file.

    Satisfies the protocol structurally — no explicit inheritance
    required.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    def read_bytes(self) -> bytes:
        """Return the whole file content.

        Raises
        ------
        HostsFileNotFoundError
            When the file does not exist.
        HostsFilePermissionError
            When the file cannot be read.
        HostsFileError
            For any other OS-level failure.
        """
        try:
            data = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise HostsFileNotFoundError(
                f"Hosts file not found: {self.path}",
                path=self.location,
                hint="Pass an existing file with --input-file.",
            ) from exc
        except PermissionError as exc:
            raise HostsFilePermissionError(
                f"Permission denied reading hosts file: {self.path}",
                path=self.location,
                hint=append_privilege_hint(None),
            ) from exc
        except OSError as exc:
            raise HostsFileError(
                f"Failed to read hosts file {self.path}: {exc}",
                path=self.location,
            ) from exc

        logger.debug("read %d bytes from %s", len(data), self.path)
        return data

    def write_bytes(self, data: bytes) -> None:
        """Atomically replace the file content with *data*.

        The permission bits of the existing file are carried over to the
        replacement.

        Raises
        ------
        HostsFilePermissionError
            When the directory or file is not writable.
        HostsFileError
            For any other OS-level failure.
        """
        target = Path(os.path.realpath(self.path))
        try:
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target.parent,
                prefix=".hosts.tmp.",
            )
        except PermissionError as exc:
            raise self._permission_error() from exc
        except OSError as exc:
            raise HostsFileError(
                f"Failed to create temporary file next to {self.path}: {exc}",
                path=self.location,
            ) from exc

        logger.debug("writing to %s and moving to %s", temp_path, target)
        try:
            with os.fdopen(temp_fd, "wb") as f:
                f.write(data)
            if target.exists():
                shutil.copymode(target, temp_path)
            os.replace(temp_path, target)
        except PermissionError as exc:
            self._discard(temp_path)
            raise self._permission_error() from exc
        except OSError as exc:
            self._discard(temp_path)
            raise HostsFileError(
                f"Failed to write hosts file {self.path}: {exc}",
                path=self.location,
            ) from exc

    def _permission_error(self) -> HostsFilePermissionError:
        return HostsFilePermissionError(
            f"Permission denied writing hosts file: {self.path}",
            path=self.location,
            hint=append_privilege_hint("Use --test to print the result instead."),
        )

    @staticmethod
    def _discard(temp_path: str) -> None:
        """Remove a leftover temporary file, ignoring a missing one."""
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
