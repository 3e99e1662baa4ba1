"""Infrastructure layer — filesystem integration.

This layer wraps all interaction with the target hosts file.  Every raw
``OSError`` must be caught here and re-raised as a
:class:`~eha.exceptions.HostsFileError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from eha.infra.hosts_file import HostsFile

__all__: list[str] = ["HostsFile"]
