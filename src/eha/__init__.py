"""eha — etc-hosts-adder.

Adds, removes, and expires temporary localhost names in the hosts file.
"""

from eha.version import __version__

__all__: list[str] = ["__version__"]
