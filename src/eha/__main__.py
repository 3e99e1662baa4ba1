"""Allow ``python -m eha`` invocation.

Delegates to the CLI error-boundary entry point so that ``python -m eha``
behaves identically to the ``eha`` console script.
"""

from __future__ import annotations

from eha.cli.app import cli

if __name__ == "__main__":
    cli()
