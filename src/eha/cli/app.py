"""CLI application entry point and command routing for eha.

This module is the **sole error boundary** for the entire application.
It catches :class:`~eha.exceptions.EhaError`, ``KeyboardInterrupt``, and
any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core
  service and the infrastructure layer.
* Standard output carries only ``--test`` content; every message goes to
  stderr.
* This module is the only place that reads the wall clock.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from datetime import datetime

from eha.cli import exit_codes
from eha.cli.console import configure_logging, console, escape
from eha.cli.validation import expire_minutes_to_seconds, validate_domain
from eha.config import Settings
from eha.core.models import Add, Command, Remove, RemoveExpired
from eha.exceptions import EhaError, UsageError
from eha.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_EXPIRE_MINUTES: int = 1440


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``eha NAME``      — add or refresh NAME
    * ``eha -r NAME``   — remove NAME
    * ``eha``           — only sweep expired entries
    """
    parser = argparse.ArgumentParser(
        prog="eha",
        description=(
            "eha (etc-hosts-adder) adds, removes, or expires temporary "
            "localhost names from the /etc/hosts file."
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="The DNS name ending in .local or .localhost to add or remove.",
    )
    parser.add_argument(
        "-r",
        "--remove",
        action="store_true",
        help="Remove the given DNS name if present.",
    )
    parser.add_argument(
        "-e",
        "--expire-minutes",
        type=int,
        default=DEFAULT_EXPIRE_MINUTES,
        help=(
            "Expiry in minutes for the entry, the entry is subject to "
            f"removal after this time (default: {DEFAULT_EXPIRE_MINUTES})."
        ),
    )
    parser.add_argument(
        "--input-file",
        default=None,
        help="Operate on the given hosts file (default: $EHA_HOSTS_FILE or the system hosts file).",
    )
    parser.add_argument(
        "--test",
        action="store_true",
        help="Print the new content to stdout instead of attempting to write the file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug details to stderr.",
    )
    return parser


def _build_command(args: argparse.Namespace) -> Command:
    """Validate parsed arguments and turn them into a core command."""
    if args.name is None:
        if args.remove:
            raise UsageError(
                "--remove requires a NAME.",
                hint="Run 'eha' without arguments to remove only expired entries.",
            )
        return RemoveExpired()

    domain = validate_domain(args.name)
    if args.remove:
        return Remove(domain)
    return Add(
        domain,
        ttl_seconds=expire_minutes_to_seconds(args.expire_minutes),
        source=_current_dir(),
    )


def _current_dir() -> str | None:
    """Return the working directory recorded as the source of a new alias."""
    try:
        cwd = os.getcwd()
    except OSError:
        return None
    return cwd.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _format_timestamp(epoch_seconds: int) -> str:
    return datetime.fromtimestamp(epoch_seconds).astimezone().strftime("%Y-%m-%d %H:%M:%S %Z")


def _write_stdout(content: bytes) -> None:
    """Write raw bytes to stdout, keeping the text layer in order."""
    sys.stdout.flush()
    sys.stdout.buffer.write(content)
    sys.stdout.buffer.flush()


def _handle(command: Command, hosts_file: str, *, dry_run: bool) -> int:
    """Run *command* against *hosts_file* and report what happened.

    Flow:
    1. Instantiate the file store and the core service.
    2. Reconcile at the current wall-clock time.
    3. Print the content (``--test``) and a summary.
    """
    from eha.core.hosts_service import HostsService
    from eha.infra.hosts_file import HostsFile

    service = HostsService(HostsFile(hosts_file))
    now = int(time.time())
    logger.debug("running %r on %s at %d", command, hosts_file, now)

    result = service.reconcile(command, now, dry_run=dry_run)

    if dry_run:
        _write_stdout(result.content)

    for domain in result.expired:
        console.print(f"[dim]Expired:[/dim] {escape(domain)}")

    if isinstance(command, Add) and result.record is not None:
        record = result.record
        console.print(
            f"[bold green]Added[/bold green] {escape(record.domain)} → {record.address} "
            f"[dim](expires {_format_timestamp(record.expires_at)})[/dim]"
        )
    elif isinstance(command, Remove):
        if result.removed:
            console.print(f"[bold green]Removed[/bold green] {escape(', '.join(result.removed))}")
        else:
            console.print(f"[yellow]Not present:[/yellow] {escape(command.domain)}")

    if not result.changed:
        console.print("[dim]No changes.[/dim]")
    elif not dry_run:
        console.print(f"[dim]Updated {escape(hosts_file)}[/dim]")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the eha CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    settings.validate()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    command = _build_command(args)
    hosts_file: str = args.input_file or settings.hosts_file
    return _handle(command, hosts_file, dry_run=args.test)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` and guarantees the process never exits with a raw
    stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except EhaError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
