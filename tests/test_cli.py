"""Tests for CLI routing and the error boundary (cli/app.py).

Every test targets a file under ``tmp_path`` and pins the wall clock.

Coverage:
* Argument → command mapping (add, remove, sweep-only).
* ``--test`` prints content to stdout and leaves the file alone.
* Validation and file errors surface as typed exceptions from ``main``.
* ``cli()`` maps exceptions to exit codes.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from eha.cli import app as app_module
from eha.cli import exit_codes
from eha.cli.app import main
from eha.exceptions import (
    HostsFileNotFoundError,
    InvalidDomainError,
    InvalidTTLError,
    UsageError,
)

T0 = 1_700_000_000

SAMPLE = (
    b"# some leading comments followed by whitespace\n"
    b"\n"
    b"127.0.0.1   localhost\n"
    b"10.0.0.9    other.name\n"
)


def _managed(domain: str, created_at: int, ttl: int) -> bytes:
    return f"127.0.0.1\t{domain}\t# eha created_at={created_at} ttl={ttl}\n".encode()


def _added(domain: str, ttl: int) -> bytes:
    """Line written by the CLI at T0 from the current directory."""
    return _managed(domain, T0, ttl).replace(b"\n", f" source={os.getcwd()}\n".encode())


@pytest.fixture(autouse=True)
def _frozen_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app_module, "time", SimpleNamespace(time=lambda: T0 + 0.75))


@pytest.fixture(autouse=True)
def _work_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

class TestRouting:
    def test_add_writes_file(self, hosts_path: Path) -> None:
        code = main(["--input-file", str(hosts_path), "foo.local"])
        assert code == exit_codes.SUCCESS
        assert hosts_path.read_bytes() == SAMPLE + _added("foo.local", 86400)

    def test_expire_minutes(self, hosts_path: Path) -> None:
        main(["--input-file", str(hosts_path), "-e", "60", "foo.local"])
        assert hosts_path.read_bytes().endswith(_added("foo.local", 3600))

    def test_add_records_working_directory(
        self, hosts_path: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        work = tmp_path / "project"
        work.mkdir()
        monkeypatch.chdir(work)
        main(["--input-file", str(hosts_path), "foo.local"])
        assert f"source={os.getcwd()}\n".encode() in hosts_path.read_bytes()

    def test_add_without_working_directory(
        self, hosts_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def _gone() -> str:
            raise FileNotFoundError("cwd removed")

        monkeypatch.setattr(app_module.os, "getcwd", _gone)
        main(["--input-file", str(hosts_path), "foo.local"])
        assert hosts_path.read_bytes() == SAMPLE + _managed("foo.local", T0, 86400)

    def test_remove(self, hosts_path: Path) -> None:
        hosts_path.write_bytes(SAMPLE + _managed("foo.local", T0, 60))
        code = main(["--input-file", str(hosts_path), "-r", "foo.local"])
        assert code == exit_codes.SUCCESS
        assert hosts_path.read_bytes() == SAMPLE

    def test_remove_missing_is_not_an_error(
        self, hosts_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["--input-file", str(hosts_path), "--remove", "foo.local"])
        assert code == exit_codes.SUCCESS
        assert hosts_path.read_bytes() == SAMPLE
        assert "Not present" in capsys.readouterr().err

    def test_no_name_sweeps_expired(self, hosts_path: Path) -> None:
        hosts_path.write_bytes(
            SAMPLE + _managed("old.local", 0, 60) + _managed("live.local", T0, 60)
        )
        assert main(["--input-file", str(hosts_path)]) == exit_codes.SUCCESS
        assert hosts_path.read_bytes() == SAMPLE + _managed("live.local", T0, 60)

    def test_env_hosts_file(
        self, hosts_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("EHA_HOSTS_FILE", str(hosts_path))
        main(["foo.local"])
        assert b"foo.local" in hosts_path.read_bytes()

    def test_input_file_overrides_env(
        self, hosts_path: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("EHA_HOSTS_FILE", str(tmp_path / "missing"))
        main(["--input-file", str(hosts_path), "foo.local"])
        assert b"foo.local" in hosts_path.read_bytes()

    def test_verbose_enables_debug_logging(self, hosts_path: Path) -> None:
        main(["-v", "--input-file", str(hosts_path)])
        assert logging.getLogger("eha").level == logging.DEBUG

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0


# ---------------------------------------------------------------------------
# --test (dry run)
# ---------------------------------------------------------------------------

class TestDryRun:
    def test_prints_content_and_keeps_file(
        self, hosts_path: Path, capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        code = main(["--test", "--input-file", str(hosts_path), "foo.local"])
        captured = capsysbinary.readouterr()

        assert code == exit_codes.SUCCESS
        assert captured.out == SAMPLE + _added("foo.local", 86400)
        assert b"Added" in captured.err
        assert hosts_path.read_bytes() == SAMPLE

    def test_prints_unchanged_content(
        self, hosts_path: Path, capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        main(["--test", "--input-file", str(hosts_path)])
        captured = capsysbinary.readouterr()
        assert captured.out == SAMPLE
        assert b"No changes" in captured.err

    def test_keeps_crlf_and_missing_trailing_newline(
        self, tmp_path: Path, capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        path = tmp_path / "hosts"
        path.write_bytes(b"127.0.0.1 localhost\r\n::1 localhost")
        main(["--test", "--input-file", str(path), "foo.local"])
        assert capsysbinary.readouterr().out == (
            b"127.0.0.1 localhost\r\n::1 localhost\r\n"
            + _added("foo.local", 86400).rstrip(b"\n")
        )


# ---------------------------------------------------------------------------
# Errors raised from main
# ---------------------------------------------------------------------------

class TestMainErrors:
    def test_remove_without_name(self, hosts_path: Path) -> None:
        with pytest.raises(UsageError):
            main(["--input-file", str(hosts_path), "-r"])

    def test_invalid_name(self, hosts_path: Path) -> None:
        with pytest.raises(InvalidDomainError):
            main(["--input-file", str(hosts_path), "example.com"])
        assert hosts_path.read_bytes() == SAMPLE

    def test_invalid_expiry(self, hosts_path: Path) -> None:
        with pytest.raises(InvalidTTLError):
            main(["--input-file", str(hosts_path), "-e", "0", "foo.local"])

    def test_expiry_ignored_without_name(self, hosts_path: Path) -> None:
        assert main(["--input-file", str(hosts_path), "-e", "0"]) == exit_codes.SUCCESS

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(HostsFileNotFoundError):
            main(["--input-file", str(tmp_path / "missing"), "foo.local"])

    def test_invalid_log_level(
        self, hosts_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("EHA_LOG_LEVEL", "LOUD")
        with pytest.raises(UsageError):
            main(["--input-file", str(hosts_path)])


# ---------------------------------------------------------------------------
# cli() error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def _run_cli(self, monkeypatch: pytest.MonkeyPatch, argv: list[str]) -> int:
        monkeypatch.setattr(sys, "argv", ["eha", *argv])
        with pytest.raises(SystemExit) as exc_info:
            app_module.cli()
        return int(exc_info.value.code)

    def test_success(self, hosts_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        code = self._run_cli(monkeypatch, ["--input-file", str(hosts_path), "foo.local"])
        assert code == exit_codes.SUCCESS

    def test_known_error(
        self,
        hosts_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run_cli(monkeypatch, ["--input-file", str(hosts_path), "example.com"])
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert "Error:" in err
        assert "Hint:" in err

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _interrupt(argv: list[str] | None = None) -> int:
            raise KeyboardInterrupt

        monkeypatch.setattr(app_module, "main", _interrupt)
        assert self._run_cli(monkeypatch, []) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        def _boom(argv: list[str] | None = None) -> int:
            raise RuntimeError("kaboom")

        monkeypatch.setattr(app_module, "main", _boom)
        assert self._run_cli(monkeypatch, []) == exit_codes.UNEXPECTED_ERROR
        assert "kaboom" in capsys.readouterr().err

    def test_markup_in_error_text_is_printed_literally(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        missing = tmp_path / "[/x]"
        code = self._run_cli(monkeypatch, ["--input-file", str(missing), "foo.local"])
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert "[/x]" in "".join(err.split())
        assert "Traceback" not in err

    def test_markup_in_unexpected_error_is_printed_literally(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        def _boom(argv: list[str] | None = None) -> int:
            raise RuntimeError("bad [/bold] tag")

        monkeypatch.setattr(app_module, "main", _boom)
        assert self._run_cli(monkeypatch, []) == exit_codes.UNEXPECTED_ERROR
        assert "bad [/bold] tag" in capsys.readouterr().err
