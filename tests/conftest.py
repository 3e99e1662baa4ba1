"""Shared pytest fixtures and configuration for the eha test suite.

Guidelines
----------
* No test touches the real system hosts file.
* Core tests must be pure — no side effects, explicit ``now``.
* Infra and CLI tests work on files under ``tmp_path``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

SAMPLE_HOSTS: bytes = (
    b"# some leading comments followed by whitespace\n"
    b"\n"
    b"127.0.0.1   localhost\n"
    b"10.0.0.9    other.name\n"
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's EHA_* variables out of the tests."""
    monkeypatch.delenv("EHA_HOSTS_FILE", raising=False)
    monkeypatch.delenv("EHA_LOG_LEVEL", raising=False)


@pytest.fixture(autouse=True)
def _reset_eha_logger() -> Iterator[None]:
    """Drop handlers installed by ``configure_logging`` between tests."""
    yield
    logger = logging.getLogger("eha")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def hosts_path(tmp_path: Path) -> Path:
    """A writable hosts file with only foreign content."""
    path = tmp_path / "hosts"
    path.write_bytes(SAMPLE_HOSTS)
    return path
