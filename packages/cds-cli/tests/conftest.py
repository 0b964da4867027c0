"""Shared test fixtures for cds-cli tests.

Provides CliRunner fixtures and helpers for writing resolution logs
and class lists into an isolated filesystem.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
import structlog
from click.testing import CliRunner

from cds_cli import output

if TYPE_CHECKING:
    from collections.abc import Callable

RESOLVE_LOG_FILENAME = "resolve.log"
CLASSLIST_FILENAME = "app.classlist"

VALID_LINES = [
    "[LF_RESOLVE] java.lang.invoke.Invokers$Holder invoke LL_L",
    "[LF_RESOLVE] java.lang.invoke.LambdaForm$Holder identity L_L",
    "[SPECIES_RESOLVE] java.lang.invoke.BoundMethodHandle$Species_L",
]


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[MagicMock, None, None]:
    """Keep library logs out of command output.

    Yields:
        Mock standing in for configure_logging, called by the cds group.
    """
    structlog.configure(
        processors=[structlog.dev.ConsoleRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    with patch("cds_core.observability.configure_logging") as configure_logging:
        yield configure_logging


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's CDS_DEBUG and JAVA_HOME out of CLI tests."""
    monkeypatch.delenv("CDS_DEBUG", raising=False)
    monkeypatch.delenv("JAVA_HOME", raising=False)


@pytest.fixture(autouse=True)
def restore_console() -> Generator[None, None, None]:
    """Undo --no-color, which replaces the module-level console."""
    original = output.console
    yield
    output.console = original


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance with isolated filesystem.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def write_file(isolated_runner: CliRunner) -> Callable[[str, str], Path]:
    """Factory fixture to create files in the isolated filesystem.

    Returns:
        Function that writes ``content`` to ``filename`` and returns its path.
    """

    def _write(filename: str, content: str) -> Path:
        path = Path(filename)
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def valid_log(write_file: Callable[[str, str], Path]) -> Path:
    """A resolution log holding three valid lines."""
    return write_file(RESOLVE_LOG_FILENAME, "\n".join(VALID_LINES) + "\n")


@pytest.fixture
def classlist(write_file: Callable[[str, str], Path]) -> Path:
    """A class list with two tagged resolution lines."""
    content = (
        "java/lang/Object id: 0\n"
        "@lambda-form-invoker [LF_RESOLVE] java.lang.invoke.Invokers$Holder invoker L_L\n"
        "@lambda-form-invoker [SPECIES_RESOLVE] java.lang.invoke.BoundMethodHandle$Species_L\n"
    )
    return write_file(CLASSLIST_FILENAME, content)
