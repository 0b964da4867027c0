"""Shared pytest fixtures for cds-core tests.

Provides in-memory fakes for the VM and code-generation capabilities,
a mocked process factory for static dumps, and structlog configuration
that makes log output capturable.
"""

from __future__ import annotations

import io
import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import structlog
from rich.console import Console

from cds_core.config import CDSConfig

INVOKERS_LINE = "[LF_RESOLVE] java.lang.invoke.Invokers$Holder invoke LL_L"
DIRECT_LINE = "[LF_RESOLVE] java.lang.invoke.DirectMethodHandle$Holder invokeStatic L3I_V"
SPECIES_LINE = "[SPECIES_RESOLVE] java.lang.invoke.BoundMethodHandle$Species_LL"


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


class FakeVM:
    """Records every capability call; answers from constructor arguments."""

    def __init__(
        self,
        *,
        dumping_class_list: bool = False,
        dumping_archive: bool = False,
        sharing_enabled: bool = True,
        vm_arguments: Sequence[str | None] | None = None,
        seed: int = 1234567,
        initialize_error: Exception | None = None,
    ) -> None:
        self.dumping_class_list = dumping_class_list
        self.dumping_archive = dumping_archive
        self.sharing_enabled = sharing_enabled
        self.vm_arguments = vm_arguments
        self.seed = seed
        self.initialize_error = initialize_error
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.invoker_log: list[str] = []

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def is_dumping_class_list(self) -> bool:
        self.calls.append(("is_dumping_class_list", ()))
        return self.dumping_class_list

    def is_dumping_archive(self) -> bool:
        self.calls.append(("is_dumping_archive", ()))
        return self.dumping_archive

    def is_sharing_enabled(self) -> bool:
        self.calls.append(("is_sharing_enabled", ()))
        return self.sharing_enabled

    def get_vm_arguments(self) -> Sequence[str | None] | None:
        self.calls.append(("get_vm_arguments", ()))
        return self.vm_arguments

    def log_lambda_form_invoker(self, line: str) -> None:
        self.calls.append(("log_lambda_form_invoker", (line,)))
        self.invoker_log.append(line)

    def initialize_from_archive(self, cls: Any) -> None:
        self.calls.append(("initialize_from_archive", (cls,)))
        if self.initialize_error is not None:
            raise self.initialize_error

    def define_archived_modules(self, platform_loader: Any, system_loader: Any) -> None:
        self.calls.append(("define_archived_modules", (platform_loader, system_loader)))

    def get_random_seed_for_dumping(self) -> int:
        self.calls.append(("get_random_seed_for_dumping", ()))
        return self.seed

    def dump_class_list(self, list_file: str) -> None:
        self.calls.append(("dump_class_list", (list_file,)))

    def dump_dynamic_archive(self, archive_file: str) -> None:
        self.calls.append(("dump_dynamic_archive", (archive_file,)))


class FakeGenerator:
    """Returns a fixed mapping and remembers what it was asked for."""

    def __init__(
        self,
        classes: Mapping[str, bytes | bytearray] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.classes = dict(classes) if classes is not None else {}
        self.error = error
        self.requests: list[tuple[Any, ...]] = []

    def generate_holder_classes(self, lines: Sequence[Any]) -> Mapping[str, bytes | bytearray]:
        self.requests.append(tuple(lines))
        if self.error is not None:
            raise self.error
        return self.classes


@pytest.fixture
def make_vm() -> Callable[..., FakeVM]:
    """Factory fixture for FakeVM instances."""
    return FakeVM


@pytest.fixture
def fake_vm() -> FakeVM:
    """A FakeVM with sharing enabled and a few original arguments."""
    return FakeVM(vm_arguments=["-Xmx512m", "-XX:+DumpSharedSpaces", "-cp", "app.jar"])


@pytest.fixture
def make_generator() -> Callable[..., FakeGenerator]:
    """Factory fixture for FakeGenerator instances."""
    return FakeGenerator


@pytest.fixture
def process_factory() -> MagicMock:
    """Mocked subprocess.Popen returning a process that exits with status 0."""
    proc = MagicMock()
    proc.pid = 4321
    proc.communicate.return_value = ("stdout line 1\nstdout line 2\n", "stderr line 1\n")
    proc.wait.return_value = 0
    return MagicMock(return_value=proc)


@pytest.fixture
def console() -> Console:
    """Console writing to an in-memory buffer."""
    return Console(file=io.StringIO(), highlight=False, width=200)


@pytest.fixture
def java_home(tmp_path: Path) -> Path:
    """A fake Java installation directory."""
    home = tmp_path / "jdk"
    (home / "bin").mkdir(parents=True)
    return home


@pytest.fixture
def config(java_home: Path) -> CDSConfig:
    """Configuration with a fixed pid and java_home, debug off."""
    return CDSConfig(java_home=java_home, pid=4242)


@pytest.fixture
def resolution_lines() -> list[str]:
    """A valid mixed batch of resolution lines."""
    return [INVOKERS_LINE, DIRECT_LINE, SPECIES_LINE]
