"""Class data sharing runtime facade.

CDSRuntime is the single object a host wires its VM into. It reads the
sharing mode flags once at construction and exposes them read-only, records
resolution traces while a class list is being dumped, and offers the two
core operations: holder-class generation and archive dumping.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console

from cds_core.config import CDSConfig
from cds_core.dump.models import ArchiveKind, DumpResult
from cds_core.dump.orchestrator import DumpOrchestrator, ProcessFactory
from cds_core.errors import UnsupportedOperationError
from cds_core.resolution.holder_classes import generate_holder_classes
from cds_core.vm import SharingState

if TYPE_CHECKING:
    from cds_core.vm import HolderClassGenerator, VirtualMachine

logger = structlog.get_logger(__name__)


class CDSRuntime:
    """Process-wide entry point for class data sharing.

    Attributes:
        vm: Native VM capabilities.
        generator: Holder-class code generator (optional).
        config: Runtime configuration.
        state: Sharing flags, read once from ``vm``.

    Example:
        >>> runtime = CDSRuntime(vm, generator=generator)
        >>> runtime.is_dumping_class_list
        False
        >>> runtime.dump_shared_archive(is_static=False, file_name="app.jsa")
    """

    def __init__(
        self,
        vm: VirtualMachine,
        *,
        generator: HolderClassGenerator | None = None,
        config: CDSConfig | None = None,
        process_factory: ProcessFactory = subprocess.Popen,
        console: Console | None = None,
    ) -> None:
        """Initialize the runtime and cache the VM's sharing state.

        Args:
            vm: Native VM capabilities.
            generator: Holder-class code generator.
            config: Runtime configuration (defaults to the environment).
            process_factory: Spawns the static dump process.
            console: Console for dump debug output.
        """
        self.vm = vm
        self.generator = generator
        self.config = config if config is not None else CDSConfig.from_environment()
        self.state = SharingState.from_vm(vm)
        self._orchestrator = DumpOrchestrator(
            vm,
            self.config,
            process_factory=process_factory,
            console=console,
        )
        self._log = logger.bind(component="cds_runtime")
        self._log.debug("sharing_state_initialized", **self.state.model_dump())

    @property
    def is_dumping_class_list(self) -> bool:
        """Whether the VM is recording a class list."""
        return self.state.dumping_class_list

    @property
    def is_dumping_archive(self) -> bool:
        """Whether the VM is writing a static or dynamic archive."""
        return self.state.dumping_archive

    @property
    def is_sharing_enabled(self) -> bool:
        """Whether class data sharing is enabled."""
        return self.state.sharing_enabled

    def trace_lambda_form_invoker(self, prefix: str, holder: str, name: str, method_type: str) -> None:
        """Record a lambda-form invoker resolution while dumping a class list."""
        if self.state.dumping_class_list:
            self.vm.log_lambda_form_invoker(f"{prefix} {holder} {name} {method_type}")

    def trace_species_type(self, prefix: str, class_name: str) -> None:
        """Record a species resolution while dumping a class list."""
        if self.state.dumping_class_list:
            self.vm.log_lambda_form_invoker(f"{prefix} {class_name}")

    def initialize_from_archive(self, cls: Any) -> None:
        """Initialize archived static fields of ``cls``, best effort.

        Failures are logged at debug level and leave the fields uninitialized.
        """
        try:
            self.vm.initialize_from_archive(cls)
        except Exception as e:
            self._log.debug(
                "archived_statics_not_initialized",
                target=getattr(cls, "__name__", repr(cls)),
                error_type=type(e).__name__,
            )

    def define_archived_modules(self, platform_loader: Any, system_loader: Any) -> None:
        """Restore the native side of archived modules."""
        self.vm.define_archived_modules(platform_loader, system_loader)

    def random_seed_for_dumping(self) -> int:
        """Seed that is stable for a given VM build and version."""
        return self.vm.get_random_seed_for_dumping()

    def generate_lambda_form_holder_classes(self, lines: Sequence[str] | None) -> list[str | bytes]:
        """Validate resolution lines and generate their holder classes.

        Returns:
            Alternating class names and class bytes.

        Raises:
            InvalidArgumentError: If ``lines`` is None.
            InvalidFormatError: If any line breaks the protocol.
            UnsupportedOperationError: If no generator is configured.
        """
        if self.generator is None:
            raise UnsupportedOperationError("generate_holder_classes", reason="no generator configured")
        return generate_holder_classes(lines, self.generator)

    def dump_shared_archive(self, *, is_static: bool, file_name: str | None = None) -> DumpResult:
        """Dump a static or dynamic archive.

        Args:
            is_static: Dump a static archive (True) or a dynamic one (False).
            file_name: Archive path, or None for the pid-based default.

        Returns:
            DumpResult of the orchestrator.
        """
        kind = ArchiveKind.STATIC if is_static else ArchiveKind.DYNAMIC
        return self._orchestrator.dump(kind, file_name)
