"""Archive dump orchestrator.

Dispatches a dump to one of two handlers:

- static: write a class list through the VM, then run a fresh
  ``java -Xshare:dump`` process that turns it into an archive;
- dynamic: ask the running VM to write the archive directly.

The static handler blocks until the child exits and has no timeout. Its
exit status is reported in the DumpResult and logged, but never raised.
With debug on, both child pipes are drained together before anything is
printed, so a chatty stderr cannot stall the child; without debug the
child's output is discarded.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console

from cds_core.dump.command import build_static_command
from cds_core.dump.models import ArchiveKind, DumpRequest, DumpResult, ExternalProcessSpec
from cds_core.observability import span

if TYPE_CHECKING:
    from cds_core.config import CDSConfig
    from cds_core.vm import VirtualMachine

logger = structlog.get_logger(__name__)

ProcessFactory = Callable[..., "subprocess.Popen[Any]"]


class DumpOrchestrator:
    """Runs static and dynamic archive dumps.

    Attributes:
        vm: VM capabilities (class list, dynamic archive, VM arguments).
        config: Debug switch, java_home and pid.

    Example:
        >>> orchestrator = DumpOrchestrator(vm, CDSConfig.from_environment())
        >>> result = orchestrator.dump(ArchiveKind.STATIC)
        >>> result.archive_file
        'java_pid4242_static.jsa'
    """

    def __init__(
        self,
        vm: VirtualMachine,
        config: CDSConfig,
        *,
        process_factory: ProcessFactory = subprocess.Popen,
        console: Console | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            vm: VM capabilities.
            config: Runtime configuration.
            process_factory: Callable with the ``subprocess.Popen`` signature.
            console: Console for debug output (defaults to stdout).
        """
        self.vm = vm
        self.config = config
        self._process_factory = process_factory
        self._console = console or Console(highlight=False)
        self._handlers: dict[ArchiveKind, Callable[[DumpRequest], DumpResult]] = {
            ArchiveKind.STATIC: self._dump_static,
            ArchiveKind.DYNAMIC: self._dump_dynamic,
        }
        self._log = logger.bind(component="dump_orchestrator")

    def request(self, kind: ArchiveKind, file_name: str | None = None) -> DumpRequest:
        """Describe a dump without running it."""
        return DumpRequest.create(kind, file_name, pid=self.config.pid, debug=self.config.debug)

    def build_command(self, request: DumpRequest) -> ExternalProcessSpec:
        """Command line of the static dump process for ``request``.

        Raises:
            ValueError: If ``request`` is not a static dump request.
            ConfigurationError: If java_home is not configured.
        """
        if request.class_list_file is None:
            raise ValueError("static dump request required")
        return build_static_command(
            self.config.launcher,
            request.class_list_file,
            request.archive_file,
            self.vm.get_vm_arguments(),
        )

    def dump(self, kind: ArchiveKind, file_name: str | None = None) -> DumpResult:
        """Dump an archive.

        Args:
            kind: Static or dynamic.
            file_name: Archive path used verbatim, or None for
                ``java_pid<pid>_<kind>.jsa``.

        Returns:
            DumpResult describing what was produced.

        Process-spawn and I/O errors propagate unchanged.
        """
        request = self.request(kind, file_name)
        if request.debug:
            label = "Static" if kind is ArchiveKind.STATIC else "Dynamic"
            self._print(f"{label} dump to file {request.archive_file}")

        self._log.info("dump_requested", kind=kind.value, archive_file=request.archive_file)
        return self._handlers[kind](request)

    def _dump_static(self, request: DumpRequest) -> DumpResult:
        assert request.class_list_file is not None
        with span(
            "dump_static_archive",
            attributes={"archive_file": request.archive_file},
        ):
            self.vm.dump_class_list(request.class_list_file)
            self._log.info("class_list_dumped", class_list_file=request.class_list_file)

            spec = self.build_command(request)
            if request.debug:
                self._print("Static dump cmd: ")
                self._print(spec.render())

            exit_code = self._run(spec, debug=request.debug)

        if exit_code != 0:
            self._log.warning(
                "static_dump_process_exited",
                exit_code=exit_code,
                archive_file=request.archive_file,
            )
        else:
            self._log.info("static_dump_completed", archive_file=request.archive_file)

        return DumpResult(
            kind=request.kind,
            archive_file=request.archive_file,
            class_list_file=request.class_list_file,
            command=spec.command,
            exit_code=exit_code,
        )

    def _dump_dynamic(self, request: DumpRequest) -> DumpResult:
        with span(
            "dump_dynamic_archive",
            attributes={"archive_file": request.archive_file},
        ):
            self.vm.dump_dynamic_archive(request.archive_file)
        self._log.info("dynamic_dump_completed", archive_file=request.archive_file)
        return DumpResult(kind=request.kind, archive_file=request.archive_file)

    def _run(self, spec: ExternalProcessSpec, *, debug: bool) -> int:
        """Spawn the dump process and wait for it to exit."""
        if not debug:
            proc = self._process_factory(
                spec.command,
                env=spec.environment,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            return proc.wait()

        proc = self._process_factory(
            spec.command,
            env=spec.environment,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
        stdout, stderr = proc.communicate()

        self._print(f"Dumping process {proc.pid} Stdout: ")
        for line in (stdout or "").splitlines():
            self._print(line)

        self._print(f"Dumping process {proc.pid} Stderr: ")
        for line in (stderr or "").splitlines():
            self._print(line)

        return proc.wait()

    def _print(self, message: str) -> None:
        self._console.print(message, markup=False, highlight=False, soft_wrap=True)
