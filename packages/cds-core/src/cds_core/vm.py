"""Capabilities provided by the hosting virtual machine.

The VM's native entry points are modelled as injected collaborators with a
fixed contract, so that validation and dump orchestration can run against
fakes or against the configuration-backed LocalHost.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from cds_core.resolution.models import ResolutionLine


@runtime_checkable
class VirtualMachine(Protocol):
    """Native capabilities of the hosting VM."""

    def is_dumping_class_list(self) -> bool:
        """Whether the VM is recording a class list."""
        ...

    def is_dumping_archive(self) -> bool:
        """Whether the VM is writing a static or dynamic archive."""
        ...

    def is_sharing_enabled(self) -> bool:
        """Whether class data sharing is enabled."""
        ...

    def get_vm_arguments(self) -> Sequence[str | None] | None:
        """Original command-line arguments, excluding the launcher itself."""
        ...

    def log_lambda_form_invoker(self, line: str) -> None:
        """Append a record to the dump-time resolution log."""
        ...

    def initialize_from_archive(self, cls: Any) -> None:
        """Populate static fields of ``cls`` from archived values."""
        ...

    def define_archived_modules(self, platform_loader: Any, system_loader: Any) -> None:
        """Restore the native side of archived module objects."""
        ...

    def get_random_seed_for_dumping(self) -> int:
        """Seed derived from the VM build id and version."""
        ...

    def dump_class_list(self, list_file: str) -> None:
        """Write the list of loaded classes to ``list_file``."""
        ...

    def dump_dynamic_archive(self, archive_file: str) -> None:
        """Write a dynamic archive of the running VM to ``archive_file``."""
        ...


@runtime_checkable
class HolderClassGenerator(Protocol):
    """Code-generation capability that turns resolution records into classes."""

    def generate_holder_classes(
        self, lines: Sequence[ResolutionLine]
    ) -> Mapping[str, bytes | bytearray]:
        """Generate holder classes.

        Args:
            lines: Validated records, in input order.

        Returns:
            Mapping of generated class name to class bytes.
        """
        ...


class SharingState(BaseModel):
    """Sharing mode flags, read from the VM exactly once.

    Attributes:
        dumping_class_list: The VM is recording a class list.
        dumping_archive: The VM is writing an archive.
        sharing_enabled: Class data sharing is enabled.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dumping_class_list: bool = Field(default=False, description="Recording a class list")
    dumping_archive: bool = Field(default=False, description="Writing an archive")
    sharing_enabled: bool = Field(default=False, description="Sharing enabled")

    @classmethod
    def from_vm(cls, vm: VirtualMachine) -> SharingState:
        """Query the three mode flags from ``vm``."""
        return cls(
            dumping_class_list=vm.is_dumping_class_list(),
            dumping_archive=vm.is_dumping_archive(),
            sharing_enabled=vm.is_sharing_enabled(),
        )
