"""Configuration-backed VM capabilities for use outside a running VM.

LocalHost lets the CLI drive a static dump from a machine where no VM is
attached: the mode flags and original arguments come from CDSConfig, and
"dumping" a class list copies an existing one into place. In-process
capabilities raise UnsupportedOperationError.
"""

from __future__ import annotations

import hashlib
import shutil
from collections.abc import Mapping, Sequence
from importlib import metadata
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from cds_core.errors import ConfigurationError, UnsupportedOperationError

if TYPE_CHECKING:
    from cds_core.config import CDSConfig
    from cds_core.resolution.models import ResolutionLine

logger = structlog.get_logger(__name__)

_NO_RUNNING_VM = "requires a running VM"


class LocalHost:
    """VM capabilities derived from configuration.

    Attributes:
        config: Source of mode flags, VM arguments and the class list.
        invoker_log: Resolution lines recorded through log_lambda_form_invoker.

    Example:
        >>> host = LocalHost(CDSConfig(class_list_source="app.classlist"))
        >>> host.dump_class_list("app.jsa.classlist")
    """

    def __init__(self, config: CDSConfig) -> None:
        """Initialize the host.

        Args:
            config: Runtime configuration.
        """
        self.config = config
        self.invoker_log: list[str] = []
        self._log = logger.bind(component="local_host")

    def is_dumping_class_list(self) -> bool:
        return self.config.dumping_class_list

    def is_dumping_archive(self) -> bool:
        return self.config.dumping_archive

    def is_sharing_enabled(self) -> bool:
        return self.config.sharing_enabled

    def get_vm_arguments(self) -> Sequence[str | None] | None:
        return list(self.config.vm_arguments)

    def log_lambda_form_invoker(self, line: str) -> None:
        self.invoker_log.append(line)
        self._log.debug("lambda_form_invoker_logged", line=line)

    def initialize_from_archive(self, cls: Any) -> None:
        raise UnsupportedOperationError("initialize_from_archive", reason=_NO_RUNNING_VM)

    def define_archived_modules(self, platform_loader: Any, system_loader: Any) -> None:
        raise UnsupportedOperationError("define_archived_modules", reason=_NO_RUNNING_VM)

    def get_random_seed_for_dumping(self) -> int:
        """Seed derived from the installed cds-core version.

        Stable for a given release, standing in for the VM's build id.
        """
        try:
            version = metadata.version("cds-runtime")
        except metadata.PackageNotFoundError:
            version = "0+unknown"

        digest = hashlib.sha256(f"cds-runtime {version}".encode()).digest()
        return int.from_bytes(digest[:8], "big", signed=True)

    def dump_class_list(self, list_file: str) -> None:
        """Copy the configured class list to ``list_file``.

        Raises:
            ConfigurationError: If no class_list_source is configured.
            FileNotFoundError: If the configured source doesn't exist.
        """
        source = self.config.class_list_source
        if source is None:
            raise ConfigurationError(
                "class_list_source is required to dump a class list",
                field_path="class_list_source",
            )
        if not Path(source).exists():
            raise FileNotFoundError(f"File not found: {source}")

        shutil.copyfile(source, list_file)
        self._log.info("class_list_copied", source=str(source), target=list_file)

    def dump_dynamic_archive(self, archive_file: str) -> None:
        raise UnsupportedOperationError("dump_dynamic_archive", reason=_NO_RUNNING_VM)

    def generate_holder_classes(
        self, lines: Sequence[ResolutionLine]
    ) -> Mapping[str, bytes | bytearray]:
        raise UnsupportedOperationError("generate_holder_classes", reason=_NO_RUNNING_VM)
