"""cds-core: class data sharing support for cds-runtime.

This package provides:
- Resolution-line validation and holder-class requests
- Static and dynamic archive dump orchestration
- CDSRuntime: facade over the hosting VM's capabilities
- LocalHost: configuration-backed capabilities for standalone use
"""

from __future__ import annotations

__version__ = "0.1.0"

from cds_core.config import CDSConfig
from cds_core.dump import (
    ArchiveKind,
    DumpOrchestrator,
    DumpRequest,
    DumpResult,
    ExternalProcessSpec,
    build_static_command,
    default_archive_name,
    filter_vm_arguments,
)
from cds_core.errors import (
    CDSError,
    ConfigurationError,
    InvalidArgumentError,
    InvalidFormatError,
    UnsupportedOperationError,
)
from cds_core.host import LocalHost
from cds_core.resolution import (
    MethodTypeDescriptor,
    ResolutionLine,
    ResolveKind,
    generate_holder_classes,
    read_resolution_log,
    validate_lines,
)
from cds_core.runtime import CDSRuntime
from cds_core.vm import HolderClassGenerator, SharingState, VirtualMachine

__all__ = [
    "__version__",
    # Runtime
    "CDSRuntime",
    "CDSConfig",
    "LocalHost",
    "SharingState",
    "VirtualMachine",
    "HolderClassGenerator",
    # Errors
    "CDSError",
    "InvalidFormatError",
    "InvalidArgumentError",
    "ConfigurationError",
    "UnsupportedOperationError",
    # Resolution lines
    "ResolveKind",
    "ResolutionLine",
    "MethodTypeDescriptor",
    "validate_lines",
    "generate_holder_classes",
    "read_resolution_log",
    # Dumping
    "ArchiveKind",
    "DumpOrchestrator",
    "DumpRequest",
    "DumpResult",
    "ExternalProcessSpec",
    "build_static_command",
    "default_archive_name",
    "filter_vm_arguments",
]
