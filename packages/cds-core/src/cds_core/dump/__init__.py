"""Archive dump orchestration.

Static dumps run a child ``java -Xshare:dump`` process; dynamic dumps are
delegated to the running VM.
"""

from __future__ import annotations

from cds_core.dump.command import (
    EXCLUDED_FLAGS,
    build_static_command,
    contains_excluded_flag,
    filter_vm_arguments,
)
from cds_core.dump.models import (
    CHILD_ENVIRONMENT,
    CLASS_LIST_SUFFIX,
    ArchiveKind,
    DumpRequest,
    DumpResult,
    ExternalProcessSpec,
    default_archive_name,
)
from cds_core.dump.orchestrator import DumpOrchestrator

__all__ = [
    "CHILD_ENVIRONMENT",
    "CLASS_LIST_SUFFIX",
    "EXCLUDED_FLAGS",
    "ArchiveKind",
    "DumpOrchestrator",
    "DumpRequest",
    "DumpResult",
    "ExternalProcessSpec",
    "build_static_command",
    "contains_excluded_flag",
    "default_archive_name",
    "filter_vm_arguments",
]
