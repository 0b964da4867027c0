"""Command line of the static dump process."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from cds_core.dump.models import CHILD_ENVIRONMENT, ExternalProcessSpec

# Flags of the original command line that would put the child into a
# conflicting dump mode.
EXCLUDED_FLAGS: tuple[str, ...] = (
    "-XX:DumpLoadedClassList=",
    "-XX:+DumpSharedSpaces",
    "-XX:+DynamicDumpSharedSpaces",
    "-XX:+RecordDynamicDumpInfo",
)


def contains_excluded_flag(arg: str) -> bool:
    """Check whether ``arg`` contains any of the excluded flags."""
    return any(flag in arg for flag in EXCLUDED_FLAGS)


def filter_vm_arguments(vm_arguments: Iterable[str | None] | None) -> list[str]:
    """Drop missing entries and conflicting dump flags, keeping order.

    Example:
        >>> filter_vm_arguments(["-XX:+DumpSharedSpaces", "-Xmx512m", None])
        ['-Xmx512m']
    """
    if vm_arguments is None:
        return []
    return [arg for arg in vm_arguments if arg is not None and not contains_excluded_flag(arg)]


def build_static_command(
    launcher: str | Path,
    class_list_file: str,
    archive_file: str,
    vm_arguments: Iterable[str | None] | None,
) -> ExternalProcessSpec:
    """Build the ``java -Xshare:dump`` command for a static archive.

    Args:
        launcher: Path of the ``java`` launcher.
        class_list_file: Class list produced for this dump.
        archive_file: Archive to write.
        vm_arguments: Original VM arguments, filtered before being appended.

    Returns:
        Command line with a replacement environment.
    """
    command = [
        str(launcher),
        "-Xlog:cds",
        "-Xshare:dump",
        f"-XX:SharedClassListFile={class_list_file}",
        f"-XX:SharedArchiveFile={archive_file}",
    ]
    command.extend(filter_vm_arguments(vm_arguments))
    return ExternalProcessSpec(command=command, environment=dict(CHILD_ENVIRONMENT))
