"""Archive dump models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

CLASS_LIST_SUFFIX = ".classlist"

# Replaces the parent environment of the dump process; an inherited
# environment can make the dump fail.
CHILD_ENVIRONMENT: dict[str, str] = {"EnvP": "null"}


class ArchiveKind(str, Enum):
    """Kind of archive to dump.

    Attributes:
        STATIC: Generated by a fresh ``java -Xshare:dump`` process.
        DYNAMIC: Generated in-process by the running VM.
    """

    STATIC = "static"
    DYNAMIC = "dynamic"


def default_archive_name(kind: ArchiveKind, pid: int) -> str:
    """Default archive file name, e.g. ``java_pid1234_static.jsa``."""
    return f"java_pid{pid}_{kind.value}.jsa"


class DumpRequest(BaseModel):
    """Description of one archive dump.

    Attributes:
        kind: Static or dynamic archive.
        archive_file: Target archive path, used verbatim without path checks.
        class_list_file: Intermediate class list (static dumps only).
        debug: Print command line and child output.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ArchiveKind
    archive_file: str
    class_list_file: str | None = None
    debug: bool = False

    @model_validator(mode="after")
    def _check_class_list(self) -> DumpRequest:
        if self.kind is ArchiveKind.STATIC and self.class_list_file is None:
            raise ValueError("static dumps require a class list file")
        if self.kind is ArchiveKind.DYNAMIC and self.class_list_file is not None:
            raise ValueError("dynamic dumps never use a class list file")
        return self

    @classmethod
    def create(
        cls,
        kind: ArchiveKind,
        file_name: str | None,
        *,
        pid: int,
        debug: bool = False,
    ) -> DumpRequest:
        """Build a request, deriving the default and class-list names.

        Args:
            kind: Archive kind.
            file_name: Caller-supplied archive path, or None for the default.
            pid: Process id used in the default name.
            debug: Debug switch.
        """
        archive_file = file_name if file_name is not None else default_archive_name(kind, pid)
        class_list_file = archive_file + CLASS_LIST_SUFFIX if kind is ArchiveKind.STATIC else None
        return cls(
            kind=kind,
            archive_file=archive_file,
            class_list_file=class_list_file,
            debug=debug,
        )


class ExternalProcessSpec(BaseModel):
    """Command line and environment of a static dump process.

    Attributes:
        command: Launcher path followed by its arguments.
        environment: Complete environment of the child (not merged with ours).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    command: list[str] = Field(..., min_length=1)
    environment: dict[str, str] = Field(default_factory=lambda: dict(CHILD_ENVIRONMENT))

    def render(self) -> str:
        """Command line as a single space-joined string."""
        return " ".join(self.command)


class DumpResult(BaseModel):
    """Outcome of a dump, for reporting.

    The orchestrator never raises on ``exit_code``; a non-zero value is
    only reported.

    Attributes:
        kind: Archive kind.
        archive_file: Archive path.
        class_list_file: Class list path (static only).
        command: Child command line (static only).
        exit_code: Child exit status (static only).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ArchiveKind
    archive_file: str
    class_list_file: str | None = None
    command: list[str] | None = None
    exit_code: int | None = None
