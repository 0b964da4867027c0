"""Runtime configuration for cds-core.

Configuration can be built from the process environment or from a YAML
file (``cds.yaml``). Environment values fill in whatever the file leaves
unset.

Environment variables:
    CDS_DEBUG: Enables debug output of static dumps. Only the exact value
        ``"true"`` turns it on.
    JAVA_HOME: Installation directory holding ``bin/java``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from cds_core.errors import ConfigurationError

DEBUG_ENV_VAR = "CDS_DEBUG"
JAVA_HOME_ENV_VAR = "JAVA_HOME"


def debug_from_environment(environ: Mapping[str, str] | None = None) -> bool:
    """Read the debug switch; only the exact value ``"true"`` enables it."""
    env = os.environ if environ is None else environ
    return env.get(DEBUG_ENV_VAR) == "true"


class CDSConfig(BaseModel):
    """Configuration consumed by the dump orchestrator and LocalHost.

    Attributes:
        debug: Print the child command line and its output during static dumps.
        java_home: Installation directory used to locate the ``java`` launcher.
        pid: Process id used in default archive names.
        vm_arguments: Original VM arguments replayed into the dump process.
        class_list_source: Existing class list copied by LocalHost when asked
            to dump a class list.
        dumping_class_list: Reported by LocalHost as the class-list mode flag.
        dumping_archive: Reported by LocalHost as the archive mode flag.
        sharing_enabled: Reported by LocalHost as the sharing flag.

    Example:
        >>> config = CDSConfig(java_home="/usr/lib/jvm/jdk-17", vm_arguments=["-Xmx512m"])
        >>> config.launcher
        PosixPath('/usr/lib/jvm/jdk-17/bin/java')
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    debug: bool = Field(default=False, description="Print dump diagnostics")
    java_home: Path | None = Field(default=None, description="Java installation directory")
    pid: int = Field(default_factory=os.getpid, ge=0, description="Process id for default names")
    vm_arguments: list[str] = Field(default_factory=list, description="Original VM arguments")
    class_list_source: Path | None = Field(default=None, description="Existing class list file")
    dumping_class_list: bool = Field(default=False, description="Class-list mode flag")
    dumping_archive: bool = Field(default=False, description="Archive mode flag")
    sharing_enabled: bool = Field(default=False, description="Sharing flag")

    @property
    def launcher(self) -> Path:
        """Path of the ``java`` launcher under ``java_home``.

        Raises:
            ConfigurationError: If ``java_home`` is unset.
        """
        if self.java_home is None:
            raise ConfigurationError(
                "java_home is required to launch a static dump",
                field_path="java_home",
            )
        return self.java_home / "bin" / "java"

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> CDSConfig:
        """Build configuration from environment variables.

        Args:
            environ: Environment mapping (defaults to ``os.environ``).
            **overrides: Field values that take precedence over the environment.

        Returns:
            Validated CDSConfig.
        """
        data = _environment_defaults(environ)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(data)

    @classmethod
    def from_yaml(
        cls,
        path: str | Path,
        environ: Mapping[str, str] | None = None,
    ) -> CDSConfig:
        """Load and validate configuration from a YAML file.

        Args:
            path: Path to the YAML file.
            environ: Environment used for keys the file leaves unset.

        Returns:
            Validated CDSConfig.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            yaml.YAMLError: If YAML syntax is invalid.
            ConfigurationError: If the document is not a mapping.
            pydantic.ValidationError: If schema validation fails.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        with path.open("r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                "Configuration must be a mapping",
                file_path=str(path),
                internal_details=f"top-level YAML type: {type(loaded).__name__}",
            )

        data = _environment_defaults(environ)
        data.update(loaded)
        return cls.model_validate(data)


def _environment_defaults(environ: Mapping[str, str] | None) -> dict[str, Any]:
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {"debug": debug_from_environment(env)}
    java_home = env.get(JAVA_HOME_ENV_VAR)
    if java_home:
        data["java_home"] = java_home
    return data
