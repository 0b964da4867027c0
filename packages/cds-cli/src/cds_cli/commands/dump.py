"""cds dump command - Dump a class data sharing archive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import click
from rich.markup import escape

from cds_cli.output import error, info, plain, success, warning

if TYPE_CHECKING:
    from cds_core.config import CDSConfig


@dataclass
class DumpOptions:
    """Grouped dump CLI options."""

    is_static: bool
    output: str | None
    config_path: str | None
    java_home: str | None
    class_list: str | None
    vm_args: tuple[str, ...]
    debug: bool
    dry_run: bool


def _build_config(opts: DumpOptions) -> CDSConfig:
    """Build CDSConfig from an optional YAML file, the environment and CLI options.

    CLI options win over the file, which wins over the environment.
    """
    from cds_core.config import CDSConfig

    overrides: dict[str, Any] = {}
    if opts.java_home is not None:
        overrides["java_home"] = opts.java_home
    if opts.class_list is not None:
        overrides["class_list_source"] = opts.class_list
    if opts.vm_args:
        overrides["vm_arguments"] = list(opts.vm_args)
    if opts.debug:
        overrides["debug"] = True

    if opts.config_path is None:
        return CDSConfig.from_environment(**overrides)

    base = CDSConfig.from_yaml(opts.config_path)
    return CDSConfig.model_validate({**base.model_dump(), **overrides})


def _show_plan(opts: DumpOptions, config: CDSConfig) -> None:
    """Print what a dump would do without running it."""
    from cds_core.dump import ArchiveKind, DumpOrchestrator
    from cds_core.host import LocalHost

    kind = ArchiveKind.STATIC if opts.is_static else ArchiveKind.DYNAMIC
    orchestrator = DumpOrchestrator(LocalHost(config), config)
    request = orchestrator.request(kind, opts.output)

    info(f"Archive: {escape(request.archive_file)}")
    if request.class_list_file is None:
        info("Dynamic archives are written by the running VM; no process is started.")
        return

    info(f"Class list: {escape(request.class_list_file)}")
    info("Command:")
    plain(orchestrator.build_command(request).render())


def _run_dump(opts: DumpOptions) -> None:
    from cds_core.host import LocalHost
    from cds_core.runtime import CDSRuntime

    config = _build_config(opts)
    if opts.dry_run:
        _show_plan(opts, config)
        return

    runtime = CDSRuntime(LocalHost(config), config=config)
    result = runtime.dump_shared_archive(is_static=opts.is_static, file_name=opts.output)

    if result.exit_code:
        warning(f"Dump process exited with status {result.exit_code}")
    success(f"Archive dump finished: {escape(result.archive_file)}")


@click.command()
@click.option(
    "--static/--dynamic",
    "is_static",
    default=True,
    help="Dump a static archive (default) or a dynamic one",
)
@click.option(
    "-o",
    "--output",
    "output",
    type=str,
    default=None,
    help="Archive file [default: java_pid<pid>_<kind>.jsa]",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to cds.yaml",
)
@click.option(
    "--java-home",
    type=click.Path(file_okay=False),
    default=None,
    help="Java installation holding bin/java [default: $JAVA_HOME]",
)
@click.option(
    "--class-list",
    type=click.Path(dir_okay=False),
    default=None,
    help="Existing class list to dump from",
)
@click.option(
    "--vm-arg",
    "vm_args",
    multiple=True,
    help="Original VM argument to replay (repeatable)",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Print the dump command and its output [default: $CDS_DEBUG]",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show the dump plan without running it",
)
def dump(
    is_static: bool,
    output: str | None,
    config_path: str | None,
    java_home: str | None,
    class_list: str | None,
    vm_args: tuple[str, ...],
    debug: bool,
    dry_run: bool,
) -> None:
    """Dump a class data sharing archive.

    A static dump copies the class list next to the archive and runs
    `java -Xshare:dump` on it. Dynamic dumps need a running VM.

    Examples:

        cds dump --java-home /usr/lib/jvm/jdk-17 --class-list app.classlist

        cds dump -o app.jsa --vm-arg -Xmx512m --vm-arg -cp --vm-arg app.jar

        cds dump --dry-run -c cds.yaml
    """
    opts = DumpOptions(
        is_static=is_static,
        output=output,
        config_path=config_path,
        java_home=java_home,
        class_list=class_list,
        vm_args=vm_args,
        debug=debug,
        dry_run=dry_run,
    )

    from pydantic import ValidationError as PydanticValidationError

    from cds_core.errors import CDSError

    try:
        _run_dump(opts)
    except FileNotFoundError as e:
        error(escape(str(e)))
        raise SystemExit(2) from None
    except PydanticValidationError as e:
        from cds_cli.errors import handle_validation_error

        handle_validation_error(e, config_path or "options")
    except CDSError as e:
        error(escape(e.user_message))
        raise SystemExit(1) from None
    except OSError as e:
        error(f"Dump failed: {escape(str(e))}")
        raise SystemExit(2) from None
    except Exception as e:
        if "yaml" in type(e).__module__.lower():
            error(f"Invalid YAML in {escape(str(config_path))}: {escape(str(e))}")
            raise SystemExit(1) from None
        raise
