"""CLI entry point for cds-runtime.

Defines the ``cds`` group. Subcommands are imported lazily so that
``cds --help`` stays fast and does not pull in pydantic or OpenTelemetry.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from cds_cli import __version__
from cds_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Rich group whose subcommands are imported on first use.

    Attributes:
        lazy_subcommands: Command name to ``module.attribute`` path, e.g.
            ``{"dump": "cds_cli.commands.dump.dump"}``.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(self.lazy_subcommands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Import and return ``cmd_name``, or None for unknown names."""
        path = self.lazy_subcommands.get(cmd_name)
        if path is None:
            return None
        module_name, attr_name = path.rsplit(".", 1)
        return getattr(importlib.import_module(module_name), attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "validate": "cds_cli.commands.validate.validate",
    "dump": "cds_cli.commands.dump.dump",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="cds")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Minimum level of diagnostic logs, written to stderr.",
)
def cli(log_level: str) -> None:
    """CDS Runtime - Class data sharing archive tooling.

    Validate method-handle resolution logs and dump class data sharing
    archives.

    **Getting Started:**

    - `cds validate -f app.classlist --classlist` - Check recorded resolution lines
    - `cds dump --static --java-home $JAVA_HOME --class-list app.classlist` - Build an archive
    - `cds dump --static --dry-run` - Show the dump command without running it
    """
    from cds_core.observability import configure_logging

    configure_logging(log_level=log_level)


if __name__ == "__main__":
    cli()
