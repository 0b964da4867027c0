"""cds validate command - Validate a method-handle resolution log."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any

import click
from rich.markup import escape

from cds_cli.errors import format_invalid_format_error, handle_file_not_found, handle_permission_error
from cds_cli.output import error, print_json, success


def _summary(kinds: Counter[str], total: int) -> dict[str, Any]:
    return {
        "valid": True,
        "lines": total,
        "lf_resolve": kinds.get("LF_RESOLVE", 0),
        "species_resolve": kinds.get("SPECIES_RESOLVE", 0),
    }


@click.command()
@click.option(
    "-f",
    "--file",
    "file_path",
    type=click.Path(exists=False),
    required=True,
    help="Resolution log or class list to validate",
)
@click.option(
    "--classlist",
    is_flag=True,
    default=False,
    help="Read only @lambda-form-invoker lines from a class list",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format [default: table]",
)
def validate(file_path: str, classlist: bool, output_format: str) -> None:
    """Validate LF_RESOLVE / SPECIES_RESOLVE resolution lines.

    Checks every line against the resolution protocol and reports the
    first offending line. Blank lines are ignored.

    Examples:

        cds validate -f resolve.log

        cds validate -f app.classlist --classlist --format json
    """
    from cds_core.errors import InvalidFormatError
    from cds_core.resolution import read_resolution_log, validate_lines

    try:
        lines = read_resolution_log(Path(file_path), classlist=classlist)
    except FileNotFoundError:
        handle_file_not_found(file_path)
    except PermissionError:
        handle_permission_error(file_path, "read")

    try:
        records = validate_lines(lines)
    except InvalidFormatError as e:
        if output_format == "json":
            print_json(
                {
                    "valid": False,
                    "line_number": e.line_number,
                    "reason": e.reason,
                    "line": e.line,
                }
            )
        else:
            error(escape(format_invalid_format_error(e)))
        raise SystemExit(1) from None

    kinds = Counter(record.kind.value for record in records)
    if output_format == "json":
        print_json(_summary(kinds, len(records)))
        return

    success(
        f"Resolution lines valid: {len(records)} "
        f"({kinds.get('LF_RESOLVE', 0)} LF_RESOLVE, "
        f"{kinds.get('SPECIES_RESOLVE', 0)} SPECIES_RESOLVE)"
    )
