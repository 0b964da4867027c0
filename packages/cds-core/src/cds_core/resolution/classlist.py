"""Read resolution lines from log files and class lists.

When a VM records a class list it stores resolution lines next to the class
names, tagged ``@lambda-form-invoker``::

    java/lang/Object id: 0
    @lambda-form-invoker [LF_RESOLVE] java.lang.invoke.Invokers$Holder invoker L_L
    @lambda-form-invoker [SPECIES_RESOLVE] java.lang.invoke.BoundMethodHandle$Species_L
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

LAMBDA_FORM_INVOKER_TAG = "@lambda-form-invoker"


def extract_resolution_lines(lines: Iterable[str]) -> list[str]:
    """Pick the tagged resolution lines out of a class list.

    Args:
        lines: Class-list lines.

    Returns:
        The text following the tag for each tagged line, in order.
    """
    tag = f"{LAMBDA_FORM_INVOKER_TAG} "
    return [line[len(tag) :] for line in lines if line.startswith(tag)]


def read_resolution_log(path: str | Path, *, classlist: bool = False) -> list[str]:
    """Read resolution lines from a file.

    Args:
        path: File to read.
        classlist: Treat the file as a class list and keep only tagged lines.
            Otherwise every non-blank line is returned as-is.

    Returns:
        Resolution lines in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    lines = path.read_text(encoding="utf-8").splitlines()
    if classlist:
        return extract_resolution_lines(lines)
    return [line for line in lines if line.strip()]
