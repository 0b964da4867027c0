"""Holder-class request builder.

Turns a batch of resolution lines into a request against the code-generation
capability and flattens the generated classes for the VM caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from cds_core.errors import InvalidArgumentError
from cds_core.resolution.validator import validate_lines

if TYPE_CHECKING:
    from cds_core.vm import HolderClassGenerator

logger = structlog.get_logger(__name__)


def generate_holder_classes(
    lines: Sequence[str] | None,
    generator: HolderClassGenerator,
) -> list[str | bytes]:
    """Validate ``lines`` and generate the holder classes they describe.

    Args:
        lines: Raw LF_RESOLVE / SPECIES_RESOLVE lines.
        generator: Code-generation capability.

    Returns:
        Alternating class names and class bytes:
        ``[name0, bytes0, name1, bytes1, ...]``.

    Raises:
        InvalidArgumentError: If ``lines`` is None.
        InvalidFormatError: If any line breaks the protocol. Nothing is
            generated in that case.

    Errors raised by ``generator`` propagate unchanged.
    """
    if lines is None:
        raise InvalidArgumentError("lines must not be None")

    records = validate_lines(lines)
    generated = generator.generate_holder_classes(tuple(records))

    flattened: list[str | bytes] = []
    for name, class_bytes in generated.items():
        flattened.append(name)
        flattened.append(bytes(class_bytes))

    logger.info(
        "holder_classes_generated",
        lines=len(records),
        classes=len(generated),
    )
    return flattened
