"""Resolution-line validator.

Guards holder-class generation: every line of a batch must follow the
LF_RESOLVE / SPECIES_RESOLVE protocol before any of it is forwarded, since
generated class bytes are loaded by the VM as trusted code.

Protocol, checked in order for each line:

1. The line starts with ``[LF_RESOLVE]`` or ``[SPECIES_RESOLVE]``.
2. Split on single spaces, it has 4 (LF_RESOLVE) or 2 (SPECIES_RESOLVE)
   tokens.
3. LF_RESOLVE only: token 1 is a known holder class and token 3 is a
   basic-type method descriptor.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import structlog

from cds_core.errors import InvalidFormatError
from cds_core.resolution.models import (
    HOLDER_CLASS_NAMES,
    LF_RESOLVE_PREFIX,
    SPECIES_RESOLVE_PREFIX,
    MethodTypeDescriptor,
    ResolutionLine,
    ResolveKind,
)

logger = structlog.get_logger(__name__)

REASON_WRONG_PREFIX = "wrong prefix"
REASON_ITEM_COUNT = "incorrect number of items"
REASON_HOLDER_NAME = "invalid holder class name"
REASON_METHOD_TYPE = "invalid method type"

_METHOD_TYPE_RE = re.compile(r"[LIJFDV][LIJFDV0-9]*_[LIJFDV]")


def is_valid_holder_name(name: str) -> bool:
    """Check whether ``name`` is one of the four known holder classes."""
    return name in HOLDER_CLASS_NAMES


def is_valid_method_type(method_type: str) -> bool:
    """Check a basic-type method descriptor such as ``LL_L``.

    Args:
        method_type: Descriptor text.

    Returns:
        True if the descriptor matches ``[LIJFDV][LIJFDV0-9]*_[LIJFDV]``.

    Example:
        >>> is_valid_method_type("L3I_V")
        True
        >>> is_valid_method_type("LL_LL")
        False
    """
    return _METHOD_TYPE_RE.fullmatch(method_type) is not None


def split_tokens(line: str) -> list[str]:
    """Split a line on single spaces, dropping trailing empty tokens.

    Interior empty tokens (from doubled spaces) are kept and count
    towards the item total.
    """
    tokens = line.split(" ")
    while tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


def _kind_of(line: str) -> ResolveKind | None:
    if line.startswith(LF_RESOLVE_PREFIX):
        return ResolveKind.LF_RESOLVE
    if line.startswith(SPECIES_RESOLVE_PREFIX):
        return ResolveKind.SPECIES_RESOLVE
    return None


def parse_resolution_line(line: str, *, line_number: int | None = None) -> ResolutionLine:
    """Validate and parse a single resolution line.

    Args:
        line: Raw line text, without trailing newline.
        line_number: Optional 1-based position used in error messages.

    Returns:
        Parsed ResolutionLine.

    Raises:
        InvalidFormatError: On the first protocol violation.
    """
    kind = _kind_of(line)
    if kind is None:
        raise InvalidFormatError(line, REASON_WRONG_PREFIX, line_number=line_number)

    tokens = split_tokens(line)
    if len(tokens) != kind.token_count:
        raise InvalidFormatError(
            line,
            REASON_ITEM_COUNT,
            detail=str(len(tokens)),
            line_number=line_number,
        )

    if kind is ResolveKind.SPECIES_RESOLVE:
        return ResolutionLine(kind=kind, raw=line, species=tokens[1])

    _, holder, method_name, method_type = tokens
    if not is_valid_holder_name(holder):
        raise InvalidFormatError(
            line,
            REASON_HOLDER_NAME,
            detail=holder,
            line_number=line_number,
        )
    if not is_valid_method_type(method_type):
        raise InvalidFormatError(
            line,
            REASON_METHOD_TYPE,
            detail=method_type,
            line_number=line_number,
        )

    return ResolutionLine(
        kind=kind,
        raw=line,
        holder_class_name=holder,
        method_name=method_name,
        method_type=MethodTypeDescriptor.parse(method_type),
    )


def validate_lines(lines: Iterable[str]) -> list[ResolutionLine]:
    """Validate a batch of resolution lines.

    The first failing line aborts the batch; no records are returned for a
    batch that contains any invalid line.

    Args:
        lines: Raw lines in input order.

    Returns:
        Parsed records, one per line, in input order.

    Raises:
        InvalidFormatError: Describing the first offending line.

    Example:
        >>> records = validate_lines([
        ...     "[LF_RESOLVE] java.lang.invoke.Invokers$Holder invoke LL_L",
        ...     "[SPECIES_RESOLVE] java.lang.invoke.BoundMethodHandle$Species_LL",
        ... ])
        >>> [r.kind.value for r in records]
        ['LF_RESOLVE', 'SPECIES_RESOLVE']
    """
    records: list[ResolutionLine] = []
    for number, line in enumerate(lines, start=1):
        try:
            records.append(parse_resolution_line(line, line_number=number))
        except InvalidFormatError as e:
            logger.warning(
                "resolution_line_rejected",
                line_number=number,
                reason=e.reason,
            )
            raise

    logger.debug("resolution_lines_validated", count=len(records))
    return records
