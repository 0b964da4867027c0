"""Resolution-line protocol.

Validation of LF_RESOLVE / SPECIES_RESOLVE records and the holder-class
request built from them.
"""

from __future__ import annotations

from cds_core.resolution.classlist import (
    LAMBDA_FORM_INVOKER_TAG,
    extract_resolution_lines,
    read_resolution_log,
)
from cds_core.resolution.holder_classes import generate_holder_classes
from cds_core.resolution.models import (
    HOLDER_CLASS_NAMES,
    MethodTypeDescriptor,
    ResolutionLine,
    ResolveKind,
)
from cds_core.resolution.validator import (
    is_valid_holder_name,
    is_valid_method_type,
    parse_resolution_line,
    validate_lines,
)

__all__ = [
    "HOLDER_CLASS_NAMES",
    "LAMBDA_FORM_INVOKER_TAG",
    "MethodTypeDescriptor",
    "ResolutionLine",
    "ResolveKind",
    "extract_resolution_lines",
    "generate_holder_classes",
    "is_valid_holder_name",
    "is_valid_method_type",
    "parse_resolution_line",
    "read_resolution_log",
    "validate_lines",
]
