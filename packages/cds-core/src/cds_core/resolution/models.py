"""Resolution record models.

A resolution log is a sequence of text lines recorded while a VM resolves
method-handle forms and species types. Each line parses into one
ResolutionLine, which is replayed later to pre-generate holder classes.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

LF_RESOLVE_PREFIX = "[LF_RESOLVE]"
SPECIES_RESOLVE_PREFIX = "[SPECIES_RESOLVE]"

DIRECT_HOLDER_CLASS_NAME = "java.lang.invoke.DirectMethodHandle$Holder"
DELEGATING_HOLDER_CLASS_NAME = "java.lang.invoke.DelegatingMethodHandle$Holder"
BASIC_FORMS_HOLDER_CLASS_NAME = "java.lang.invoke.LambdaForm$Holder"
INVOKERS_HOLDER_CLASS_NAME = "java.lang.invoke.Invokers$Holder"

HOLDER_CLASS_NAMES = frozenset(
    {
        DIRECT_HOLDER_CLASS_NAME,
        DELEGATING_HOLDER_CLASS_NAME,
        BASIC_FORMS_HOLDER_CLASS_NAME,
        INVOKERS_HOLDER_CLASS_NAME,
    }
)

BASIC_TYPE_CHARS = "LIJFDV"


class ResolveKind(str, Enum):
    """Kind of resolution record, selected by the line's prefix token.

    Attributes:
        LF_RESOLVE: A lambda-form invoker resolution (4 tokens).
        SPECIES_RESOLVE: A bound-method-handle species resolution (2 tokens).
    """

    LF_RESOLVE = "LF_RESOLVE"
    SPECIES_RESOLVE = "SPECIES_RESOLVE"

    @property
    def prefix(self) -> str:
        """Literal prefix token that introduces this kind of line."""
        return f"[{self.value}]"

    @property
    def token_count(self) -> int:
        """Number of space-separated tokens a line of this kind must have."""
        return 4 if self is ResolveKind.LF_RESOLVE else 2


class MethodTypeDescriptor(BaseModel):
    """Basic-type method signature such as ``LL_L`` or ``L3I_V``.

    Attributes:
        parameters: Parameter part; basic type characters, with digits
            allowed after the first character as arity counts.
        return_type: Single basic type character.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    parameters: str = Field(..., pattern=r"^[LIJFDV][LIJFDV0-9]*$")
    return_type: str = Field(..., pattern=r"^[LIJFDV]$")

    def __str__(self) -> str:
        return f"{self.parameters}_{self.return_type}"

    @classmethod
    def parse(cls, text: str) -> MethodTypeDescriptor:
        """Split a descriptor on its underscore.

        Args:
            text: Descriptor text, e.g. ``"LL_L"``.

        Returns:
            Parsed descriptor.

        Raises:
            pydantic.ValidationError: If either part breaks the grammar.
        """
        parameters, _, return_type = text.partition("_")
        return cls(parameters=parameters, return_type=return_type)


class ResolutionLine(BaseModel):
    """One validated resolution record.

    Attributes:
        kind: Record kind, from the prefix token.
        raw: The line exactly as it was received.
        holder_class_name: Holder class (LF_RESOLVE only).
        method_name: Invoker method name (LF_RESOLVE only).
        method_type: Invoker method type (LF_RESOLVE only).
        species: Species type token (SPECIES_RESOLVE only).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ResolveKind
    raw: str = Field(..., min_length=1)
    holder_class_name: str | None = None
    method_name: str | None = None
    method_type: MethodTypeDescriptor | None = None
    species: str | None = None

    def __str__(self) -> str:
        return self.raw
