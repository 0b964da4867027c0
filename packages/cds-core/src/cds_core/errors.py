"""Custom exception hierarchy for cds-core.

This module defines the exception classes used throughout cds-runtime:
- CDSError: Base exception for all CDS-related errors
- InvalidFormatError: Raised when a resolution line breaks the protocol
- InvalidArgumentError: Raised when a required argument is missing
- ConfigurationError: Raised when configuration is missing or invalid
- UnsupportedOperationError: Raised when a host cannot provide a capability

User-facing messages are safe to display. Technical details passed as
``internal_details`` are logged via structlog and never shown to the user.

Process and I/O errors raised while dumping an archive are not part of this
hierarchy: they propagate with their original type and detail.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)


class CDSError(Exception):
    """Base exception for cds-runtime.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but NEVER exposed to the user.

    Example:
        >>> raise CDSError(
        ...     "Archive dump failed",
        ...     internal_details="class list writer returned EACCES",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize CDSError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "cds_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class InvalidFormatError(CDSError, ValueError):
    """Raised when a resolution line does not follow the protocol.

    The whole batch is rejected on the first offending line; nothing is
    forwarded to holder-class generation.

    Attributes:
        line: The offending line, verbatim.
        reason: Short machine-friendly reason, one of ``"wrong prefix"``,
            ``"incorrect number of items"``, ``"invalid holder class name"``
            or ``"invalid method type"``.
        line_number: 1-based position of the line in its batch (if known).

    Example:
        >>> raise InvalidFormatError(
        ...     "[LF_RESOLVE] com.example.Foo invoke LL_L",
        ...     "invalid holder class name",
        ...     detail="com.example.Foo",
        ... )
        # User sees: "Invalid holder class name: com.example.Foo"
    """

    def __init__(
        self,
        line: str,
        reason: str,
        *,
        detail: str | None = None,
        line_number: int | None = None,
    ) -> None:
        """Initialize InvalidFormatError.

        Args:
            line: The offending line.
            reason: Reason the line was rejected.
            detail: The offending token (defaults to the whole line).
            line_number: 1-based position of the line in its batch.
        """
        shown = detail if detail is not None else line
        user_message = f"{reason.capitalize()}: {shown}"
        if line_number is not None:
            user_message = f"{user_message} (line {line_number})"

        super().__init__(user_message)

        self.line = line
        self.reason = reason
        self.line_number = line_number


class InvalidArgumentError(CDSError, ValueError):
    """Raised when a required argument is absent.

    Example:
        >>> raise InvalidArgumentError("lines must not be None")
    """

    pass


class ConfigurationError(CDSError):
    """Raised when configuration is missing or invalid.

    Use this exception when:
    - A config file cannot be parsed or has the wrong shape
    - A setting required by an operation is unset (e.g. java_home)

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the offending field (if known).

    Example:
        >>> raise ConfigurationError(
        ...     "java_home is required for a static dump",
        ...     field_path="java_home",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with context.

        Args:
            user_message: Safe message to display to the user.
            file_path: Path to the configuration file (optional).
            field_path: Dot-separated path to the field (optional).
            internal_details: Technical details for internal logging only.
        """
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path


class UnsupportedOperationError(CDSError):
    """Raised when a host cannot provide a VM capability.

    The standalone host used by the CLI has no running VM behind it, so
    in-process operations such as a dynamic dump are unavailable.

    Attributes:
        operation: Name of the unavailable capability.
    """

    def __init__(self, operation: str, *, reason: str | None = None) -> None:
        """Initialize UnsupportedOperationError.

        Args:
            operation: Name of the unavailable capability.
            reason: Optional explanation appended to the message.
        """
        user_message = f"Operation not supported by this host: {operation}"
        if reason:
            user_message = f"{user_message} ({reason})"
        super().__init__(user_message)
        self.operation = operation
