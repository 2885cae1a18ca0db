"""Exception hierarchy for icomoon-ingest.

Every error carries a stable ``code`` string so callers (an upload handler,
the CLI) can surface the specific failure to the user.
"""

from __future__ import annotations

from typing import Any


class IconIngestError(Exception):
    """Base class for all icomoon-ingest errors."""

    code = "ingest_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            extra = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({extra})"
        return self.message


# ---------------------------------------------------------------------------
# Upload validation
# ---------------------------------------------------------------------------


class ValidationError(IconIngestError):
    """Uploaded bytes were rejected before any parser ran."""

    code = "validation_error"


class FileTooLargeError(ValidationError):
    code = "file_too_large"

    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(
            f"The file is too large. Maximum size is {max_size // (1024 * 1024)}MB.",
            details={"size": size, "max_size": max_size},
        )
        self.size = size
        self.max_size = max_size


class EmptyFileError(ValidationError):
    code = "empty_file"

    def __init__(self, filename: str) -> None:
        super().__init__("The uploaded file is empty.", details={"filename": filename})


class ExtensionMismatchError(ValidationError):
    code = "invalid_type"

    def __init__(self, filename: str, expected: str) -> None:
        super().__init__(
            f"Please upload a valid .{expected} file.",
            details={"filename": filename, "expected": expected},
        )
        self.expected = expected


class MimeMismatchError(ValidationError):
    code = "invalid_mime"

    def __init__(self, mime_type: str, expected: str) -> None:
        super().__init__(
            f"File content does not look like {expected} (detected {mime_type}).",
            details={"mime_type": mime_type, "expected": expected},
        )
        self.mime_type = mime_type


class NotSvgError(ValidationError):
    code = "not_svg"

    def __init__(self) -> None:
        super().__init__("File does not appear to be a valid SVG.")


# ---------------------------------------------------------------------------
# Malformed input
# ---------------------------------------------------------------------------


class FormatError(IconIngestError):
    """Input could not be decoded as the expected format."""

    code = "format_error"


class MalformedJsonError(FormatError):
    code = "json_parse_error"


class MalformedXmlError(FormatError):
    code = "xml_parse_error"


class InvalidSvgError(FormatError):
    code = "invalid_svg"


class NoPathsError(FormatError):
    code = "no_paths"

    def __init__(self) -> None:
        super().__init__("No SVG paths found in selection.json.")


# ---------------------------------------------------------------------------
# Security rejections (terminal for the upload)
# ---------------------------------------------------------------------------


class SecurityError(IconIngestError):
    """Input carried a construct that is refused outright."""

    code = "security_error"


class DoctypeNotAllowedError(SecurityError):
    code = "doctype_not_allowed"

    def __init__(self) -> None:
        super().__init__(
            "SVG files with DOCTYPE declarations are not allowed for security reasons."
        )


class EntityNotAllowedError(SecurityError):
    code = "entity_not_allowed"

    def __init__(self) -> None:
        super().__init__(
            "SVG files with ENTITY declarations are not allowed for security reasons."
        )


class ScriptNotAllowedError(SecurityError):
    code = "script_not_allowed"

    def __init__(self) -> None:
        super().__init__("SVG files containing script tags are not allowed.")


# ---------------------------------------------------------------------------
# Sanitizer output
# ---------------------------------------------------------------------------


class SanitizationError(IconIngestError):
    """The sanitizer could not produce output."""

    code = "sanitization_error"


class EmptySvgError(SanitizationError):
    code = "empty_svg"

    def __init__(self) -> None:
        super().__init__("SVG content is empty.")


class SanitizationFailedError(SanitizationError):
    code = "sanitization_failed"


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class StoreError(IconIngestError):
    """The catalog store failed to read or write."""

    code = "store_error"


class ConfigError(IconIngestError):
    """Configuration file is invalid."""

    code = "config_error"
