"""Error taxonomy for documentation synchronisation."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .constants import remediation_for


class DokumentorError(RuntimeError):
    """Base error carrying a stable code and remediation hint."""

    default_code = "DOKUMENTOR_FAILED"

    def __init__(self, message: str, *, code: Optional[str] = None, remediation: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.remediation = remediation if remediation is not None else remediation_for(self.code)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "remediation": self.remediation}


class MalformedDocumentError(DokumentorError):
    """Raised when the destination's markers cannot be paired."""

    default_code = "DOC_MARKERS_MALFORMED"

    def __init__(self, identifier: str, offset: int, reason: str, *, code: Optional[str] = None) -> None:
        self.identifier = identifier
        self.offset = offset
        self.reason = reason
        super().__init__(f"Section '{identifier}' is malformed at offset {offset}: {reason}", code=code)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update({"identifier": self.identifier, "offset": self.offset, "reason": self.reason})
        return payload


class MarkerCollisionError(MalformedDocumentError):
    """Raised when generated content would itself contain section markers."""

    default_code = "DOC_SECTION_MARKER_COLLISION"

    def __init__(self, identifier: str, offset: int, marker: str) -> None:
        self.marker = marker
        super().__init__(identifier, offset, f"content contains marker line '{marker}'")


class UnknownSectionIdentifierError(DokumentorError, ValueError):
    default_code = "SECTION_UNKNOWN"

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unknown section identifier: {value!r}")


class WriteFailure(DokumentorError):
    """Raised when the destination could not be replaced; it is left untouched."""

    default_code = "DOC_WRITE_FAILED"

    def __init__(self, destination: str, cause: OSError) -> None:
        self.destination = destination
        self.cause = cause
        super().__init__(f"Failed to write {destination}: {cause}")


class UnsupportedToolError(DokumentorError, ValueError):
    default_code = "MIGRATION_TOOL_UNSUPPORTED"

    def __init__(self, tool: str, supported: Optional[list] = None) -> None:
        self.tool = tool
        self.supported = list(supported or [])
        hint = f" (supported: {', '.join(self.supported)})" if self.supported else ""
        super().__init__(f"Unsupported migration tool: {tool}{hint}")


class ToolDetectionError(DokumentorError):
    default_code = "MIGRATION_TOOL_UNDETECTED"


class UnsupportedFormatError(DokumentorError, ValueError):
    default_code = "FORMAT_UNSUPPORTED"


class UnsupportedSourceError(DokumentorError, ValueError):
    default_code = "SOURCE_UNSUPPORTED"


class ManifestError(DokumentorError):
    default_code = "MANIFEST_INVALID"


class ConfigError(DokumentorError, ValueError):
    default_code = "CONFIG_INVALID"


class RendererStateError(DokumentorError):
    default_code = "RENDERER_STATE"


class RepositoryLookupError(DokumentorError):
    default_code = "REPOSITORY_LOOKUP_FAILED"


class DocumentEncodingError(DokumentorError):
    """Raised when a destination is not valid UTF-8."""

    default_code = "DOC_ENCODING_INVALID"

    def __init__(self, destination: str, cause: UnicodeDecodeError) -> None:
        self.destination = destination
        self.cause = cause
        super().__init__(f"{destination} is not valid UTF-8 (byte offset {cause.start}): {cause.reason}")
