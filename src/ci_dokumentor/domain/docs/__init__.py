"""Domain primitives for marker-based documentation synchronisation."""

from __future__ import annotations

from .content import ReadableContent
from .errors import (
    DokumentorError,
    MalformedDocumentError,
    MarkerCollisionError,
    UnknownSectionIdentifierError,
    UnsupportedToolError,
    WriteFailure,
)
from .markers import PROTOCOL, MarkerProtocol, OwnedBlock, UntouchedBlock
from .sections import DEFAULT_ORDER, SectionEntry, SectionIdentifier
from .synchronizer import SYNCHRONIZER, SectionSynchronizer
from .value_objects import DokumentorConfig, SectionSelection

__all__ = [
    "DEFAULT_ORDER",
    "DokumentorConfig",
    "DokumentorError",
    "MalformedDocumentError",
    "MarkerCollisionError",
    "MarkerProtocol",
    "OwnedBlock",
    "PROTOCOL",
    "ReadableContent",
    "SYNCHRONIZER",
    "SectionEntry",
    "SectionIdentifier",
    "SectionSelection",
    "SectionSynchronizer",
    "UnknownSectionIdentifierError",
    "UnsupportedToolError",
    "UntouchedBlock",
    "WriteFailure",
]
