"""Data models shared by the compiler, its sinks and its plugins."""

from gnostic.models.document import (
    DOCUMENT_TYPES,
    CompiledDocument,
    Info,
    OpenAPIVersion,
    V2Document,
    V3Document,
)
from gnostic.models.envelope import (
    File,
    Parameter,
    Request,
    Response,
    Version,
    Wrapper,
)

__all__ = [
    "CompiledDocument",
    "DOCUMENT_TYPES",
    "File",
    "Info",
    "OpenAPIVersion",
    "Parameter",
    "Request",
    "Response",
    "V2Document",
    "V3Document",
    "Version",
    "Wrapper",
]
