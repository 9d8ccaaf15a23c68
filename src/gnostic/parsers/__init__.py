"""
Source decoders for OpenAPI descriptions.

This package turns raw JSON, YAML or binary source bytes into compiled
documents, detects OpenAPI versions and resolves $ref references.
"""

from gnostic.parsers.base import DocumentDecoder, ExtensionHandler
from gnostic.parsers.binary import BinaryDecoder
from gnostic.parsers.openapi import OpenAPITextDecoder, read_info_from_bytes
from gnostic.parsers.references import ReferenceResolver
from gnostic.parsers.registry import DecoderRegistry, get_default_registry
from gnostic.parsers.version import detect_version

__all__ = [
    "BinaryDecoder",
    "DecoderRegistry",
    "DocumentDecoder",
    "ExtensionHandler",
    "OpenAPITextDecoder",
    "ReferenceResolver",
    "detect_version",
    "get_default_registry",
    "read_info_from_bytes",
]
