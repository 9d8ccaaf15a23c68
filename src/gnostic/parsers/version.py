"""Detect which OpenAPI version a decoded description declares."""

from typing import Any, Mapping

from gnostic.models.document import OpenAPIVersion


def detect_version(info: Any) -> OpenAPIVersion:
    """
    Determine the OpenAPI version of a decoded JSON/YAML tree.

    "swagger": "2.0" is checked first, then "openapi": "3.0". Missing,
    mistyped or other values never raise; they yield UNKNOWN.

    Args:
        info: Decoded source tree

    Returns:
        OpenAPIVersion.V2, OpenAPIVersion.V3 or OpenAPIVersion.UNKNOWN
    """
    if not isinstance(info, Mapping):
        return OpenAPIVersion.UNKNOWN
    swagger = info.get("swagger")
    if isinstance(swagger, str) and swagger == "2.0":
        return OpenAPIVersion.V2
    openapi = info.get("openapi")
    if isinstance(openapi, str) and openapi == "3.0":
        return OpenAPIVersion.V3
    return OpenAPIVersion.UNKNOWN
