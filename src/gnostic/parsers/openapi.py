"""
Decoder for OpenAPI descriptions written in JSON or YAML.

JSON is parsed as YAML (a superset), the version is detected from the
decoded tree and the tree is validated into the matching document model.
"""

import logging
import time
from typing import Any, List, Sequence

import yaml
from pydantic import ValidationError

from gnostic.exceptions import DecodeError
from gnostic.models.document import DOCUMENT_TYPES, CompiledDocument, OpenAPIVersion
from gnostic.parsers.base import ExtensionHandler
from gnostic.parsers.version import detect_version

logger = logging.getLogger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class SourceLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamp-looking scalars as strings."""


SourceLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _stringify_keys(node: Any) -> Any:
    # YAML allows non-string keys (e.g. unquoted response codes like 200)
    if isinstance(node, dict):
        return {str(key): _stringify_keys(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_stringify_keys(item) for item in node]
    return node


def read_info_from_bytes(data: bytes, source_name: str) -> Any:
    """
    Parse JSON or YAML bytes into a generic tree.

    Raises:
        DecodeError: If the bytes are not valid JSON/YAML
    """
    try:
        info = yaml.load(data, Loader=SourceLoader)
    except yaml.YAMLError as e:
        raise DecodeError(f"Unable to parse {source_name}: {e}") from e
    return _stringify_keys(info)


def build_document(tree: Any, version: OpenAPIVersion) -> CompiledDocument:
    """
    Validate a decoded tree into the document model for its version.

    Raises:
        DecodeError: If the version is unknown or the tree is invalid
    """
    document_type = DOCUMENT_TYPES.get(version)
    if document_type is None:
        raise DecodeError("Unable to identify OpenAPI version.")
    try:
        return document_type.model_validate(tree)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or '$root'}: {error['msg']}"
            for error in e.errors()
        )
        raise DecodeError(problems) from e


class OpenAPITextDecoder:
    """Decodes .json and .yaml OpenAPI descriptions."""

    @property
    def extensions(self) -> List[str]:
        return [".json", ".yaml"]

    def decode(
        self,
        data: bytes,
        source_name: str,
        extension_handlers: Sequence[ExtensionHandler] = (),
    ) -> CompiledDocument:
        start_ms = time.time() * 1000
        info = read_info_from_bytes(data, source_name)
        version = detect_version(info)
        document = build_document(info, version)

        if extension_handlers:
            handled = ", ".join(handler.name for handler in extension_handlers)
            logger.debug(
                f"Extensions {sorted(document.vendor_extensions)} available "
                f"to handlers: {handled}"
            )

        duration_ms = (time.time() * 1000) - start_ms
        logger.info(
            f"Decoded {source_name} as OpenAPI {version.tag} ({duration_ms:.0f}ms)"
        )
        return document
