"""Decoder for binary documents previously written with --pb-out."""

import logging
from typing import List, Sequence

import cbor2

from gnostic.exceptions import DecodeError
from gnostic.models.document import CompiledDocument
from gnostic.parsers.base import ExtensionHandler
from gnostic.parsers.openapi import build_document
from gnostic.parsers.version import detect_version

logger = logging.getLogger(__name__)


class BinaryDecoder:
    """Decodes the CBOR binary form of a compiled document."""

    @property
    def extensions(self) -> List[str]:
        return [".pb"]

    def decode(
        self,
        data: bytes,
        source_name: str,
        extension_handlers: Sequence[ExtensionHandler] = (),
    ) -> CompiledDocument:
        try:
            tree = cbor2.loads(data)
        except (cbor2.CBORDecodeError, ValueError) as e:
            raise DecodeError(f"Unable to decode binary document: {e}") from e

        # Extensions were already handled when the binary form was compiled
        document = build_document(tree, detect_version(tree))
        logger.info(
            f"Decoded {source_name} as binary OpenAPI "
            f"{document.openapi_version.tag}"
        )
        return document
