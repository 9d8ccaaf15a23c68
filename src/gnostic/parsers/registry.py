"""
Decoder registry for routing sources by file extension.

The registry maps lower-cased source extensions to decoders. Sources with
an extension no decoder claims are rejected before any decoding happens.
"""

import logging
from typing import Dict, Sequence

from gnostic.exceptions import FormatDetectionError
from gnostic.models.document import CompiledDocument
from gnostic.parsers.base import DocumentDecoder, ExtensionHandler
from gnostic.parsers.binary import BinaryDecoder
from gnostic.parsers.openapi import OpenAPITextDecoder
from gnostic.reader import source_extension

logger = logging.getLogger(__name__)


class DecoderRegistry:
    """
    Registry of source decoders keyed by extension.

    Example:
        >>> registry = DecoderRegistry()
        >>> registry.register(OpenAPITextDecoder())
        >>> document = registry.decode(data, "petstore.yaml")
    """

    def __init__(self) -> None:
        """Initialize an empty decoder registry."""
        self._decoders: Dict[str, DocumentDecoder] = {}

    def register(self, decoder: DocumentDecoder) -> None:
        """
        Register a decoder for every extension it declares.

        Later registrations replace earlier ones for the same extension.
        """
        for extension in decoder.extensions:
            self._decoders[extension.lower()] = decoder
        logger.debug(f"Registered decoder: {type(decoder).__name__}")

    @property
    def supported_extensions(self) -> list[str]:
        return sorted(self._decoders)

    def decoder_for(self, source_name: str) -> DocumentDecoder:
        """
        Select the decoder for a source name.

        Raises:
            FormatDetectionError: If no decoder handles the extension
        """
        decoder = self._decoders.get(source_extension(source_name))
        if decoder is None:
            accepted = ", ".join(
                f"'{extension.lstrip('.')}'" for extension in self.supported_extensions
            )
            raise FormatDetectionError(
                f"Unknown file extension. {_join_accepted(accepted)} are accepted."
            )
        return decoder

    def decode(
        self,
        data: bytes,
        source_name: str,
        extension_handlers: Sequence[ExtensionHandler] = (),
    ) -> CompiledDocument:
        """Decode source bytes with the decoder matching the source extension."""
        decoder = self.decoder_for(source_name)
        return decoder.decode(data, source_name, extension_handlers)


def _join_accepted(accepted: str) -> str:
    # "'json', 'pb', 'yaml'" -> "'json', 'pb', and 'yaml'"
    head, sep, tail = accepted.rpartition(", ")
    return f"{head}, and {tail}" if sep else accepted


def get_default_registry() -> DecoderRegistry:
    """
    Create a registry with the built-in decoders.

    Returns:
        DecoderRegistry handling .json, .yaml and .pb sources
    """
    registry = DecoderRegistry()
    registry.register(OpenAPITextDecoder())
    registry.register(BinaryDecoder())
    return registry
