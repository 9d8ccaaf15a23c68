"""
Base decoder protocol and shared decoder types.

A decoder turns raw source bytes into a compiled document. Decoders are
selected by source extension through the DecoderRegistry.
"""

from dataclasses import dataclass
from typing import List, Protocol, Sequence

from gnostic.models.document import CompiledDocument


@dataclass(frozen=True)
class ExtensionHandler:
    """
    A registered handler for OpenAPI specification extensions.

    The name is the executable that handles x-* extension values
    (e.g. gnostic-x-samples).
    """

    name: str


class DocumentDecoder(Protocol):
    """Protocol for source decoders."""

    @property
    def extensions(self) -> List[str]:
        """Lower-cased file extensions this decoder handles (e.g. ['.yaml'])."""
        ...

    def decode(
        self,
        data: bytes,
        source_name: str,
        extension_handlers: Sequence[ExtensionHandler] = (),
    ) -> CompiledDocument:
        """
        Decode source bytes into a compiled document.

        Args:
            data: Raw source bytes
            source_name: Name of the source, used in error messages
            extension_handlers: Handlers registered for x-* extensions

        Raises:
            DecodeError: If the bytes are malformed or the version is unknown
        """
        ...
