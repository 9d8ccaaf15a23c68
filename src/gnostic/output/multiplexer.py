"""
Output multiplexer for compiled documents.

Emits the binary, JSON and text serializations of a compiled document, each
to its own configured sink. A failure in one format is reported and does
not prevent the remaining formats from being written.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List

from gnostic.exceptions import SerializationError, SinkWriteError
from gnostic.models.document import CompiledDocument
from gnostic.output.sinks import SinkWriter, resolve_sink
from gnostic.pipeline.failure_tracking import ErrorReporter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputFormat:
    """A serialization of compiled documents and the extension it is saved with."""

    name: str
    extension: str
    serialize: Callable[[CompiledDocument], bytes]


BINARY = OutputFormat("binary", "pb", CompiledDocument.to_binary)
JSON = OutputFormat("json", "json", CompiledDocument.to_json)
TEXT = OutputFormat("text", "text", CompiledDocument.to_text)


class OutputMultiplexer:
    """Writes document serializations to independently configured sinks."""

    def __init__(self, writer: SinkWriter, reporter: ErrorReporter) -> None:
        self.writer = writer
        self.reporter = reporter

    def emit(
        self,
        document: CompiledDocument,
        source_name: str,
        binary_out: str = "",
        json_out: str = "",
        text_out: str = "",
    ) -> List[str]:
        """
        Emit every configured serialization.

        Args:
            document: Compiled document to serialize
            source_name: Source name, used to derive file names in directories
            binary_out: Location for the binary form ('' to skip)
            json_out: Location for the JSON form ('' to skip)
            text_out: Location for the text form ('' to skip)

        Returns:
            Names of the formats that were written
        """
        written = []
        for output_format, location in (
            (BINARY, binary_out),
            (JSON, json_out),
            (TEXT, text_out),
        ):
            if not location:
                continue
            if self._emit_one(document, source_name, output_format, location):
                written.append(output_format.name)
        return written

    def _emit_one(
        self,
        document: CompiledDocument,
        source_name: str,
        output_format: OutputFormat,
        location: str,
    ) -> bool:
        try:
            payload = output_format.serialize(document)
            sink = resolve_sink(location, source_name, output_format.extension)
            self.writer.write(sink, payload)
        except (SerializationError, SinkWriteError) as e:
            logger.info(f"Failed to write {output_format.name} output: {e}")
            self.reporter.report(e, stage=f"emit:{output_format.name}")
            return False
        logger.debug(f"Wrote {output_format.name} output to {location}")
        return True
