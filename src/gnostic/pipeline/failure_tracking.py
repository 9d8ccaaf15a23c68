"""
Shared failure tracking for a compiler run.

Centralizes how errors are reported to the error sink and remembered so
that the run's exit status reflects every failure, including the ones
that did not stop processing.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from gnostic.exceptions import SinkWriteError
from gnostic.output.sinks import DiagnosticStream, FilePath, SinkWriter, resolve_sink

logger = logging.getLogger(__name__)


@dataclass
class RecordedFailure:
    """A failure recorded during a run."""

    error: Exception
    stage: str

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass
class ErrorReporter:
    """
    Writes error messages to the error sink and records them.

    The first message of a run truncates a file error sink; later messages
    are appended so that no failure of the run is lost.
    """

    writer: SinkWriter
    source_name: str
    errors_out: str = "="
    failures: List[RecordedFailure] = field(default_factory=list)
    _written: bool = field(default=False, init=False, repr=False)

    def error_bytes(self, error: Exception) -> bytes:
        """Format an error as reported to the error sink."""
        return f"Errors reading {self.source_name}\n{error}".encode("utf-8")

    def report(self, error: Exception, stage: str = "") -> None:
        """
        Record a failure and write it to the error sink.

        Args:
            error: The exception that occurred
            stage: Orchestrator stage or plugin the failure belongs to

        If the error sink itself cannot be written, the message goes to the
        diagnostic stream instead.
        """
        self.failures.append(RecordedFailure(error=error, stage=stage))
        payload = self.error_bytes(error)
        sink = resolve_sink(self.errors_out, self.source_name, "errors")
        if isinstance(sink, FilePath):
            # streams get their newline from the writer
            payload += b"\n"
        try:
            self.writer.write(sink, payload, append=self._written)
            self._written = True
        except SinkWriteError as write_error:
            logger.error(f"Could not write to error sink: {write_error}")
            self.writer.write(DiagnosticStream(), self.error_bytes(error))

    @property
    def failed(self) -> bool:
        """Whether any failure was recorded."""
        return bool(self.failures)
