"""
Compiler run orchestrator.

Sequences one run of the compiler:

    parse options -> validate options -> load source -> decode
        -> [resolve references] -> emit sinks -> invoke plugins -> exit

Failures before emission are fatal and end the run. Failures while writing
sinks or running plugins are reported and recorded, and every remaining
sink and plugin still runs; the run then exits non-zero.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from gnostic.config import RunOptions, settings
from gnostic.exceptions import FatalError, GnosticError, UsageError
from gnostic.models.document import CompiledDocument
from gnostic.options import USAGE, parse_options, validate_options
from gnostic.output.multiplexer import OutputMultiplexer
from gnostic.output.sinks import SinkWriter, Streams
from gnostic.parsers.registry import DecoderRegistry, get_default_registry
from gnostic.pipeline.failure_tracking import ErrorReporter, RecordedFailure
from gnostic.plugins.protocol import PluginInvoker
from gnostic.reader import SourceReader

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


@dataclass
class RunResult:
    """Outcome of a compiler run."""

    exit_code: int
    failures: List[RecordedFailure] = field(default_factory=list)
    document: Optional[CompiledDocument] = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == EXIT_SUCCESS


class Orchestrator:
    """
    Runs the compiler for one validated set of options.

    Example:
        >>> options = validate_options(parse_options(["api.yaml", "--json-out=-"]))
        >>> result = Orchestrator(options, Streams.system()).run()
    """

    def __init__(
        self,
        options: RunOptions,
        streams: Streams,
        registry: Optional[DecoderRegistry] = None,
        reader: Optional[SourceReader] = None,
        plugin_prefix: str = "",
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            options: Validated run options
            streams: Primary and diagnostic streams
            registry: Decoder registry (defaults to the built-in decoders)
            reader: Source reader (defaults to a new SourceReader)
            plugin_prefix: Plugin executable prefix (defaults to
                settings.plugin_prefix)
        """
        self.options = options
        self.streams = streams
        self.registry = registry or get_default_registry()
        self.reader = reader or SourceReader()

        self.writer = SinkWriter(streams)
        self.reporter = ErrorReporter(
            writer=self.writer,
            source_name=options.source_name,
            errors_out=options.errors_out or "=",
        )
        self.multiplexer = OutputMultiplexer(self.writer, self.reporter)
        self.invoker = PluginInvoker(
            self.writer, plugin_prefix=plugin_prefix or settings.plugin_prefix
        )

    def run(self) -> RunResult:
        """
        Execute the run.

        Returns:
            RunResult with exit code 0 only if nothing failed
        """
        try:
            document = self.compile()
        except FatalError as e:
            logger.debug(f"Fatal error: {e}", exc_info=True)
            self.reporter.report(e, stage="compile")
            return RunResult(exit_code=EXIT_FAILURE, failures=self.reporter.failures)

        self.emit_sinks(document)
        self.invoke_plugins(document)

        exit_code = EXIT_FAILURE if self.reporter.failed else EXIT_SUCCESS
        return RunResult(
            exit_code=exit_code, failures=self.reporter.failures, document=document
        )

    def compile(self) -> CompiledDocument:
        """
        Load, decode and optionally resolve the source.

        Raises:
            SourceReadError, FormatDetectionError, DecodeError, ResolutionError
        """
        source_name = self.options.source_name
        data = self.reader.read_bytes(source_name)
        document = self.registry.decode(
            data, source_name, self.options.extension_handlers
        )
        if self.options.resolve_references:
            document = document.resolve_references(source_name, reader=self.reader)
        return document

    def emit_sinks(self, document: CompiledDocument) -> None:
        """Write the configured fixed-format serializations."""
        self.multiplexer.emit(
            document,
            self.options.source_name,
            binary_out=self.options.binary_out,
            json_out=self.options.json_out,
            text_out=self.options.text_out,
        )

    def invoke_plugins(self, document: CompiledDocument) -> None:
        """Run every plugin call in order, recording failures."""
        for call in self.options.plugin_calls:
            try:
                self.invoker.perform(call, document, self.options.source_name)
            except GnosticError as e:
                logger.info(f"Plugin {call.name} failed: {e}")
                self.reporter.report(e, stage=f"plugin:{call.name}")


def run(args: Sequence[str], streams: Optional[Streams] = None) -> int:
    """
    Run the compiler for a raw argument list.

    Args:
        args: Command-line arguments without the program name
        streams: Streams to use (defaults to the process's stdout/stderr)

    Returns:
        Process exit code
    """
    streams = streams or Streams.system()
    try:
        options = validate_options(parse_options(args))
    except UsageError as e:
        streams.stderr.write(f"{e}\n{USAGE}\n".encode("utf-8"))
        streams.stderr.flush()
        return EXIT_FAILURE

    return Orchestrator(options, streams).run().exit_code
