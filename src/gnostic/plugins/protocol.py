"""
Plugin invocation protocol.

A plugin is an executable named <prefix><NAME> found on PATH. For each
--NAME-out=INVOCATION flag the compiler:

1. parses INVOCATION into parameters and an output location,
2. writes a serialized Request to the plugin's standard input,
3. forwards the plugin's standard error to its own diagnostic stream
   (attached directly when that stream is a real file, so output is live;
   replayed after the plugin exits otherwise),
4. reads a serialized Response from the plugin's standard output,
5. writes the response files to the output location, unless the plugin
   reported errors.

Calls are synchronous: a plugin has finished and its files are written
before the next plugin starts.
"""

import io
import logging
import shutil
import subprocess
from pathlib import PurePath
from typing import BinaryIO, Optional, Sequence

from gnostic import COMPILER_VERSION
from gnostic.exceptions import (
    ExecutionError,
    PluginReportedError,
    ProtocolError,
    SinkWriteError,
)
from gnostic.models.document import CompiledDocument
from gnostic.models.envelope import (
    File,
    Parameter,
    Request,
    Response,
    Version,
    Wrapper,
)
from gnostic.output.sinks import DirectoryPath, SinkWriter, resolve_plugin_sink
from gnostic.plugins.invocation import Invocation, PluginCall, parse_invocation

logger = logging.getLogger(__name__)

DEFAULT_PLUGIN_PREFIX = "gnostic-"


def build_request(
    invocation: Invocation, document: CompiledDocument, source_name: str
) -> Request:
    """
    Build the request envelope for one plugin call.

    Args:
        invocation: Parsed invocation of the plugin
        document: Compiled document handed to the plugin
        source_name: Name the document was read from

    Returns:
        Request carrying the fixed compiler version, the parameters in
        invocation order, the output path and the wrapped document
    """
    major, minor, patch = COMPILER_VERSION
    return Request(
        compiler_version=Version(major=major, minor=minor, patch=patch),
        parameters=[
            Parameter(name=name, value=value) for name, value in invocation.parameters
        ],
        output_path=invocation.output_path,
        wrapper=Wrapper(
            name=source_name,
            version=document.openapi_version.tag,
            value=document.to_binary(),
        ),
    )


def _check_file_names(executable: str, files: Sequence[File]) -> None:
    for file in files:
        path = PurePath(file.name)
        if (
            not file.name
            or "\x00" in file.name
            or path.is_absolute()
            or ".." in path.parts
        ):
            raise ProtocolError(
                f"{executable} returned an invalid file name: {file.name!r}"
            )


def _file_descriptor(stream: BinaryIO) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return None

class PluginInvoker:
    """Runs plugin executables and dispatches their responses."""

    def __init__(
        self, writer: SinkWriter, plugin_prefix: str = DEFAULT_PLUGIN_PREFIX
    ) -> None:
        """
        Initialize the invoker.

        Args:
            writer: Writer used for response files and forwarded stderr
            plugin_prefix: Prefix joined with plugin names to find executables
        """
        self.writer = writer
        self.plugin_prefix = plugin_prefix

    def perform(
        self, call: PluginCall, document: CompiledDocument, source_name: str
    ) -> Response:
        """
        Invoke one plugin and write its files.

        Args:
            call: Plugin name and invocation string
            document: Compiled document handed to the plugin
            source_name: Name the document was read from

        Returns:
            The plugin's response

        Raises:
            InvalidInvocationError: If the invocation string is malformed
            ExecutionError: If the plugin cannot run or fails without output
            ProtocolError: If the plugin's output is not a valid response
            PluginReportedError: If the plugin reported errors
            OutputConflictError: If the output location is an existing file
            SinkWriteError: If a response file cannot be written
        """
        executable = call.executable_name(self.plugin_prefix)
        invocation = parse_invocation(call.invocation, executable)
        request = build_request(invocation, document, source_name)

        output = self._execute(executable, request.to_bytes())
        response = Response.from_bytes(output)
        if response.errors:
            raise PluginReportedError(executable, response.errors)

        self._dispatch(executable, invocation.output_path, response)
        logger.info(f"{executable} produced {len(response.files)} file(s)")
        return response

    def _execute(self, executable: str, request_bytes: bytes) -> bytes:
        path = shutil.which(executable)
        if path is None:
            raise ExecutionError(f"Unable to find {executable} on PATH")

        logger.debug(f"Running {path} with {len(request_bytes)} byte request")
        diagnostics = self.writer.streams.stderr
        attached = _file_descriptor(diagnostics) is not None
        if attached:
            diagnostics.flush()
        try:
            completed = subprocess.run(
                [path],
                input=request_bytes,
                stdout=subprocess.PIPE,
                stderr=diagnostics if attached else subprocess.PIPE,
                check=False,
            )
        except OSError as e:
            raise ExecutionError(f"Unable to start {executable}: {e}") from e

        if completed.stderr:
            self.writer.streams.stderr.write(completed.stderr)
            self.writer.streams.stderr.flush()

        if completed.returncode < 0:
            raise ExecutionError(
                f"{executable} was terminated by signal {-completed.returncode}"
            )
        if completed.returncode != 0 and not completed.stdout:
            raise ExecutionError(
                f"{executable} exited with status {completed.returncode}"
            )
        if completed.returncode != 0:
            logger.info(
                f"{executable} exited with status {completed.returncode}; "
                f"reading its response anyway"
            )
        return completed.stdout

    def _dispatch(self, executable: str, location: str, response: Response) -> None:
        sink = resolve_plugin_sink(location)
        if isinstance(sink, DirectoryPath):
            _check_file_names(executable, response.files)
            try:
                sink.directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise SinkWriteError(f"Unable to create {sink.directory}: {e}") from e
        for file in response.files:
            self.writer.write_named(sink, file.name, file.data)
