"""
Output sinks.

A sink is the resolved destination for produced bytes. Location strings
map to sinks as follows:

    !       discard everything
    -       the primary output stream (stdout)
    =       the diagnostic stream (stderr)
    <dir>   an existing directory; a file name is derived for the payload
    <path>  anything else is a file path
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union
from urllib.parse import urlparse

from gnostic.exceptions import OutputConflictError, SinkWriteError
from gnostic.reader import is_url

logger = logging.getLogger(__name__)

DISCARD = "!"
STDOUT = "-"
STDERR = "="


@dataclass(frozen=True)
class Discard:
    """Drops every payload."""


@dataclass(frozen=True)
class PrimaryStream:
    """Writes to the primary output stream."""


@dataclass(frozen=True)
class DiagnosticStream:
    """Writes to the diagnostic stream."""


@dataclass(frozen=True)
class DirectoryPath:
    """Writes named files inside a directory, creating it when absent."""

    directory: Path


@dataclass(frozen=True)
class FilePath:
    """Writes a single file."""

    path: Path


Sink = Union[Discard, PrimaryStream, DiagnosticStream, DirectoryPath, FilePath]


@dataclass
class Streams:
    """The binary streams standing in for stdout and stderr."""

    stdout: BinaryIO
    stderr: BinaryIO

    @classmethod
    def system(cls) -> "Streams":
        """Streams bound to the process's stdout and stderr."""
        sys.stdout.flush()
        sys.stderr.flush()
        return cls(stdout=sys.stdout.buffer, stderr=sys.stderr.buffer)


def source_base_name(source_name: str) -> str:
    """Base name of a source with its extension removed."""
    path = urlparse(source_name).path if is_url(source_name) else source_name
    return Path(path).stem


def _stream_sink(location: str) -> Union[Discard, PrimaryStream, DiagnosticStream, None]:
    if location == DISCARD:
        return Discard()
    if location == STDOUT:
        return PrimaryStream()
    if location == STDERR:
        return DiagnosticStream()
    return None


def resolve_sink(location: str, source_name: str, extension: str) -> Sink:
    """
    Resolve a fixed-format output location.

    Args:
        location: Value of --pb-out, --json-out, --text-out or --errors-out
        source_name: Source the payload was compiled from
        extension: Extension used when location is a directory (e.g. 'pb')

    Returns:
        The sink to write to
    """
    stream = _stream_sink(location)
    if stream is not None:
        return stream
    target = Path(location)
    if target.is_dir():
        return FilePath(target / f"{source_base_name(source_name)}.{extension}")
    return FilePath(target)


def resolve_plugin_sink(location: str) -> Sink:
    """
    Resolve the output location of a plugin call.

    Plugin outputs go to a directory that is created on demand. An existing
    file at the location is never overwritten.

    Raises:
        OutputConflictError: If location exists and is not a directory
    """
    stream = _stream_sink(location)
    if stream is not None:
        return stream
    target = Path(location)
    if target.exists() and not target.is_dir():
        raise OutputConflictError(location)
    return DirectoryPath(target)


class SinkWriter:
    """Writes payloads to resolved sinks."""

    def __init__(self, streams: Streams) -> None:
        self.streams = streams

    def write(self, sink: Sink, data: bytes, append: bool = False) -> None:
        """
        Write one payload to a sink.

        Stream sinks get a trailing newline after the payload. File sinks are
        truncated unless append is set.

        Raises:
            SinkWriteError: If the payload cannot be written
        """
        if isinstance(sink, Discard):
            return
        if isinstance(sink, (PrimaryStream, DiagnosticStream)):
            stream = self._stream(sink)
            stream.write(data)
            stream.write(b"\n")
            stream.flush()
            return
        if isinstance(sink, FilePath):
            self._write_file(sink.path, data, append=append)
            return
        raise SinkWriteError(f"Cannot write a single payload to {sink}")

    def write_named(self, sink: Sink, name: str, data: bytes) -> None:
        """
        Write a named file produced by a plugin.

        The primary stream gets a visible header per file so that several
        files can be inspected in order. Directory sinks get one file per
        name, created or overwritten.

        Raises:
            SinkWriteError: If the file cannot be written
        """
        if isinstance(sink, Discard):
            return
        if isinstance(sink, (PrimaryStream, DiagnosticStream)):
            stream = self._stream(sink)
            stream.write(f"\n\n{name} -------------------- \n".encode("utf-8"))
            stream.write(data)
            stream.flush()
            return
        if isinstance(sink, DirectoryPath):
            self._write_file(sink.directory / name, data)
            return
        raise SinkWriteError(f"Cannot write named file {name} to {sink}")

    def _stream(self, sink: Union[PrimaryStream, DiagnosticStream]) -> BinaryIO:
        if isinstance(sink, PrimaryStream):
            return self.streams.stdout
        return self.streams.stderr

    def _write_file(self, path: Path, data: bytes, append: bool = False) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "ab" if append else "wb") as handle:
                handle.write(data)
        except (OSError, ValueError) as e:
            raise SinkWriteError(f"Unable to write {path}: {e}") from e
        logger.debug(f"Wrote {len(data)} bytes to {path}")
