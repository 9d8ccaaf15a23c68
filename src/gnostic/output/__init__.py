"""Sinks for compiled documents and plugin output."""

from gnostic.output.multiplexer import OutputMultiplexer
from gnostic.output.sinks import (
    DiagnosticStream,
    DirectoryPath,
    Discard,
    FilePath,
    PrimaryStream,
    Sink,
    SinkWriter,
    Streams,
    resolve_plugin_sink,
    resolve_sink,
)

__all__ = [
    "DiagnosticStream",
    "DirectoryPath",
    "Discard",
    "FilePath",
    "OutputMultiplexer",
    "PrimaryStream",
    "Sink",
    "SinkWriter",
    "Streams",
    "resolve_plugin_sink",
    "resolve_sink",
]
