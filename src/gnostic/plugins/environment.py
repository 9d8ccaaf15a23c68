"""
Helper for writing plugins in Python.

A plugin reads one Request from standard input and writes one Response to
standard output:

    env = PluginEnvironment.from_stdin()
    document = env.document()
    env.add_file("summary.txt", render(document).encode())
    env.respond()

Anything the plugin prints to standard error is shown to the user as-is.
"""

import sys
from typing import BinaryIO, Dict, List, Optional

import cbor2

from gnostic.exceptions import DecodeError, ProtocolError
from gnostic.models.document import CompiledDocument
from gnostic.models.envelope import File, Request, Response
from gnostic.parsers.openapi import build_document
from gnostic.parsers.version import detect_version


class PluginEnvironment:
    """Request/response state for a plugin process."""

    def __init__(self, request: Request) -> None:
        self.request = request
        self.files: List[File] = []
        self.errors: List[str] = []

    @classmethod
    def from_stdin(cls, stream: Optional[BinaryIO] = None) -> "PluginEnvironment":
        """
        Read the request envelope.

        Raises:
            ProtocolError: If the input is not a valid request
        """
        data = (stream or sys.stdin.buffer).read()
        return cls(Request.from_bytes(data))

    @property
    def parameters(self) -> Dict[str, str]:
        """Invocation parameters; for repeated keys the last value wins."""
        return {param.name: param.value for param in self.request.parameters}

    @property
    def output_path(self) -> str:
        return self.request.output_path

    @property
    def source_name(self) -> str:
        return self.request.wrapper.name if self.request.wrapper else ""

    @property
    def version_tag(self) -> str:
        return self.request.wrapper.version if self.request.wrapper else "unknown"

    def document(self) -> CompiledDocument:
        """
        Decode the wrapped compiled document.

        Raises:
            ProtocolError: If the request carries no document or it is invalid
        """
        if self.request.wrapper is None:
            raise ProtocolError("Request carries no document")
        try:
            tree = cbor2.loads(self.request.wrapper.value)
            return build_document(tree, detect_version(tree))
        except (cbor2.CBORDecodeError, ValueError, DecodeError) as e:
            raise ProtocolError(f"Invalid document in request: {e}") from e

    def add_file(self, name: str, data: bytes) -> None:
        self.files.append(File(name=name, data=data))

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def response(self) -> Response:
        return Response(files=self.files, errors=self.errors)

    def respond(self, stream: Optional[BinaryIO] = None) -> None:
        """Write the response envelope to standard output."""
        out = stream or sys.stdout.buffer
        out.write(self.response().to_bytes())
        out.flush()
