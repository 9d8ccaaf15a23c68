"""
Plugin request and response envelopes.

The compiler writes one Request to a plugin's standard input and reads one
Response from its standard output. Both travel as CBOR maps whose keys are
the field names below; byte fields are carried as CBOR byte strings.
"""

from typing import Any, List, Optional

import cbor2
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gnostic.exceptions import ProtocolError


class Version(BaseModel):
    """Semantic version of the compiler that produced a request."""

    model_config = ConfigDict(frozen=True)

    major: int = 0
    minor: int = 0
    patch: int = 0


class Parameter(BaseModel):
    """A single name=value plugin parameter."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str


class Wrapper(BaseModel):
    """A serialized compiled document with its source name and version tag."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    value: bytes


class File(BaseModel):
    """A file produced by a plugin."""

    model_config = ConfigDict(frozen=True)

    name: str
    data: bytes = b""


class _Envelope(BaseModel):
    """CBOR encoding shared by requests and responses."""

    def to_bytes(self) -> bytes:
        return cbor2.dumps(self.model_dump(mode="python"), canonical=True)

    @classmethod
    def from_bytes(cls, data: bytes) -> Any:
        """
        Decode an envelope.

        Empty input decodes to an envelope with default field values.

        Raises:
            ProtocolError: If the bytes are not a CBOR map of the right shape
        """
        if not data:
            return cls.model_validate({})
        try:
            payload = cbor2.loads(data)
        except (cbor2.CBORDecodeError, ValueError, TypeError) as e:
            raise ProtocolError(f"Unable to decode {cls.__name__}: {e}") from e
        if not isinstance(payload, dict):
            raise ProtocolError(
                f"Unable to decode {cls.__name__}: expected a map, "
                f"got {type(payload).__name__}"
            )
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise ProtocolError(f"Invalid {cls.__name__}: {e}") from e


class Request(_Envelope):
    """Envelope sent to a plugin on standard input."""

    compiler_version: Version = Field(default_factory=Version)
    parameters: List[Parameter] = Field(default_factory=list)
    output_path: str = ""
    wrapper: Optional[Wrapper] = None


class Response(_Envelope):
    """Envelope read from a plugin's standard output."""

    files: List[File] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
