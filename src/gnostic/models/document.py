"""
Compiled document models.

A compiled document is the typed, validated form of an OpenAPI description.
There is one concrete model per supported OpenAPI version; both share the
serialization and reference-resolution capabilities of CompiledDocument.
Documents are frozen: resolving references produces a new document.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional

import cbor2
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticSerializationError

from gnostic.exceptions import ResolutionError, SerializationError

if TYPE_CHECKING:
    from gnostic.reader import SourceReader


class OpenAPIVersion(int, Enum):
    """OpenAPI versions understood by the compiler."""

    UNKNOWN = 0
    V2 = 2
    V3 = 3

    @property
    def tag(self) -> str:
        """Version tag sent to plugins in the request wrapper."""
        if self is OpenAPIVersion.V2:
            return "v2"
        if self is OpenAPIVersion.V3:
            return "v3"
        return "unknown"


class Info(BaseModel):
    """The info object shared by both OpenAPI versions."""

    model_config = ConfigDict(frozen=True, extra="allow")

    title: str
    version: str
    description: Optional[str] = None


class CompiledDocument(BaseModel):
    """
    Base class for compiled OpenAPI documents.

    Sections without a dedicated field are kept as extra fields so that
    nothing from the source is lost on re-serialization. Top-level
    specification extensions (x-*) are available through vendor_extensions.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    openapi_version: ClassVar[OpenAPIVersion] = OpenAPIVersion.UNKNOWN

    info: Info
    paths: Dict[str, Any] = Field(default_factory=dict)
    security: Optional[List[Any]] = None
    tags: Optional[List[Any]] = None
    external_docs: Optional[Dict[str, Any]] = Field(None, alias="externalDocs")

    @property
    def vendor_extensions(self) -> Dict[str, Any]:
        """Top-level x-* keys carried by the source."""
        extra = self.model_extra or {}
        return {key: value for key, value in extra.items() if key.startswith("x-")}

    def to_tree(self) -> Dict[str, Any]:
        """Return the document as a plain nested mapping using source key names."""
        return self.model_dump(mode="python", by_alias=True, exclude_none=True)

    def to_binary(self) -> bytes:
        """
        Serialize to the binary (CBOR) form.

        Canonical encoding is used so repeated serialization of an unchanged
        document is byte-identical.
        """
        try:
            return cbor2.dumps(self.to_tree(), canonical=True)
        except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
            raise SerializationError(f"Unable to encode binary document: {e}") from e

    def to_json(self) -> bytes:
        """Serialize to indented JSON."""
        try:
            return self.model_dump_json(
                by_alias=True, exclude_none=True, indent=2
            ).encode("utf-8")
        except (PydanticSerializationError, ValueError) as e:
            raise SerializationError(f"Unable to encode JSON document: {e}") from e

    def to_text(self) -> bytes:
        """Serialize to a human-readable YAML rendering."""
        try:
            text = yaml.safe_dump(
                self.to_tree(), sort_keys=False, allow_unicode=True
            )
        except yaml.YAMLError as e:
            raise SerializationError(f"Unable to encode text document: {e}") from e
        return text.encode("utf-8")

    def resolve_references(
        self, source_name: str, reader: Optional["SourceReader"] = None
    ) -> "CompiledDocument":
        """
        Return a copy of this document with $ref references replaced.

        Args:
            source_name: Name the document was read from; relative external
                references are resolved against it
            reader: Source reader for external references (defaults to a
                new SourceReader)

        Raises:
            ResolutionError: If a reference is missing, cyclic or unreadable
        """
        from gnostic.parsers.references import ReferenceResolver

        resolver = ReferenceResolver(source_name, reader=reader)
        try:
            return type(self).model_validate(resolver.resolve(self.to_tree()))
        except ValidationError as e:
            raise ResolutionError(f"Resolved document is invalid: {e}") from e


class V2Document(CompiledDocument):
    """An OpenAPI 2.0 (Swagger) document."""

    openapi_version: ClassVar[OpenAPIVersion] = OpenAPIVersion.V2

    swagger: str
    host: Optional[str] = None
    base_path: Optional[str] = Field(None, alias="basePath")
    schemes: Optional[List[str]] = None
    consumes: Optional[List[str]] = None
    produces: Optional[List[str]] = None
    definitions: Optional[Dict[str, Any]] = None
    parameters: Optional[Dict[str, Any]] = None
    responses: Optional[Dict[str, Any]] = None
    security_definitions: Optional[Dict[str, Any]] = Field(
        None, alias="securityDefinitions"
    )


class V3Document(CompiledDocument):
    """An OpenAPI 3.0 document."""

    openapi_version: ClassVar[OpenAPIVersion] = OpenAPIVersion.V3

    openapi: str
    servers: Optional[List[Any]] = None
    components: Optional[Dict[str, Any]] = None


DOCUMENT_TYPES: Dict[OpenAPIVersion, type[CompiledDocument]] = {
    OpenAPIVersion.V2: V2Document,
    OpenAPIVersion.V3: V3Document,
}
