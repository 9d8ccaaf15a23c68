"""Tests for $ref resolution."""

import pytest

from gnostic.exceptions import ResolutionError
from gnostic.parsers.references import ReferenceResolver, lookup_pointer


class TestLookupPointer:
    """Tests for JSON pointer lookup."""

    def test_nested_keys_and_indexes(self):
        tree = {"a": {"b": [{"c": 1}, {"c": 2}]}}

        assert lookup_pointer(tree, "/a/b/1/c") == 2

    def test_empty_pointer_is_whole_tree(self):
        tree = {"a": 1}

        assert lookup_pointer(tree, "") is tree

    def test_escaped_tokens(self):
        tree = {"paths": {"/pets/{id}": {"get": 1}}, "a~b": 2}

        assert lookup_pointer(tree, "/paths/~1pets~1%7Bid%7D/get") == 1
        assert lookup_pointer(tree, "/a~0b") == 2

    def test_missing_segment(self):
        with pytest.raises(KeyError):
            lookup_pointer({"a": {}}, "/a/b")


class TestReferenceResolver:
    """Tests for ReferenceResolver."""

    def test_internal_references(self, v2_document):
        tree = ReferenceResolver("petstore.yaml").resolve(v2_document.to_tree())

        schema = tree["paths"]["/pets"]["get"]["responses"]["200"]["schema"]
        assert schema["type"] == "array"
        assert schema["items"]["properties"]["name"] == {"type": "string"}

    def test_document_resolve_references(self, v3_document):
        resolved = v3_document.resolve_references("petstore-v3.json")

        response = resolved.paths["/pets"]["get"]["responses"]["200"]
        schema = response["content"]["application/json"]["schema"]
        assert schema == {"type": "object", "properties": {"name": {"type": "string"}}}
        # the original document is unchanged
        assert "$ref" in str(v3_document.paths)

    def test_external_file_reference(self, tmp_path):
        (tmp_path / "common.yaml").write_text(
            "definitions:\n"
            "  Error:\n"
            "    type: object\n"
            "    properties:\n"
            "      detail:\n"
            "        $ref: '#/definitions/Detail'\n"
            "  Detail:\n"
            "    type: string\n"
        )
        tree = {"schema": {"$ref": "common.yaml#/definitions/Error"}}

        resolved = ReferenceResolver(str(tmp_path / "api.yaml")).resolve(tree)

        assert resolved["schema"] == {
            "type": "object",
            "properties": {"detail": {"type": "string"}},
        }

    def test_whole_file_reference(self, tmp_path):
        (tmp_path / "pet.json").write_text('{"type": "object"}')

        resolved = ReferenceResolver(str(tmp_path / "api.yaml")).resolve(
            {"schema": {"$ref": "pet.json"}}
        )

        assert resolved["schema"] == {"type": "object"}

    def test_repeated_reference_is_resolved_once(self):
        tree = {
            "definitions": {"Pet": {"type": "object"}},
            "a": {"$ref": "#/definitions/Pet"},
            "b": {"$ref": "#/definitions/Pet"},
        }

        resolved = ReferenceResolver("api.yaml").resolve(tree)

        assert resolved["a"] is resolved["b"]

    def test_circular_reference(self):
        tree = {
            "definitions": {
                "Node": {
                    "type": "object",
                    "properties": {"next": {"$ref": "#/definitions/Node"}},
                }
            },
            "root": {"$ref": "#/definitions/Node"},
        }

        with pytest.raises(ResolutionError, match="Circular reference"):
            ReferenceResolver("api.yaml").resolve(tree)

    def test_missing_target(self):
        with pytest.raises(ResolutionError, match="#/definitions/Missing"):
            ReferenceResolver("api.yaml").resolve(
                {"definitions": {}, "a": {"$ref": "#/definitions/Missing"}}
            )

    def test_missing_file(self, tmp_path):
        with pytest.raises(ResolutionError, match="absent.yaml"):
            ReferenceResolver(str(tmp_path / "api.yaml")).resolve(
                {"a": {"$ref": "absent.yaml#/x"}}
            )
