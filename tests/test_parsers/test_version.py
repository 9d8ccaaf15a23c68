"""Tests for OpenAPI version detection."""

import pytest

from gnostic.models.document import OpenAPIVersion
from gnostic.parsers.version import detect_version


class TestDetectVersion:
    """Tests for detect_version."""

    def test_swagger_2_0_is_v2(self):
        assert detect_version({"swagger": "2.0"}) is OpenAPIVersion.V2

    def test_openapi_3_0_is_v3(self):
        assert detect_version({"openapi": "3.0"}) is OpenAPIVersion.V3

    @pytest.mark.parametrize(
        "info",
        [
            {},
            {"swagger": "1.0"},
            {"openapi": "3.1"},
            {"swagger": 2.0},
            {"openapi": 3.0},
            {"swagger": None},
            None,
            [],
            "swagger: 2.0",
        ],
    )
    def test_everything_else_is_unknown(self, info):
        assert detect_version(info) is OpenAPIVersion.UNKNOWN

    def test_swagger_wins_when_both_match(self):
        info = {"swagger": "2.0", "openapi": "3.0"}

        assert detect_version(info) is OpenAPIVersion.V2

    def test_invalid_swagger_falls_through_to_openapi(self):
        info = {"swagger": "1.2", "openapi": "3.0"}

        assert detect_version(info) is OpenAPIVersion.V3

    def test_detection_does_not_modify_input(self):
        info = {"swagger": "2.0", "info": {"title": "x"}}
        snapshot = dict(info)

        detect_version(info)

        assert info == snapshot


def test_version_tags():
    assert OpenAPIVersion.V2.tag == "v2"
    assert OpenAPIVersion.V3.tag == "v3"
    assert OpenAPIVersion.UNKNOWN.tag == "unknown"
