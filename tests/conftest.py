"""
Pytest configuration and fixtures for Gnostic tests.

Provides in-memory streams, sample OpenAPI sources and a factory for fake
plugin executables placed on PATH.
"""

import io
import os
import stat
import sys
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from gnostic.output.sinks import Streams

PETSTORE_V2 = """\
swagger: "2.0"
info:
  title: Swagger Petstore
  version: 1.0.0
host: petstore.swagger.io
basePath: /v1
paths:
  /pets:
    get:
      operationId: listPets
      responses:
        200:
          description: A paged array of pets
          schema:
            $ref: "#/definitions/Pets"
definitions:
  Pet:
    type: object
    properties:
      id:
        type: integer
      name:
        type: string
  Pets:
    type: array
    items:
      $ref: "#/definitions/Pet"
x-generator: handwritten
"""

PETSTORE_V3 = """\
{
  "openapi": "3.0",
  "info": {"title": "Petstore", "version": "1.0.0"},
  "paths": {
    "/pets": {
      "get": {
        "operationId": "listPets",
        "responses": {
          "200": {
            "description": "pets",
            "content": {
              "application/json": {
                "schema": {"$ref": "#/components/schemas/Pet"}
              }
            }
          }
        }
      }
    }
  },
  "components": {
    "schemas": {
      "Pet": {"type": "object", "properties": {"name": {"type": "string"}}}
    }
  }
}
"""


@pytest.fixture
def streams() -> Streams:
    """In-memory stdout and stderr."""
    return Streams(stdout=io.BytesIO(), stderr=io.BytesIO())


@pytest.fixture
def petstore_v2(tmp_path) -> Path:
    path = tmp_path / "petstore.yaml"
    path.write_text(PETSTORE_V2)
    return path


@pytest.fixture
def petstore_v3(tmp_path) -> Path:
    path = tmp_path / "petstore-v3.json"
    path.write_text(PETSTORE_V3)
    return path


@pytest.fixture
def plugin_bin(tmp_path, monkeypatch) -> Path:
    """A directory at the front of PATH for fake plugin executables."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return bin_dir


@pytest.fixture
def make_plugin(plugin_bin) -> Callable[[str, str], Path]:
    """
    Create an executable Python plugin named gnostic-<name>.

    The body runs with `env` bound to a PluginEnvironment read from stdin;
    the response is written after the body unless it exits first.
    """

    def _make(name: str, body: str) -> Path:
        script = plugin_bin / f"gnostic-{name}"
        script.write_text(
            f"#!{sys.executable}\n"
            "import sys\n"
            "from gnostic.plugins.environment import PluginEnvironment\n"
            "env = PluginEnvironment.from_stdin()\n"
            + textwrap.dedent(body)
            + "\nenv.respond()\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def v2_document():
    from gnostic.parsers.openapi import OpenAPITextDecoder

    return OpenAPITextDecoder().decode(PETSTORE_V2.encode(), "petstore.yaml")


@pytest.fixture
def v3_document():
    from gnostic.parsers.openapi import OpenAPITextDecoder

    return OpenAPITextDecoder().decode(PETSTORE_V3.encode(), "petstore-v3.json")
