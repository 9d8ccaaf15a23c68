"""
Reference resolution for compiled documents.

Replaces {"$ref": "..."} objects with the value they point to. Internal
references use JSON pointers ("#/definitions/Pet"); external references
name another JSON/YAML file relative to the referring source
("common.yaml#/definitions/Error").
"""

import logging
from typing import Any, Dict, Optional, Tuple
from urllib.parse import unquote

from gnostic.exceptions import DecodeError, ResolutionError, SourceReadError
from gnostic.parsers.openapi import read_info_from_bytes
from gnostic.reader import SourceReader, join_source

logger = logging.getLogger(__name__)


def _unescape(token: str) -> str:
    return unquote(token).replace("~1", "/").replace("~0", "~")


def lookup_pointer(tree: Any, pointer: str) -> Any:
    """
    Follow a JSON pointer ("/a/b/0") into a decoded tree.

    Raises:
        KeyError: If a segment does not exist
    """
    node = tree
    if not pointer:
        return node
    for raw in pointer.lstrip("/").split("/"):
        token = _unescape(raw)
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise KeyError(token)
    return node


class ReferenceResolver:
    """
    Resolves $ref references in a document tree.

    Circular references cannot be expanded into a tree and are reported
    as errors.
    """

    def __init__(
        self, source_name: str, reader: Optional[SourceReader] = None
    ) -> None:
        self.source_name = source_name
        self.reader = reader or SourceReader()
        self._documents: Dict[str, Any] = {}
        self._resolved: Dict[str, Any] = {}

    def resolve(self, tree: Any) -> Any:
        """
        Return a copy of tree with every reference replaced.

        Raises:
            ResolutionError: For missing targets, cycles or unreadable files
        """
        self._documents[self.source_name] = tree
        resolved = self._resolve_node(tree, self.source_name, ())
        logger.info(
            f"Resolved {len(self._resolved)} reference(s) in {self.source_name}"
        )
        return resolved

    def _resolve_node(self, node: Any, base: str, stack: Tuple[str, ...]) -> Any:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str):
                return self._resolve_ref(ref, base, stack)
            return {
                key: self._resolve_node(value, base, stack)
                for key, value in node.items()
            }
        if isinstance(node, list):
            return [self._resolve_node(item, base, stack) for item in node]
        return node

    def _resolve_ref(self, ref: str, base: str, stack: Tuple[str, ...]) -> Any:
        location, _, pointer = ref.partition("#")
        target_source = join_source(base, location) if location else base
        key = f"{target_source}#{pointer}"

        if key in stack:
            chain = " -> ".join(stack + (key,))
            raise ResolutionError(f"Circular reference: {chain}")
        if key in self._resolved:
            return self._resolved[key]

        document = self._load(target_source, ref)
        try:
            target = lookup_pointer(document, pointer)
        except KeyError as e:
            raise ResolutionError(
                f"Unable to resolve {ref}: no {e} in {target_source}"
            ) from e

        resolved = self._resolve_node(target, target_source, stack + (key,))
        self._resolved[key] = resolved
        return resolved

    def _load(self, source: str, ref: str) -> Any:
        if source not in self._documents:
            try:
                data = self.reader.read_bytes(source)
                self._documents[source] = read_info_from_bytes(data, source)
            except (SourceReadError, DecodeError) as e:
                raise ResolutionError(f"Unable to resolve {ref}: {e}") from e
        return self._documents[source]
