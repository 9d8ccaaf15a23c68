"""
Byte-source reader.

Reads OpenAPI sources from local files or http(s) URLs. Results are cached
per reader so that external references to the same file are fetched once.
"""

import logging
from pathlib import Path
from typing import Dict
from urllib.parse import urljoin, urlparse

import httpx

from gnostic.exceptions import SourceReadError

logger = logging.getLogger(__name__)


def is_url(name: str) -> bool:
    """Check whether a source name is an http(s) URL."""
    return urlparse(name).scheme in ("http", "https")


def source_extension(name: str) -> str:
    """
    Get the lower-cased extension of a source name.

    For URLs only the path component is considered, so query strings do not
    affect format detection.
    """
    path = urlparse(name).path if is_url(name) else name
    return Path(path).suffix.lower()


def join_source(base: str, relative: str) -> str:
    """Resolve a relative source name against the source it was found in."""
    if is_url(relative) or Path(relative).is_absolute():
        return relative
    if is_url(base):
        return urljoin(base, relative)
    return str(Path(base).parent / relative)


class SourceReader:
    """Reads raw bytes for source names, with a per-instance cache."""

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout
        self._cache: Dict[str, bytes] = {}

    def read_bytes(self, name: str) -> bytes:
        """
        Read all bytes of a file or URL.

        Args:
            name: Local path or http(s) URL

        Returns:
            The raw source bytes

        Raises:
            SourceReadError: If the source cannot be read
        """
        if name in self._cache:
            return self._cache[name]

        if is_url(name):
            data = self._fetch(name)
        else:
            try:
                data = Path(name).read_bytes()
            except OSError as e:
                raise SourceReadError(f"Unable to read {name}: {e}") from e

        logger.debug(f"Read {len(data)} bytes from {name}")
        self._cache[name] = data
        return data

    def _fetch(self, url: str) -> bytes:
        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                response = client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as e:
            raise SourceReadError(
                f"Unable to fetch {url}: HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise SourceReadError(f"Unable to fetch {url}: {e}") from e
