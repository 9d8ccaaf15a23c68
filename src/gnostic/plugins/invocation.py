"""
Plugin invocation strings.

A plugin flag such as --foo-out=mode=fast,lang=go:out/dir carries an
invocation string made of optional comma-separated key=value parameters,
followed by a colon and an output location:

    invocation := [params ":"] path
    params     := pair ("," pair)*
    pair       := key "=" value

Keys and values use letters, digits, '-', '_', '.' and '/'. The path may
contain any character except ',', ':' and '='.
"""

import string
from dataclasses import dataclass
from typing import Tuple

from gnostic.exceptions import InvalidInvocationError

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "-_./")
_PATH_SEPARATORS = frozenset(",:=")


@dataclass(frozen=True)
class PluginCall:
    """A plugin requested on the command line with --NAME-out=INVOCATION."""

    name: str
    invocation: str

    def executable_name(self, prefix: str) -> str:
        """Name of the executable that implements this plugin."""
        return prefix + self.name


@dataclass(frozen=True)
class Invocation:
    """Parameters and output location parsed from an invocation string."""

    parameters: Tuple[Tuple[str, str], ...]
    output_path: str


def _is_name(token: str) -> bool:
    return bool(token) and all(char in _NAME_CHARS for char in token)


def _is_path(token: str) -> bool:
    return bool(token) and not any(char in _PATH_SEPARATORS for char in token)


def _is_pair(token: str) -> bool:
    key, sep, value = token.partition("=")
    return bool(sep) and _is_name(key) and _is_name(value)


def is_valid_invocation(invocation: str) -> bool:
    """Check that the whole string matches the invocation grammar."""
    if ":" not in invocation:
        return _is_path(invocation)
    # The path cannot hold ':' and names cannot hold ':', so the only
    # candidate split is at the last colon.
    params, _, path = invocation.rpartition(":")
    return all(_is_pair(pair) for pair in params.split(",")) and _is_path(path)


def split_invocation(invocation: str) -> Invocation:
    """
    Split an invocation string into parameters and output location.

    One ':'-separated segment is the output path. With two segments the
    first holds the parameters; pairs without exactly one '=' are dropped
    and duplicate keys are kept in order. With more than two segments only
    the last one is used, as the output path.
    """
    segments = invocation.split(":")
    if len(segments) == 1:
        return Invocation(parameters=(), output_path=segments[0])
    if len(segments) == 2:
        parameters = []
        for keyvalue in segments[0].split(","):
            pair = keyvalue.split("=")
            if len(pair) == 2:
                parameters.append((pair[0], pair[1]))
        return Invocation(parameters=tuple(parameters), output_path=segments[1])
    return Invocation(parameters=(), output_path=segments[-1])


def parse_invocation(invocation: str, executable: str) -> Invocation:
    """
    Validate and split a plugin invocation string.

    Args:
        invocation: Text after '=' in a --NAME-out flag
        executable: Plugin executable name, used in error messages

    Returns:
        Parsed Invocation

    Raises:
        InvalidInvocationError: If the string does not match the grammar
    """
    if not is_valid_invocation(invocation):
        raise InvalidInvocationError(executable, invocation)
    return split_invocation(invocation)
