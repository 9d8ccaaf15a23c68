"""
Plugin support.

Plugins are external executables that receive the compiled document on
standard input and return generated files on standard output. This package
parses plugin invocation strings, runs plugins and provides a helper for
plugins written in Python.
"""

from gnostic.plugins.environment import PluginEnvironment
from gnostic.plugins.invocation import (
    Invocation,
    PluginCall,
    parse_invocation,
    split_invocation,
)
from gnostic.plugins.protocol import DEFAULT_PLUGIN_PREFIX, PluginInvoker, build_request

__all__ = [
    "DEFAULT_PLUGIN_PREFIX",
    "Invocation",
    "PluginCall",
    "PluginEnvironment",
    "PluginInvoker",
    "build_request",
    "parse_invocation",
    "split_invocation",
]
