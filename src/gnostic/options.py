"""
Command-line option parsing.

Plugin flags are open-ended (--NAME-out=...), so options are parsed from
the raw argument list rather than declared one by one.
"""

import re
from typing import Sequence

from gnostic.config import RunOptions, settings
from gnostic.exceptions import UsageError
from gnostic.parsers.base import ExtensionHandler
from gnostic.plugins.invocation import PluginCall

USAGE = """
Usage: gnostic OPENAPI_SOURCE [OPTIONS]
  OPENAPI_SOURCE is the filename or URL of an OpenAPI description to read.
Options:
  --pb-out=PATH       Write a binary document to the specified location.
  --json-out=PATH     Write a JSON document to the specified location.
  --text-out=PATH     Write a text document to the specified location.
  --errors-out=PATH   Write compilation errors to the specified location.
  --PLUGIN-out=PATH   Run the plugin named gnostic-PLUGIN and write results
                      to the specified location.
  --x-EXTENSION       Use the extension named gnostic-x-EXTENSION
                      to process OpenAPI specification extensions.
  --resolve-refs      Explicitly resolve $ref references.
                      This could have problems with recursive definitions.
"""

# --PLUGIN-out=PATH and --PLUGIN_out=PATH
_PLUGIN_FLAG = re.compile(r"--([^=]+)[-_]out=(.+)")
# --x-EXTENSION
_EXTENSION_FLAG = re.compile(r"--x-(.+)")


def parse_options(args: Sequence[str], extension_prefix: str = "") -> RunOptions:
    """
    Parse command-line arguments (without the program name).

    Args:
        args: Raw arguments
        extension_prefix: Prefix for extension handler names (defaults to
            settings.extension_prefix)

    Returns:
        Unvalidated RunOptions

    Raises:
        UsageError: On an unknown option
    """
    prefix = extension_prefix or settings.extension_prefix
    options = RunOptions()

    for arg in args:
        plugin_match = _PLUGIN_FLAG.fullmatch(arg)
        if plugin_match:
            name, invocation = plugin_match.group(1), plugin_match.group(2)
            if name == "pb":
                options.binary_out = invocation
            elif name == "json":
                options.json_out = invocation
            elif name == "text":
                options.text_out = invocation
            elif name == "errors":
                options.errors_out = invocation
            else:
                options.plugin_calls.append(
                    PluginCall(name=name, invocation=invocation)
                )
            continue

        extension_match = _EXTENSION_FLAG.fullmatch(arg)
        if extension_match:
            options.extension_handlers.append(
                ExtensionHandler(name=prefix + extension_match.group(1))
            )
        elif arg == "--resolve-refs":
            options.resolve_references = True
        elif arg.startswith("-"):
            raise UsageError(f"Unknown option: {arg}.")
        else:
            options.source_name = arg

    return options


def validate_options(options: RunOptions) -> RunOptions:
    """
    Check that a run has a source and something to produce.

    Unset error output defaults to the diagnostic stream.

    Raises:
        UsageError: If no output directive or no source was given
    """
    if not options.has_output_directive:
        raise UsageError("Missing output directives.")
    if not options.source_name:
        raise UsageError("No input specified.")
    if not options.errors_out:
        options.errors_out = "="
    return options
