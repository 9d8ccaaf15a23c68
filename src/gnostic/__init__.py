"""
Gnostic - compile OpenAPI descriptions into a typed model.

Reads declarative REST API descriptions, validates them into a compiled
document and distributes that document to output sinks and to external
plugin processes.
"""

__version__ = "0.1.0"

# Version announced to plugins in every request envelope.
COMPILER_VERSION = (0, 1, 0)
