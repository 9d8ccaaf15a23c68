"""Custom exceptions for Gnostic."""

from typing import Sequence


class GnosticError(Exception):
    """Base exception for all Gnostic errors."""

    pass


class FatalError(GnosticError):
    """Errors that terminate a run before any output is produced."""

    pass


class UsageError(FatalError):
    """Raised when command-line options are missing or malformed."""

    pass


class SourceReadError(FatalError):
    """Raised when the source description cannot be read."""

    pass


class FormatDetectionError(FatalError):
    """Raised when the source extension does not map to a known format."""

    pass


class DecodeError(FatalError):
    """Raised when the source cannot be decoded into a compiled document."""

    pass


class ResolutionError(FatalError):
    """Raised when $ref references cannot be resolved."""

    pass


class SerializationError(GnosticError):
    """Raised when a compiled document cannot be serialized to a format."""

    pass


class SinkWriteError(GnosticError):
    """Raised when produced bytes cannot be written to their sink."""

    pass


class PluginError(GnosticError):
    """Base exception for failures of a single plugin call."""

    pass


class InvalidInvocationError(PluginError):
    """Raised when a plugin invocation string does not match the grammar."""

    def __init__(self, executable: str, invocation: str):
        self.executable = executable
        self.invocation = invocation
        super().__init__(f"Invalid invocation of {executable}: {invocation}")


class ExecutionError(PluginError):
    """Raised when a plugin process cannot be started or fails abnormally."""

    pass


class ProtocolError(PluginError):
    """Raised when a plugin response cannot be understood."""

    pass


class PluginReportedError(PluginError):
    """Raised when a plugin reports errors in its response envelope."""

    def __init__(self, executable: str, messages: Sequence[str]):
        self.executable = executable
        self.messages = list(messages)
        super().__init__(f"Plugin error: {executable}: {self.messages}")


class OutputConflictError(PluginError):
    """Raised when plugin output would overwrite an existing file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Error, unable to overwrite {path}")
