"""
Gnostic Configuration.

Tool-wide settings come from environment variables via Pydantic Settings.
Per-run options parsed from the command line live in RunOptions and are
passed explicitly through the orchestrator.
"""

from dataclasses import dataclass, field
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from gnostic.parsers.base import ExtensionHandler
from gnostic.plugins.invocation import PluginCall


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GNOSTIC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Plugins
    plugin_prefix: str = "gnostic-"  # --foo-out=... runs gnostic-foo
    extension_prefix: str = "gnostic-x-"  # --x-foo registers gnostic-x-foo

    # Logging
    log_level: str = "WARNING"
    log_format: str = "standard"  # standard or json


@dataclass
class RunOptions:
    """
    Options for a single compiler run.

    Empty sink locations mean the corresponding format is not produced.
    The error sink defaults to the diagnostic stream once options are
    validated.
    """

    source_name: str = ""
    binary_out: str = ""
    json_out: str = ""
    text_out: str = ""
    errors_out: str = ""
    resolve_references: bool = False
    plugin_calls: List[PluginCall] = field(default_factory=list)
    extension_handlers: List[ExtensionHandler] = field(default_factory=list)

    @property
    def has_output_directive(self) -> bool:
        """Whether any fixed-format sink or plugin call was requested."""
        return bool(
            self.binary_out
            or self.json_out
            or self.text_out
            or self.errors_out
            or self.plugin_calls
        )


# Global settings instance
settings = Settings()
