"""Error taxonomy for the documentation pipeline."""

from __future__ import annotations


class ConanDocError(RuntimeError):
    """Base class for pipeline failures.

    ``stage`` names the pipeline stage that failed and ``diagnostics`` holds
    the external tool's output exactly as it was captured.
    """

    stage = "pipeline"

    def __init__(self, message: str, *, diagnostics: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.diagnostics = diagnostics

    def report(self) -> str:
        """Return the user-facing failure text including tool diagnostics."""
        text = f"{self.stage} failed: {self.message}"
        if self.diagnostics.strip():
            text = f"{text}\n{self.diagnostics.rstrip()}"
        return text


class ResolutionError(ConanDocError):
    """Raised when the package path or its inspection output is unusable."""

    stage = "inspect"


class DependencyFetchError(ConanDocError):
    """Raised when dependencies cannot be installed or their sources resolved."""

    stage = "dependencies"


class TemplateError(ConanDocError):
    """Raised when the Doxyfile template is missing or malformed."""

    stage = "config"


class GenerationError(ConanDocError):
    """Raised when doxygen fails or produces no entry point."""

    stage = "doxygen"


class BrowserOpenError(ConanDocError):
    """Raised when the generated docs cannot be opened. Never fatal."""

    stage = "open"


__all__ = [
    "BrowserOpenError",
    "ConanDocError",
    "DependencyFetchError",
    "GenerationError",
    "ResolutionError",
    "TemplateError",
]
