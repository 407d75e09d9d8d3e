"""Exception hierarchy for devinit.

Every error raised by the template engine, the generator and the requirement
checker derives from :class:`DevinitError` so the CLI can report any failure
with a single ``except`` clause.  Low-level causes (``OSError``, Jinja2 and
YAML errors) are always chained with ``raise ... from exc``.
"""

from __future__ import annotations

from pathlib import Path


class DevinitError(Exception):
    """Base class for all devinit failures."""


# ---------------------------------------------------------------------------
# Template loading
# ---------------------------------------------------------------------------


class TemplateLoadError(DevinitError):
    """Raised when a template bundle cannot be loaded."""

    def __init__(self, template: str, message: str) -> None:
        self.template = template
        super().__init__(message)


class TemplateNotFoundError(TemplateLoadError):
    """The bundle directory does not exist under the template root."""

    def __init__(self, template: str) -> None:
        super().__init__(template, f"template not found: {template}")


class MalformedMetadataError(TemplateLoadError):
    """``template.yaml`` is unreadable or does not parse into a descriptor."""

    def __init__(self, template: str, reason: str) -> None:
        self.reason = reason
        super().__init__(template, f"failed to parse template.yaml for {template}: {reason}")


class InvalidTemplateError(TemplateLoadError):
    """The descriptor parsed but failed structural validation."""

    def __init__(self, template: str, reason: str) -> None:
        self.reason = reason
        super().__init__(template, f"invalid template {template}: {reason}")


# ---------------------------------------------------------------------------
# Rendering and file output
# ---------------------------------------------------------------------------


class TemplateRenderError(DevinitError):
    """Base class for failures while rendering a single template file."""

    def __init__(self, source: str | Path, message: str) -> None:
        self.source = Path(source)
        super().__init__(f"{self.source}: {message}")


class TemplateSyntaxError(TemplateRenderError):
    """The template file contains malformed template syntax."""

    def __init__(self, source: str | Path, message: str, lineno: int | None = None) -> None:
        self.lineno = lineno
        where = f"line {lineno}: " if lineno else ""
        super().__init__(source, f"template syntax error: {where}{message}")


class TemplateExecutionError(TemplateRenderError):
    """A referenced name is undefined or of the wrong type while rendering."""

    def __init__(self, source: str | Path, message: str) -> None:
        super().__init__(source, f"failed to execute template: {message}")


class FileOperationError(DevinitError):
    """A filesystem read, write or directory creation failed."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class GenerationError(DevinitError):
    """Generating one file of a project failed; carries its destination."""

    def __init__(self, destination: str | Path, message: str) -> None:
        self.destination = Path(destination)
        super().__init__(f"failed to generate file {self.destination}: {message}")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class InvalidVersionError(DevinitError):
    """A version string or version constraint could not be parsed."""

    def __init__(self, version: str, message: str) -> None:
        self.version = version
        super().__init__(message)


class InvalidProjectNameError(DevinitError):
    """A project name violates one of the naming rules."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(DevinitError):
    """The configuration file or a DEVINIT_* environment variable is invalid."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"invalid configuration in {source}: {message}")
