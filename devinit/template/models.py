"""Pydantic models describing a template bundle's ``template.yaml``.

The field names (and aliases) mirror the YAML keys.  Unknown keys are ignored
and ``null`` collections are read as empty, so hand-written descriptors can be
terse.  Hooks, dependencies and the healthcheck are part of the schema but are
never executed by the generator.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_FILE_MODE = 0o644

_MODE_PATTERN = re.compile(r"(?:0o)?([0-7]{1,4})", re.IGNORECASE)

VariableValue = Union[str, bool, int, float, None]
"""A resolved template variable: string, boolean, number, or absent."""


class _Schema(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


def _empty_if_none(value: Any, empty: Any) -> Any:
    return empty if value is None else value


# ---------------------------------------------------------------------------
# Requirements
# ---------------------------------------------------------------------------


class SystemRequirement(_Schema):
    """An external command the generated project needs."""

    command: str
    version: str = Field(default="", description="Version constraint, e.g. '>=3.11'")
    required: bool = False
    when: str = Field(default="", description="Enabling condition")
    install_hint: str = ""


class EnvironmentRequirement(_Schema):
    """An environment variable the generated project needs."""

    variable: str = Field(alias="var")
    required: bool = False
    when: str = ""


class Requirements(_Schema):
    system: list[SystemRequirement] = Field(default_factory=list)
    environment: list[EnvironmentRequirement] = Field(default_factory=list)

    @field_validator("system", "environment", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return _empty_if_none(value, [])


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------


class VariableType(str, Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    CHOICE = "choice"
    INT = "int"


class VariableDeclaration(_Schema):
    """A variable the template accepts, with its default value."""

    type: VariableType = VariableType.STRING
    required: bool = False
    default: Any = None
    choices: list[str] = Field(default_factory=list)
    pattern: str = ""
    description: str = ""

    @field_validator("choices", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return _empty_if_none(value, [])


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class FileSpec(_Schema):
    """One file of the bundle and where it lands in the generated project."""

    source: str = Field(alias="src")
    destination: str = Field(alias="dest")
    conditions: list[str] = Field(default_factory=list)
    permissions: str = ""

    @field_validator("conditions", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return _empty_if_none(value, [])

    @field_validator("permissions", mode="before")
    @classmethod
    def _int_mode_to_text(cls, value: Any) -> Any:
        # An unquoted 755 is read as the digits it was written with.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return _empty_if_none(value, "")

    @property
    def mode(self) -> int:
        """Permission bits for the written file.

        Raises:
            ValueError: If ``permissions`` is not an octal mode string.
        """
        text = self.permissions.strip()
        if not text:
            return DEFAULT_FILE_MODE
        match = _MODE_PATTERN.fullmatch(text)
        if match is None:
            raise ValueError(f"invalid permission mode: {self.permissions}")
        return int(match.group(1), 8)


# ---------------------------------------------------------------------------
# Declared-only sections
# ---------------------------------------------------------------------------


class Dependency(_Schema):
    template: str
    when: str = ""


class ErrorLevel(str, Enum):
    ERROR = "error"
    WARN = "warn"
    IGNORE = "ignore"


class Hook(_Schema):
    run: str = ""
    validate_command: str = Field(default="", alias="validate")
    working_dir: str = ""
    error_level: ErrorLevel = ErrorLevel.ERROR
    error: str = Field(default="", description="Custom error message")


class Hooks(_Schema):
    pre_generate: list[Hook] = Field(default_factory=list)
    post_generate: list[Hook] = Field(default_factory=list)

    @field_validator("pre_generate", "post_generate", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return _empty_if_none(value, [])


class Healthcheck(_Schema):
    command: str = ""
    port: int = 0
    timeout: str = ""


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------


class TemplateDescriptor(_Schema):
    """Declared metadata of one template bundle."""

    version: str = ""
    name: str = ""
    description: str = ""
    language: str = ""
    framework: str = ""
    min_cli_version: str = ""

    requirements: Requirements = Field(default_factory=Requirements)
    variables: dict[str, VariableDeclaration] = Field(default_factory=dict)
    files: list[FileSpec] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)
    hooks: Hooks = Field(default_factory=Hooks)
    healthcheck: Healthcheck | None = None

    # Set by the loader, never read from YAML.
    path: Path = Field(default=Path("."), exclude=True)

    @field_validator("requirements", "hooks", mode="before")
    @classmethod
    def _none_to_section(cls, value: Any) -> Any:
        return _empty_if_none(value, {})

    @field_validator("variables", mode="before")
    @classmethod
    def _none_to_dict(cls, value: Any) -> Any:
        return _empty_if_none(value, {})

    @field_validator("files", "dependencies", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return _empty_if_none(value, [])

    @property
    def identifier(self) -> str:
        """``language/framework`` as declared in the metadata."""
        return f"{self.language}/{self.framework}"

    def default_variables(self) -> dict[str, VariableValue]:
        """Declared defaults, skipping variables that have none."""
        return {
            key: declaration.default
            for key, declaration in self.variables.items()
            if declaration.default is not None
        }
