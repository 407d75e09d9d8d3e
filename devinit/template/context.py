"""Per-generation rendering context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from devinit.template.casing import to_camel, to_kebab, to_pascal, to_snake
from devinit.template.models import TemplateDescriptor, VariableValue


def get_string(variables: Mapping[str, VariableValue], key: str) -> str:
    """Return ``variables[key]`` if it is a string, else ``""``."""
    value = variables.get(key)
    return value if isinstance(value, str) else ""


def get_bool(variables: Mapping[str, VariableValue], key: str) -> bool:
    """Return ``variables[key]`` if it is a boolean, else ``False``."""
    value = variables.get(key)
    return value if isinstance(value, bool) else False


def get_int(variables: Mapping[str, VariableValue], key: str) -> int:
    """Return ``variables[key]`` if it is an integer (not a bool), else ``0``."""
    value = variables.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


@dataclass(frozen=True)
class RenderingContext:
    """Project identity plus resolved variables for one ``generate`` call.

    The casing variants and the convenience fields are derived once in
    ``__post_init__``; the convenience fields only mirror well-known keys of
    ``variables`` and cannot be set independently.
    """

    project_name: str
    output_dir: str
    variables: dict[str, VariableValue]
    template: TemplateDescriptor | None = None

    project_name_snake: str = field(init=False)
    project_name_camel: str = field(init=False)
    project_name_pascal: str = field(init=False)
    project_name_kebab: str = field(init=False)

    python_version: str = field(init=False)
    include_docker: bool = field(init=False)
    database: str = field(init=False)
    include_tests: bool = field(init=False)
    ci_provider: str = field(init=False)

    def __post_init__(self) -> None:
        derived = {
            "project_name_snake": to_snake(self.project_name),
            "project_name_camel": to_camel(self.project_name),
            "project_name_pascal": to_pascal(self.project_name),
            "project_name_kebab": to_kebab(self.project_name),
            "python_version": get_string(self.variables, "PythonVersion"),
            "include_docker": get_bool(self.variables, "IncludeDocker"),
            "database": get_string(self.variables, "Database"),
            "include_tests": get_bool(self.variables, "IncludeTests"),
            "ci_provider": get_string(self.variables, "CIProvider"),
        }
        for name, value in derived.items():
            object.__setattr__(self, name, value)

    def get_string(self, key: str) -> str:
        return get_string(self.variables, key)

    def get_bool(self, key: str) -> bool:
        return get_bool(self.variables, key)

    def get_int(self, key: str) -> int:
        return get_int(self.variables, key)

    def as_template_vars(self) -> dict[str, Any]:
        """Names visible inside a template.

        Every merged variable is exposed at top level; the project fields are
        layered on top so they cannot be shadowed by a variable.
        """
        scope: dict[str, Any] = dict(self.variables)
        scope.update(
            {
                "ProjectName": self.project_name,
                "ProjectNameSnake": self.project_name_snake,
                "ProjectNameCamel": self.project_name_camel,
                "ProjectNamePascal": self.project_name_pascal,
                "ProjectNameKebab": self.project_name_kebab,
                "OutputDir": self.output_dir,
                "Variables": dict(self.variables),
                "Template": self.template,
                "PythonVersion": self.python_version,
                "IncludeDocker": self.include_docker,
                "Database": self.database,
                "IncludeTests": self.include_tests,
                "CIProvider": self.ci_provider,
            }
        )
        return scope
