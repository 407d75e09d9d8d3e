"""devinit generator -- materializes a project from a template bundle.

Quick usage::

    from devinit.generator import GenerateOptions, ProjectGenerator

    generator = ProjectGenerator("templates")
    result = generator.generate(
        GenerateOptions(project_name="my-service", language="python", framework="fastapi")
    )
"""

from devinit.generator.engine import (
    FileAction,
    GenerateOptions,
    GenerationResult,
    ProjectGenerator,
    merge_variables,
)
from devinit.generator.naming import validate_project_name

__all__ = [
    "FileAction",
    "GenerateOptions",
    "GenerationResult",
    "ProjectGenerator",
    "merge_variables",
    "validate_project_name",
]
