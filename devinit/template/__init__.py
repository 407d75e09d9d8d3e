"""Template bundles: descriptor model, loading, rendering context and rendering.

Quick usage::

    from devinit.template import TemplateLoader, TemplateRenderer

    loader = TemplateLoader("templates")
    descriptor = loader.load("python/fastapi")
"""

from devinit.template.casing import to_camel, to_kebab, to_pascal, to_snake
from devinit.template.context import RenderingContext
from devinit.template.loader import TemplateLoader
from devinit.template.models import (
    FileSpec,
    SystemRequirement,
    TemplateDescriptor,
    VariableDeclaration,
    VariableValue,
)
from devinit.template.renderer import TemplateRenderer

__all__ = [
    "FileSpec",
    "RenderingContext",
    "SystemRequirement",
    "TemplateDescriptor",
    "TemplateLoader",
    "TemplateRenderer",
    "VariableDeclaration",
    "VariableValue",
    "to_camel",
    "to_kebab",
    "to_pascal",
    "to_snake",
]
